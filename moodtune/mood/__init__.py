"""
Mood module for MoodTune.

Canonical mood labels, label normalization and detection results.
"""

from .labels import MoodLabel, Vocabulary, normalize
from .schemas import DetectionType, MoodDetectionResult, MoodDetectionRecord, clamp_intensity

__all__ = [
    'MoodLabel',
    'Vocabulary',
    'normalize',
    'DetectionType',
    'MoodDetectionResult',
    'MoodDetectionRecord',
    'clamp_intensity'
]
