"""
Inference module for MoodTune.

Pluggable mood detection and text embedding backends (mock or Hugging Face).
"""

from .adapters import (
    ImageMoodAdapter,
    TextMoodAdapter,
    AudioMoodAdapter,
    EmbeddingAdapter,
    top_prediction,
    text_intensity,
)
from .client import HuggingFaceClient
from .factory import AdapterSet, build_adapters

__all__ = [
    'ImageMoodAdapter',
    'TextMoodAdapter',
    'AudioMoodAdapter',
    'EmbeddingAdapter',
    'top_prediction',
    'text_intensity',
    'HuggingFaceClient',
    'AdapterSet',
    'build_adapters'
]
