"""
Mood detection schemas for MoodTune.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .labels import MoodLabel

MIN_INTENSITY = 0.0
MAX_INTENSITY = 10.0


class DetectionType(str, Enum):
    IMAGE = "image"
    TEXT = "text"
    AUDIO = "audio"


def clamp_intensity(value: float) -> float:
    return min(MAX_INTENSITY, max(MIN_INTENSITY, float(value)))


@dataclass(frozen=True)
class MoodDetectionResult:
    """Outcome of a single mood detection call."""
    mood_label: MoodLabel
    intensity: float
    confidence: Optional[float] = None
    raw_score: Optional[float] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.mood_label, MoodLabel):
            raise ValueError("mood_label must be a MoodLabel")
        if self.confidence is not None and not (0.0 <= self.confidence <= 1.0):
            raise ValueError("Confidence must be between 0.0 and 1.0")
        if not (MIN_INTENSITY <= self.intensity <= MAX_INTENSITY):
            raise ValueError("Intensity must be between 0 and 10")

    def to_record(self, user_id: str, detection_type: DetectionType,
                  metadata: Optional[Dict[str, Any]] = None) -> 'MoodDetectionRecord':
        """Build the record handed to mood-detection persistence."""
        return MoodDetectionRecord(
            user_id=user_id,
            detection_type=DetectionType(detection_type),
            mood_label=self.mood_label,
            confidence=self.confidence,
            intensity=self.intensity,
            raw_score=self.raw_score,
            metadata=dict(self.details if metadata is None else metadata),
        )


@dataclass
class MoodDetectionRecord:
    """A detection as stored by the mood-detection repository."""
    user_id: str
    detection_type: DetectionType
    mood_label: MoodLabel
    intensity: float
    confidence: Optional[float] = None
    raw_score: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[str] = None
