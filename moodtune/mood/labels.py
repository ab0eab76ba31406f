"""
Canonical mood labels and the normalizer that maps detector vocabularies onto them.
"""
from enum import Enum
from typing import Dict, Optional

from ..utils.errors import InvalidInputError


class MoodLabel(str, Enum):
    HAPPY = "happy"
    SAD = "sad"
    ENERGETIC = "energetic"
    CALM = "calm"
    ANXIOUS = "anxious"
    EXCITED = "excited"
    MELANCHOLIC = "melancholic"
    FOCUSED = "focused"
    NEUTRAL = "neutral"
    ANGRY = "angry"
    DISGUST = "disgust"
    FEAR = "fear"
    SURPRISE = "surprise"
    RELAXED = "relaxed"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Optional[str]) -> 'MoodLabel':
        """Parse a mood declared by a caller.

        Only canonical labels are accepted; detector output goes through
        `normalize` instead.

        Raises:
            InvalidInputError: If the value is missing or not canonical
        """
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            raise InvalidInputError("mood label required")
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidInputError(f"Unknown mood label: {value!r}") from None


class Vocabulary(str, Enum):
    """Label vocabularies emitted by the different detectors."""
    FACIAL_EXPRESSION = "facial_expression"
    FINE_GRAINED_EMOTION = "fine_grained_emotion"
    SPEECH_EMOTION = "speech_emotion"


_FACIAL_EXPRESSION: Dict[str, MoodLabel] = {
    'happy': MoodLabel.HAPPY,
    'happiness': MoodLabel.HAPPY,
    'angry': MoodLabel.ANGRY,
    'anger': MoodLabel.ANGRY,
    'disgust': MoodLabel.DISGUST,
    'fear': MoodLabel.FEAR,
    'fearful': MoodLabel.FEAR,
    'surprise': MoodLabel.SURPRISE,
    'surprised': MoodLabel.SURPRISE,
    'sad': MoodLabel.SAD,
    'sadness': MoodLabel.SAD,
    'neutral': MoodLabel.NEUTRAL,
    'calm': MoodLabel.CALM,
    'relaxed': MoodLabel.RELAXED,
}

_FINE_GRAINED_EMOTION: Dict[str, MoodLabel] = {
    'joy': MoodLabel.HAPPY,
    'optimism': MoodLabel.HAPPY,
    'admiration': MoodLabel.HAPPY,
    'approval': MoodLabel.HAPPY,
    'gratitude': MoodLabel.HAPPY,
    'amusement': MoodLabel.HAPPY,
    'pride': MoodLabel.HAPPY,
    'love': MoodLabel.HAPPY,
    'relief': MoodLabel.RELAXED,
    'anger': MoodLabel.ANGRY,
    'annoyance': MoodLabel.ANGRY,
    'disappointment': MoodLabel.SAD,
    'sadness': MoodLabel.SAD,
    'grief': MoodLabel.SAD,
    'remorse': MoodLabel.SAD,
    'embarrassment': MoodLabel.SAD,
    'fear': MoodLabel.ANXIOUS,
    'anxiety': MoodLabel.ANXIOUS,
    'nervousness': MoodLabel.ANXIOUS,
    'disgust': MoodLabel.DISGUST,
    'surprise': MoodLabel.SURPRISE,
    'curiosity': MoodLabel.FOCUSED,
    'realization': MoodLabel.FOCUSED,
    'confusion': MoodLabel.NEUTRAL,
    'neutral': MoodLabel.NEUTRAL,
    # binary sentiment models
    'positive': MoodLabel.HAPPY,
    'negative': MoodLabel.SAD,
}

_SPEECH_EMOTION: Dict[str, MoodLabel] = {
    'happy': MoodLabel.HAPPY,
    'hap': MoodLabel.HAPPY,
    'anger': MoodLabel.ANGRY,
    'angry': MoodLabel.ANGRY,
    'ang': MoodLabel.ANGRY,
    'sad': MoodLabel.SAD,
    'sadness': MoodLabel.SAD,
    'fear': MoodLabel.ANXIOUS,
    'fearful': MoodLabel.ANXIOUS,
    'disgust': MoodLabel.DISGUST,
    'surprise': MoodLabel.SURPRISE,
    'surprised': MoodLabel.SURPRISE,
    'neutral': MoodLabel.NEUTRAL,
    'neu': MoodLabel.NEUTRAL,
    'calm': MoodLabel.CALM,
}

VOCABULARY_TABLES: Dict[Vocabulary, Dict[str, MoodLabel]] = {
    Vocabulary.FACIAL_EXPRESSION: _FACIAL_EXPRESSION,
    Vocabulary.FINE_GRAINED_EMOTION: _FINE_GRAINED_EMOTION,
    Vocabulary.SPEECH_EMOTION: _SPEECH_EMOTION,
}


def normalize(vocabulary: Vocabulary, raw_label: Optional[str]) -> MoodLabel:
    """Map a raw detector label onto the canonical mood set.

    Unknown, empty or missing labels map to neutral.
    """
    if raw_label is None:
        return MoodLabel.NEUTRAL
    table = VOCABULARY_TABLES[Vocabulary(vocabulary)]
    return table.get(str(raw_label).strip().lower(), MoodLabel.NEUTRAL)
