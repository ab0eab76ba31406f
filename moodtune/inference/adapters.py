"""
Mood inference adapters.

Each capability (image, text, audio, embedding) has an interface and
interchangeable implementations: a mock that returns fixed or simply
derived values, and a Hugging Face implementation that calls the hosted
inference API. The implementation is chosen once, when the adapter set is
built, never per call.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..mood.labels import MoodLabel, Vocabulary, normalize
from ..mood.schemas import MoodDetectionResult, clamp_intensity, MIN_INTENSITY, MAX_INTENSITY
from ..utils.errors import ConfigurationError, InvalidInputError
from .client import HuggingFaceClient

logger = logging.getLogger(__name__)


def top_prediction(output: Any) -> Optional[Dict[str, Any]]:
    """Return the highest scoring {label, score} element of a provider response.

    Handles both a flat list of predictions and a nested list whose first
    element is the list to scan. Returns None when nothing usable is present.
    """
    if not isinstance(output, list) or not output:
        return None
    predictions = output[0] if isinstance(output[0], list) else output
    best = None
    best_score = float('-inf')
    for item in predictions:
        if not isinstance(item, dict) or 'label' not in item:
            continue
        try:
            score = float(item.get('score', 0.0))
        except (TypeError, ValueError):
            continue
        if score > best_score:
            best, best_score = item, score
    return best


def _label_and_score(output: Any, default_score: float) -> Tuple[Optional[str], float]:
    top = top_prediction(output)
    if top is None:
        return None, default_score
    score = float(top.get('score') or default_score)
    return str(top['label']), min(1.0, max(0.0, score))


def _require_payload(data: Optional[bytes], kind: str) -> bytes:
    if not data:
        raise InvalidInputError(f"{kind} payload required")
    return data


def _check_intensity(intensity: Optional[float]) -> Optional[float]:
    if intensity is None:
        return None
    try:
        value = float(intensity)
    except (TypeError, ValueError):
        raise InvalidInputError(f"Invalid intensity: {intensity!r}") from None
    if not (MIN_INTENSITY <= value <= MAX_INTENSITY):
        raise InvalidInputError("Intensity must be between 0 and 10")
    return value


def text_intensity(mood: MoodLabel, confidence: float) -> float:
    """Heuristic intensity for text detections without a caller-supplied value.

    happy scales up with confidence, sad scales down, anything else is 5.
    """
    if mood == MoodLabel.HAPPY:
        return confidence * 8 + 2
    if mood == MoodLabel.SAD:
        return (1 - confidence) * 8 + 2
    return 5.0


# -- interfaces ---------------------------------------------------------------

class ImageMoodAdapter(ABC):
    mode = "abstract"

    @abstractmethod
    def analyze_image(self, image: bytes) -> MoodDetectionResult:
        """Detect mood from an image (e.g. a webcam snapshot)."""


class TextMoodAdapter(ABC):
    mode = "abstract"

    @abstractmethod
    def analyze_text(self, text: str, intensity: Optional[float] = None) -> MoodDetectionResult:
        """Detect mood from free text, optionally with a caller-supplied intensity."""


class AudioMoodAdapter(ABC):
    mode = "abstract"

    @abstractmethod
    def analyze_audio(self, audio: bytes) -> MoodDetectionResult:
        """Detect mood from an audio clip."""


class EmbeddingAdapter(ABC):
    mode = "abstract"
    is_active = False

    @abstractmethod
    def embed(self, text: str) -> np.ndarray:
        """Return a fixed-length 1-D vector for `text`."""


# -- mock implementations -----------------------------------------------------

class MockImageAdapter(ImageMoodAdapter):
    mode = "mock"

    def analyze_image(self, image: bytes) -> MoodDetectionResult:
        _require_payload(image, "image")
        return MoodDetectionResult(mood_label=MoodLabel.NEUTRAL, confidence=0.5, intensity=5.0)


class MockTextAdapter(TextMoodAdapter):
    mode = "mock"

    def analyze_text(self, text: str, intensity: Optional[float] = None) -> MoodDetectionResult:
        if text is None:
            raise InvalidInputError("text required")
        intensity = _check_intensity(intensity)
        confidence = min(0.9, 0.3 + len(text) / 200) if text else 0.5
        return MoodDetectionResult(
            mood_label=MoodLabel.NEUTRAL,
            confidence=confidence,
            intensity=5.0 if intensity is None else intensity,
            raw_score=confidence,
        )


class MockAudioAdapter(AudioMoodAdapter):
    mode = "mock"

    def analyze_audio(self, audio: bytes) -> MoodDetectionResult:
        _require_payload(audio, "audio")
        return MoodDetectionResult(mood_label=MoodLabel.CALM, confidence=0.7, intensity=7.0)


class UnconfiguredEmbeddingAdapter(EmbeddingAdapter):
    """Stands in when no provider is configured; there is no meaningful mock embedding."""
    mode = "mock"
    is_active = False

    def embed(self, text: str) -> np.ndarray:
        raise ConfigurationError("Embeddings require a configured inference provider")


# -- Hugging Face implementations -------------------------------------------

class HuggingFaceImageAdapter(ImageMoodAdapter):
    mode = "huggingface"

    def __init__(self, client: HuggingFaceClient, model_id: str):
        self.client = client
        self.model_id = model_id

    def analyze_image(self, image: bytes) -> MoodDetectionResult:
        payload = _require_payload(image, "image")
        output = self.client.post(self.model_id, payload, binary=True)
        label, score = _label_and_score(output, default_score=0.5)
        mood = normalize(Vocabulary.FACIAL_EXPRESSION, label)
        logger.debug(f"Image model {self.model_id} predicted {label!r} -> {mood} ({score:.3f})")
        return MoodDetectionResult(
            mood_label=mood,
            confidence=score,
            intensity=clamp_intensity(score * 10),
            raw_score=score,
            details={'raw': output},
        )


class HuggingFaceTextAdapter(TextMoodAdapter):
    mode = "huggingface"

    def __init__(self, client: HuggingFaceClient, model_id: str):
        self.client = client
        self.model_id = model_id

    def analyze_text(self, text: str, intensity: Optional[float] = None) -> MoodDetectionResult:
        if text is None or not text.strip():
            raise InvalidInputError("text required")
        intensity = _check_intensity(intensity)
        output = self.client.post(self.model_id, {'inputs': text})
        label, score = _label_and_score(output, default_score=0.5)
        mood = normalize(Vocabulary.FINE_GRAINED_EMOTION, label)
        if intensity is None:
            intensity = clamp_intensity(text_intensity(mood, score))
        return MoodDetectionResult(
            mood_label=mood,
            confidence=score,
            intensity=intensity,
            raw_score=score,
            details={'label': label},
        )


class HuggingFaceAudioAdapter(AudioMoodAdapter):
    mode = "huggingface"

    def __init__(self, client: HuggingFaceClient, model_id: str):
        self.client = client
        self.model_id = model_id

    def analyze_audio(self, audio: bytes) -> MoodDetectionResult:
        payload = _require_payload(audio, "audio")
        output = self.client.post(self.model_id, payload, binary=True)
        label, score = _label_and_score(output, default_score=0.6)
        mood = normalize(Vocabulary.SPEECH_EMOTION, label)
        return MoodDetectionResult(
            mood_label=mood,
            confidence=score,
            intensity=clamp_intensity(score * 10),
            raw_score=score,
            details={'label': label},
        )


class HuggingFaceEmbeddingAdapter(EmbeddingAdapter):
    mode = "huggingface"
    is_active = True

    def __init__(self, client: HuggingFaceClient, model_id: str):
        self.client = client
        self.model_id = model_id

    def embed(self, text: str) -> np.ndarray:
        output = self.client.post(self.model_id, {'inputs': text})
        vector = np.asarray(output, dtype=float)
        # batch of one -> first row; token-level output -> mean pool
        if vector.ndim == 3:
            vector = vector[0]
        if vector.ndim == 2:
            vector = vector[0] if vector.shape[0] == 1 else vector.mean(axis=0)
        if vector.ndim != 1 or vector.size == 0:
            raise ValueError(f"Unexpected embedding shape from {self.model_id}: {vector.shape}")
        return vector
