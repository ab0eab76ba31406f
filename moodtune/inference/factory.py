"""
Builds the adapter set from configuration.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..config.settings import InferenceConfig
from .adapters import (
    ImageMoodAdapter, TextMoodAdapter, AudioMoodAdapter, EmbeddingAdapter,
    MockImageAdapter, MockTextAdapter, MockAudioAdapter, UnconfiguredEmbeddingAdapter,
    HuggingFaceImageAdapter, HuggingFaceTextAdapter, HuggingFaceAudioAdapter,
    HuggingFaceEmbeddingAdapter,
)
from .client import HuggingFaceClient

logger = logging.getLogger(__name__)


@dataclass
class AdapterSet:
    """The inference strategies selected for this process."""
    image: ImageMoodAdapter
    text: TextMoodAdapter
    audio: AudioMoodAdapter
    embedding: EmbeddingAdapter

    def modes(self) -> Dict[str, str]:
        return {
            'image': self.image.mode,
            'text': self.text.mode,
            'audio': self.audio.mode,
            'embedding': self.embedding.mode,
        }


def build_adapters(config: InferenceConfig,
                   client: Optional[HuggingFaceClient] = None) -> AdapterSet:
    """Select mock or provider adapters for each capability.

    A capability uses the provider only when its mode is "huggingface" and
    an API token is configured. The embedding adapter follows the reco mode.
    """
    if client is None and config.is_configured:
        client = HuggingFaceClient(config.api_token, config.base_url, timeout=config.timeout_seconds)

    image: ImageMoodAdapter = MockImageAdapter()
    text: TextMoodAdapter = MockTextAdapter()
    audio: AudioMoodAdapter = MockAudioAdapter()
    embedding: EmbeddingAdapter = UnconfiguredEmbeddingAdapter()

    if config.mode_active(config.face_adapter):
        image = HuggingFaceImageAdapter(client, config.image_model_id)
    if config.mode_active(config.text_adapter):
        text = HuggingFaceTextAdapter(client, config.text_model_id)
    if config.mode_active(config.audio_adapter):
        audio = HuggingFaceAudioAdapter(client, config.audio_model_id)
    if config.mode_active(config.reco_adapter):
        embedding = HuggingFaceEmbeddingAdapter(client, config.embed_model_id)

    adapters = AdapterSet(image=image, text=text, audio=audio, embedding=embedding)
    if not config.is_configured:
        logger.info("No inference API token configured, using mock adapters")
    logger.info(f"Inference adapters selected: {adapters.modes()}")
    return adapters
