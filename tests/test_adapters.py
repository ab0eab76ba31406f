from unittest.mock import MagicMock

import numpy as np
import pytest

from moodtune.config.settings import InferenceConfig
from moodtune.inference.adapters import (
    HuggingFaceAudioAdapter,
    HuggingFaceEmbeddingAdapter,
    HuggingFaceImageAdapter,
    HuggingFaceTextAdapter,
    MockAudioAdapter,
    MockImageAdapter,
    MockTextAdapter,
    UnconfiguredEmbeddingAdapter,
    text_intensity,
    top_prediction,
)
from moodtune.inference.factory import build_adapters
from moodtune.mood.labels import MoodLabel
from moodtune.utils.errors import ConfigurationError, InvalidInputError, ProviderError


def _client(output):
    client = MagicMock()
    client.post.return_value = output
    return client


class TestMockAdapters:

    def test_empty_text_defaults_to_half_confidence(self):
        result = MockTextAdapter().analyze_text("")
        assert result.mood_label == MoodLabel.NEUTRAL
        assert result.confidence == 0.5
        assert result.intensity == 5.0

    def test_text_confidence_grows_with_length_and_caps(self):
        assert MockTextAdapter().analyze_text("x" * 20).confidence == pytest.approx(0.4)
        assert MockTextAdapter().analyze_text("x" * 500).confidence == 0.9

    def test_text_keeps_supplied_intensity(self):
        assert MockTextAdapter().analyze_text("fine", intensity=8).intensity == 8.0

    def test_text_rejects_missing_text_and_bad_intensity(self):
        with pytest.raises(InvalidInputError):
            MockTextAdapter().analyze_text(None)
        with pytest.raises(InvalidInputError):
            MockTextAdapter().analyze_text("fine", intensity=11)

    def test_image_and_audio_fixed_values(self):
        image = MockImageAdapter().analyze_image(b"img")
        assert (image.mood_label, image.confidence, image.intensity) == (MoodLabel.NEUTRAL, 0.5, 5.0)
        audio = MockAudioAdapter().analyze_audio(b"wav")
        assert (audio.mood_label, audio.confidence, audio.intensity) == (MoodLabel.CALM, 0.7, 7.0)

    def test_empty_payload_is_invalid(self):
        with pytest.raises(InvalidInputError):
            MockImageAdapter().analyze_image(b"")
        with pytest.raises(InvalidInputError):
            MockAudioAdapter().analyze_audio(None)

    def test_unconfigured_embedding_raises(self):
        adapter = UnconfiguredEmbeddingAdapter()
        assert adapter.is_active is False
        with pytest.raises(ConfigurationError):
            adapter.embed("anything")


class TestTopPrediction:

    def test_flat_list_takes_max_score(self):
        output = [{"label": "sad", "score": 0.1}, {"label": "happy", "score": 0.9}]
        assert top_prediction(output)["label"] == "happy"

    def test_nested_list_scans_first_inner_list(self):
        output = [[{"label": "neu", "score": 0.2}, {"label": "ang", "score": 0.7}]]
        assert top_prediction(output)["label"] == "ang"

    @pytest.mark.parametrize("output", [None, [], {"error": "x"}, [[]], [{"score": 1.0}]])
    def test_unusable_output(self, output):
        assert top_prediction(output) is None


class TestHuggingFaceAdapters:

    def test_image_picks_highest_score(self):
        client = _client([{"label": "happy", "score": 0.9}, {"label": "sad", "score": 0.1}])
        result = HuggingFaceImageAdapter(client, "face-model").analyze_image(b"img")

        assert result.mood_label == MoodLabel.HAPPY
        assert result.confidence == pytest.approx(0.9)
        assert result.intensity == pytest.approx(9.0)
        client.post.assert_called_once_with("face-model", b"img", binary=True)

    def test_image_without_predictions_falls_back(self):
        result = HuggingFaceImageAdapter(_client([]), "face-model").analyze_image(b"img")
        assert result.mood_label == MoodLabel.NEUTRAL
        assert result.confidence == 0.5
        assert result.intensity == 5.0

    def test_text_derives_intensity_from_polarity(self):
        client = _client([[{"label": "joy", "score": 0.5}, {"label": "neutral", "score": 0.3}]])
        result = HuggingFaceTextAdapter(client, "text-model").analyze_text("what a day")

        assert result.mood_label == MoodLabel.HAPPY
        assert result.intensity == pytest.approx(6.0)
        assert result.details == {"label": "joy"}
        client.post.assert_called_once_with("text-model", {"inputs": "what a day"})

    def test_text_supplied_intensity_wins(self):
        client = _client([{"label": "sadness", "score": 0.9}])
        result = HuggingFaceTextAdapter(client, "text-model").analyze_text("meh", intensity=3)
        assert result.mood_label == MoodLabel.SAD
        assert result.intensity == 3.0

    def test_text_blank_is_rejected_before_calling_provider(self):
        client = _client([])
        with pytest.raises(InvalidInputError):
            HuggingFaceTextAdapter(client, "text-model").analyze_text("   ")
        client.post.assert_not_called()

    def test_audio_uses_speech_vocabulary(self):
        client = _client([{"label": "neu", "score": 0.3}, {"label": "sad", "score": 0.65}])
        result = HuggingFaceAudioAdapter(client, "audio-model").analyze_audio(b"wav")
        assert result.mood_label == MoodLabel.SAD
        assert result.intensity == pytest.approx(6.5)

    def test_provider_errors_propagate(self):
        client = MagicMock()
        client.post.side_effect = ProviderError(500, "boom", model_id="face-model")
        with pytest.raises(ProviderError):
            HuggingFaceImageAdapter(client, "face-model").analyze_image(b"img")

    def test_embedding_shapes(self):
        adapter = HuggingFaceEmbeddingAdapter(_client([0.1, 0.2, 0.3]), "embed")
        np.testing.assert_allclose(adapter.embed("x"), [0.1, 0.2, 0.3])

        adapter = HuggingFaceEmbeddingAdapter(_client([[1.0, 2.0]]), "embed")
        np.testing.assert_allclose(adapter.embed("x"), [1.0, 2.0])

        # token-level output is mean pooled
        adapter = HuggingFaceEmbeddingAdapter(_client([[[1.0, 0.0], [3.0, 2.0]]]), "embed")
        np.testing.assert_allclose(adapter.embed("x"), [2.0, 1.0])

    def test_embedding_rejects_scalar(self):
        with pytest.raises(ValueError):
            HuggingFaceEmbeddingAdapter(_client(0.5), "embed").embed("x")


def test_text_intensity_heuristic():
    assert text_intensity(MoodLabel.HAPPY, 1.0) == pytest.approx(10.0)
    assert text_intensity(MoodLabel.SAD, 1.0) == pytest.approx(2.0)
    assert text_intensity(MoodLabel.CALM, 0.9) == 5.0


class TestBuildAdapters:

    def test_no_token_means_mock_everywhere(self):
        adapters = build_adapters(InferenceConfig())
        assert adapters.modes() == {"image": "mock", "text": "mock", "audio": "mock", "embedding": "mock"}

    def test_token_enables_provider_per_capability(self):
        config = InferenceConfig(api_token="tok", audio_adapter="mock", reco_adapter="huggingface")
        adapters = build_adapters(config, client=MagicMock())

        assert isinstance(adapters.image, HuggingFaceImageAdapter)
        assert isinstance(adapters.text, HuggingFaceTextAdapter)
        assert isinstance(adapters.audio, MockAudioAdapter)
        assert isinstance(adapters.embedding, HuggingFaceEmbeddingAdapter)
        assert adapters.embedding.is_active
