import pytest

from moodtune.mood.labels import VOCABULARY_TABLES, MoodLabel, Vocabulary, normalize
from moodtune.mood.schemas import DetectionType, MoodDetectionResult, clamp_intensity
from moodtune.utils.errors import InvalidInputError


def test_facial_labels_are_case_insensitive():
    assert normalize(Vocabulary.FACIAL_EXPRESSION, "HAPPY") == MoodLabel.HAPPY
    assert normalize(Vocabulary.FACIAL_EXPRESSION, " Sad ") == MoodLabel.SAD
    assert normalize(Vocabulary.FACIAL_EXPRESSION, "fearful") == MoodLabel.FEAR


def test_fine_grained_labels_collapse_onto_canonical_moods():
    assert normalize(Vocabulary.FINE_GRAINED_EMOTION, "joy") == MoodLabel.HAPPY
    assert normalize(Vocabulary.FINE_GRAINED_EMOTION, "grief") == MoodLabel.SAD
    assert normalize(Vocabulary.FINE_GRAINED_EMOTION, "nervousness") == MoodLabel.ANXIOUS
    assert normalize(Vocabulary.FINE_GRAINED_EMOTION, "curiosity") == MoodLabel.FOCUSED


def test_vocabularies_are_separate():
    # "fear" is its own mood for faces but anxious for text
    assert normalize(Vocabulary.FACIAL_EXPRESSION, "fear") == MoodLabel.FEAR
    assert normalize(Vocabulary.FINE_GRAINED_EMOTION, "fear") == MoodLabel.ANXIOUS


def test_speech_short_codes():
    assert normalize(Vocabulary.SPEECH_EMOTION, "hap") == MoodLabel.HAPPY
    assert normalize(Vocabulary.SPEECH_EMOTION, "ang") == MoodLabel.ANGRY
    assert normalize(Vocabulary.SPEECH_EMOTION, "neu") == MoodLabel.NEUTRAL


@pytest.mark.parametrize("raw", [None, "", "   ", "bewildered", "joy!"])
def test_unknown_or_empty_labels_map_to_neutral(raw):
    assert normalize(Vocabulary.FACIAL_EXPRESSION, raw) == MoodLabel.NEUTRAL


def test_parse_accepts_canonical_labels():
    assert MoodLabel.parse("Happy") == MoodLabel.HAPPY
    assert MoodLabel.parse(MoodLabel.CALM) == MoodLabel.CALM


@pytest.mark.parametrize("value", [None, "", "joy", "very happy"])
def test_parse_rejects_non_canonical_labels(value):
    with pytest.raises(InvalidInputError):
        MoodLabel.parse(value)


def test_display_name_and_str():
    assert MoodLabel.HAPPY.display_name == "Happy"
    assert str(MoodLabel.MELANCHOLIC) == "melancholic"


def test_clamp_intensity():
    assert clamp_intensity(-1) == 0.0
    assert clamp_intensity(12.5) == 10.0
    assert clamp_intensity(4.2) == 4.2


def test_detection_result_rejects_out_of_range_values():
    with pytest.raises(ValueError):
        MoodDetectionResult(mood_label=MoodLabel.HAPPY, intensity=11)
    with pytest.raises(ValueError):
        MoodDetectionResult(mood_label=MoodLabel.HAPPY, intensity=5, confidence=1.5)
    with pytest.raises(ValueError):
        MoodDetectionResult(mood_label="happy", intensity=5)


def test_to_record_uses_details_as_default_metadata():
    result = MoodDetectionResult(mood_label=MoodLabel.SAD, intensity=3.0, confidence=0.8,
                                 details={"label": "grief"})
    record = result.to_record("u1", DetectionType.TEXT)
    assert record.user_id == "u1"
    assert record.detection_type == DetectionType.TEXT
    assert record.metadata == {"label": "grief"}
    assert record.id is None

    record = result.to_record("u1", "text", metadata={"text_length": 4})
    assert record.detection_type == DetectionType.TEXT
    assert record.metadata == {"text_length": 4}


@pytest.mark.parametrize("vocabulary", list(Vocabulary))
def test_every_table_entry_maps_into_canonical_set(vocabulary):
    table = VOCABULARY_TABLES[vocabulary]
    assert table
    for raw, mood in table.items():
        assert isinstance(mood, MoodLabel)
        assert normalize(vocabulary, raw) == mood
        assert normalize(vocabulary, raw.upper()) == mood


@pytest.mark.parametrize("raw", ["happy", "sad", "neutral", "angry", "disgust", "fear", "surprise"])
def test_facial_expression_labels_are_canonical(raw):
    assert normalize(Vocabulary.FACIAL_EXPRESSION, raw) in set(MoodLabel)


def test_normalize_is_pure():
    for vocabulary in Vocabulary:
        for raw in list(VOCABULARY_TABLES[vocabulary]) + ["unknown", "", None]:
            first = normalize(vocabulary, raw)
            assert normalize(vocabulary, raw) == first
    assert normalize(Vocabulary.FACIAL_EXPRESSION, "happy") == MoodLabel.HAPPY
