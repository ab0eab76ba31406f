from unittest.mock import MagicMock

import pytest

from moodtune.inference.client import HuggingFaceClient
from moodtune.utils.errors import ConfigurationError, ProviderError


def _response(status=200, json_body=None, content=b"", content_type="application/json"):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.headers = {"content-type": content_type}
    response.json.return_value = json_body
    response.content = content
    response.text = "model is loading" if status >= 400 else ""
    return response


def test_post_json_payload_with_bearer_token():
    session = MagicMock()
    session.post.return_value = _response(json_body=[{"label": "joy", "score": 0.8}])
    client = HuggingFaceClient("tok", "https://hf.example/models/", timeout=5, session=session)

    result = client.post("org/model", {"inputs": "hello"})

    assert result == [{"label": "joy", "score": 0.8}]
    args, kwargs = session.post.call_args
    assert args[0] == "https://hf.example/models/org/model"
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}
    assert kwargs["json"] == {"inputs": "hello"}
    assert kwargs["timeout"] == 5


def test_post_binary_payload_sends_raw_body():
    session = MagicMock()
    session.post.return_value = _response(json_body=[])
    client = HuggingFaceClient("tok", "https://hf.example/models", session=session)

    client.post("org/model", b"\x89PNG", binary=True)

    _, kwargs = session.post.call_args
    assert kwargs["data"] == b"\x89PNG"
    assert "json" not in kwargs


def test_non_json_response_returns_bytes():
    session = MagicMock()
    session.post.return_value = _response(content=b"raw", content_type="application/octet-stream")
    client = HuggingFaceClient("tok", "https://hf.example/models", session=session)

    assert client.post("org/model", {"inputs": "x"}) == b"raw"


def test_error_status_raises_provider_error():
    session = MagicMock()
    session.post.return_value = _response(status=503)
    client = HuggingFaceClient("tok", "https://hf.example/models", session=session)

    with pytest.raises(ProviderError) as excinfo:
        client.post("org/model", {"inputs": "x"})

    assert excinfo.value.status_code == 503
    assert excinfo.value.model_id == "org/model"
    assert "503" in str(excinfo.value)


def test_missing_token_or_model_raises_configuration_error():
    session = MagicMock()
    with pytest.raises(ConfigurationError):
        HuggingFaceClient(None, "https://hf.example/models", session=session).post("org/model", {})
    with pytest.raises(ConfigurationError):
        HuggingFaceClient("tok", "https://hf.example/models", session=session).post("", {})
    session.post.assert_not_called()
