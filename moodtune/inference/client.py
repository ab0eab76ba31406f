"""
Hugging Face Inference API client.
"""
import logging
from typing import Any, Optional

import requests

from ..utils.errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)


class HuggingFaceClient:
    """Posts raw inputs to per-model inference endpoints.

    One request per call, no retries: a failed call is terminal for the
    request that made it.
    """

    def __init__(self, api_token: Optional[str], base_url: str,
                 timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.api_token = api_token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def model_url(self, model_id: str) -> str:
        return f"{self.base_url}/{model_id}"

    def post(self, model_id: str, payload: Any, binary: bool = False) -> Any:
        """
        Send `payload` to `model_id`.

        Args:
            model_id: Provider model identifier, e.g. "trpakov/vit-face-expression"
            payload: Raw bytes when `binary` is set, otherwise a JSON-serialisable object
            binary: Send the payload as the raw request body

        Returns:
            Decoded JSON when the provider answers with JSON, raw bytes otherwise

        Raises:
            ConfigurationError: If no API token or model id is configured
            ProviderError: If the provider answers with a non-success status
        """
        if not self.api_token:
            raise ConfigurationError("HF_API_TOKEN not set")
        if not model_id:
            raise ConfigurationError("No model id configured for this capability")

        headers = {"Authorization": f"Bearer {self.api_token}"}
        url = self.model_url(model_id)
        logger.debug(f"POST {url} (binary={binary})")

        if binary:
            response = self.session.post(url, headers=headers, data=payload, timeout=self.timeout)
        else:
            response = self.session.post(url, headers=headers, json=payload, timeout=self.timeout)

        if not response.ok:
            logger.error(f"Provider call to {model_id} failed with status {response.status_code}")
            raise ProviderError(response.status_code, response.text, model_id=model_id)

        content_type = response.headers.get('content-type', '')
        if 'application/json' in content_type:
            return response.json()
        return response.content
