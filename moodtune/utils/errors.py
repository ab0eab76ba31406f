"""
Error taxonomy for MoodTune.

Adapters, the engine and the playlist generator raise these and let them
propagate; the API layer translates them into HTTP responses.
"""
from typing import Optional


class MoodTuneError(Exception):
    """Base class for all MoodTune errors."""
    pass


class ConfigurationError(MoodTuneError):
    """Raised when the external provider is selected but not configured."""
    pass


class ProviderError(MoodTuneError):
    """Raised when the external inference provider answers with a non-success status."""

    def __init__(self, status_code: int, body: str, model_id: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.model_id = model_id
        super().__init__(f"Provider error {status_code}: {body}")


class InvalidInputError(MoodTuneError, ValueError):
    """Raised when caller input is rejected before any repository or provider call."""
    pass
