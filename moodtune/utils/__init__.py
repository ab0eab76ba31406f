"""
Utility modules for MoodTune.

Provides structured logging and the shared error taxonomy.
"""

from .errors import MoodTuneError, ConfigurationError, ProviderError, InvalidInputError
from .logging import StructuredLogger, LogContext, get_logger, redact_secrets

__all__ = [
    'MoodTuneError',
    'ConfigurationError',
    'ProviderError',
    'InvalidInputError',
    'StructuredLogger',
    'LogContext',
    'get_logger',
    'redact_secrets'
]
