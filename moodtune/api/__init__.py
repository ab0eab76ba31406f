"""
API module for the MoodTune REST API.
"""
from .routes import router
from .handlers import register_exception_handlers
from .schemas import (
    MoodDetectionResponse,
    RecommendationsResponse,
    PlaylistResponse,
    VoiceResponse,
    HealthResponse
)

__all__ = [
    "router",
    "register_exception_handlers",
    "MoodDetectionResponse",
    "RecommendationsResponse",
    "PlaylistResponse",
    "VoiceResponse",
    "HealthResponse"
]
