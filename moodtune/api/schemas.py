"""
Pydantic schemas for the MoodTune REST API.
"""
from datetime import date as Date, datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


class MoodTextRequest(BaseModel):
    """Free text to analyze for mood."""
    text: Optional[str] = Field(default=None, description="Text to analyze")
    intensity: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=10.0,
        description="Caller-supplied intensity (0-10); derived from the model when omitted"
    )


class MoodDetectionResponse(BaseModel):
    """Result of a mood detection call."""
    mood_label: str = Field(description="Canonical mood label")
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0, description="Detector certainty")
    intensity: float = Field(ge=0.0, le=10.0, description="Strength of the mood (0-10)")
    raw_score: Optional[float] = Field(default=None, description="Raw model score")
    details: Dict[str, Any] = Field(default_factory=dict, description="Detector-specific details")
    detection_id: str = Field(description="Identifier of the stored detection")


class MoodHistoryItem(BaseModel):
    id: Optional[str] = None
    detection_type: str
    mood_label: str
    confidence: Optional[float] = None
    intensity: float
    raw_score: Optional[float] = None
    created_at: datetime


class JournalEntryRequest(BaseModel):
    """Journal entry; one per user per day."""
    date: Date = Field(description="Day the entry is for")
    mood_label: str = Field(description="Canonical mood label")
    intensity: float = Field(ge=0.0, le=10.0, description="Mood intensity (0-10)")
    notes: str = Field(default="", description="Free text notes")


class JournalEntryResponse(BaseModel):
    date: Optional[Date] = None
    mood_label: str
    intensity: Optional[float] = None
    notes: str = ""


class SongResponse(BaseModel):
    """Song as returned by recommendation endpoints."""
    id: str
    title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[float] = None
    genres: List[str] = Field(default_factory=list)
    mood_tags: List[str] = Field(default_factory=list)
    is_local: bool = False
    cover_url: Optional[str] = None


class RecommendationsResponse(BaseModel):
    success: bool = True
    mood_label: str = Field(description="Mood the recommendations are for")
    genres: List[str] = Field(description="Genres derived from the mood")
    ranked: bool = Field(description="Whether items were re-ranked by embedding similarity")
    items: List[SongResponse] = Field(description="Recommended songs, best first")
    processing_time_ms: float = Field(ge=0.0, description="Time taken to process the request in milliseconds")


class GeneratePlaylistRequest(BaseModel):
    """Request body for playlist generation."""
    mood_label: str = Field(default="neutral", description="Canonical mood label")
    playlist_name: Optional[str] = Field(default=None, description="Base playlist name")
    max_items: int = Field(default=20, ge=1, description="Maximum number of songs (capped at 100)")
    prefer_local: Optional[bool] = Field(
        default=None,
        description="Prefer songs from the local library; the configured playlist.prefer_local when omitted"
    )


class PlaylistItemResponse(BaseModel):
    song_id: str
    song_title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[float] = None
    audio_url: str
    cover_url: Optional[str] = None
    mood_tags: List[str] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    is_local: bool = False


class PlaylistResponse(BaseModel):
    id: str
    name: str
    description: str
    mood_label: str
    items: List[PlaylistItemResponse]
    requested_items: Optional[int] = Field(default=None, description="Number of songs asked for")
    complete: Optional[bool] = Field(default=None, description="Whether the quota was filled")


class VoiceCommandRequest(BaseModel):
    text: Optional[str] = None


class VoiceAnalyzeRequest(BaseModel):
    transcript: Optional[str] = None


class CommandResponse(BaseModel):
    action: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None


class VoiceMoodResponse(BaseModel):
    mood_label: str
    intensity: float
    confidence: Optional[float] = None
    raw_score: Optional[float] = None


class VoiceResponse(BaseModel):
    success: bool = True
    command: CommandResponse
    mood: VoiceMoodResponse


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(description="API status")
    version: str = Field(description="API version")
    adapters: Dict[str, str] = Field(description="Selected inference adapter per capability")
    catalog_size: int = Field(description="Number of songs in the catalog")


class ErrorResponse(BaseModel):
    """Error response format."""
    success: bool = False
    message: str = Field(description="Error message")
