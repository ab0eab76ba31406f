"""
FastAPI routes for the MoodTune REST API.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from .schemas import (
    MoodTextRequest,
    MoodDetectionResponse,
    MoodHistoryItem,
    JournalEntryRequest,
    JournalEntryResponse,
    SongResponse,
    RecommendationsResponse,
    GeneratePlaylistRequest,
    PlaylistItemResponse,
    PlaylistResponse,
    VoiceCommandRequest,
    VoiceAnalyzeRequest,
    CommandResponse,
    VoiceMoodResponse,
    VoiceResponse,
    HealthResponse,
    ErrorResponse,
)
from .dependencies import AppState, get_app_state, get_user_id
from ..mood.labels import MoodLabel
from ..mood.schemas import DetectionType, MoodDetectionResult
from ..persistence.schemas import HistoryEntry, SongRecord
from ..playlist.schemas import SongSummary
from ..recommendation.schemas import RecommendationRequest
from ..utils.errors import InvalidInputError
from ..voice.parser import analyze_voice


router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    502: {"model": ErrorResponse, "description": "Inference provider error"},
    503: {"model": ErrorResponse, "description": "Inference provider not configured"},
}


def _song_response(song: SongRecord) -> SongResponse:
    return SongResponse(
        id=song.id,
        title=song.title,
        artist=song.artist,
        album=song.album,
        duration=song.duration,
        genres=sorted(song.genres),
        mood_tags=sorted(song.mood_tags),
        is_local=song.is_local,
        cover_url=song.cover_url,
    )


def _playlist_item(item: SongSummary) -> PlaylistItemResponse:
    return PlaylistItemResponse(
        song_id=item.song_id,
        song_title=item.title,
        artist=item.artist,
        album=item.album,
        duration=item.duration,
        audio_url=item.audio_url,
        cover_url=item.cover_url,
        mood_tags=item.mood_tags,
        genres=item.genres,
        is_local=item.is_local,
    )


def _store_detection(state: AppState, user_id: str, detection_type: DetectionType,
                     result: MoodDetectionResult, metadata: Optional[dict] = None) -> MoodDetectionResponse:
    record = result.to_record(user_id, detection_type, metadata)
    detection_id = state.detections.record(record)
    return MoodDetectionResponse(
        mood_label=result.mood_label.value,
        confidence=result.confidence,
        intensity=result.intensity,
        raw_score=result.raw_score,
        details=result.details,
        detection_id=detection_id,
    )


def _read_upload(file: Optional[UploadFile]) -> bytes:
    if file is None:
        raise InvalidInputError("file required")
    data = file.file.read()
    if not data:
        raise InvalidInputError("file required")
    return data


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check endpoint"
)
async def health_check(state: AppState = Depends(get_app_state)):
    """Report API status, selected inference adapters and catalog size."""
    return HealthResponse(
        status="healthy",
        version=state.config.version,
        adapters=state.adapters.modes(),
        catalog_size=state.songs.count(),
    )


@router.post(
    "/mood/image",
    response_model=MoodDetectionResponse,
    responses=ERROR_RESPONSES,
    tags=["Mood"],
    summary="Detect mood from a webcam snapshot"
)
def detect_image_mood(
    file: Optional[UploadFile] = File(default=None),
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    result = state.adapters.image.analyze_image(_read_upload(file))
    return _store_detection(state, user_id, DetectionType.IMAGE, result)


@router.post(
    "/mood/text",
    response_model=MoodDetectionResponse,
    responses=ERROR_RESPONSES,
    tags=["Mood"],
    summary="Detect mood from free text"
)
def detect_text_mood(
    request: MoodTextRequest,
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    """
    Analyze free text for mood.

    When `intensity` is omitted it is derived from the detected mood and the
    model confidence.
    """
    if not request.text:
        raise InvalidInputError("text required")
    result = state.adapters.text.analyze_text(request.text, request.intensity)
    return _store_detection(state, user_id, DetectionType.TEXT, result,
                            metadata={'text_length': len(request.text)})


@router.post(
    "/mood/audio",
    response_model=MoodDetectionResponse,
    responses=ERROR_RESPONSES,
    tags=["Mood"],
    summary="Detect mood from an audio clip"
)
def detect_audio_mood(
    file: Optional[UploadFile] = File(default=None),
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    result = state.adapters.audio.analyze_audio(_read_upload(file))
    return _store_detection(state, user_id, DetectionType.AUDIO, result)


@router.get(
    "/mood/history",
    response_model=List[MoodHistoryItem],
    tags=["Mood"],
    summary="Most recent mood detections"
)
def mood_history(
    limit: int = Query(default=50, ge=1, le=200),
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    return [
        MoodHistoryItem(
            id=record.id,
            detection_type=record.detection_type.value,
            mood_label=record.mood_label.value,
            confidence=record.confidence,
            intensity=record.intensity,
            raw_score=record.raw_score,
            created_at=record.created_at,
        )
        for record in state.detections.history(user_id, limit)
    ]


@router.post(
    "/journal",
    response_model=JournalEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERROR_RESPONSES[400]},
    tags=["Journal"],
    summary="Create or replace the journal entry for a day"
)
def upsert_journal_entry(
    request: JournalEntryRequest,
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    entry = state.journal.upsert(user_id, HistoryEntry(
        mood_label=MoodLabel.parse(request.mood_label),
        notes=request.notes,
        intensity=request.intensity,
        entry_date=request.date,
    ))
    return JournalEntryResponse(
        date=entry.entry_date,
        mood_label=entry.mood_label.value,
        intensity=entry.intensity,
        notes=entry.notes,
    )


@router.get(
    "/recommendations",
    response_model=RecommendationsResponse,
    responses=ERROR_RESPONSES,
    tags=["Recommendations"],
    summary="Mood-based song recommendations"
)
def get_recommendations(
    mood: str = Query(default="neutral", description="Canonical mood label"),
    limit: int = Query(default=25, ge=1, le=100),
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    """
    Recommend songs tagged with the mood or one of its genres.

    Songs are re-ranked by embedding similarity to the user's recent journal
    when the recommendation adapter is backed by the inference provider.
    """
    history = state.journal.recent(user_id, state.config.recommendation.journal_lookback)
    recommended = state.engine.handle(RecommendationRequest(
        mood_label=MoodLabel.parse(mood),
        history=history,
        limit=limit,
    ))
    return RecommendationsResponse(
        mood_label=recommended.mood_label.value,
        genres=sorted(recommended.genres),
        ranked=recommended.ranked,
        items=[_song_response(song) for song in recommended.songs],
        processing_time_ms=recommended.processing_time_ms,
    )


@router.post(
    "/playlists/generate",
    response_model=PlaylistResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: ERROR_RESPONSES[400]},
    tags=["Playlists"],
    summary="Generate a playlist for a mood"
)
def generate_playlist(
    request: GeneratePlaylistRequest,
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    """
    Build a playlist for a mood and store it.

    The playlist may hold fewer songs than `max_items` when the catalog
    cannot supply enough distinct songs; `complete` tells which.
    """
    with state.logger.operation_context("PlaylistGenerator", "generate",
                                        mood_label=request.mood_label,
                                        max_items=request.max_items) as log:
        playlist = state.generator.generate(
            MoodLabel.parse(request.mood_label),
            name=request.playlist_name,
            limit=request.max_items,
            prefer_local=request.prefer_local,
            user_id=user_id,
        )
        log.metric("playlist_items", len(playlist.items), tags={"mood": playlist.mood_label.value})

    return PlaylistResponse(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        mood_label=playlist.mood_label.value,
        items=[_playlist_item(item) for item in playlist.items],
        requested_items=playlist.requested_limit,
        complete=playlist.is_complete,
    )


@router.get(
    "/playlists/{playlist_id}",
    response_model=PlaylistResponse,
    responses={404: {"model": ErrorResponse, "description": "Playlist not found"}},
    tags=["Playlists"],
    summary="Fetch a stored playlist"
)
def get_playlist(
    playlist_id: str,
    state: AppState = Depends(get_app_state),
    user_id: str = Depends(get_user_id)
):
    stored = state.playlists.fetch_with_resolved_items(playlist_id)
    if stored is None or stored.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    template = state.config.playlist.stream_url_template
    return PlaylistResponse(
        id=stored.id,
        name=stored.name,
        description=stored.description,
        mood_label=stored.mood_label.value,
        items=[_playlist_item(SongSummary.from_song(song, template)) for song in stored.songs],
    )


def _voice_response(state: AppState, text: Optional[str], field_name: str) -> VoiceResponse:
    if not text:
        raise InvalidInputError(f"{field_name} required")
    analysis = analyze_voice(text, state.adapters.text, state.voice_parser)
    command = analysis.command.to_dict()
    return VoiceResponse(
        command=CommandResponse(**command),
        mood=VoiceMoodResponse(
            mood_label=analysis.mood.mood_label.value,
            intensity=analysis.mood.intensity,
            confidence=analysis.mood.confidence,
            raw_score=analysis.mood.raw_score,
        ),
    )


@router.post(
    "/voice/command",
    response_model=VoiceResponse,
    responses=ERROR_RESPONSES,
    tags=["Voice"],
    summary="Parse a spoken command"
)
def voice_command(request: VoiceCommandRequest, state: AppState = Depends(get_app_state)):
    """
    Parse a playback command from text and detect the speaker's mood.

    Matching is keyword based: pause, resume, next, previous, stop,
    volume up/down, then "play <query>".
    """
    return _voice_response(state, request.text, "text")


@router.post(
    "/voice/analyze",
    response_model=VoiceResponse,
    responses=ERROR_RESPONSES,
    tags=["Voice"],
    summary="Analyze a transcript for a command and mood"
)
def voice_analyze(request: VoiceAnalyzeRequest, state: AppState = Depends(get_app_state)):
    return _voice_response(state, request.transcript, "transcript")
