"""
Persistence layer module for MoodTune.

Repository interfaces for songs, playlists, mood detections and journal
entries, with in-memory and JSON-file implementations.
"""

from .schemas import SongRecord, HistoryEntry, PlaylistItem, PlaylistDraft, StoredPlaylist, ValidationResult
from .repository import (
    SongRepository,
    PlaylistRepository,
    MoodDetectionRepository,
    JournalRepository,
    InMemorySongRepository,
    InMemoryPlaylistRepository,
    InMemoryMoodDetectionRepository,
    InMemoryJournalRepository,
)
from .song_catalog import JsonSongRepository

__all__ = [
    'SongRecord',
    'HistoryEntry',
    'PlaylistItem',
    'PlaylistDraft',
    'StoredPlaylist',
    'ValidationResult',
    'SongRepository',
    'PlaylistRepository',
    'MoodDetectionRepository',
    'JournalRepository',
    'InMemorySongRepository',
    'InMemoryPlaylistRepository',
    'InMemoryMoodDetectionRepository',
    'InMemoryJournalRepository',
    'JsonSongRepository'
]
