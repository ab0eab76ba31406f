"""
Playlist module for MoodTune.

Selects songs for a mood with a fallback cascade and assembles playlists.
"""

from ..persistence.schemas import PlaylistDraft, PlaylistItem
from .schemas import SongSummary, GeneratedPlaylist
from .selector import PlaylistGenerator

__all__ = [
    'PlaylistDraft',
    'PlaylistItem',
    'SongSummary',
    'GeneratedPlaylist',
    'PlaylistGenerator'
]
