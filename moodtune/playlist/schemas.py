"""
Playlist schemas for MoodTune.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from ..mood.labels import MoodLabel
from ..persistence.schemas import SongRecord


@dataclass
class SongSummary:
    """Display-ready view of a playlist song."""
    song_id: str
    title: str
    artist: Optional[str]
    album: Optional[str]
    duration: Optional[float]
    audio_url: str
    cover_url: Optional[str]
    mood_tags: List[str]
    genres: List[str]
    is_local: bool

    @classmethod
    def from_song(cls, song: SongRecord, stream_url_template: str) -> 'SongSummary':
        return cls(
            song_id=song.id,
            title=song.title,
            artist=song.artist,
            album=song.album,
            duration=song.duration,
            audio_url=stream_url_template.format(song_id=song.id),
            cover_url=song.cover_url,
            mood_tags=sorted(song.mood_tags),
            genres=sorted(song.genres),
            is_local=song.is_local,
        )


@dataclass
class GeneratedPlaylist:
    """A persisted, mood-generated playlist with resolved items.

    `items` may be shorter than `requested_limit` when the catalog could not
    supply enough distinct songs; that is not an error.
    """
    id: str
    user_id: str
    name: str
    description: str
    mood_label: MoodLabel
    requested_limit: int
    items: List[SongSummary] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return len(self.items) == self.requested_limit

    @property
    def song_ids(self) -> List[str]:
        return [item.song_id for item in self.items]
