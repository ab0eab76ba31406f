"""
Stored entities for MoodTune.

Songs, journal entries and playlists are owned by the storage layer; the
recommendation core only reads songs and hands playlist drafts over for
persistence.
"""
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from ..mood.labels import MoodLabel


def _tag_set(data: Dict[str, Any], key: str) -> FrozenSet[str]:
    tags = data.get(key)
    if tags is None:
        return frozenset()
    if not isinstance(tags, (list, tuple)):
        raise ValueError(f"{key} must be a list of strings, got {type(tags).__name__}")
    if not all(isinstance(tag, str) for tag in tags):
        raise ValueError(f"{key} must only contain strings")
    return frozenset(tags)


@dataclass(frozen=True)
class SongRecord:
    """
    A song in the catalog.

    Attributes:
        id: Catalog identifier
        title: Song title
        artist: Performing artist
        album: Album name
        duration: Length in seconds, when known
        genres: Genre tags
        mood_tags: Mood tags
        is_local: Whether the file lives on the local filesystem
        cover_url: Cover art location
        local_path: Path of the local file
        file_id: Identifier of the uploaded file in the remote store
    """
    id: str
    title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    duration: Optional[float] = None
    genres: FrozenSet[str] = frozenset()
    mood_tags: FrozenSet[str] = frozenset()
    is_local: bool = False
    cover_url: Optional[str] = None
    local_path: Optional[str] = None
    file_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'genres', frozenset(g.lower() for g in self.genres))
        object.__setattr__(self, 'mood_tags', frozenset(t.lower() for t in self.mood_tags))

    @property
    def tags(self) -> FrozenSet[str]:
        """Mood tags and genres together, the set tag queries match against."""
        return self.mood_tags | self.genres

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert SongRecord to dictionary for JSON serialization.

        Tag sets are written as sorted lists.
        """
        result = asdict(self)
        result['genres'] = sorted(self.genres)
        result['mood_tags'] = sorted(self.mood_tags)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SongRecord':
        """
        Create SongRecord from dictionary data.

        Raises:
            KeyError: If id or title is missing
            ValueError: If data types are invalid
        """
        duration = data.get('duration')
        return cls(
            id=str(data['id']),
            title=data['title'],
            artist=data.get('artist'),
            album=data.get('album'),
            duration=float(duration) if duration is not None else None,
            genres=_tag_set(data, 'genres'),
            mood_tags=_tag_set(data, 'mood_tags'),
            is_local=bool(data.get('is_local', False)),
            cover_url=data.get('cover_url'),
            local_path=data.get('local_path'),
            file_id=data.get('file_id'),
        )


@dataclass(frozen=True)
class HistoryEntry:
    """One journal record, used as recommendation history."""
    mood_label: MoodLabel
    notes: str = ""
    intensity: Optional[float] = None
    entry_date: Optional[date] = None


@dataclass(frozen=True)
class PlaylistItem:
    song_id: str
    order: int


@dataclass
class PlaylistDraft:
    """A playlist ready to be persisted.

    Items carry a dense 0-based order and never repeat a song.
    """
    name: str
    description: str
    mood_label: MoodLabel
    items: Tuple[PlaylistItem, ...] = ()

    def __post_init__(self):
        self.items = tuple(self.items)
        song_ids = [item.song_id for item in self.items]
        if len(song_ids) != len(set(song_ids)):
            raise ValueError("Playlist items must not repeat a song")
        if [item.order for item in self.items] != list(range(len(self.items))):
            raise ValueError("Playlist item order must be dense and 0-based")

    @classmethod
    def from_songs(cls, name: str, description: str, mood_label: MoodLabel,
                   songs: List[SongRecord]) -> 'PlaylistDraft':
        items = tuple(PlaylistItem(song_id=song.id, order=idx) for idx, song in enumerate(songs))
        return cls(name=name, description=description, mood_label=mood_label, items=items)

    @property
    def song_ids(self) -> List[str]:
        return [item.song_id for item in self.items]


@dataclass
class StoredPlaylist:
    """A persisted playlist, with `songs` resolved in item order when fetched."""
    id: str
    user_id: str
    name: str
    description: str
    mood_label: MoodLabel
    items: Tuple[PlaylistItem, ...]
    songs: List[SongRecord] = field(default_factory=list)
    is_public: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ValidationResult:
    """Result of catalog validation"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    metadata: Optional[Dict[str, Any]] = None

    def add_error(self, error: str) -> None:
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)
