"""
Repository interfaces and in-memory implementations.

The production system keeps songs, playlists, detections and journal
entries in a document store. The core only depends on the interfaces
below; the in-memory implementations back tests, the CLI and the
development API.
"""
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from ..mood.schemas import MoodDetectionRecord
from .schemas import SongRecord, PlaylistDraft, StoredPlaylist, HistoryEntry

logger = logging.getLogger(__name__)


class SongRepository(ABC):
    """Read access to the song catalog. Results keep catalog order."""

    @abstractmethod
    def find_by_tags(self, tags: Iterable[str], limit: int, local_only: bool = False) -> List[SongRecord]:
        """Songs whose mood tags or genres contain any of `tags`."""

    @abstractmethod
    def find_local(self, exclude_ids: Iterable[str], limit: int) -> List[SongRecord]:
        """Local songs not in `exclude_ids`."""

    @abstractmethod
    def find_any(self, exclude_ids: Iterable[str], limit: int) -> List[SongRecord]:
        """Any songs not in `exclude_ids`."""

    @abstractmethod
    def find_by_id(self, song_id: str) -> Optional[SongRecord]:
        pass

    @abstractmethod
    def count(self) -> int:
        pass


class PlaylistRepository(ABC):

    @abstractmethod
    def create(self, draft: PlaylistDraft, user_id: str) -> str:
        """Persist `draft` and return its id."""

    @abstractmethod
    def fetch_with_resolved_items(self, playlist_id: str) -> Optional[StoredPlaylist]:
        """Return the playlist with its songs populated, or None."""


class MoodDetectionRepository(ABC):

    @abstractmethod
    def record(self, detection: MoodDetectionRecord) -> str:
        pass

    @abstractmethod
    def history(self, user_id: str, limit: int) -> List[MoodDetectionRecord]:
        """Most recent detections first."""


class JournalRepository(ABC):

    @abstractmethod
    def upsert(self, user_id: str, entry: HistoryEntry) -> HistoryEntry:
        """Store `entry`, replacing any entry the user has for the same day."""

    @abstractmethod
    def recent(self, user_id: str, limit: int) -> List[HistoryEntry]:
        """Most recent entries first."""


class InMemorySongRepository(SongRepository):
    """Song catalog held in a dict keyed by song id."""

    def __init__(self, songs: Optional[Iterable[SongRecord]] = None):
        self._songs: Dict[str, SongRecord] = OrderedDict()
        self._lock = threading.Lock()
        for song in songs or ():
            self._songs[song.id] = song

    def _all(self) -> List[SongRecord]:
        with self._lock:
            return list(self._songs.values())

    def add(self, song: SongRecord) -> None:
        with self._lock:
            self._songs[song.id] = song

    def find_by_tags(self, tags: Iterable[str], limit: int, local_only: bool = False) -> List[SongRecord]:
        wanted = {str(t).lower() for t in tags}
        if limit <= 0 or not wanted:
            return []
        found = []
        for song in self._all():
            if local_only and not song.is_local:
                continue
            if song.tags & wanted:
                found.append(song)
                if len(found) >= limit:
                    break
        return found

    def _find_excluding(self, exclude_ids: Iterable[str], limit: int, local_only: bool) -> List[SongRecord]:
        if limit <= 0:
            return []
        excluded = set(exclude_ids)
        found = []
        for song in self._all():
            if song.id in excluded or (local_only and not song.is_local):
                continue
            found.append(song)
            if len(found) >= limit:
                break
        return found

    def find_local(self, exclude_ids: Iterable[str], limit: int) -> List[SongRecord]:
        return self._find_excluding(exclude_ids, limit, local_only=True)

    def find_any(self, exclude_ids: Iterable[str], limit: int) -> List[SongRecord]:
        return self._find_excluding(exclude_ids, limit, local_only=False)

    def find_by_id(self, song_id: str) -> Optional[SongRecord]:
        with self._lock:
            return self._songs.get(str(song_id))

    def count(self) -> int:
        with self._lock:
            return len(self._songs)


class InMemoryPlaylistRepository(PlaylistRepository):
    """Playlists kept in memory; items are resolved against a song repository."""

    def __init__(self, songs: SongRepository):
        self.songs = songs
        self._playlists: Dict[str, StoredPlaylist] = {}
        self._lock = threading.Lock()

    def create(self, draft: PlaylistDraft, user_id: str) -> str:
        playlist_id = uuid.uuid4().hex
        stored = StoredPlaylist(
            id=playlist_id,
            user_id=user_id,
            name=draft.name,
            description=draft.description,
            mood_label=draft.mood_label,
            items=draft.items,
        )
        with self._lock:
            self._playlists[playlist_id] = stored
        logger.debug(f"Stored playlist {playlist_id} with {len(draft.items)} items")
        return playlist_id

    def fetch_with_resolved_items(self, playlist_id: str) -> Optional[StoredPlaylist]:
        with self._lock:
            stored = self._playlists.get(playlist_id)
        if stored is None:
            return None
        songs = []
        for item in sorted(stored.items, key=lambda i: i.order):
            song = self.songs.find_by_id(item.song_id)
            if song is None:
                logger.warning(f"Playlist {playlist_id} references missing song {item.song_id}")
                continue
            songs.append(song)
        return StoredPlaylist(
            id=stored.id,
            user_id=stored.user_id,
            name=stored.name,
            description=stored.description,
            mood_label=stored.mood_label,
            items=stored.items,
            songs=songs,
            is_public=stored.is_public,
            created_at=stored.created_at,
        )


class InMemoryMoodDetectionRepository(MoodDetectionRepository):

    def __init__(self):
        self._records: List[MoodDetectionRecord] = []
        self._lock = threading.Lock()

    def record(self, detection: MoodDetectionRecord) -> str:
        detection.id = uuid.uuid4().hex
        with self._lock:
            self._records.append(detection)
        return detection.id

    def history(self, user_id: str, limit: int) -> List[MoodDetectionRecord]:
        with self._lock:
            records = [r for r in self._records if r.user_id == user_id]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:max(0, limit)]


class InMemoryJournalRepository(JournalRepository):

    def __init__(self):
        self._entries: Dict[Tuple[str, Optional[date]], HistoryEntry] = {}
        self._lock = threading.Lock()

    def upsert(self, user_id: str, entry: HistoryEntry) -> HistoryEntry:
        with self._lock:
            self._entries[(user_id, entry.entry_date)] = entry
        return entry

    def recent(self, user_id: str, limit: int) -> List[HistoryEntry]:
        with self._lock:
            entries = [e for (uid, _), e in self._entries.items() if uid == user_id]
        entries.sort(key=lambda e: e.entry_date or date.min, reverse=True)
        return entries[:max(0, limit)]
