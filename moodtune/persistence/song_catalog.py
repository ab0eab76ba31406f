"""
JSON-backed song catalog for MoodTune.

Stores song metadata keyed by song id in a single JSON file and serves it
through the `SongRepository` interface. Writes are atomic (temp file plus
rename).
"""
import json
import os
import tempfile
from typing import Dict, List, Optional
import logging

from .repository import InMemorySongRepository
from .schemas import SongRecord, ValidationResult


class JsonSongRepository(InMemorySongRepository):
    """
    Song repository persisted as a JSON object of {song_id: song}.

    The file is read lazily on first access and cached until the catalog
    is rewritten.
    """

    def __init__(self, storage_path: str):
        """
        Args:
            storage_path: Path to the JSON catalog file
        """
        super().__init__()
        self.storage_path = storage_path
        self.logger = logging.getLogger(__name__)
        self._loaded = False

    def _all(self) -> List[SongRecord]:
        self.load_catalog()
        return super()._all()

    def find_by_id(self, song_id: str) -> Optional[SongRecord]:
        self.load_catalog()
        return super().find_by_id(song_id)

    def count(self) -> int:
        self.load_catalog()
        return super().count()

    def load_catalog(self) -> Dict[str, SongRecord]:
        """
        Load the catalog from storage.

        A missing file yields an empty catalog. Malformed entries are logged
        and skipped.

        Raises:
            ValueError: If the file is not a JSON object or is not valid JSON
        """
        if self._loaded:
            with self._lock:
                return dict(self._songs)

        if not os.path.exists(self.storage_path):
            self.logger.warning(f"Song catalog not found, starting empty: {self.storage_path}")
            self._loaded = True
            return {}

        try:
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            error_msg = f"JSON corruption in catalog file {self.storage_path}: {e}"
            self.logger.error(error_msg)
            raise ValueError(error_msg) from e

        if not isinstance(data, dict):
            raise ValueError("Catalog file must contain a JSON object")

        catalog: Dict[str, SongRecord] = {}
        for key, value in data.items():
            try:
                song = SongRecord.from_dict({'id': key, **value})
            except (ValueError, KeyError, TypeError) as e:
                self.logger.error(f"Invalid song data for ID {key}: {e}")
                continue
            catalog[song.id] = song

        with self._lock:
            self._songs.clear()
            self._songs.update(catalog)
        self._loaded = True

        self.logger.info(f"Loaded catalog with {len(catalog)} songs")
        return catalog

    def create_catalog(self, songs: List[SongRecord]) -> None:
        """
        Replace the catalog with `songs` and save it.

        Raises:
            ValueError: If two songs share an id
            IOError: If saving fails
        """
        seen_ids = set()
        for song in songs:
            if song.id in seen_ids:
                error_msg = f"ID collision detected: song id {song.id} appears multiple times"
                self.logger.error(error_msg)
                raise ValueError(error_msg)
            seen_ids.add(song.id)

        catalog = {song.id: song for song in songs}
        self.save_atomic(catalog)

        with self._lock:
            self._songs.clear()
            self._songs.update(catalog)
        self._loaded = True

        self.logger.info(f"Created catalog with {len(songs)} songs")

    def add(self, song: SongRecord) -> None:
        """Add or replace one song and save the catalog."""
        self.load_catalog()
        super().add(song)
        with self._lock:
            catalog = dict(self._songs)
        self.save_atomic(catalog)

    def validate_catalog(self) -> ValidationResult:
        """
        Check the catalog for missing fields and likely duplicates.

        Two songs with the same case-insensitive title and artist are
        reported as a warning, not an error.
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])

        try:
            catalog = self.load_catalog()
        except (OSError, ValueError) as e:
            result.add_error(f"Failed to load catalog: {e}")
            return result

        seen: Dict[tuple, str] = {}
        for song_id, song in catalog.items():
            if not song.title:
                result.add_error(f"Song {song_id} missing title")
            if song.is_local and not song.local_path:
                result.add_error(f"Local song {song_id} missing local_path")
            if not song.mood_tags and not song.genres:
                result.add_warning(f"Song {song_id} has no mood tags or genres")

            key = ((song.title or '').lower(), (song.artist or '').lower())
            if key in seen:
                result.add_warning(f"Songs {seen[key]} and {song_id} look like duplicates")
            else:
                seen[key] = song_id

        result.metadata = {
            'total_songs': len(catalog),
            'local_songs': sum(1 for s in catalog.values() if s.is_local),
            'unique_genres': len(set().union(*(s.genres for s in catalog.values()))) if catalog else 0,
        }
        return result

    def save_atomic(self, catalog: Dict[str, SongRecord]) -> None:
        """
        Atomically save the catalog to storage.

        Raises:
            IOError: If saving fails
        """
        data = {}
        for song_id, song in catalog.items():
            song_dict = song.to_dict()
            song_dict.pop('id')
            data[song_id] = song_dict

        temp_dir = os.path.dirname(os.path.abspath(self.storage_path))
        os.makedirs(temp_dir, exist_ok=True)

        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='w',
                dir=temp_dir,
                delete=False,
                suffix='.tmp',
                encoding='utf-8'
            ) as temp_file:
                temp_path = temp_file.name
                json.dump(data, temp_file, indent=2, ensure_ascii=False)

            os.replace(temp_path, self.storage_path)
            temp_path = None

            self.logger.info(f"Atomically saved catalog with {len(catalog)} songs to {self.storage_path}")

        except OSError as e:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)
            error_msg = f"Failed to save catalog atomically: {e}"
            self.logger.error(error_msg)
            raise IOError(error_msg) from e
