"""
Mood playlist generation.

Songs are selected with a fallback cascade, each tier engaged only while
the quota is unfilled:

1. songs tagged with the mood (local songs only when `prefer_local`)
2. any local song not yet selected (only when `prefer_local`)
3. any song not yet selected

The selection is shuffled before ranks are assigned so that repeated
generations for the same mood vary.
"""
import logging
from typing import List, Optional

import numpy as np

from ..mood.labels import MoodLabel
from ..persistence.repository import SongRepository, PlaylistRepository
from ..persistence.schemas import PlaylistDraft, SongRecord
from ..utils.errors import InvalidInputError
from .schemas import GeneratedPlaylist, SongSummary

DEFAULT_STREAM_URL = "/api/v1/songs/stream/{song_id}"


class PlaylistGenerator:
    """Builds, persists and returns mood playlists."""

    def __init__(self, song_repository: SongRepository, playlist_repository: PlaylistRepository,
                 rng: Optional[np.random.Generator] = None,
                 stream_url_template: str = DEFAULT_STREAM_URL,
                 default_name: str = "Generated Playlist",
                 default_limit: int = 20, max_items: int = 100, prefer_local: bool = True):
        """
        Args:
            song_repository: Catalog to select from
            playlist_repository: Where generated playlists are stored
            rng: Source of the shuffle permutation; anything with `permutation(n)`
            stream_url_template: Format string for `audio_url`, with a `{song_id}` field
            default_name: Playlist name when the caller gives none
            default_limit: Item count when the caller gives none
            max_items: Hard ceiling on the item count
            prefer_local: Whether `generate` favours local songs when the caller does not say
        """
        self.song_repository = song_repository
        self.playlist_repository = playlist_repository
        self.rng = rng if rng is not None else np.random.default_rng()
        self.stream_url_template = stream_url_template
        self.default_name = default_name
        self.default_limit = default_limit
        self.max_items = max_items
        self.prefer_local = prefer_local
        self.logger = logging.getLogger(__name__)

    def resolve_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.default_limit
        if limit < 1:
            raise InvalidInputError("max_items must be positive")
        return min(int(limit), self.max_items)

    def select_candidates(self, mood_label: MoodLabel, limit: int, prefer_local: bool = True) -> List[SongRecord]:
        """Run the fallback cascade and return distinct songs in selection order."""
        selected: List[SongRecord] = []
        seen = set()

        def take(songs: List[SongRecord]) -> int:
            added = 0
            for song in songs:
                if len(selected) >= limit:
                    break
                if song.id in seen:
                    continue
                seen.add(song.id)
                selected.append(song)
                added += 1
            return added

        tier1 = take(self.song_repository.find_by_tags({mood_label.value}, limit, local_only=prefer_local))
        tier2 = 0
        if len(selected) < limit and prefer_local:
            tier2 = take(self.song_repository.find_local(list(seen), limit - len(selected)))
        tier3 = 0
        if len(selected) < limit:
            tier3 = take(self.song_repository.find_any(list(seen), limit - len(selected)))

        self.logger.debug(
            f"Cascade for {mood_label}: matched={tier1} local_backfill={tier2} "
            f"any_backfill={tier3} limit={limit} prefer_local={prefer_local}"
        )
        return selected

    def shuffle(self, songs: List[SongRecord]) -> List[SongRecord]:
        """Uniformly permute `songs` using the injected random source."""
        if len(songs) < 2:
            return list(songs)
        return [songs[i] for i in self.rng.permutation(len(songs))]

    def build_draft(self, mood_label: MoodLabel, name: str, songs: List[SongRecord]) -> PlaylistDraft:
        return PlaylistDraft.from_songs(
            name=f"{name} - {mood_label.display_name}",
            description=f"Auto-generated playlist for {mood_label} mood",
            mood_label=mood_label,
            songs=songs,
        )

    def generate(self, mood_label: MoodLabel, name: Optional[str] = None, limit: Optional[int] = None,
                 prefer_local: Optional[bool] = None, user_id: str = "anonymous") -> GeneratedPlaylist:
        """
        Generate and persist a playlist for `mood_label`.

        Args:
            mood_label: Canonical mood the playlist is for
            name: Base playlist name; the capitalised mood is appended
            limit: Maximum number of songs
            prefer_local: Restrict the first tiers to local songs; the generator's
                setting when None
            user_id: Owner of the stored playlist

        Returns:
            GeneratedPlaylist whose items may fall short of `limit` when the
            catalog runs out of distinct songs

        Raises:
            InvalidInputError: If the mood or limit is invalid
        """
        mood_label = MoodLabel.parse(mood_label)
        limit = self.resolve_limit(limit)
        name = (name or '').strip() or self.default_name
        if prefer_local is None:
            prefer_local = self.prefer_local

        songs = self.shuffle(self.select_candidates(mood_label, limit, prefer_local))
        draft = self.build_draft(mood_label, name, songs)

        playlist_id = self.playlist_repository.create(draft, user_id)
        stored = self.playlist_repository.fetch_with_resolved_items(playlist_id)
        if stored is None:
            raise RuntimeError(f"Playlist {playlist_id} vanished after creation")

        if len(stored.songs) < limit:
            self.logger.warning(
                f"Playlist for {mood_label} has {len(stored.songs)} of {limit} requested songs"
            )
        self.logger.info(f"Generated playlist {playlist_id} with {len(stored.songs)} songs for {mood_label}")

        return GeneratedPlaylist(
            id=stored.id,
            user_id=stored.user_id,
            name=stored.name,
            description=stored.description,
            mood_label=stored.mood_label,
            requested_limit=limit,
            items=[SongSummary.from_song(song, self.stream_url_template) for song in stored.songs],
        )
