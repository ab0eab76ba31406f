"""Test configuration and fixtures."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from moodtune.persistence.repository import InMemorySongRepository, InMemoryPlaylistRepository
from moodtune.persistence.schemas import SongRecord


ENV_VARS = (
    "HF_API_TOKEN",
    "MOODTUNE_HF_API_TOKEN",
    "MOODTUNE_HF_BASE_URL",
    "MOODTUNE_FACE_ADAPTER",
    "MOODTUNE_TEXT_ADAPTER",
    "MOODTUNE_AUDIO_ADAPTER",
    "MOODTUNE_RECO_ADAPTER",
    "MOODTUNE_TIMEOUT_SECONDS",
    "MOODTUNE_EMBEDDING_WORKERS",
    "MOODTUNE_CATALOG_PATH",
    "MOODTUNE_LOG_LEVEL",
    "MOODTUNE_LOG_FORMAT",
    "MOODTUNE_CONFIG",
)


def make_song(song_id, mood_tags=(), genres=(), is_local=False, title=None, artist="Artist"):
    return SongRecord(
        id=song_id,
        title=title or f"Song {song_id}",
        artist=artist,
        album="Album",
        duration=200.0,
        genres=frozenset(genres),
        mood_tags=frozenset(mood_tags),
        is_local=is_local,
        local_path=f"music/{song_id}.mp3" if is_local else None,
    )


class ReversePermutation:
    """Deterministic stand-in for a numpy Generator."""

    def permutation(self, n):
        return np.arange(n)[::-1]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of configuration tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def catalog_songs():
    return [
        make_song("h1", mood_tags=["happy"], genres=["pop"], is_local=True),
        make_song("h2", mood_tags=["happy"], is_local=True),
        make_song("h3", mood_tags=["happy", "excited"], is_local=True),
        make_song("h4", mood_tags=["happy"], genres=["pop"]),
        make_song("s1", mood_tags=["sad"], genres=["acoustic"], is_local=True),
        make_song("s2", mood_tags=["sad"], genres=["indie"]),
        make_song("e1", mood_tags=["energetic"], genres=["rock"]),
        make_song("c1", mood_tags=["calm"], genres=["ambient"], is_local=True),
        make_song("n1", genres=["jazz"]),
    ]


@pytest.fixture()
def song_repo(catalog_songs):
    return InMemorySongRepository(catalog_songs)


@pytest.fixture()
def playlist_repo(song_repo):
    return InMemoryPlaylistRepository(song_repo)
