import numpy as np
import pytest

from moodtune.mood.labels import MoodLabel
from moodtune.persistence.repository import InMemoryPlaylistRepository, InMemorySongRepository
from moodtune.persistence.schemas import PlaylistDraft, PlaylistItem
from moodtune.playlist.selector import PlaylistGenerator
from moodtune.utils.errors import InvalidInputError

from conftest import ReversePermutation, make_song


def _generator(songs, rng=None):
    repo = songs if isinstance(songs, InMemorySongRepository) else InMemorySongRepository(songs)
    return PlaylistGenerator(repo, InMemoryPlaylistRepository(repo), rng=rng or ReversePermutation())


def test_local_matches_then_local_backfill(song_repo):
    generator = _generator(song_repo)
    selected = generator.select_candidates(MoodLabel.HAPPY, 5, prefer_local=True)
    assert [s.id for s in selected] == ["h1", "h2", "h3", "s1", "c1"]


def test_falls_through_to_any_song(song_repo):
    generator = _generator(song_repo)
    selected = generator.select_candidates(MoodLabel.HAPPY, 7, prefer_local=True)
    assert [s.id for s in selected] == ["h1", "h2", "h3", "s1", "c1", "h4", "s2"]


def test_without_local_preference_skips_local_tier(song_repo):
    generator = _generator(song_repo)
    selected = generator.select_candidates(MoodLabel.HAPPY, 6, prefer_local=False)
    assert [s.id for s in selected] == ["h1", "h2", "h3", "h4", "s1", "s2"]


def test_three_local_matches_fill_quota_of_five():
    songs = [make_song(f"l{i}", mood_tags=["happy"], is_local=True) for i in range(3)]
    songs += [make_song(f"o{i}", mood_tags=["calm"], is_local=i % 2 == 0) for i in range(10)]
    generator = _generator(songs, rng=np.random.default_rng(7))

    playlist = generator.generate(MoodLabel.HAPPY, limit=5, prefer_local=True)

    ids = playlist.song_ids
    assert len(ids) == 5
    assert len(set(ids)) == 5
    assert {"l0", "l1", "l2"} <= set(ids)
    assert playlist.is_complete


def test_shuffle_uses_injected_permutation(song_repo):
    playlist = _generator(song_repo).generate(MoodLabel.HAPPY, limit=5)
    assert playlist.song_ids == ["c1", "s1", "h3", "h2", "h1"]


def test_seeded_generator_is_reproducible(catalog_songs):
    first = _generator(catalog_songs, rng=np.random.default_rng(42)).generate(MoodLabel.HAPPY, limit=6)
    second = _generator(catalog_songs, rng=np.random.default_rng(42)).generate(MoodLabel.HAPPY, limit=6)
    assert first.song_ids == second.song_ids


def test_playlist_shorter_than_limit_when_catalog_runs_out(catalog_songs):
    playlist = _generator(catalog_songs).generate(MoodLabel.SAD, limit=50)
    assert len(playlist.items) == len(catalog_songs)
    assert len(set(playlist.song_ids)) == len(catalog_songs)
    assert playlist.requested_limit == 50
    assert not playlist.is_complete


def test_empty_catalog_gives_empty_playlist():
    playlist = _generator([]).generate(MoodLabel.CALM, limit=10)
    assert playlist.items == []
    assert playlist.name == "Generated Playlist - Calm"


def test_name_description_and_items(song_repo):
    playlist = _generator(song_repo).generate(MoodLabel.HAPPY, name="Morning", limit=2,
                                              user_id="u1")
    assert playlist.name == "Morning - Happy"
    assert playlist.description == "Auto-generated playlist for happy mood"
    assert playlist.user_id == "u1"
    item = playlist.items[0]
    assert item.audio_url == f"/api/v1/songs/stream/{item.song_id}"
    assert item.is_local


def test_generated_playlist_is_persisted(song_repo, playlist_repo):
    generator = PlaylistGenerator(song_repo, playlist_repo, rng=ReversePermutation())
    playlist = generator.generate(MoodLabel.HAPPY, limit=3)

    stored = playlist_repo.fetch_with_resolved_items(playlist.id)
    assert [s.id for s in stored.songs] == playlist.song_ids
    assert [i.order for i in stored.items] == [0, 1, 2]


@pytest.mark.parametrize("limit, expected", [(None, 20), (1, 1), (250, 100)])
def test_limit_resolution(song_repo, limit, expected):
    assert _generator(song_repo).resolve_limit(limit) == expected


def test_invalid_limit_and_mood(song_repo):
    generator = _generator(song_repo)
    with pytest.raises(InvalidInputError):
        generator.generate(MoodLabel.HAPPY, limit=0)
    with pytest.raises(InvalidInputError):
        generator.generate("blissful")


def test_draft_rejects_duplicates_and_gaps():
    with pytest.raises(ValueError):
        PlaylistDraft("p", "d", MoodLabel.HAPPY, [PlaylistItem("a", 0), PlaylistItem("a", 1)])
    with pytest.raises(ValueError):
        PlaylistDraft("p", "d", MoodLabel.HAPPY, [PlaylistItem("a", 0), PlaylistItem("b", 2)])


@pytest.mark.parametrize("limit, expected", [(1, 1), (3, 3), (4, 4), (10, 4)])
def test_remote_only_catalog_fills_from_any_song(limit, expected):
    songs = [make_song(f"r{i}", mood_tags=["calm"]) for i in range(4)]
    generator = _generator(songs)

    playlist = generator.generate(MoodLabel.HAPPY, limit=limit, prefer_local=True)

    assert len(playlist.items) == expected == min(limit, len(songs))
    assert len(set(playlist.song_ids)) == expected
    assert not any(item.is_local for item in playlist.items)


@pytest.mark.parametrize("extra", [None, 0, 5])
@pytest.mark.parametrize("mood", [MoodLabel.HAPPY, MoodLabel.SAD, MoodLabel.FOCUSED])
def test_playlist_size_bounded_with_distinct_songs(catalog_songs, mood, extra):
    limit = 1 if extra is None else len(catalog_songs) + extra
    playlist = _generator(catalog_songs, rng=np.random.default_rng(3)).generate(mood, limit=limit)

    ids = playlist.song_ids
    assert 0 <= len(ids) <= limit
    assert len(ids) == min(limit, len(catalog_songs))
    assert len(set(ids)) == len(ids)


def test_generator_default_local_preference(song_repo):
    generator = PlaylistGenerator(song_repo, InMemoryPlaylistRepository(song_repo),
                                  rng=ReversePermutation(), prefer_local=False)

    assert generator.generate(MoodLabel.HAPPY, limit=5).song_ids == ["s1", "h4", "h3", "h2", "h1"]
    assert generator.generate(MoodLabel.HAPPY, limit=5, prefer_local=True).song_ids == \
        ["c1", "s1", "h3", "h2", "h1"]
