"""
Ranking strategies for recommended songs.

`IdentityRanker` keeps the repository order. `EmbeddingRanker` orders songs
by cosine similarity between an embedding of the user's context (current
mood plus recent journal lines) and an embedding of each song's metadata.
It makes one embedding call per candidate, so callers bound the candidate
set before ranking.
"""
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..config.settings import InferenceConfig
from ..inference.adapters import EmbeddingAdapter
from ..mood.labels import MoodLabel
from ..persistence.schemas import HistoryEntry, SongRecord
from .similarity import SimilarityCalculator

logger = logging.getLogger(__name__)

RankedSongs = Tuple[List[SongRecord], Optional[List[float]]]


class SongRanker(ABC):

    @abstractmethod
    def rank_with_scores(self, mood_label: MoodLabel, history: Sequence[HistoryEntry],
                         songs: Sequence[SongRecord]) -> RankedSongs:
        """Return songs in ranked order and their scores (None when unscored)."""

    def rank(self, mood_label: MoodLabel, history: Sequence[HistoryEntry],
             songs: Sequence[SongRecord]) -> List[SongRecord]:
        ranked, _ = self.rank_with_scores(mood_label, history, songs)
        return ranked


class IdentityRanker(SongRanker):
    """Leaves songs in the order they were given."""

    def rank_with_scores(self, mood_label, history, songs) -> RankedSongs:
        return list(songs), None


def user_context_text(mood_label: MoodLabel, history: Sequence[HistoryEntry],
                      window: int = 10) -> str:
    lines = [f"Current mood: {mood_label}."]
    for entry in list(history)[:window]:
        lines.append(f"Journal mood: {entry.mood_label}, notes: {entry.notes or ''}")
    return "\n".join(lines)


def song_metadata_text(song: SongRecord) -> str:
    return " ".join([
        song.title or '',
        song.artist or '',
        " ".join(sorted(song.genres)),
        " ".join(sorted(song.mood_tags)),
    ])


class EmbeddingRanker(SongRanker):
    """Orders songs by similarity to the user's context embedding."""

    def __init__(self, embedding: EmbeddingAdapter,
                 similarity: Optional[SimilarityCalculator] = None,
                 history_window: int = 10, max_workers: int = 1):
        self.embedding = embedding
        self.similarity = similarity or SimilarityCalculator()
        self.history_window = history_window
        self.max_workers = max_workers

    def _embed_songs(self, songs: Sequence[SongRecord]) -> List[np.ndarray]:
        texts = [song_metadata_text(song) for song in songs]
        if self.max_workers > 1 and len(texts) > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(texts))) as executor:
                return list(executor.map(self.embedding.embed, texts))
        return [self.embedding.embed(text) for text in texts]

    def rank_with_scores(self, mood_label, history, songs) -> RankedSongs:
        songs = list(songs)
        if not songs:
            return [], []

        query = self.embedding.embed(user_context_text(mood_label, history, self.history_window))
        vectors = self._embed_songs(songs)
        ranking = self.similarity.rank_by_similarity(query, np.vstack(vectors))

        logger.debug(f"Ranked {len(songs)} songs by embedding similarity")
        return [songs[i] for i, _ in ranking], [score for _, score in ranking]


def build_ranker(config: InferenceConfig, embedding: EmbeddingAdapter,
                 history_window: int = 10) -> SongRanker:
    """Embedding ranking only when the reco mode calls the provider and embeddings work."""
    if config.mode_active(config.reco_adapter) and embedding.is_active:
        return EmbeddingRanker(embedding, history_window=history_window,
                               max_workers=config.embedding_workers)
    return IdentityRanker()
