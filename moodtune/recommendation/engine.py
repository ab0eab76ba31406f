"""
Recommendation engine for MoodTune.
"""
import time
import logging
from typing import Dict, FrozenSet, List, Optional, Sequence

from ..mood.labels import MoodLabel
from ..persistence.repository import SongRepository
from ..persistence.schemas import HistoryEntry, SongRecord
from ..utils.errors import InvalidInputError
from .ranking import RankedSongs, SongRanker, IdentityRanker
from .schemas import RecommendationRequest, RecommendationResult, RecommendedSongs

DEFAULT_GENRES: FrozenSet[str] = frozenset({'ambient'})

# moods without an entry fall back to DEFAULT_GENRES
MOOD_GENRES: Dict[MoodLabel, FrozenSet[str]] = {
    MoodLabel.HAPPY: frozenset({'pop'}),
    MoodLabel.ENERGETIC: frozenset({'rock'}),
    MoodLabel.SAD: frozenset({'acoustic', 'indie'}),
}


class RecommendationEngine:
    """Turns a mood and recent history into genres, a result budget and ranked songs."""

    def __init__(self, song_repository: SongRepository, ranker: Optional[SongRanker] = None,
                 default_limit: int = 20, max_limit: int = 100, history_window: int = 20):
        """Initialize the recommendation engine.

        Args:
            song_repository: Catalog queried by `recommend_songs`
            ranker: Ranking strategy, identity when omitted
            default_limit: Result size when the caller gives none
            max_limit: Hard ceiling on the result size
            history_window: Number of most recent history entries kept as seed
        """
        self.song_repository = song_repository
        self.ranker = ranker or IdentityRanker()
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.history_window = history_window
        self.logger = logging.getLogger(__name__)

    def resolve_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.default_limit
        if limit < 1:
            raise InvalidInputError("Limit must be positive")
        return min(int(limit), self.max_limit)

    @staticmethod
    def genres_for(mood_label: MoodLabel) -> FrozenSet[str]:
        return MOOD_GENRES.get(mood_label, DEFAULT_GENRES)

    def recommend(self, mood_label: MoodLabel, history: Optional[Sequence[HistoryEntry]] = None,
                  limit: Optional[int] = None) -> RecommendationResult:
        """Propose genres and a result budget for `mood_label`.

        Args:
            mood_label: Detected or declared mood
            history: Journal entries, most recent first
            limit: Requested result size; defaulted and capped

        Returns:
            RecommendationResult with the truncated history as seed
        """
        mood_label = MoodLabel.parse(mood_label)
        return RecommendationResult(
            mood_label=mood_label,
            genres=self.genres_for(mood_label),
            limit=self.resolve_limit(limit),
            seed_history=tuple(list(history or ())[:self.history_window]),
        )

    def rank_songs(self, mood_label: MoodLabel, history: Optional[Sequence[HistoryEntry]],
                   songs: Sequence[SongRecord]) -> List[SongRecord]:
        """Order `songs` with the configured ranking strategy."""
        ranked, _ = self.rank_songs_with_scores(mood_label, history, songs)
        return ranked

    def rank_songs_with_scores(self, mood_label: MoodLabel, history: Optional[Sequence[HistoryEntry]],
                               songs: Sequence[SongRecord]) -> RankedSongs:
        return self.ranker.rank_with_scores(MoodLabel.parse(mood_label), list(history or ()), songs)

    def recommend_songs(self, mood_label: MoodLabel, history: Optional[Sequence[HistoryEntry]] = None,
                        limit: Optional[int] = None) -> RecommendedSongs:
        """Fetch songs tagged with the mood or one of its genres, then rank them."""
        start_time = time.time()
        result = self.recommend(mood_label, history, limit)
        songs = self.song_repository.find_by_tags(result.query_tags, result.limit)
        self.logger.debug(
            f"Found {len(songs)} candidates for {result.mood_label} "
            f"(tags={sorted(result.query_tags)}, limit={result.limit})"
        )
        ranked, scores = self.rank_songs_with_scores(result.mood_label, result.seed_history, songs)
        return RecommendedSongs(
            mood_label=result.mood_label,
            songs=ranked,
            genres=result.genres,
            ranked=scores is not None,
            processing_time_ms=(time.time() - start_time) * 1000,
            scores=scores,
        )

    def handle(self, request: RecommendationRequest) -> RecommendedSongs:
        return self.recommend_songs(request.mood_label, request.history, request.limit)
