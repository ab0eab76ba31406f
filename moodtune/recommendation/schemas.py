"""
Recommendation schemas for MoodTune.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple

from ..mood.labels import MoodLabel
from ..persistence.schemas import HistoryEntry, SongRecord

MAX_LIMIT = 100


@dataclass
class RecommendationRequest:
    """Request for mood-based recommendations."""
    mood_label: MoodLabel
    history: Sequence[HistoryEntry] = ()
    limit: int = 20

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError("Limit must be positive")
        if self.limit > MAX_LIMIT:
            raise ValueError(f"Limit cannot exceed {MAX_LIMIT}")


@dataclass(frozen=True)
class RecommendationResult:
    """Genres and result budget proposed for a mood. Not persisted."""
    mood_label: MoodLabel
    genres: FrozenSet[str]
    limit: int
    seed_history: Tuple[HistoryEntry, ...] = ()

    @property
    def query_tags(self) -> FrozenSet[str]:
        """Tags to query the catalog with: the mood itself plus its genres."""
        return frozenset({self.mood_label.value}) | self.genres


@dataclass
class RecommendedSongs:
    """Songs returned for a mood, in ranked order."""
    mood_label: MoodLabel
    songs: List[SongRecord]
    genres: FrozenSet[str]
    ranked: bool = False
    processing_time_ms: float = 0.0
    scores: Optional[List[float]] = field(default=None)

    def __post_init__(self):
        if self.processing_time_ms < 0:
            raise ValueError("Processing time cannot be negative")
