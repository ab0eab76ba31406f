"""
Recommendation module for MoodTune.

This module maps moods to genres, fetches matching songs and ranks them,
optionally by embedding similarity.
"""

from .engine import RecommendationEngine
from .similarity import SimilarityCalculator
from .ranking import SongRanker, IdentityRanker, EmbeddingRanker, build_ranker
from .schemas import RecommendationRequest, RecommendationResult, RecommendedSongs

__all__ = [
    'RecommendationEngine',
    'SimilarityCalculator',
    'SongRanker',
    'IdentityRanker',
    'EmbeddingRanker',
    'build_ranker',
    'RecommendationRequest',
    'RecommendationResult',
    'RecommendedSongs'
]
