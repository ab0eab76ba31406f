"""
Cosine similarity between embedding vectors.
"""
import numpy as np
from typing import List, Tuple
import logging

EPSILON = 1e-8


class SimilarityCalculator:
    """Scores song embeddings against a user-context embedding.

    The denominator carries a small epsilon, so zero vectors score 0
    instead of dividing by zero.
    """

    def __init__(self, epsilon: float = EPSILON):
        self.epsilon = epsilon
        self.logger = logging.getLogger(__name__)

    def cosine_similarity(self, a: np.ndarray, b: np.ndarray) -> float:
        """dot(a, b) / (||a|| * ||b|| + epsilon) for two 1-D vectors of equal length.

        Raises:
            ValueError: On a length mismatch or non 1-D input
        """
        a = np.asarray(a, dtype=float)
        b = np.asarray(b, dtype=float)
        if a.ndim != 1 or b.ndim != 1:
            raise ValueError("Embeddings must be 1-D vectors")
        if a.shape != b.shape:
            raise ValueError(f"Embedding lengths differ: {a.shape[0]} vs {b.shape[0]}")
        return float(np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b) + self.epsilon))

    def compute_batch_similarity(self, query: np.ndarray, candidates: np.ndarray) -> np.ndarray:
        """Score every row of `candidates` against `query`.

        Args:
            query: User-context embedding, shape (dim,)
            candidates: One song embedding per row, shape (n_songs, dim)

        Returns:
            Scores of shape (n_songs,); empty when there are no candidates
        """
        query = np.asarray(query, dtype=float)
        candidates = np.asarray(candidates, dtype=float)
        if query.ndim != 1:
            raise ValueError("Query embedding must be a 1-D vector")
        if candidates.size == 0:
            return np.array([])
        if candidates.ndim != 2:
            raise ValueError("Song embeddings must be stacked into a 2-D matrix")
        if candidates.shape[1] != query.shape[0]:
            raise ValueError(
                f"Embedding lengths differ: query has {query.shape[0]}, "
                f"songs have {candidates.shape[1]}"
            )
        norms = np.linalg.norm(candidates, axis=1) * np.linalg.norm(query)
        return (candidates @ query) / (norms + self.epsilon)

    def rank_by_similarity(self, query: np.ndarray, candidates: np.ndarray) -> List[Tuple[int, float]]:
        """(row index, score) pairs, best first; equal scores keep row order."""
        scores = self.compute_batch_similarity(query, candidates)
        order = np.argsort(-scores, kind="stable")
        self.logger.debug(f"Scored {len(scores)} candidates")
        return [(int(i), float(scores[i])) for i in order]
