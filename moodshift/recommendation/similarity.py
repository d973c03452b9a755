"""
Similarity calculation module for MoodShift.
"""
import numpy as np
import logging


class SimilarityCalculator:
    """Calculates similarity scores between mood vectors."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def cosine_similarity(self, v1: np.ndarray, v2: np.ndarray) -> float:
        """Calculate cosine similarity between two vectors.

        Args:
            v1: First vector (numpy array)
            v2: Second vector (numpy array)

        Returns:
            Cosine similarity score; 0.0 when either vector has zero magnitude

        Raises:
            ValueError: If vectors have different shapes or are not 1D
        """
        if v1.shape != v2.shape:
            raise ValueError(f"Vector dimensions must match: {v1.shape} vs {v2.shape}")
        if len(v1.shape) != 1:
            raise ValueError("Vectors must be 1-dimensional")
        norm1 = np.linalg.norm(v1)
        norm2 = np.linalg.norm(v2)
        if norm1 == 0 or norm2 == 0:
            return 0.0
        similarity = np.dot(v1, v2) / (norm1 * norm2)
        return float(np.clip(similarity, -1.0, 1.0))

    def compute_batch_similarity(self, query: np.ndarray, candidates: np.ndarray) -> np.ndarray:
        """Compute cosine similarity between a query vector and multiple candidates.

        Args:
            query: Query vector of shape (n_features,)
            candidates: Matrix of candidate vectors of shape (n_candidates, n_features)

        Returns:
            Array of similarity scores of shape (n_candidates,); zero-magnitude
            rows (or a zero query) score 0.0

        Raises:
            ValueError: If input shapes are invalid or incompatible
        """
        if len(query.shape) != 1:
            raise ValueError("Query must be a 1-dimensional vector")
        if len(candidates.shape) != 2:
            raise ValueError("Candidates must be a 2-dimensional matrix")
        if query.shape[0] != candidates.shape[1]:
            raise ValueError(
                f"Feature dimensions must match: query={query.shape[0]}, "
                f"candidates={candidates.shape[1]}"
            )
        similarities = np.zeros(candidates.shape[0])
        if candidates.shape[0] == 0:
            return similarities
        query_norm = np.linalg.norm(query)
        if query_norm == 0:
            return similarities
        candidate_norms = np.linalg.norm(candidates, axis=1)
        non_zero_mask = candidate_norms != 0
        if np.any(non_zero_mask):
            similarities[non_zero_mask] = (
                np.dot(candidates[non_zero_mask], query) /
                (query_norm * candidate_norms[non_zero_mask])
            )
        return np.clip(similarities, -1.0, 1.0)
