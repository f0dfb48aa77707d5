import numpy as np
from sklearn.metrics.pairwise import cosine_distances

from mdrcluster.pipeline.models import TermMatrix


def cosine_dissimilarity(matrix: TermMatrix) -> np.ndarray:
    """Symmetric `N x N` cosine distances with a zero diagonal.

    A document with a zero vector is at distance `1` from every other document,
    its self-distance stays `0`. With non-negative weights all values are in `[0, 1]`.
    """
    n_docs = matrix.shape[0]
    if matrix.shape[1] == 0:
        # no vocabulary at all, every vector is zero
        distances = np.ones((n_docs, n_docs), dtype=np.float64)
    else:
        # zero rows stay zero when normalized, so their similarity is `0` and the distance `1`
        distances = cosine_distances(matrix.weights)

    distances = (distances + distances.T) / 2
    np.clip(distances, 0.0, 1.0, out=distances)
    np.fill_diagonal(distances, 0.0)
    return distances
