import logging
import math
from typing import Union

import numpy as np
from sklearn.cluster import DBSCAN

from mdrcluster.pipeline.models import DensityClustering

# a core point needs at least `MIN_PTS - 1` neighbors, the point itself included it reaches `MIN_PTS`
MIN_PTS = 3
EPS_SCALE = 2.5
EPS_MAX = 0.8


def compute_eps(n_docs: int) -> Union[float, None]:
    """`min(2.5 / ln(N), 0.8)`, `None` when `N <= 1` as `ln(N) <= 0` there."""
    if n_docs <= 1:
        return None
    return min(EPS_SCALE / math.log(n_docs), EPS_MAX)


def density_clusters(distances: np.ndarray, min_pts: int = MIN_PTS) -> DensityClustering:
    """DBSCAN over a precomputed dissimilarity matrix.

    Documents are visited in corpus order, each unvisited core point opens the next
    cluster id which is then expanded over all density-reachable points. A border
    point reachable from several clusters stays with the first one reaching it.

    Labels are `0` for noise and `1..M` for clusters in discovery order.
    """
    n_docs = distances.shape[0]
    eps = compute_eps(n_docs)
    if eps is None:
        return DensityClustering(
            labels=np.zeros(n_docs, dtype=int),
            core_mask=np.zeros(n_docs, dtype=bool),
            eps=None,
            min_pts=min_pts,
        )

    # `min_samples` counts the point itself, same as `min_pts`
    clustering_model = DBSCAN(eps=eps, min_samples=min_pts, metric='precomputed')
    clustering_model.fit(distances)

    # sklearn marks noise with `-1` and numbers clusters from `0`
    labels = clustering_model.labels_.astype(int) + 1
    core_mask = np.zeros(n_docs, dtype=bool)
    core_mask[clustering_model.core_sample_indices_] = True

    logging.debug(
        f'dbscan eps={eps:.4f} min_pts={min_pts}: {int(labels.max())} clusters, '
        f'{int(np.sum(labels == 0))} noise of {n_docs}'
    )

    return DensityClustering(labels=labels, core_mask=core_mask, eps=eps, min_pts=min_pts)
