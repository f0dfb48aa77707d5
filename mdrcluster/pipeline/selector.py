from collections import Counter
from typing import Dict, List, Sequence, Tuple

import numpy as np

from mdrcluster.pipeline.models import ClusterSummary, NormalizedDocument, RankedResult

NOISE = 0
DEFAULT_TOP_CLUSTERS = 8


def group_sizes(labels: Sequence[int]) -> List[Tuple[int, int]]:
    """`(label, size)` of every group, the noise group included, largest first.

    Groups of equal size keep the discovery order of their label, noise (`0`) sorting first.
    """
    counts = Counter(int(label) for label in labels)
    ordered = sorted(counts.items(), key=lambda item: item[0])
    # `sorted` is stable, ties stay in label order
    return sorted(ordered, key=lambda item: -item[1])


def select_top_clusters(labels: Sequence[int], top_clusters: int = DEFAULT_TOP_CLUSTERS) -> List[ClusterSummary]:
    """Ranks the largest clusters as `1..M` with `M <= top_clusters`.

    The `top_clusters + 1` largest groups are taken first, noise included when it is
    among them, then noise is dropped. If noise was not among them the smallest of the
    remaining clusters is cut as well.
    """
    if top_clusters < 1:
        raise ValueError(f'top_clusters must be at least 1, got {top_clusters}')

    groups = group_sizes(labels)[:top_clusters + 1]
    clusters = [(label, size) for label, size in groups if label != NOISE][:top_clusters]
    return [
        ClusterSummary(rank=rank, cluster_id=label, size=size)
        for rank, (label, size) in enumerate(clusters, start=1)
    ]


def join_ranked(
    documents: Sequence[NormalizedDocument],
    labels: Sequence[int],
    coords: np.ndarray,
    clusters: Sequence[ClusterSummary],
) -> List[RankedResult]:
    """The surviving documents in corpus order, with their rank and coordinates."""
    rank_by_label: Dict[int, int] = {c.cluster_id: c.rank for c in clusters}
    events = []
    for idx, doc in enumerate(documents):
        rank = rank_by_label.get(int(labels[idx]))
        if rank is None:
            continue
        events.append(RankedResult(
            id=doc.id,
            raw_text=doc.raw_text,
            rank=rank,
            x=float(coords[idx, 0]),
            y=float(coords[idx, 1]),
        ))
    return events
