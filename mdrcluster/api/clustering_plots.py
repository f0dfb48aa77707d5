import base64
import io
import logging
from typing import List, Union

from matplotlib import colormaps
from matplotlib.figure import Figure

from mdrcluster.pipeline.models import RankedResult


def make_cluster_scatter(events: List[RankedResult], title: str = "MDR AE Clusters (PCA)") -> Union[bytes, None]:
    """A 2D scatter plot of the kept events, colored by cluster rank.

    **Details**:
    Coordinates are the first two principal components, axis orientation carries no meaning.
    Every call draws on its own figure, concurrent requests share no pyplot state.
    """
    if not events:
        return None

    ranks = sorted(set(e.rank for e in events))
    colors = colormaps['Set2'].resampled(max(len(ranks), 1))

    fig = Figure(figsize=(8, 8))
    ax = fig.subplots()
    for i, rank in enumerate(ranks):
        members = [e for e in events if e.rank == rank]
        ax.scatter(
            [e.x for e in members], [e.y for e in members],
            color=colors(i), s=60, alpha=0.8, label=f'Cluster {rank} ({len(members)})',
        )

    ax.set_title(title)
    ax.set_xlabel("PC1")
    ax.set_ylabel("PC2")
    ax.legend()

    logging.debug(f'plotted {len(events)} events in {len(ranks)} clusters')
    return _figure_to_png(fig)


def _figure_to_png(fig: Figure) -> bytes:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight")
    buf.seek(0)
    return buf.read()


def to_data_uri(png: bytes) -> str:
    img_base64 = base64.b64encode(png).decode("utf-8")
    return f"data:image/png;base64,{img_base64}"
