import logging
from typing import Iterable, Optional

import numpy as np

from mdrcluster.pipeline.clusterer import density_clusters
from mdrcluster.pipeline.distance import cosine_dissimilarity
from mdrcluster.pipeline.models import DocumentInput, PipelineResult, documents_from_pairs
from mdrcluster.pipeline.normalizer import normalize_documents
from mdrcluster.pipeline.reducer import project_2d
from mdrcluster.pipeline.selector import DEFAULT_TOP_CLUSTERS, join_ranked, select_top_clusters
from mdrcluster.pipeline.tracker import ProgressTracker
from mdrcluster.pipeline.vectorizer import vectorize

PROJECTION_SOURCES = ('distances', 'vectors')


def run_pipeline(
    documents: Iterable[DocumentInput],
    top_clusters: int = DEFAULT_TOP_CLUSTERS,
    projection: str = 'distances',
    tracker: Optional[ProgressTracker] = None,
) -> PipelineResult:
    """Clusters the narratives of one result set and keeps the `top_clusters` largest.

    Every stage gets fresh inputs and returns new structures, nothing is kept between runs.
    Empty corpora, single documents and documents without usable words are not errors,
    they end up with zero clusters.
    """
    if projection not in PROJECTION_SOURCES:
        raise ValueError(f'unknown projection source: {projection}, use one of {", ".join(PROJECTION_SOURCES)}')
    if top_clusters < 1:
        raise ValueError(f'top_clusters must be at least 1, got {top_clusters}')

    if tracker is None:
        tracker = ProgressTracker()

    corpus = documents_from_pairs(documents)
    n_docs = len(corpus)
    if n_docs == 0:
        logging.info('no documents to cluster')
        return PipelineResult(document_count=0, cluster_count=0)

    on_processed = tracker('text_processing', 'Performing text processing ...', 0.2)
    normalized = normalize_documents(corpus)
    term_matrix = vectorize(normalized)
    distances = cosine_dissimilarity(term_matrix)
    on_processed(documents=n_docs, terms=len(term_matrix.vocabulary))

    on_clustered = tracker('clustering', 'Running DBSCAN Clustering ...', 0.5)
    clustering = density_clusters(distances)
    on_clustered(clusters=clustering.cluster_count)

    on_projected = tracker('projection', 'Performing Principal Component Analysis ...', 0.7)
    coords = project_2d(distances if projection == 'distances' else term_matrix.weights)
    on_projected()

    on_selected = tracker('selection', 'Selecting top clusters ...', 0.8)
    clusters = select_top_clusters(clustering.labels, top_clusters)
    events = join_ranked(normalized, clustering.labels, coords, clusters)
    on_selected(clusters=len(clusters))

    noise_count = int(np.sum(clustering.labels == 0))
    logging.info(
        f'clustered {n_docs} documents: {clustering.cluster_count} clusters found, '
        f'{len(clusters)} kept, {noise_count} noise'
    )

    return PipelineResult(
        document_count=n_docs,
        cluster_count=len(clusters),
        noise_count=noise_count,
        eps=clustering.eps,
        clusters=clusters,
        events=events,
    )
