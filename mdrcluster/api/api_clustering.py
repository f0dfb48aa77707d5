from typing import Optional

from apiflask import APIFlask, HTTPError

from mdrcluster._boot import Services
from mdrcluster.api.clustering_plots import make_cluster_scatter, to_data_uri
from mdrcluster.api.schemas import ClusterRequest, ClusterResponse, SearchRequest
from mdrcluster.config.config import AppConfig
from mdrcluster.pipeline.models import PipelineResult
from mdrcluster.pipeline.pipeline import run_pipeline
from mdrcluster.pipeline.tracker import ProgressTracker
from mdrcluster.retrieval.openfda import OpenFDAQuery, RetrievalError, default_date_range


def _cluster_response(documents, options: dict, events_found: Optional[int] = None):
    tracker = ProgressTracker()
    try:
        result: PipelineResult = run_pipeline(
            documents,
            top_clusters=options.get('top_clusters', AppConfig.TOP_CLUSTERS),
            projection=options.get('projection', AppConfig.PROJECTION),
            tracker=tracker,
        )
    except ValueError as e:
        raise HTTPError(400, message=str(e))

    assets = None
    if options.get('plot', False):
        assets = []
        on_plotted = tracker('plot', 'Plotting ...', 0.9)
        png = make_cluster_scatter(result.events)
        if png:
            assets.append({'type': 'cluster-scatter-pca', 'value': to_data_uri(png)})
        on_plotted()

    tracker.finish()

    return {
        'usage': tracker.usage,
        'outcome': {
            **result.to_dict(),
            'events_found': events_found if events_found is not None else result.document_count,
        },
        'assets': assets,
    }


def api_clustering(app: APIFlask, s: Services):
    @app.route('/event-clusters', methods=['POST'])
    @app.input(ClusterRequest)
    @app.output(ClusterResponse())
    @app.doc(tags=['Clustering'], description='''
Clusters short adverse-event narratives to surface recurring complaint types.

1. **Text Processing**: numbers and punctuation are removed, the text is lowercased, English stop words are dropped and the remaining words are stemmed.
2. **TF-IDF**: each narrative becomes a weighted term vector.
3. **DBSCAN**: density-based clustering on cosine distances, `minPts = 3` and `eps = min(2.5 / ln(N), 0.8)`.
4. **PCA**: every narrative is projected on the first two principal components.
5. **Selection**: only the `top_clusters` largest clusters are returned, noise is omitted.

Events which can not be clustered are omitted from `events`.
''')
    def event_clusters(json_data):
        options = json_data.get('options', {}) or {}
        documents = [(d['id'], d.get('text')) for d in json_data['documents']]
        return _cluster_response(documents, options)

    @app.route('/event-search', methods=['POST'])
    @app.input(SearchRequest)
    @app.output(ClusterResponse())
    @app.doc(tags=['Clustering'], description='''
Searches the openFDA medical device adverse events API and clusters the returned narratives, like `/event-clusters`.

Queries are limited to the first 1000 results. The "Additional Manufacturer Narrative" texts are not clustered.
''')
    def event_search(json_data):
        options = json_data.get('options', {}) or {}
        date_from, date_to = default_date_range()
        query = OpenFDAQuery(
            date_from=json_data.get('date_from') or date_from,
            date_to=json_data.get('date_to') or date_to,
            company=json_data.get('company'),
            device=json_data.get('device'),
        )
        if query.date_from > query.date_to:
            raise HTTPError(400, message='date_from must not be after date_to')

        try:
            batch = s.openfda.fetch_events(query)
        except RetrievalError as e:
            raise HTTPError(502, message=str(e))

        return _cluster_response(batch.documents, options, events_found=batch.events_found)
