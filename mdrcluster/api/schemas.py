from apiflask import Schema, fields
from marshmallow.validate import Length, OneOf, Range

from mdrcluster.config.config import AppConfig
from mdrcluster.pipeline.pipeline import PROJECTION_SOURCES


class EventDocument(Schema):
    id = fields.String(required=True, validate=Length(min=1))
    text = fields.String(required=True, allow_none=True)


class ClusterRequestOptions(Schema):
    top_clusters = fields.Integer(
        load_default=AppConfig.TOP_CLUSTERS,
        validate=Range(min=1, max=50),
        metadata={
            'description': 'The maximum number of clusters to return, only the largest clusters are kept. Events of any other cluster, and all noise, are omitted.',
        },
    )
    projection = fields.String(
        load_default=AppConfig.PROJECTION,
        validate=OneOf(PROJECTION_SOURCES),
        metadata={
            'description': '''Input of the 2D projection (PCA).

- **`distances`**: rows of the pairwise cosine-distance matrix.
- **`vectors`**: the TF-IDF weighted term vectors.
'''
        },
    )
    plot = fields.Boolean(
        load_default=False,
        metadata={'description': 'If true, adds a PNG scatter plot of the clusters to `assets`, as base64 data uri.'},
    )


class ClusterRequest(Schema):
    documents = fields.List(
        fields.Nested(EventDocument()),
        required=True,
        metadata={
            'description': 'Event narratives to cluster, ids must be unique.',
            'example': [
                {'id': '1', 'text': 'The device displayed an error and failed to start.'},
                {'id': '2', 'text': 'Battery swelling was observed after charging.'},
            ],
        },
    )
    options = fields.Nested(ClusterRequestOptions(), load_default=dict)


class SearchRequest(Schema):
    date_from = fields.Date(metadata={'description': 'Start of the `date_received` range, defaults to two years ago.'})
    date_to = fields.Date(metadata={'description': 'End of the `date_received` range, defaults to today.'})
    company = fields.String(allow_none=True, metadata={'description': 'Manufacturer name (optional).', 'example': 'Roche'})
    device = fields.String(allow_none=True, metadata={'description': 'Brand name of the product (optional).', 'example': 'Accu-chek'})
    options = fields.Nested(ClusterRequestOptions(), load_default=dict)


class UsageStats(Schema):
    stage = fields.String()
    message = fields.String()
    progress = fields.Float()
    dur = fields.Integer()
    documents = fields.Integer()
    terms = fields.Integer()
    clusters = fields.Integer()


class Usage(Schema):
    model = fields.String()
    stats = fields.List(fields.Nested(UsageStats()))


class ClusterInfo(Schema):
    rank = fields.Integer()
    cluster_id = fields.Integer(metadata={'description': 'The DBSCAN cluster id, in order of discovery.'})
    size = fields.Integer()


class ClusteredEvent(Schema):
    id = fields.String()
    text = fields.String()
    cluster = fields.Integer(metadata={'description': 'The cluster rank, `1` is the largest cluster.'})
    x = fields.Float()
    y = fields.Float()


class ClusterOutcome(Schema):
    events_found = fields.Integer(allow_none=True)
    document_count = fields.Integer()
    cluster_count = fields.Integer()
    noise_count = fields.Integer()
    eps = fields.Float(allow_none=True)
    clusters = fields.List(fields.Nested(ClusterInfo()))
    events = fields.List(fields.Nested(ClusteredEvent()))


class Asset(Schema):
    type = fields.String()
    value = fields.String()


class ClusterResponse(Schema):
    usage = fields.List(fields.Nested(Usage()))
    outcome = fields.Nested(ClusterOutcome())
    assets = fields.List(fields.Nested(Asset()), allow_none=True)
