import signal
import sys
import logging

from apiflask import APIFlask, Schema, fields
from flask_cors import CORS

from mdrcluster._boot import boot
from mdrcluster.api.api import cluster_api
from mdrcluster.config.config import AppConfig
from mdrcluster.helper import ts

logging.basicConfig(stream=sys.stdout, level=AppConfig.LOGGING_LEVEL)
matplotlib_logger = logging.getLogger('matplotlib')
matplotlib_logger.setLevel(logging.INFO)
urllib3_logger = logging.getLogger('urllib3')
urllib3_logger.setLevel(logging.INFO)

s = boot()

app = APIFlask(
    __name__,
    title='mdr-cluster',
    version='0.1.0',
    docs_ui=AppConfig.API_DOCS_UI,
)
app.config['OPENAPI_VERSION'] = '3.1.0'
app.config['TAGS'] = [
    {'name': 'Clustering', 'description': 'Clustering of medical device adverse event narratives (MDR texts) to spot recurring complaint types.'},
]
app.config['INFO'] = {
    'description': 'Groups adverse event narratives with TF-IDF, cosine distances and DBSCAN, projected to 2D with PCA. Result sets are bounded to 1000 events.',
}

CORS(
    app,
    origins=AppConfig.CORS_ORIGINS,
    send_wildcard=AppConfig.CORS_SEND_WILDCARD,
)

original_sigint_handler = signal.getsignal(signal.SIGINT)


def on_signal(signal_number, frame):
    s.shutdown()
    if callable(original_sigint_handler):
        original_sigint_handler(signal_number, frame)


signal.signal(signal.SIGTERM, on_signal)
signal.signal(signal.SIGINT, on_signal)


class PingResponse(Schema):
    now = fields.String()


@app.route('/ping')
@app.output(PingResponse)
def route_ping():
    return {
        "now": ts.now_iso(micros=False),
    }


cluster_api(app, s)
