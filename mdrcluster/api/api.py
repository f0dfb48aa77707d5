from apiflask import APIFlask

from mdrcluster._boot import Services
from mdrcluster.api.api_clustering import api_clustering


def cluster_api(app: APIFlask, s: Services):
    api_clustering(app, s)
