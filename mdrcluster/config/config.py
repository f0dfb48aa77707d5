import os

TRUTHY_ENV_VAL = ['true', 'True', '1', 'yes']


class AppConfig:
    APP_ENV = os.getenv('APP_ENV')
    SERVICE_NAME = os.getenv('SERVICE_NAME', "mdr-cluster")

    LOGGING_LEVEL = os.getenv('LOGGING_LEVEL', "INFO")

    API_DOCS_UI = os.getenv('API_DOCS_UI', 'swagger-ui')
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    CORS_SEND_WILDCARD = os.getenv('CORS_SEND_WILDCARD') in TRUTHY_ENV_VAL

    OPENFDA_URL = os.getenv('OPENFDA_URL', 'https://api.fda.gov/device/event.json')
    OPENFDA_API_KEY = os.getenv('OPENFDA_API_KEY')
    # openFDA rejects a `limit` above 1000
    OPENFDA_LIMIT = min(int(os.getenv('OPENFDA_LIMIT', '1000')), 1000)
    OPENFDA_TIMEOUT = float(os.getenv('OPENFDA_TIMEOUT', '30'))

    TOP_CLUSTERS = int(os.getenv('TOP_CLUSTERS', '8'))
    PROJECTION = os.getenv('PROJECTION', 'distances')
