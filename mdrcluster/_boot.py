import logging

from mdrcluster.retrieval.openfda import OpenFDAClient


class Services(object):
    def __init__(self, openfda: OpenFDAClient):
        self.openfda = openfda

    def shutdown(self):
        logging.debug('closing openFDA session')
        self.openfda.close()


def boot() -> Services:
    return Services(
        openfda=OpenFDAClient(),
    )
