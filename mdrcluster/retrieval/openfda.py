import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Tuple
from urllib.parse import quote

import requests

from mdrcluster.config.config import AppConfig
from mdrcluster.pipeline.models import Document

# response phrasing of the manufacturer, clustering is only based on the event itself
EXCLUDED_TEXT_TYPES = {'Additional Manufacturer Narrative'}


class RetrievalError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def default_date_range(today: Optional[date] = None) -> Tuple[date, date]:
    today = today or date.today()
    return today - timedelta(days=2 * 365), today


@dataclass
class OpenFDAQuery:
    date_from: date
    date_to: date
    company: Optional[str] = None
    device: Optional[str] = None
    limit: int = AppConfig.OPENFDA_LIMIT

    def search(self) -> str:
        search = f'date_received:[{self.date_from.isoformat()}+TO+{self.date_to.isoformat()}]'
        if self.company:
            search += '+AND+device.manufacturer_d_name:' + _term(self.company)
        if self.device:
            search += '+AND+device.brand_name:' + _term(self.device)
        return search


def _term(value: str) -> str:
    value = value.strip()
    if any(c.isspace() for c in value):
        value = f'"{value}"'
    return quote(value, safe='')


@dataclass
class EventBatch:
    # number of event reports, one report may carry several narratives
    events_found: int = 0
    documents: List[Document] = field(default_factory=list)


def parse_events(payload) -> EventBatch:
    if not isinstance(payload, dict) or not isinstance(payload.get('results'), list):
        raise RetrievalError('malformed openFDA response, missing `results`')

    results = payload['results']
    documents = []
    seen = set()
    for event in results:
        if not isinstance(event, dict):
            continue
        mdr_texts = event.get('mdr_text') or []
        if not isinstance(mdr_texts, list):
            raise RetrievalError('malformed openFDA response, `mdr_text` is not a list')
        for mdr_text in mdr_texts:
            if not isinstance(mdr_text, dict):
                raise RetrievalError('malformed openFDA response, invalid `mdr_text` entry')
            if mdr_text.get('text_type_code') in EXCLUDED_TEXT_TYPES:
                continue
            doc_id = mdr_text.get('mdr_text_key')
            text = mdr_text.get('text')
            if not doc_id or not text:
                continue
            if doc_id in seen:
                logging.debug(f'skipping duplicate mdr_text_key {doc_id}')
                continue
            seen.add(doc_id)
            documents.append(Document(str(doc_id), text))

    return EventBatch(events_found=len(results), documents=documents)


class OpenFDAClient(object):
    def __init__(
        self,
        url: str = AppConfig.OPENFDA_URL,
        api_key: Optional[str] = AppConfig.OPENFDA_API_KEY,
        timeout: float = AppConfig.OPENFDA_TIMEOUT,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = requests.Session()

    def fetch_events(self, query: OpenFDAQuery) -> EventBatch:
        # openFDA needs the literal `+` and `:` in `search`, `requests` would escape them in `params`
        url = f'{self.url}?search={query.search()}'
        params = {'limit': query.limit}
        if self.api_key:
            params['api_key'] = self.api_key

        logging.info(f'fetching openFDA events: {query.search()} limit={query.limit}')
        try:
            res = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RetrievalError(f'openFDA request failed: {e}') from e

        if res.status_code == 404:
            # openFDA answers a search without matches with `NOT_FOUND`
            logging.info('openFDA found no matching events')
            return EventBatch()
        if res.status_code >= 400:
            raise RetrievalError(f'openFDA responded with {res.status_code}', status=res.status_code)

        try:
            payload = res.json()
        except ValueError as e:
            raise RetrievalError('openFDA response is not valid JSON') from e

        batch = parse_events(payload)
        logging.info(f'openFDA returned {batch.events_found} events with {len(batch.documents)} narratives')
        return batch

    def close(self):
        self.session.close()
