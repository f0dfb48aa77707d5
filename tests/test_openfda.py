from datetime import date
from unittest.mock import Mock, patch

import pytest
import requests

from mdrcluster.pipeline.models import Document
from mdrcluster.retrieval.openfda import (
    EventBatch,
    OpenFDAClient,
    OpenFDAQuery,
    RetrievalError,
    default_date_range,
    parse_events,
)


def _payload():
    return {
        'meta': {'results': {'total': 3}},
        'results': [
            {'mdr_text': [
                {'mdr_text_key': '100', 'text_type_code': 'Description of Event or Problem', 'text': 'Pump alarm.'},
                {'mdr_text_key': '101', 'text_type_code': 'Additional Manufacturer Narrative', 'text': 'Device evaluated.'},
            ]},
            {'mdr_text': [
                {'mdr_text_key': '200', 'text_type_code': 'Description of Event or Problem', 'text': 'Battery swelling.'},
                {'mdr_text_key': '100', 'text_type_code': 'Description of Event or Problem', 'text': 'Duplicate key.'},
                {'mdr_text_key': '201', 'text_type_code': 'Description of Event or Problem', 'text': ''},
            ]},
            {},
        ],
    }


def _response(status_code=200, payload=None):
    res = Mock()
    res.status_code = status_code
    res.json.return_value = payload
    return res


class TestOpenFDAQuery:
    """Test the openFDA search string."""

    def test_date_range_only(self):
        query = OpenFDAQuery(date(2020, 1, 1), date(2020, 12, 31))
        assert query.search() == 'date_received:[2020-01-01+TO+2020-12-31]'

    def test_company_and_device(self):
        query = OpenFDAQuery(date(2020, 1, 1), date(2020, 12, 31), company='Roche', device='Accu-chek')
        assert query.search() == (
            'date_received:[2020-01-01+TO+2020-12-31]'
            '+AND+device.manufacturer_d_name:Roche'
            '+AND+device.brand_name:Accu-chek'
        )

    def test_multi_word_value_quoted(self):
        query = OpenFDAQuery(date(2020, 1, 1), date(2020, 1, 2), company='Acme Medical')
        assert query.search().endswith('device.manufacturer_d_name:%22Acme%20Medical%22')

    def test_default_date_range(self):
        date_from, date_to = default_date_range(date(2022, 6, 30))
        assert date_to == date(2022, 6, 30)
        assert date_from == date(2020, 6, 30)


class TestParseEvents:
    """Test extraction of the narratives."""

    def test_filters_and_deduplicates(self):
        batch = parse_events(_payload())
        assert batch.events_found == 3
        assert batch.documents == [Document('100', 'Pump alarm.'), Document('200', 'Battery swelling.')]

    @pytest.mark.parametrize('payload', [
        None,
        [],
        {},
        {'results': 'nope'},
        {'results': [{'mdr_text': ['oops']}]},
        {'results': [{'mdr_text': {'text': 'Pump alarm.'}}]},
    ])
    def test_malformed(self, payload):
        with pytest.raises(RetrievalError):
            parse_events(payload)


class TestOpenFDAClient:
    """Test the HTTP handling of the client."""

    @pytest.fixture
    def client(self):
        client = OpenFDAClient(url='https://fda.test/device/event.json', api_key='secret', timeout=5)
        yield client
        client.close()

    @pytest.fixture
    def query(self):
        return OpenFDAQuery(date(2020, 1, 1), date(2020, 12, 31), limit=1000)

    def test_fetch(self, client, query):
        with patch.object(client.session, 'get', return_value=_response(payload=_payload())) as get:
            batch = client.fetch_events(query)

        assert batch.events_found == 3
        assert len(batch.documents) == 2
        get.assert_called_once_with(
            'https://fda.test/device/event.json?search=date_received:[2020-01-01+TO+2020-12-31]',
            params={'limit': 1000, 'api_key': 'secret'},
            timeout=5,
        )

    def test_not_found_is_empty(self, client, query):
        with patch.object(client.session, 'get', return_value=_response(404, {'error': {'code': 'NOT_FOUND'}})):
            batch = client.fetch_events(query)
        assert batch == EventBatch()

    def test_server_error(self, client, query):
        with patch.object(client.session, 'get', return_value=_response(500)):
            with pytest.raises(RetrievalError) as exc:
                client.fetch_events(query)
        assert exc.value.status == 500

    def test_network_error(self, client, query):
        with patch.object(client.session, 'get', side_effect=requests.ConnectionError('down')):
            with pytest.raises(RetrievalError, match='request failed'):
                client.fetch_events(query)

    def test_invalid_json(self, client, query):
        res = _response()
        res.json.side_effect = ValueError('no json')
        with patch.object(client.session, 'get', return_value=res):
            with pytest.raises(RetrievalError, match='not valid JSON'):
                client.fetch_events(query)
