"""
Tests for the Airtable-backed store. HTTP calls are mocked.
"""
import pytest
import requests
from unittest.mock import Mock, patch

from pipeline_estimation.store.airtable import AirtableStore


def make_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = str(payload)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Error")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def store():
    return AirtableStore('key123', 'appBASE', api_url='https://api.example.com/v0/', timeout=5)


class TestSelectRecords:
    """Tests for AirtableStore.select_records()."""

    @patch('pipeline_estimation.store.airtable.requests.get')
    def test_follows_pagination(self, mock_get, store):
        """Test that every page is fetched using the returned offset."""
        seen_params = []
        pages = [
            make_response({'records': [{'id': 'r1', 'fields': {'Job Name': 'A'}}], 'offset': 'itr1'}),
            make_response({'records': [{'id': 'r2'}]}),
        ]

        def fake_get(url, headers=None, params=None, timeout=None):
            seen_params.append(dict(params))
            return pages[len(seen_params) - 1]

        mock_get.side_effect = fake_get

        records = store.select_records(
            'Jobs', sort=[{'field': 'Needs By', 'direction': 'asc'}], view='Sorted Grid'
        )

        assert records == [
            {'id': 'r1', 'fields': {'Job Name': 'A'}},
            {'id': 'r2', 'fields': {}},
        ]
        assert seen_params[0] == {
            'view': 'Sorted Grid',
            'sort[0][field]': 'Needs By',
            'sort[0][direction]': 'asc',
        }
        assert seen_params[1]['offset'] == 'itr1'

        url = mock_get.call_args[0][0]
        assert url == 'https://api.example.com/v0/appBASE/Jobs'
        assert mock_get.call_args[1]['headers']['Authorization'] == 'Bearer key123'
        assert mock_get.call_args[1]['timeout'] == 5

    @patch('pipeline_estimation.store.airtable.requests.get')
    def test_table_name_is_quoted(self, mock_get, store):
        mock_get.return_value = make_response({'records': []})
        store.select_records('Work Stations')
        assert mock_get.call_args[0][0].endswith('/appBASE/Work%20Stations')

    @patch('pipeline_estimation.store.airtable.requests.get')
    def test_http_error_propagates(self, mock_get, store):
        mock_get.return_value = make_response({'error': 'NOT_AUTHORIZED'}, status_code=401)
        with pytest.raises(requests.exceptions.HTTPError):
            store.select_records('Jobs')


class TestUpdateRecord:
    """Tests for AirtableStore.update_record()."""

    @patch('pipeline_estimation.store.airtable.requests.patch')
    def test_patch_sends_fields(self, mock_patch, store):
        mock_patch.return_value = make_response({'id': 'rec1', 'fields': {'Est. Start Date': '2026-10-19'}})

        updated = store.update_record('Jobs', 'rec1', {'Est. Start Date': '2026-10-19', 'Days to Complete': None})

        assert updated == {'id': 'rec1', 'fields': {'Est. Start Date': '2026-10-19'}}
        assert mock_patch.call_args[0][0] == 'https://api.example.com/v0/appBASE/Jobs/rec1'
        assert mock_patch.call_args[1]['json'] == {
            'fields': {'Est. Start Date': '2026-10-19', 'Days to Complete': None}
        }

    @patch('pipeline_estimation.store.airtable.requests.patch')
    def test_http_error_propagates(self, mock_patch, store):
        mock_patch.return_value = make_response({'error': 'INVALID'}, status_code=422)
        with pytest.raises(requests.exceptions.HTTPError):
            store.update_record('Jobs', 'rec1', {})


class TestFromConfig:
    def test_reads_settings(self):
        class AirtableSettings:
            AIRTABLE_API_KEY = 'k'
            AIRTABLE_BASE_ID = 'b'
            AIRTABLE_API_URL = 'https://api.airtable.com/v0'
            AIRTABLE_TIMEOUT = 12.0

        store = AirtableStore.from_config(AirtableSettings)
        assert store.base_id == 'b'
        assert store.timeout == 12.0
        assert repr(store) == 'AirtableStore(base_id=b)'
