import requests
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pipeline_estimation.logging_config import get_logger
from pipeline_estimation.store.base import TabularStore

logger = get_logger(__name__)


class AirtableStore(TabularStore):
    """
    TabularStore backed by the Airtable REST API.
    """

    def __init__(self, api_key: str, base_id: str,
                 api_url: str = "https://api.airtable.com/v0", timeout: float = 30):
        self.api_key = api_key
        self.base_id = base_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> 'AirtableStore':
        return cls(
            config.AIRTABLE_API_KEY,
            config.AIRTABLE_BASE_ID,
            api_url=config.AIRTABLE_API_URL,
            timeout=config.AIRTABLE_TIMEOUT,
        )

    def _headers(self):
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _table_url(self, table):
        return f"{self.api_url}/{self.base_id}/{quote(table, safe='')}"

    def select_records(
        self,
        table: str,
        sort: Optional[List[Dict[str, str]]] = None,
        view: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetches all records of a table, following Airtable's pagination offsets.
        """
        url = self._table_url(table)
        params = {}
        if view:
            params["view"] = view
        for i, spec in enumerate(sort or []):
            params[f"sort[{i}][field]"] = spec["field"]
            params[f"sort[{i}][direction]"] = spec.get("direction", "asc")

        records = []
        while True:
            response = requests.get(url, headers=self._headers(), params=params, timeout=self.timeout)
            try:
                response.raise_for_status()
            except requests.exceptions.HTTPError as http_err:
                logger.error("Airtable select failed", table=table, status=response.status_code,
                             error=str(http_err), body=response.text[:500])
                raise

            data = response.json()
            records.extend(
                {"id": r["id"], "fields": r.get("fields", {})}
                for r in data.get("records", [])
            )

            next_offset = data.get("offset")
            if not next_offset:
                break
            params["offset"] = next_offset

        logger.debug("Fetched Airtable records", table=table, count=len(records))
        return records

    def update_record(self, table: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Updates named fields of a single record (PATCH leaves other fields untouched).
        """
        url = f"{self._table_url(table)}/{record_id}"
        response = requests.patch(url, headers=self._headers(), json={"fields": fields}, timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as http_err:
            logger.error("Airtable update failed", table=table, record_id=record_id,
                         status=response.status_code, error=str(http_err), body=response.text[:500])
            raise

        data = response.json()
        return {"id": data.get("id", record_id), "fields": data.get("fields", {})}

    def __repr__(self) -> str:
        return f"AirtableStore(base_id={self.base_id})"
