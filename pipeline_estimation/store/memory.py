"""In-memory TabularStore used by tests and offline previews."""

import copy
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pipeline_estimation.store.base import TabularStore


class InMemoryStore(TabularStore):
    """
    Tables held as lists of record dicts.

    Views are not modelled; a view argument is accepted and ignored.
    """

    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = copy.deepcopy(tables) if tables else {}

    @classmethod
    def from_json_file(cls, path: str) -> 'InMemoryStore':
        """Load tables from a JSON file shaped {table_name: [records]}."""
        with open(Path(path), 'r') as f:
            return cls(json.load(f))

    def select_records(
        self,
        table: str,
        sort: Optional[List[Dict[str, str]]] = None,
        view: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        if table not in self.tables:
            raise KeyError(f"Unknown table '{table}'")

        records = copy.deepcopy(self.tables[table])

        # Apply sorts last-to-first so the first sort key wins; missing values sort last
        for spec in reversed(sort or []):
            field_name = spec['field']
            reverse = spec.get('direction', 'asc') == 'desc'
            present = [r for r in records if r['fields'].get(field_name) is not None]
            missing = [r for r in records if r['fields'].get(field_name) is None]
            present.sort(key=lambda r: r['fields'][field_name], reverse=reverse)
            records = present + missing

        return records

    def update_record(self, table: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        for record in self.tables.get(table, []):
            if record['id'] == record_id:
                record['fields'].update(fields)
                return copy.deepcopy(record)
        raise KeyError(f"Record '{record_id}' not found in table '{table}'")
