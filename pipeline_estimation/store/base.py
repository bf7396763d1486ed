"""Interface of the tabular datastore the estimator reads from and writes to."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class TabularStore(ABC):
    """
    Record store organized as named tables.

    Records are dicts shaped {"id": str, "fields": {name: value}}. Stores are
    assumed eventually consistent; callers never read back their own writes
    within a run.
    """

    @abstractmethod
    def select_records(
        self,
        table: str,
        sort: Optional[List[Dict[str, str]]] = None,
        view: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Read every record of a table.

        Args:
            table: Table name
            sort: Optional list of {"field": name, "direction": "asc"|"desc"}
            view: Optional view name restricting and ordering records

        Returns:
            list of record dicts
        """
        pass

    @abstractmethod
    def update_record(self, table: str, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Write named fields of one record. None clears a field.

        Returns:
            The updated record
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
