"""Tabular datastore interface, implementations and record parsing."""

from .base import TabularStore
from .memory import InMemoryStore
from .airtable import AirtableStore

__all__ = ['TabularStore', 'InMemoryStore', 'AirtableStore']
