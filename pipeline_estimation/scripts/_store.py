"""Store selection shared by the command-line scripts."""

from pipeline_estimation.exceptions import ConfigurationError
from pipeline_estimation.store import AirtableStore, InMemoryStore


def build_store(config, store_file=None):
    """
    Use a local JSON snapshot when given, otherwise the configured Airtable base.
    """
    if store_file:
        return InMemoryStore.from_json_file(store_file)

    if not config.AIRTABLE_API_KEY or not config.AIRTABLE_BASE_ID:
        raise ConfigurationError("AIRTABLE_API_KEY and AIRTABLE_BASE_ID must be set (or pass --store-file)")
    return AirtableStore.from_config(config)
