"""Airtable record store: REST client, formulas, normalizers, repositories."""

from app.infrastructure.airtable._rest_client import (
    AirtableAPIError,
    AirtableRESTClient,
    StoreRecord,
    TableReference,
)
from app.infrastructure.airtable.client import build_record_store, init_record_store

__all__ = [
    "AirtableAPIError",
    "AirtableRESTClient",
    "StoreRecord",
    "TableReference",
    "build_record_store",
    "init_record_store",
]
