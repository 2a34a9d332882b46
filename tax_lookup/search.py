# tax_lookup/search.py
from __future__ import annotations

from typing import Iterable, Optional

from .models import AppMessage, SearchOutcome, TaxRecord
from .text_utils import normalize_tax_id

FOUND_TEMPLATE = "Found data for tax ID: {query}"
NOT_FOUND_TEMPLATE = "Tax ID not found: {query}"


def search_key(raw: str | None) -> str:
    return normalize_tax_id((raw or "").strip())


def find_record(records: Iterable[TaxRecord], raw: str | None) -> Optional[TaxRecord]:
    """Return the first record whose tax ID equals the normalized input."""
    key = search_key(raw)
    if not key:
        return None
    for record in records:
        if record.tax_id == key:
            return record
    return None


def search(records: Iterable[TaxRecord], raw: str | None) -> Optional[SearchOutcome]:
    """Look up a user-entered tax ID.

    Returns None for blank input so callers can skip any state change.
    Messages quote the text exactly as the user typed it.
    """
    if not search_key(raw):
        return None

    record = find_record(records, raw)
    if record is None:
        return SearchOutcome(
            query=raw,
            record=None,
            message=AppMessage.error(NOT_FOUND_TEMPLATE.format(query=raw)),
        )
    return SearchOutcome(
        query=raw,
        record=record,
        message=AppMessage.success(FOUND_TEMPLATE.format(query=raw)),
    )
