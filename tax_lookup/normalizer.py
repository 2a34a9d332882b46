# tax_lookup/normalizer.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .config import MIN_COLUMNS, MIN_TAX_ID_LENGTH, UNKNOWN_AUTHORITY, UNSPECIFIED_NAME
from .models import TaxRecord
from .text_utils import normalize_tax_id, parse_number, strip_authority_suffix

_LOGGER = logging.getLogger(__name__)

# Column layout of the published sheet
COL_AUTHORITY = 0
COL_TAX_ID = 1
COL_NAME = 2
COL_INVOICE_COUNT = 3
COL_TAX_AMOUNT = 4
COL_TOTAL_AMOUNT = 5


def _text_or(default: str) -> Callable[[str], str]:
    def coerce(raw: str) -> str:
        return raw.strip() or default

    return coerce


def _authority(raw: str) -> str:
    # a bare ".0" strips down to nothing
    return strip_authority_suffix(raw.strip()) or UNKNOWN_AUTHORITY


def _count(raw: str) -> int:
    return int(parse_number(raw))


# field name -> (column index, raw-to-typed coercion)
# every fallback value a row can receive is decided here
COERCION_DEFAULTS: Dict[str, tuple[int, Callable[[str], object]]] = {
    "authority_code": (COL_AUTHORITY, _authority),
    "name": (COL_NAME, _text_or(UNSPECIFIED_NAME)),
    "invoice_count": (COL_INVOICE_COUNT, _count),
    "tax_amount": (COL_TAX_AMOUNT, parse_number),
    "total_amount": (COL_TOTAL_AMOUNT, parse_number),
}


def _column(columns: Sequence[str], index: int) -> str:
    if index < len(columns) and columns[index] is not None:
        return columns[index]
    return ""


def coerce_fields(columns: Sequence[str]) -> Dict[str, object]:
    return {
        field: coerce(_column(columns, index))
        for field, (index, coerce) in COERCION_DEFAULTS.items()
    }


def build_record(columns: Sequence[str]) -> Optional[TaxRecord]:
    """Turn one split CSV row into a TaxRecord, or None if the row is unusable.

    Rows are dropped when they have fewer than two columns or when the
    normalized tax ID is shorter than MIN_TAX_ID_LENGTH.
    """
    if len(columns) < MIN_COLUMNS:
        return None

    tax_id = normalize_tax_id(columns[COL_TAX_ID])
    if len(tax_id) < MIN_TAX_ID_LENGTH:
        return None

    return TaxRecord(tax_id=tax_id, **coerce_fields(columns))


def build_records(rows: Iterable[Sequence[str]]) -> List[TaxRecord]:
    records: List[TaxRecord] = []
    skipped = 0
    for columns in rows:
        record = build_record(columns)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    _LOGGER.debug("Built %d records, skipped %d rows", len(records), skipped)
    return records
