# tax_lookup/loader.py
from __future__ import annotations

import logging
from typing import List, Optional

import requests

from . import config
from .csv_parser import split_csv_row, split_lines
from .errors import DataFetchError
from .models import DatasetStats, TaxRecord
from .normalizer import build_records

_LOGGER = logging.getLogger(__name__)


def fetch_csv_text(
    url: str,
    timeout: float,
    session: Optional[requests.Session] = None,
) -> str:
    """GET the published CSV export and return its body as text."""
    http = session or requests
    try:
        res = http.get(url, timeout=timeout)
        res.raise_for_status()
    except requests.RequestException as exc:
        _LOGGER.warning("CSV fetch from %s failed: %s", url, exc)
        raise DataFetchError(f"Could not fetch dataset: {exc}") from exc

    # Google Sheets serves UTF-8 but does not always say so
    if not res.encoding or res.encoding.lower() == "iso-8859-1":
        res.encoding = "utf-8"
    return res.text


def parse_dataset(text: str) -> List[TaxRecord]:
    """Parse a whole CSV document. The first line is a header and is skipped."""
    lines = split_lines(text)
    return build_records(split_csv_row(line) for line in lines[1:])


def load_dataset(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> List[TaxRecord]:
    text = fetch_csv_text(
        url or config.DATA_URL,
        config.HTTP_TIMEOUT if timeout is None else timeout,
        session=session,
    )
    records = parse_dataset(text)
    _LOGGER.info("Loaded %d tax records", len(records))
    return records


def compute_stats(records: List[TaxRecord]) -> DatasetStats:
    return DatasetStats(
        total_records=len(records),
        total_invoices=sum(r.invoice_count for r in records),
    )


class DatasetStore:
    """Holds the current record collection.

    A reload swaps in a complete new list or, on failure, keeps the old one.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url or config.DATA_URL
        self.timeout = config.HTTP_TIMEOUT if timeout is None else timeout
        self.session = session
        self._records: List[TaxRecord] = []
        self.loaded = False

    @property
    def records(self) -> List[TaxRecord]:
        return self._records

    def reload(self) -> List[TaxRecord]:
        # raises DataFetchError before anything is replaced
        records = load_dataset(self.url, self.timeout, session=self.session)
        self._records = records
        self.loaded = True
        return records

    def ensure_loaded(self) -> List[TaxRecord]:
        if not self.loaded:
            self.reload()
        return self._records

    def stats(self) -> DatasetStats:
        return compute_stats(self._records)
