# tax_lookup/errors.py
from __future__ import annotations


class TaxLookupError(Exception):
    """Base class for errors raised by the lookup library."""


class DataFetchError(TaxLookupError):
    """The CSV export could not be fetched (network error or bad status)."""


class MissingApiKeyError(TaxLookupError):
    """No Gemini API key is configured, so no insight request is attempted."""
