"""Password-gated lookup over a published tax-invoice CSV export."""

from .models import AppMessage, DatasetStats, LoadingState, MessageType, SearchOutcome, TaxRecord

__all__ = [
    "AppMessage",
    "DatasetStats",
    "LoadingState",
    "MessageType",
    "SearchOutcome",
    "TaxRecord",
    "__version__",
]

__version__ = "0.1.0"
