# tax_lookup/report.py
from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from .config import CURRENCY
from .models import TaxRecord

CURRENCY_SYMBOL = "₫"


def format_number(value: float) -> str:
    """Group thousands with dots, the vi-VN way: 1234567 -> "1.234.567"."""
    return f"{round(value):,}".replace(",", ".")


def format_currency(amount: float) -> str:
    return f"{format_number(amount)} {CURRENCY_SYMBOL}"


def render_text_report(
    record: TaxRecord,
    insight: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    generated_at = generated_at or datetime.now()
    lines = [
        "TAX INVOICE LOOKUP REPORT",
        f"Generated: {generated_at:%Y-%m-%d %H:%M}",
        "",
        f"Tax ID:         {record.tax_id}",
        f"Business name:  {record.name}",
        f"Tax office:     {record.authority_code}",
        f"Invoice count:  {format_number(record.invoice_count)}",
        f"Tax amount:     {format_currency(record.tax_amount)}",
        f"Gross amount:   {format_currency(record.total_amount)}",
    ]
    if insight:
        lines += ["", "AI insight:", insight]
    return "\n".join(lines) + "\n"


def render_json_report(record: TaxRecord, insight: Optional[str] = None) -> str:
    data = {
        "record": record.model_dump(by_alias=True),
        "currency": CURRENCY,
        "insight": insight,
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
