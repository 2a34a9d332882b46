# tax_lookup/text_utils.py
from __future__ import annotations

import math
import re

# quotes, whitespace and hyphens never take part in a tax ID match
TAX_ID_NOISE_RE = re.compile(r"['\"\s-]")
NUMBER_NOISE_RE = re.compile(r"[^\d.,]")

_AUTHORITY_FLOAT_SUFFIX = ".0"


def normalize_tax_id(raw: str | None) -> str:
    """Strip quotes, whitespace and hyphens, keeping the order of the rest.

    Used both when the dataset is built and when a user searches, so the
    two sides always agree.
    """
    if not raw:
        return ""
    return TAX_ID_NOISE_RE.sub("", raw)


def strip_authority_suffix(raw: str) -> str:
    # the sheet exports integer office codes as floats ("10.0")
    if raw.endswith(_AUTHORITY_FLOAT_SUFFIX):
        return raw[: -len(_AUTHORITY_FLOAT_SUFFIX)]
    return raw


def _is_thousands_group(s: str, sep: str) -> bool:
    head, _, tail = s.partition(sep)
    # "0,125" and "1234,567" read as decimals
    return 0 < len(head.lstrip("0")) <= 3 and len(tail) == 3 and tail.isdigit()


def parse_number(raw: str | None) -> float:
    """Parse a locale-formatted amount such as ``"1.234.567 ₫"`` or ``"12,5"``.

    Anything that does not end up as a finite number yields 0.0.
    """
    if not raw:
        return 0.0
    s = NUMBER_NOISE_RE.sub("", raw)
    if not s:
        return 0.0

    has_dot, has_comma = "." in s, "," in s
    if has_dot and has_comma:
        # right-most separator is the decimal one
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif has_dot or has_comma:
        sep = "." if has_dot else ","
        if s.count(sep) > 1 or _is_thousands_group(s, sep):
            s = s.replace(sep, "")
        else:
            s = s.replace(sep, ".")

    try:
        value = float(s)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def clean_line(line: str) -> str:
    return line.rstrip("\r")
