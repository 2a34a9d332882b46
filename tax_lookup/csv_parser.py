# tax_lookup/csv_parser.py
from __future__ import annotations

import re
from typing import List

from .text_utils import clean_line

DELIMITER = ","
QUOTE = '"'

LINE_SPLIT_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> List[str]:
    """Split a CSV document into raw lines.

    Quoted fields spanning several lines are not reassembled; each physical
    line is parsed on its own.
    """
    return LINE_SPLIT_RE.split(text)


def split_csv_row(line: str) -> List[str]:
    """Split one CSV line into fields.

    - commas inside a double-quoted span are part of the field
    - ``""`` inside a quoted span is one literal quote
    - ``""`` input gives ``[""]``; a trailing comma gives a trailing empty field
    - an unterminated quote swallows the rest of the line into the last field
    """
    line = clean_line(line)
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if in_quotes:
            if ch == QUOTE:
                if i + 1 < n and line[i + 1] == QUOTE:
                    current.append(QUOTE)
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(ch)
        elif ch == QUOTE:
            in_quotes = True
        elif ch == DELIMITER:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields
