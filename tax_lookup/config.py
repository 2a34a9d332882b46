# tax_lookup/config.py
"""Runtime settings for the tax invoice lookup tool."""
from __future__ import annotations

import os

# Published CSV export of the tax-invoice spreadsheet
DATA_URL = os.getenv(
    "TAX_LOOKUP_DATA_URL",
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vQAstBXE5hbO14W9dWz-wDU1h4tve42LjLNq1uN3WjpHDgst5J_F4VO8enZS3q5e2YOM9hRNBkuCt0a"
    "/pub?output=csv",
)

# Not a security control: anyone running the app can read it.
APP_PASSWORD = os.getenv("TAX_LOOKUP_PASSWORD", "abc@2025")

HTTP_TIMEOUT = float(os.getenv("TAX_LOOKUP_HTTP_TIMEOUT", "15"))
SEARCH_DELAY_SECONDS = float(os.getenv("TAX_LOOKUP_SEARCH_DELAY", "0.4"))

MIN_TAX_ID_LENGTH = 5
MIN_COLUMNS = 2

UNKNOWN_AUTHORITY = "N/A"
UNSPECIFIED_NAME = "Unspecified"

SESSION_KEY = "is_auth"
LOGIN_ERROR_KEY = "login_error"

CURRENCY = "VND"

GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
