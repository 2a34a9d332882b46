# tax_lookup/insights.py
import logging
import os

from google import generativeai as genai

from .config import CURRENCY, GEMINI_API_KEY_ENV
from .errors import MissingApiKeyError
from .models import TaxRecord

_LOGGER = logging.getLogger(__name__)

AI_FAILURE_MESSAGE = "AI system error."

# ----------------------------------------------------
# Gemini models, tried in order
# ----------------------------------------------------
PREFERRED_MODELS = [
    "gemini-2.0-flash",  # fast, cheap
    "gemini-1.5-flash",  # older fallback
]


def _api_key():
    return os.getenv(GEMINI_API_KEY_ENV) or None


def _extract_text(response):
    """Safely extract text from Gemini response."""
    try:
        if response.text:
            return response.text
    except (AttributeError, ValueError):
        # .text raises ValueError when the candidate was blocked
        pass

    try:
        if response.candidates:
            parts = response.candidates[0].content.parts
            if parts and hasattr(parts[0], "text"):
                return parts[0].text
    except (AttributeError, IndexError):
        pass

    return None


def build_prompt(record: TaxRecord) -> str:
    return f"""
You are a tax analyst reviewing e-invoice activity for one business.

Write a short commentary (3-5 sentences) about the figures below:
the invoice volume, the tax amount relative to the gross amount, and
anything a tax officer should double-check. Answer in plain text.

--- RECORD ---
Tax office code: {record.authority_code}
Tax ID: {record.tax_id}
Business name: {record.name}
Invoice count: {record.invoice_count}
Tax amount ({CURRENCY}): {record.tax_amount:,.0f}
Gross amount ({CURRENCY}): {record.total_amount:,.0f}
"""


def _call_gemini(prompt: str, api_key: str) -> str | None:
    """
    Try multiple Gemini models. Return response text or None.
    """
    genai.configure(api_key=api_key)
    _LOGGER.debug("Gemini prompt (first 200 chars): %s", prompt[:200])

    for model_name in PREFERRED_MODELS:
        try:
            _LOGGER.info("Trying Gemini model %s", model_name)
            model = genai.GenerativeModel(model_name)
            response = model.generate_content(prompt)
            text = _extract_text(response)

            if text:
                return text.strip()

            _LOGGER.warning("No usable text from %s", model_name)

        except Exception as e:
            _LOGGER.warning("Gemini call to %s failed: %s", model_name, e)

    _LOGGER.error("All Gemini calls failed.")
    return None


def get_tax_insight(record: TaxRecord) -> str:
    """Ask Gemini for commentary on one record.

    Raises MissingApiKeyError when no key is configured. Every other failure
    comes back as AI_FAILURE_MESSAGE.
    """
    api_key = _api_key()
    if not api_key:
        raise MissingApiKeyError(f"{GEMINI_API_KEY_ENV} is not set")

    _LOGGER.info("Requesting insight for %s (key %s********)", record.tax_id, api_key[:6])
    answer = _call_gemini(build_prompt(record), api_key)
    if not answer:
        return AI_FAILURE_MESSAGE
    return answer
