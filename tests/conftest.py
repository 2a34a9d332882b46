import pytest
import requests

from tax_lookup.models import TaxRecord

SAMPLE_CSV = (
    "CQT,MST,Ten,SL,Thue,TongTien\r\n"
    '01,8077806911-001,ACME,10,"1.000","5.000"\r\n'
    "10.0,'0101234567,\"Công ty \"\"Hoa Sen\"\"\",\"1.234\",\"12.345.678\",\"135.802.458\"\n"
    "01,12-3,X,1,1,1\n"
    "02,123456,,abc,,1000\n"
    "\n"
)


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code
        self.encoding = "utf-8"

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Stands in for requests.Session; replays queued responses or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def acme():
    return TaxRecord(
        authority_code="01",
        tax_id="8077806911001",
        name="ACME",
        invoice_count=10,
        tax_amount=1000,
        total_amount=5000,
    )


@pytest.fixture(autouse=True)
def _no_gemini_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
