# main.py
import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from tax_lookup import config
from tax_lookup.errors import DataFetchError, MissingApiKeyError
from tax_lookup.insights import get_tax_insight
from tax_lookup.loader import DatasetStore
from tax_lookup.models import DatasetStats, TaxRecord
from tax_lookup.report import render_text_report
from tax_lookup.search import search
from tax_lookup.session import SessionGate

logging.basicConfig(
    level=os.getenv("TAX_LOOKUP_LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOGGER = logging.getLogger("tax_lookup.api")

app = FastAPI(title="Tax Invoice Lookup Service")

store = DatasetStore()


def get_store() -> DatasetStore:
    return store


def require_password(x_app_password: Optional[str] = Header(default=None)) -> None:
    # same plain comparison as the UI gate; not real access control
    if not SessionGate({}).authenticate(x_app_password or ""):
        raise HTTPException(status_code=401, detail="Wrong password.")


def _records(ds: DatasetStore) -> list[TaxRecord]:
    try:
        return ds.ensure_loaded()
    except DataFetchError as exc:
        _LOGGER.warning("Dataset unavailable: %s", exc)
        raise HTTPException(
            status_code=502, detail="Could not connect to the CSV data server."
        ) from exc


def _find(ds: DatasetStore, tax_id: str):
    outcome = search(_records(ds), tax_id)
    if outcome is None:
        raise HTTPException(status_code=400, detail="Please enter a tax ID.")
    if not outcome.found:
        raise HTTPException(status_code=404, detail=outcome.message.text)
    return outcome


# ---------------------------------------------------------
# HEALTH
# ---------------------------------------------------------
@app.get("/health")
def health(ds: DatasetStore = Depends(get_store)):
    return {
        "status": "ok",
        "gemini_key_loaded": bool(os.getenv(config.GEMINI_API_KEY_ENV)),
        "records_loaded": len(ds.records),
    }


# ---------------------------------------------------------
# DATASET
# ---------------------------------------------------------
@app.post("/dataset/reload", response_model=DatasetStats, dependencies=[Depends(require_password)])
def reload_dataset(ds: DatasetStore = Depends(get_store)):
    try:
        ds.reload()
    except DataFetchError as exc:
        raise HTTPException(
            status_code=502, detail="Could not connect to the CSV data server."
        ) from exc
    return ds.stats()


@app.get("/dataset/stats", response_model=DatasetStats, dependencies=[Depends(require_password)])
def dataset_stats(ds: DatasetStore = Depends(get_store)):
    _records(ds)
    return ds.stats()


# ---------------------------------------------------------
# LOOKUP
# ---------------------------------------------------------
class LookupResponse(BaseModel):
    message: str
    record: TaxRecord


@app.get("/lookup/{tax_id}", response_model=LookupResponse, dependencies=[Depends(require_password)])
def lookup(tax_id: str, ds: DatasetStore = Depends(get_store)):
    outcome = _find(ds, tax_id)
    return {"message": outcome.message.text, "record": outcome.record}


# ---------------------------------------------------------
# AI INSIGHT
# ---------------------------------------------------------
class InsightResponse(BaseModel):
    tax_id: str
    insight: str


@app.post("/insight/{tax_id}", response_model=InsightResponse, dependencies=[Depends(require_password)])
def insight(tax_id: str, ds: DatasetStore = Depends(get_store)):
    record = _find(ds, tax_id).record
    try:
        text = get_tax_insight(record)
    except MissingApiKeyError as exc:
        raise HTTPException(
            status_code=503,
            detail=f"{config.GEMINI_API_KEY_ENV} is not configured on the server.",
        ) from exc
    return {"tax_id": record.tax_id, "insight": text}


# ---------------------------------------------------------
# REPORT
# ---------------------------------------------------------
@app.get("/report/{tax_id}", response_class=PlainTextResponse, dependencies=[Depends(require_password)])
def report(tax_id: str, ds: DatasetStore = Depends(get_store)):
    return render_text_report(_find(ds, tax_id).record)
