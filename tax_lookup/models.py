# tax_lookup/models.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaxRecord(BaseModel):
    """One row of the published tax-invoice sheet."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    authority_code: str = Field(alias="CQT")
    tax_id: str = Field(alias="MST")
    name: str = Field(alias="Ten")
    invoice_count: int = Field(default=0, alias="SL")
    tax_amount: float = Field(default=0.0, alias="Thue")
    total_amount: float = Field(default=0.0, alias="TongTien")


class MessageType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    NONE = ""


class AppMessage(BaseModel):
    type: MessageType = MessageType.NONE
    text: str = ""

    @classmethod
    def success(cls, text: str) -> "AppMessage":
        return cls(type=MessageType.SUCCESS, text=text)

    @classmethod
    def error(cls, text: str) -> "AppMessage":
        return cls(type=MessageType.ERROR, text=text)


class LoadingState(str, Enum):
    IDLE = "idle"
    FETCHING_DATA = "fetching_data"
    SEARCHING = "searching"
    AI_ANALYZING = "ai_analyzing"


class DatasetStats(BaseModel):
    total_records: int
    total_invoices: int


class SearchOutcome(BaseModel):
    query: str
    record: Optional[TaxRecord] = None
    message: AppMessage

    @property
    def found(self) -> bool:
        return self.record is not None
