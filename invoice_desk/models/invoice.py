from __future__ import annotations
import math
from datetime import date, datetime, timedelta
from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel

InvoiceStatus = Literal["draft", "pending", "paid", "overdue"]

DEFAULT_DUE_DAYS = 30

# Invoice-only fields, absent from the form shape
DRAFT_EXCLUDE = {"id", "created_at", "updated_at"}


def to_amount(value: Any) -> float:
    """Coerce form input to a non-negative finite float; anything malformed is 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if value == "":
            return 0.0
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(v):
        return 0.0
    return max(0.0, v)


class LineItem(CamelModel):
    description: str = ""
    quantity: float = 1.0
    price: float = 0.0

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("quantity", "price", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> float:
        return to_amount(v)


def _default_due_date() -> date:
    return date.today() + timedelta(days=DEFAULT_DUE_DAYS)


class InvoiceDraft(CamelModel):
    """Form-side copy of an invoice; may hold incomplete data until submitted."""

    client_name: str = ""
    invoice_number: str = ""
    issue_date: date = Field(default_factory=date.today)
    due_date: date = Field(default_factory=_default_due_date)
    status: InvoiceStatus = "draft"
    items: List[LineItem] = Field(default_factory=lambda: [LineItem()])
    notes: str = ""

    @field_validator("client_name", "invoice_number", "notes", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Invoice(InvoiceDraft):
    id: str
    items: List[LineItem] = Field(min_length=1)
    created_at: datetime
    updated_at: Optional[datetime] = None

    def to_draft(self) -> InvoiceDraft:
        data = self.model_dump(exclude=DRAFT_EXCLUDE)
        return InvoiceDraft.model_validate(data)
