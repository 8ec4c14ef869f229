"""
Outcome values returned by every InvoiceService command.

Expected failures (validation, unknown id, rejected line-item removal, failed
write) are reported through `Outcome.error`, never raised.
"""
from __future__ import annotations
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from invoice_desk.models.invoice import Invoice, InvoiceDraft, LineItem


class StoreError(str, Enum):
    MISSING_CLIENT_NAME = "missing_client_name"
    INCOMPLETE_LINE_ITEM = "incomplete_line_item"
    NO_LINE_ITEMS = "no_line_items"
    NOT_FOUND = "not_found"
    LAST_LINE_ITEM = "last_line_item"
    LINE_ITEM_NOT_FOUND = "line_item_not_found"
    PERSISTENCE_WRITE_FAILED = "persistence_write_failed"


VALIDATION_ERRORS = frozenset({
    StoreError.MISSING_CLIENT_NAME,
    StoreError.INCOMPLETE_LINE_ITEM,
    StoreError.NO_LINE_ITEMS,
})

_ERROR_MESSAGES = {
    StoreError.MISSING_CLIENT_NAME: "Client name is required",
    StoreError.INCOMPLETE_LINE_ITEM: "All items must have a description",
    StoreError.NO_LINE_ITEMS: "Invoice needs at least one item",
    StoreError.NOT_FOUND: "Invoice not found",
    StoreError.LAST_LINE_ITEM: "Invoice needs at least one item",
    StoreError.LINE_ITEM_NOT_FOUND: "Line item not found",
    StoreError.PERSISTENCE_WRITE_FAILED: "Invoices could not be saved",
}


class Outcome(BaseModel):
    ok: bool
    error: Optional[StoreError] = None
    message: str = ""
    invoice: Optional[Invoice] = None
    draft: Optional[InvoiceDraft] = None
    items: Optional[List[LineItem]] = None

    @classmethod
    def success(cls, message: str = "", **kwargs) -> "Outcome":
        return cls(ok=True, message=message, **kwargs)

    @classmethod
    def failure(cls, error: StoreError, **kwargs) -> "Outcome":
        return cls(ok=False, error=error, message=_ERROR_MESSAGES[error], **kwargs)

    @property
    def is_validation_error(self) -> bool:
        return self.error in VALIDATION_ERRORS


class StoreEvent(BaseModel):
    """Change notification handed to subscribers after each command."""

    action: str
    invoice_id: Optional[str] = None
    outcome: Outcome
