from __future__ import annotations
from typing import Optional

from pydantic import BaseModel

from invoice_desk.models.invoice import InvoiceDraft
from invoice_desk.services.results import StoreError


class ValidationResult(BaseModel):
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def validate(draft: InvoiceDraft) -> ValidationResult:
    """Submit-time checks; the first failing rule wins."""
    if not (draft.client_name or "").strip():
        return ValidationResult(error=StoreError.MISSING_CLIENT_NAME)
    if not draft.items:
        return ValidationResult(error=StoreError.NO_LINE_ITEMS)
    if any(not it.description for it in draft.items):
        return ValidationResult(error=StoreError.INCOMPLETE_LINE_ITEM)
    return ValidationResult()
