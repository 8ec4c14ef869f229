# invoice_desk/services/invoice_service.py
"""
Invoice store: the authoritative, ordered invoice collection.

Every command validates first, builds the new collection, saves it through the
repository and only then swaps it in, so a failed save leaves memory untouched.
Commands return an `Outcome` and notify subscribers with a `StoreEvent`.
"""
from __future__ import annotations
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable, List, Optional, Sequence

from pydantic import ValidationError

from invoice_desk.data.seed import seed_invoices
from invoice_desk.models.common import gen_id, now_utc
from invoice_desk.models.invoice import DEFAULT_DUE_DAYS, DRAFT_EXCLUDE, Invoice, InvoiceDraft, LineItem
from invoice_desk.services import calculator, query
from invoice_desk.services.numbering import DEFAULT_PREFIX, new_invoice_number
from invoice_desk.services.results import Outcome, StoreError, StoreEvent
from invoice_desk.services.validator import validate
from invoice_desk.storage.repo import (
    InMemoryRepository,
    PersistenceReadError,
    PersistenceWriteError,
    Repository,
)

logger = logging.getLogger(__name__)

LINE_ITEM_FIELDS = ("description", "quantity", "price")

Listener = Callable[[StoreEvent], Any]


class InvoiceService:
    def __init__(
        self,
        repo: Optional[Repository] = None,
        *,
        invoice_prefix: str = DEFAULT_PREFIX,
        default_due_days: int = DEFAULT_DUE_DAYS,
        on_load_error: Optional[Callable[[PersistenceReadError], Any]] = None,
    ) -> None:
        self.repo = repo if repo is not None else InMemoryRepository()
        self.invoice_prefix = invoice_prefix
        self.default_due_days = default_due_days
        self.on_load_error = on_load_error
        self.load_error: Optional[PersistenceReadError] = None
        self._listeners: List[Listener] = []
        self._invoices: List[Invoice] = self._load()

    # ----------- load -----------
    def _load(self) -> List[Invoice]:
        try:
            records = self.repo.load()
        except PersistenceReadError as exc:
            return self._fallback_to_seed(exc)

        if records is None:
            logger.info("No persisted invoices, starting from the seed collection")
            return seed_invoices()

        out: List[Invoice] = []
        seen = set()
        for d in records:
            try:
                inv = Invoice.model_validate(d)
            except ValidationError as exc:
                rid = d.get("id") if isinstance(d, dict) else None
                logger.warning("Skipping invalid invoice record id=%r: %s", rid, exc)
                continue
            if inv.id in seen:
                logger.warning("Skipping duplicate invoice id=%s", inv.id)
                continue
            seen.add(inv.id)
            out.append(inv)

        if records and not out:
            return self._fallback_to_seed(PersistenceReadError("No valid invoice records"))

        logger.info("Loaded %d invoices", len(out))
        return out

    def _fallback_to_seed(self, exc: PersistenceReadError) -> List[Invoice]:
        logger.warning("Persisted invoices unreadable, using the seed collection: %s", exc)
        self.load_error = exc
        if self.on_load_error is not None:
            try:
                self.on_load_error(exc)
            except Exception:
                logger.exception("on_load_error callback failed")
        return seed_invoices()

    # ----------- observers -----------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, action: str, invoice_id: Optional[str], outcome: Outcome) -> Outcome:
        event = StoreEvent(action=action, invoice_id=invoice_id, outcome=outcome)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed for %s", listener, action)
        return outcome

    # ----------- internals -----------
    def _index_of(self, invoice_id: str) -> int:
        for i, inv in enumerate(self._invoices):
            if inv.id == invoice_id:
                return i
        return -1

    def _commit(self, invoices: List[Invoice]) -> Optional[Outcome]:
        """Save then swap in; returns a failure outcome when the save fails."""
        try:
            self.repo.save([inv.to_record() for inv in invoices])
        except PersistenceWriteError as exc:
            logger.warning("Failed to save invoices: %s", exc)
            return Outcome.failure(StoreError.PERSISTENCE_WRITE_FAILED)
        self._invoices = invoices
        return None

    def _not_found(self, action: str, invoice_id: str) -> Outcome:
        logger.warning("%s: invoice %s not found", action, invoice_id)
        return self._emit(action, invoice_id, Outcome.failure(StoreError.NOT_FOUND))

    # ----------- read accessors -----------
    @property
    def invoices(self) -> List[Invoice]:
        return [inv.model_copy(deep=True) for inv in self._invoices]

    def __len__(self) -> int:
        return len(self._invoices)

    def get(self, invoice_id: str) -> Optional[Invoice]:
        idx = self._index_of(invoice_id)
        return self._invoices[idx].model_copy(deep=True) if idx >= 0 else None

    def view(self, search_term: Optional[str] = "", status_filter: Optional[str] = query.STATUS_ALL) -> List[Invoice]:
        return [inv.model_copy(deep=True) for inv in query.view(self._invoices, search_term, status_filter)]

    def total_for(self, invoice_id: str) -> Optional[Decimal]:
        idx = self._index_of(invoice_id)
        if idx < 0:
            return None
        return calculator.total(self._invoices[idx].items)

    # ----------- drafts -----------
    def new_draft(self) -> InvoiceDraft:
        today = date.today()
        return InvoiceDraft(
            invoice_number=new_invoice_number(self.invoice_prefix),
            issue_date=today,
            due_date=today + timedelta(days=self.default_due_days),
        )

    def draft_from(self, invoice_id: str) -> Outcome:
        idx = self._index_of(invoice_id)
        if idx < 0:
            return Outcome.failure(StoreError.NOT_FOUND)
        return Outcome.success(draft=self._invoices[idx].to_draft())

    # form-level helpers: they never touch the collection nor notify subscribers
    def add_line_item(self, items: Sequence[LineItem]) -> List[LineItem]:
        return [it.model_copy() for it in items] + [LineItem()]

    def set_line_item_field(self, items: Sequence[LineItem], index: int, field: str, value: Any) -> Outcome:
        if field not in LINE_ITEM_FIELDS:
            raise ValueError(f"Unknown line item field: {field}")
        current = [it.model_copy() for it in items]
        if not 0 <= index < len(current):
            return Outcome.failure(StoreError.LINE_ITEM_NOT_FOUND, items=current)
        current[index] = LineItem.model_validate({**current[index].model_dump(), field: value})
        return Outcome.success(items=current)

    def remove_line_item(self, items: Sequence[LineItem], index: int) -> Outcome:
        current = [it.model_copy() for it in items]
        if len(current) == 1:
            return Outcome.failure(StoreError.LAST_LINE_ITEM, items=current)
        if not 0 <= index < len(current):
            return Outcome.failure(StoreError.LINE_ITEM_NOT_FOUND, items=current)
        del current[index]
        return Outcome.success(items=current)

    # ----------- commands -----------
    def create(self, draft: InvoiceDraft) -> Outcome:
        check = validate(draft)
        if not check.ok:
            logger.warning("Invoice creation rejected: %s", check.error.value)
            return self._emit("create", None, Outcome.failure(check.error, draft=draft))

        data = draft.model_dump(exclude=DRAFT_EXCLUDE)
        data["invoice_number"] = data["invoice_number"] or new_invoice_number(self.invoice_prefix)
        invoice = Invoice.model_validate({**data, "id": gen_id(), "created_at": now_utc()})

        failed = self._commit([invoice] + self._invoices)
        if failed:
            return self._emit("create", invoice.id, failed)
        logger.info("Created invoice %s (%s)", invoice.id, invoice.invoice_number)
        return self._emit(
            "create", invoice.id,
            Outcome.success("New invoice created successfully!", invoice=invoice.model_copy(deep=True)),
        )

    def update(self, invoice_id: str, draft: InvoiceDraft) -> Outcome:
        check = validate(draft)
        if not check.ok:
            logger.warning("Update of invoice %s rejected: %s", invoice_id, check.error.value)
            return self._emit("update", invoice_id, Outcome.failure(check.error, draft=draft))

        idx = self._index_of(invoice_id)
        if idx < 0:
            return self._not_found("update", invoice_id)

        current = self._invoices[idx]
        data = draft.model_dump(exclude=DRAFT_EXCLUDE)
        # blank number in the form keeps the stored one
        data["invoice_number"] = data["invoice_number"] or current.invoice_number
        updated = Invoice.model_validate({
            **data,
            "id": current.id,
            "created_at": current.created_at,
            "updated_at": now_utc(),
        })

        invoices = list(self._invoices)
        invoices[idx] = updated
        failed = self._commit(invoices)
        if failed:
            return self._emit("update", invoice_id, failed)
        logger.info("Updated invoice %s (%s)", updated.id, updated.invoice_number)
        return self._emit(
            "update", invoice_id,
            Outcome.success("Invoice updated successfully!", invoice=updated.model_copy(deep=True)),
        )

    def remove(self, invoice_id: str) -> Outcome:
        """Delete an invoice. Confirmation is the caller's business."""
        idx = self._index_of(invoice_id)
        if idx < 0:
            return self._not_found("remove", invoice_id)

        removed = self._invoices[idx]
        failed = self._commit([inv for inv in self._invoices if inv.id != invoice_id])
        if failed:
            return self._emit("remove", invoice_id, failed)
        logger.info("Removed invoice %s (%s)", removed.id, removed.invoice_number)
        return self._emit("remove", invoice_id, Outcome.success("Invoice deleted successfully!", invoice=removed))

    def clone(self, invoice_id: str) -> Outcome:
        idx = self._index_of(invoice_id)
        if idx < 0:
            return self._not_found("clone", invoice_id)

        source = self._invoices[idx]
        cloned = source.model_copy(
            update={
                "id": gen_id(),
                "invoice_number": new_invoice_number(self.invoice_prefix),
                "status": "draft",
                "created_at": now_utc(),
                "updated_at": None,
            },
            deep=True,
        )

        failed = self._commit([cloned] + self._invoices)
        if failed:
            return self._emit("clone", invoice_id, failed)
        logger.info("Cloned invoice %s into %s (%s)", source.id, cloned.id, cloned.invoice_number)
        return self._emit(
            "clone", invoice_id,
            Outcome.success("Invoice cloned successfully!", invoice=cloned.model_copy(deep=True)),
        )

    def mark_paid(self, invoice_id: str) -> Outcome:
        idx = self._index_of(invoice_id)
        if idx < 0:
            return self._not_found("mark_paid", invoice_id)

        paid = self._invoices[idx].model_copy(update={"status": "paid", "updated_at": now_utc()}, deep=True)
        invoices = list(self._invoices)
        invoices[idx] = paid

        failed = self._commit(invoices)
        if failed:
            return self._emit("mark_paid", invoice_id, failed)
        logger.info("Marked invoice %s (%s) as paid", paid.id, paid.invoice_number)
        return self._emit(
            "mark_paid", invoice_id,
            Outcome.success("Invoice marked as paid!", invoice=paid.model_copy(deep=True)),
        )
