from __future__ import annotations
from typing import Iterable, List, Optional

from invoice_desk.models.invoice import Invoice

STATUS_ALL = "all"


def matches_search(invoice: Invoice, search_term: Optional[str]) -> bool:
    term = (search_term or "").lower()
    if not term:
        return True
    return term in invoice.client_name.lower() or term in invoice.invoice_number.lower()


def matches_status(invoice: Invoice, status_filter: Optional[str]) -> bool:
    if not status_filter or status_filter == STATUS_ALL:
        return True
    return invoice.status == status_filter


def view(
    invoices: Iterable[Invoice],
    search_term: Optional[str] = "",
    status_filter: Optional[str] = STATUS_ALL,
) -> List[Invoice]:
    """Filtered view of the collection, source order preserved. Never mutates."""
    return [
        inv for inv in invoices
        if matches_search(inv, search_term) and matches_status(inv, status_filter)
    ]
