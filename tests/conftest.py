"""Shared test fixtures for the invoice-desk test suite."""

import pytest

from invoice_desk.models.invoice import InvoiceDraft, LineItem
from invoice_desk.services.invoice_service import InvoiceService
from invoice_desk.storage.repo import InMemoryRepository


@pytest.fixture
def repo():
    """Empty in-memory repository (nothing persisted yet)."""
    return InMemoryRepository()


@pytest.fixture
def service(repo):
    """InvoiceService over the in-memory repository, starting from the seed."""
    return InvoiceService(repo)


@pytest.fixture
def make_draft():
    """Factory for valid drafts; keyword arguments override fields."""

    def _make(**overrides):
        data = {
            "client_name": "Globex",
            "invoice_number": "",
            "items": [LineItem(description="Design work", quantity=2, price=125.5)],
            "notes": "Due on receipt",
        }
        data.update(overrides)
        return InvoiceDraft(**data)

    return _make


@pytest.fixture
def events(service):
    """Collects StoreEvents emitted by the service."""
    received = []
    service.subscribe(received.append)
    return received
