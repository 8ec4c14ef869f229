"""Tests for invoice models."""

import json
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from invoice_desk.data.seed import SEED_RECORDS, seed_invoices
from invoice_desk.models.invoice import Invoice, InvoiceDraft, LineItem


class TestLineItem:
    """Tests for LineItem coercion."""

    @pytest.mark.parametrize("raw", ["", "abc", None, float("nan"), float("inf"), [1]])
    def test_malformed_amounts_become_zero(self, raw):
        """Malformed quantity/price input coerces to 0."""
        item = LineItem(description="x", quantity=raw, price=raw)
        assert item.quantity == 0
        assert item.price == 0

    def test_negative_amounts_clamp_to_zero(self):
        """Quantities and prices never go below 0."""
        item = LineItem(description="x", quantity=-3, price=-10)
        assert item.quantity == 0
        assert item.price == 0

    def test_numeric_strings_are_parsed(self):
        """Form strings, including decimal commas, are accepted."""
        item = LineItem(description="x", quantity="2", price="19,99")
        assert item.quantity == 2
        assert item.price == pytest.approx(19.99)

    def test_none_description_becomes_empty(self):
        """A cleared description field is stored as an empty string."""
        assert LineItem(description=None).description == ""


class TestInvoiceDraft:
    """Tests for InvoiceDraft defaults."""

    def test_blank_form_defaults(self):
        """A blank draft has one blank item and due date 30 days out."""
        draft = InvoiceDraft()
        assert draft.client_name == ""
        assert draft.status == "draft"
        assert draft.issue_date == date.today()
        assert draft.due_date == date.today() + timedelta(days=30)
        assert len(draft.items) == 1
        assert draft.items[0].description == ""
        assert draft.items[0].quantity == 1
        assert draft.items[0].price == 0

    def test_rejects_unknown_status(self):
        """Status is restricted to the known lifecycle values."""
        with pytest.raises(ValidationError):
            InvoiceDraft(status="archived")

    def test_none_notes_become_empty(self):
        """Null text fields are stored as empty strings."""
        assert InvoiceDraft(notes=None).notes == ""


class TestInvoice:
    """Tests for Invoice."""

    def test_requires_at_least_one_item(self):
        """An invoice cannot exist without items."""
        with pytest.raises(ValidationError):
            Invoice(
                id="x", client_name="A", items=[],
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )

    def test_record_uses_camel_case_keys(self):
        """Persisted records use the camelCase field names."""
        record = seed_invoices()[0].to_record()
        assert set(record) == {
            "id", "clientName", "invoiceNumber", "issueDate", "dueDate",
            "status", "items", "notes", "createdAt",
        }
        assert record["issueDate"] == "2023-09-15"
        assert record["createdAt"] == "2023-09-15T10:30:00Z"

    def test_updated_at_omitted_until_set(self):
        """updatedAt only appears once the invoice was updated."""
        inv = seed_invoices()[0]
        assert "updatedAt" not in inv.to_record()
        inv.updated_at = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)
        assert inv.to_record()["updatedAt"] == "2024-02-01T12:00:00Z"

    def test_record_round_trip(self):
        """A record read back gives an equal invoice."""
        for inv in seed_invoices():
            raw = json.dumps(inv.to_record())
            assert Invoice.model_validate(json.loads(raw)) == inv

    def test_seed_records_load(self):
        """The seed records are valid invoices."""
        invoices = seed_invoices()
        assert [i.id for i in invoices] == ["1", "2", "3"]
        assert [i.status for i in invoices] == ["paid", "pending", "draft"]
        assert len(invoices) == len(SEED_RECORDS)

    def test_seed_returns_fresh_copies(self):
        """Mutating one seed copy does not leak into the next."""
        first = seed_invoices()
        first[0].items[0].description = "changed"
        assert seed_invoices()[0].items[0].description == "Web Development Services"

    def test_to_draft_copies_form_fields(self):
        """to_draft drops identity and timestamps and copies items."""
        inv = seed_invoices()[1]
        draft = inv.to_draft()
        assert not hasattr(draft, "id")
        assert draft.client_name == "Stark Industries"
        draft.items[0].quantity = 99
        assert inv.items[0].quantity == 10
