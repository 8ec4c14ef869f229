"""Tests for the query/filter engine."""

from datetime import datetime, timezone

from invoice_desk.data.seed import seed_invoices
from invoice_desk.models.invoice import Invoice, LineItem
from invoice_desk.services.query import STATUS_ALL, view


def _invoice(id, client, number, status):
    return Invoice(
        id=id,
        client_name=client,
        invoice_number=number,
        status=status,
        items=[LineItem(description="x", quantity=1, price=1)],
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


INVOICES = [
    _invoice("a", "Acme Corp", "INV-1", "paid"),
    _invoice("b", "Initech", "ACME-77", "paid"),
    _invoice("c", "ACME Ltd", "INV-3", "pending"),
    _invoice("d", "Globex", "INV-4", "paid"),
    _invoice("e", "acme west", "INV-5", "draft"),
]


class TestView:
    """Tests for query.view."""

    def test_empty_term_and_all_returns_everything(self):
        """No filter keeps the whole collection in order."""
        assert [i.id for i in view(INVOICES, "", STATUS_ALL)] == ["a", "b", "c", "d", "e"]

    def test_none_term_matches_everything(self):
        """None is treated like an empty search."""
        assert len(view(INVOICES, None, STATUS_ALL)) == 5

    def test_search_is_case_insensitive_on_name_or_number(self):
        """Search matches client name or invoice number, ignoring case."""
        assert [i.id for i in view(INVOICES, "acme")] == ["a", "b", "c", "e"]

    def test_status_filter_exact(self):
        """Status filter keeps exact matches only."""
        assert [i.id for i in view(INVOICES, "", "pending")] == ["c"]

    def test_search_and_status_are_anded(self):
        """Both predicates must hold."""
        result = view(INVOICES, "acme", "paid")
        assert [i.id for i in result] == ["a", "b"]
        for inv in result:
            assert inv.status == "paid"
            assert "acme" in inv.client_name.lower() or "acme" in inv.invoice_number.lower()

    def test_unknown_status_matches_nothing(self):
        """Statuses are compared by equality, no hierarchy."""
        assert view(INVOICES, "", "archived") == []

    def test_does_not_mutate_source(self):
        """The source list is left as it was."""
        source = seed_invoices()
        snapshot = [i.model_dump() for i in source]
        view(source, "stark", "pending")
        assert [i.model_dump() for i in source] == snapshot
