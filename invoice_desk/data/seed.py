"""Demo collection used when no valid persisted invoices exist."""
from __future__ import annotations
from typing import Any, Dict, List

from invoice_desk.models.invoice import Invoice

SEED_RECORDS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "clientName": "Acme Corporation",
        "invoiceNumber": "INV-2023-001",
        "issueDate": "2023-09-15",
        "dueDate": "2023-10-15",
        "status": "paid",
        "items": [
            {"description": "Web Development Services", "quantity": 1, "price": 1500},
            {"description": "Hosting (Annual)", "quantity": 1, "price": 200},
        ],
        "notes": "Thank you for your business!",
        "createdAt": "2023-09-15T10:30:00Z",
    },
    {
        "id": "2",
        "clientName": "Stark Industries",
        "invoiceNumber": "INV-2023-002",
        "issueDate": "2023-10-01",
        "dueDate": "2023-10-31",
        "status": "pending",
        "items": [
            {"description": "Consulting Services", "quantity": 10, "price": 150},
            {"description": "Technical Documentation", "quantity": 1, "price": 350},
        ],
        "notes": "Net 30 payment terms",
        "createdAt": "2023-10-01T14:45:00Z",
    },
    {
        "id": "3",
        "clientName": "Wayne Enterprises",
        "invoiceNumber": "INV-2023-003",
        "issueDate": "2023-10-15",
        "dueDate": "2023-11-15",
        "status": "draft",
        "items": [
            {"description": "Security Audit", "quantity": 1, "price": 2500},
            {"description": "Penetration Testing", "quantity": 2, "price": 1200},
        ],
        "notes": "",
        "createdAt": "2023-10-15T09:15:00Z",
    },
]


def seed_invoices() -> List[Invoice]:
    return [Invoice.model_validate(d) for d in SEED_RECORDS]
