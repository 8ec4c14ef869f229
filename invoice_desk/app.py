from __future__ import annotations
import logging
from typing import Any, Callable, Optional

from invoice_desk.config import Settings, load_settings
from invoice_desk.services.invoice_service import InvoiceService
from invoice_desk.storage.json_repo import JsonRepository
from invoice_desk.storage.repo import PersistenceReadError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


def build_service(
    settings: Optional[Settings] = None,
    *,
    on_load_error: Optional[Callable[[PersistenceReadError], Any]] = None,
) -> InvoiceService:
    """Wire settings, logging and the JSON file repository into an InvoiceService."""
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    repo = JsonRepository(
        settings.invoices_path,
        entity_name="invoice",
        backup_enabled=settings.backup_enabled,
        backup_keep=settings.backup_keep,
    )
    return InvoiceService(
        repo,
        invoice_prefix=settings.invoice_prefix,
        default_due_days=settings.default_due_days,
        on_load_error=on_load_error,
    )
