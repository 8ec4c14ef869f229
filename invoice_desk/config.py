from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from invoice_desk.models.invoice import DEFAULT_DUE_DAYS
from invoice_desk.services.numbering import DEFAULT_PREFIX

logger = logging.getLogger(__name__)

# --- Base paths ---
# per-user default; INVOICE_DESK_DATA_DIR overrides it
DATA_DIR = Path.home() / ".local" / "share" / "invoice-desk"
SETTINGS_FILENAME = "settings.json"

ENV_DATA_DIR = "INVOICE_DESK_DATA_DIR"
ENV_LOG_LEVEL = "INVOICE_DESK_LOG_LEVEL"
ENV_INVOICE_PREFIX = "INVOICE_DESK_INVOICE_PREFIX"


class Settings(BaseModel):
    data_dir: Path = DATA_DIR
    invoices_filename: str = "invoices.json"
    invoice_prefix: str = DEFAULT_PREFIX
    default_due_days: int = Field(DEFAULT_DUE_DAYS, ge=0)
    backup_enabled: bool = True
    backup_keep: int = Field(5, ge=0)
    log_level: str = "INFO"

    @property
    def invoices_path(self) -> Path:
        return self.data_dir / self.invoices_filename


def _load_json(path: os.PathLike | str):
    p = Path(path)
    if not p.exists():
        return None
    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", p, exc)
        return None


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name)
    return value if isinstance(value, dict) else {}


def load_settings(path: Optional[os.PathLike | str] = None) -> Settings:
    """
    Settings from <data_dir>/settings.json, then environment overrides:
    - INVOICE_DESK_DATA_DIR
    - INVOICE_DESK_LOG_LEVEL
    - INVOICE_DESK_INVOICE_PREFIX
    """
    data_dir = Path(os.environ.get(ENV_DATA_DIR) or DATA_DIR)
    settings_path = Path(path) if path else data_dir / SETTINGS_FILENAME

    raw = _load_json(settings_path)
    if not isinstance(raw, dict):
        raw = {}

    numbering = _section(raw, "numbering")
    invoices = _section(raw, "invoices")
    storage = _section(raw, "storage")
    logging_conf = _section(raw, "logging")

    values: Dict[str, Any] = {"data_dir": data_dir}
    if "invoice_prefix" in numbering:
        values["invoice_prefix"] = numbering["invoice_prefix"]
    if "default_due_days" in invoices:
        values["default_due_days"] = invoices["default_due_days"]
    if "filename" in storage:
        values["invoices_filename"] = storage["filename"]
    if "backup_enabled" in storage:
        values["backup_enabled"] = storage["backup_enabled"]
    if "backup_keep" in storage:
        values["backup_keep"] = storage["backup_keep"]
    if "level" in logging_conf:
        values["log_level"] = logging_conf["level"]

    if os.environ.get(ENV_LOG_LEVEL):
        values["log_level"] = os.environ[ENV_LOG_LEVEL]
    if os.environ.get(ENV_INVOICE_PREFIX):
        values["invoice_prefix"] = os.environ[ENV_INVOICE_PREFIX]

    try:
        return Settings(**values)
    except ValidationError as exc:
        logger.warning("Invalid settings in %s, using defaults: %s", settings_path, exc)
        return Settings(data_dir=data_dir)
