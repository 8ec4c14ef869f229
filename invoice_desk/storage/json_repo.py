from __future__ import annotations

import glob
import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from invoice_desk.storage.repo import (
    PersistenceReadError,
    PersistenceWriteError,
    Repository,
    dumps_records,
    loads_records,
)

logger = logging.getLogger(__name__)


class JsonRepository(Repository):
    """
    One JSON file holding a whole collection.
    - Atomic writes (temp file + os.replace)
    - Skips the write when content is unchanged (less noise, fewer .bak)
    - Rotating backups (backup_enabled, backup_keep)
    - An unparsable file is copied to <name>.corrupt.json before failing
    """

    def __init__(
        self,
        filepath: Union[str, Path],
        entity_name: str = "invoice",
        *,
        backup_enabled: bool = True,
        backup_keep: int = 5,
    ) -> None:
        self.filepath = Path(filepath)
        self.entity_name = entity_name
        self._lock = threading.Lock()
        self.backup_enabled = backup_enabled
        self.backup_keep = max(0, int(backup_keep))

        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    # ---------------- Read ---------------- #

    def load(self) -> Optional[List[Dict[str, Any]]]:
        try:
            raw = self.filepath.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceReadError(f"Cannot read {self.filepath}: {exc}") from exc
        try:
            return loads_records(raw)
        except PersistenceReadError:
            self._keep_corrupt_copy()
            raise

    def _keep_corrupt_copy(self) -> None:
        backup = self.filepath.with_suffix(".corrupt.json")
        try:
            shutil.copy2(self.filepath, backup)
        except OSError as exc:
            logger.warning("Could not copy corrupt %s file to %s: %s", self.entity_name, backup, exc)

    # ---------------- Write ---------------- #

    def _rotate_backups(self) -> None:
        if not self.backup_enabled or self.backup_keep <= 0:
            return
        pattern = str(self.filepath.with_suffix(".*.bak.json"))
        files = sorted(glob.glob(pattern))
        # keep the most recent ones
        if len(files) > self.backup_keep:
            for old in files[: len(files) - self.backup_keep]:
                try:
                    Path(old).unlink(missing_ok=True)
                    logger.debug("Removed old backup %s", old)
                except OSError as exc:
                    logger.warning("Could not remove old backup %s: %s", old, exc)

    def _backup(self) -> None:
        ts = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        backup = self.filepath.with_suffix(f".{ts}.bak.json")
        try:
            shutil.copy2(self.filepath, backup)
        except OSError as exc:
            logger.warning("Could not back up %s to %s: %s", self.filepath, backup, exc)
            return
        self._rotate_backups()

    def save(self, records: List[Dict[str, Any]]) -> None:
        with self._lock:
            new_dump = dumps_records(records)

            if self.filepath.exists():
                try:
                    if self.filepath.read_text(encoding="utf-8") == new_dump:
                        logger.debug("%s unchanged, write skipped", self.filepath)
                        return
                except (OSError, UnicodeDecodeError):
                    pass  # unreadable current file: overwrite it

                if self.backup_enabled:
                    self._backup()

            tmp_name = None
            try:
                fd, tmp_name = tempfile.mkstemp(
                    dir=str(self.filepath.parent), prefix=self.filepath.name, suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(new_dump)
                os.replace(tmp_name, self.filepath)
            except OSError as exc:
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise PersistenceWriteError(f"Cannot write {self.filepath}: {exc}") from exc
