"""JSON-file-backed ledger store."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from club_attendance.adapters.ledger_document import LedgerDocument
from club_attendance.domain.models import Ledger
from club_attendance.domain.seed import seed_ledger
from club_attendance.services.ledger import LedgerStore

STORAGE_KEY = "obecnosc_app_data_v2"

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileLedgerStore(LedgerStore):
    """Stores the ledger snapshot under a fixed key of a JSON file."""

    path: Path
    storage_key: str = STORAGE_KEY

    def load(self) -> Ledger:
        """Return the saved ledger, or the seed ledger when none is readable."""
        try:
            entries = self._read_entries()
        except (OSError, ValueError):
            _logger.warning("Failed to load ledger from %s", self.path, exc_info=True)
            return seed_ledger()
        payload = entries.get(self.storage_key)
        if payload is None:
            return seed_ledger()
        try:
            document = LedgerDocument.model_validate(payload)
        except ValidationError:
            _logger.warning("Stored ledger is invalid: key=%s", self.storage_key)
            return seed_ledger()
        return document.to_ledger()

    def save(self, ledger: Ledger) -> bool:
        """Write the ledger, keeping other keys of the file intact."""
        try:
            entries = self._read_entries()
        except (OSError, ValueError):
            entries = {}
        entries[self.storage_key] = LedgerDocument.from_ledger(ledger).to_json_dict()
        try:
            self._write_entries(entries)
        except OSError:
            _logger.exception("Failed to save ledger to %s", self.path)
            return False
        return True

    def _read_entries(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Ledger file must contain a JSON object")
        return data

    def _write_entries(self, entries: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(entries, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
