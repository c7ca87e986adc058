import json
import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)

MASTER_FILE = "all_registrations.json"


class StorageError(Exception):
    pass


class RegistrationStore:
    """Registrations kept as JSON files in one directory.

    Each submission is written to ``registration_<id>.json`` and appended to
    ``all_registrations.json``. Both files are replaced atomically, so a crash
    never leaves half a file behind. The append is still a plain
    read-modify-write without any lock: two concurrent saves can drop one of
    the records from the master file (the individual files are kept).
    """

    def __init__(self, directory=None):
        self.directory = Path(directory or settings.REGISTRATIONS_DIR)

    @property
    def master_path(self) -> Path:
        return self.directory / MASTER_FILE

    def record_path(self, record_id: str) -> Path:
        return self.directory / f"registration_{record_id}.json"

    def _read_master(self) -> list:
        if not self.master_path.exists():
            return []
        with open(self.master_path, encoding="utf-8") as fh:
            registrations = json.load(fh)
        if not isinstance(registrations, list):
            raise ValueError(f"{self.master_path} does not hold a list")
        return registrations

    def _write(self, path: Path, data):
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False, default=str)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _next_id(self) -> str:
        # epoch milliseconds, bumped past any id already on disk
        record_id = int(time.time() * 1000)
        while self.record_path(str(record_id)).exists():
            record_id += 1
        return str(record_id)

    def save(self, data: dict) -> dict:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            registrations = self._read_master()
            record = {
                **data,
                "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                "id": self._next_id(),
            }
            record_path = self.record_path(record["id"])
            self._write(record_path, record)
            registrations.append(record)
            try:
                self._write(self.master_path, registrations)
            except (OSError, ValueError):
                record_path.unlink(missing_ok=True)
                raise
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not save registration: {e}") from e

        logger.info("Registration saved: %s - %s", record.get("name"), record.get("eventType"))
        return record

    def all(self) -> list:
        try:
            return self._read_master()
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read registrations: {e}") from e
