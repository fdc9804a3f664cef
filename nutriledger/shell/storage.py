"""Snapshot Storage - Persistence adapters for ledger snapshots.

All disk I/O for the local backends is contained here; the Firestore backend
lives in firestore_client.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from ..core.errors import PersistenceError
from ..core.models import LedgerSnapshot


logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    """Durable key-value medium holding one ledger snapshot."""

    def load(self) -> Optional[LedgerSnapshot]:
        """Return the stored snapshot, or None if nothing was saved yet.

        Raises:
            PersistenceError: If the medium cannot be read
        """
        ...

    def save(self, snapshot: LedgerSnapshot) -> None:
        """Store a snapshot, replacing the previous one.

        Raises:
            PersistenceError: If the write fails
        """
        ...


class InMemoryStore:
    """Process-local store; contents are lost on exit.

    ``fail_saves`` makes every save raise, to exercise failure paths.
    """

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None) -> None:
        self._data: Optional[str] = snapshot.model_dump_json() if snapshot else None
        self.fail_saves = False
        self.save_count = 0

    def load(self) -> Optional[LedgerSnapshot]:
        if self._data is None:
            return None
        return LedgerSnapshot.model_validate_json(self._data)

    def save(self, snapshot: LedgerSnapshot) -> None:
        if self.fail_saves:
            raise PersistenceError("In-memory store is configured to fail")
        self._data = snapshot.model_dump_json()
        self.save_count += 1


class JsonFileStore:
    """Store a snapshot as a single JSON document on disk.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash never leaves a half-written snapshot.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[LedgerSnapshot]:
        logger.debug("Loading snapshot from %s", self.path)
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("Failed to read snapshot: %s", str(e))
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e

        try:
            return LedgerSnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Corrupt snapshot in %s", self.path)
            raise PersistenceError(f"Corrupt snapshot in {self.path}") from e

    def save(self, snapshot: LedgerSnapshot) -> None:
        logger.debug("Saving snapshot to %s (%d entries)", self.path, len(snapshot.entries))
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json(indent=2))
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error("Failed to save snapshot: %s", str(e))
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e
