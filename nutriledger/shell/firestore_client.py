"""Firestore Client - Persistence for ledger snapshots.

This module handles all Firestore I/O for the ledger.
All I/O is contained here; business logic is in the core module.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore
from pydantic import ValidationError

from ..core.errors import PersistenceError
from ..core.models import LedgerSnapshot


logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    """Configuration for Firestore client.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        ledger_id: Document ID holding this ledger's snapshot
        timeout: Seconds to wait for a read or write before failing
    """

    project_id: str | None = None
    database: str | None = None
    ledger_id: str = "default"
    timeout: float = 10.0


class FirestoreLedgerStore:
    """Snapshot store backed by a single Firestore document.

    Document structure:
        ledgers/{ledger_id}: { profile, day_key, entries: [...], updated_at }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore store.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _ledger_ref(self) -> firestore.DocumentReference:
        """Get reference to the ledger document."""
        return self.client.collection("ledgers").document(self.config.ledger_id)

    def load(self) -> LedgerSnapshot | None:
        """Fetch the stored snapshot.

        Returns:
            LedgerSnapshot if found, None otherwise

        Raises:
            PersistenceError: If Firestore is unreachable or the document is corrupt
        """
        logger.debug("Fetching ledger: %s", self.config.ledger_id)
        try:
            doc = self._ledger_ref().get(timeout=self.config.timeout)
        except GoogleAPIError as e:
            logger.error("Failed to fetch ledger: %s", str(e))
            raise PersistenceError(f"Failed to fetch ledger: {e}") from e

        if not doc.exists:
            return None

        data = doc.to_dict()
        data.pop("updated_at", None)
        try:
            return LedgerSnapshot.model_validate(data)
        except ValidationError as e:
            logger.error("Corrupt ledger document: %s", self.config.ledger_id)
            raise PersistenceError("Corrupt ledger document") from e

    def save(self, snapshot: LedgerSnapshot) -> None:
        """Save a snapshot, replacing the stored document.

        Raises:
            PersistenceError: If the write fails or times out
        """
        logger.info(
            "Saving ledger %s for %s (%d entries)",
            self.config.ledger_id,
            snapshot.day_key,
            len(snapshot.entries),
        )
        data = snapshot.model_dump(mode="json")
        data["updated_at"] = datetime.now(timezone.utc)
        try:
            self._ledger_ref().set(data, timeout=self.config.timeout)
        except GoogleAPIError as e:
            logger.error("Failed to save ledger: %s", str(e))
            raise PersistenceError(f"Failed to save ledger: {e}") from e
