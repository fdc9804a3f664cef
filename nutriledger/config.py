"""Configuration - Settings read from environment variables."""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from .shell.firestore_client import FirestoreConfig, FirestoreLedgerStore
from .shell.storage import InMemoryStore, JsonFileStore, SnapshotStore


logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("memory", "file", "firestore")


@dataclass
class LedgerConfig:
    """Runtime configuration for the ledger service.

    Attributes:
        storage_backend: One of "memory", "file" or "firestore"
        ledger_file: Path of the JSON snapshot for the "file" backend
        firestore: Firestore settings for the "firestore" backend
        preview_count: Recent entries shown on the dashboard
        host: Interface uvicorn binds to
        port: Port uvicorn listens on
        cors_origins: Browser origins allowed to call the API
    """

    storage_backend: str = "file"
    ledger_file: str = "nutriledger.json"
    firestore: FirestoreConfig = field(default_factory=FirestoreConfig)
    preview_count: int = 3
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, "
                f"got {self.storage_backend!r}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LedgerConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            storage_backend=env.get("STORAGE_BACKEND", "file"),
            ledger_file=env.get("LEDGER_FILE", "nutriledger.json"),
            firestore=FirestoreConfig(
                project_id=env.get("FIRESTORE_PROJECT") or None,
                database=env.get("FIRESTORE_DATABASE", "nutriledger"),
                ledger_id=env.get("LEDGER_ID", "default"),
                timeout=float(env.get("PERSISTENCE_TIMEOUT", 10)),
            ),
            preview_count=int(env.get("PREVIEW_COUNT", 3)),
            host=env.get("HOST", "0.0.0.0"),
            port=int(env.get("PORT", 8080)),
            cors_origins=[
                o.strip() for o in env.get("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()
            ],
        )

    def create_store(self) -> SnapshotStore:
        """Instantiate the configured persistence adapter."""
        logger.info("Using %s storage backend", self.storage_backend)
        if self.storage_backend == "memory":
            return InMemoryStore()
        if self.storage_backend == "firestore":
            return FirestoreLedgerStore(self.firestore)
        return JsonFileStore(self.ledger_file)
