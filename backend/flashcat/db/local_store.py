"""
Named, versioned documents kept in the ``local_store`` table.

Each document is written as a ``{"version", "data"}`` envelope and read back
through a :class:`VersionedStorage`, so older payloads are migrated on load.
"""
from __future__ import annotations

import logging
from typing import Any

import aiosqlite

from flashcat.db.sqlite import load_document, save_document
from flashcat.services.store_versioning import VersionedStorage

logger = logging.getLogger(__name__)


class LocalStore:
    def __init__(self, name: str, storage: VersionedStorage) -> None:
        self.name = name
        self.storage = storage

    async def load(self, db: aiosqlite.Connection) -> Any | None:
        stored = await load_document(db, self.name)
        if stored is None:
            return None
        data = self.storage.deserialize(stored)
        if data is None:
            logger.warning("Discarding unreadable %s document", self.name)
        return data

    async def save(self, db: aiosqlite.Connection, data: Any) -> None:
        await save_document(db, self.name, self.storage.serialize(data))
