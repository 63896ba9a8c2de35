"""
Versioned storage envelopes.

Persisted documents are wrapped as ``{"version": N, "data": ...}``. Reading
an older envelope runs the registered migrations one version at a time; a
payload without an envelope is treated as version 1. A migration that
raises makes ``deserialize`` return ``None`` so callers fall back to their
default state.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

MigrationFn = Callable[[Any], Any]


class VersionedStorage:
    def __init__(
        self, current_version: int, migrations: Mapping[int, MigrationFn] | None = None
    ) -> None:
        self.current_version = current_version
        self.migrations = dict(migrations or {})

    def serialize(self, data: Any) -> dict[str, Any]:
        return {"version": self.current_version, "data": data}

    def deserialize(self, stored: Any) -> Any | None:
        if not stored or not isinstance(stored, dict):
            return None

        if "version" in stored and "data" in stored:
            data = stored["data"]
            version = stored["version"] if isinstance(stored["version"], int) else 1
        else:
            data = stored
            version = 1

        while version < self.current_version:
            next_version = version + 1
            migration = self.migrations.get(next_version)
            if migration is not None:
                try:
                    data = migration(data)
                except Exception:
                    logger.warning(
                        "Migration to version %s failed; using defaults",
                        next_version,
                        exc_info=True,
                    )
                    return None
            version = next_version

        return data


def get_stored_version(stored: Any) -> int:
    if not stored or not isinstance(stored, dict):
        return 0
    version = stored.get("version")
    return version if isinstance(version, int) else 1


def needs_migration(stored: Any, current_version: int) -> bool:
    if not stored or not isinstance(stored, dict):
        return False
    return get_stored_version(stored) < current_version
