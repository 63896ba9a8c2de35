"""Local object store for synthesized audio, served under ``/media``."""
from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class AudioStore:
    def __init__(self, root: Path, public_base_url: str, mount_path: str = "/media") -> None:
        self.root = root
        self.public_base_url = public_base_url.rstrip("/")
        self.mount_path = mount_path

    def _resolve(self, object_path: str) -> Path:
        return self.root / object_path

    def exists(self, object_path: str) -> bool:
        return self._resolve(object_path).is_file()

    def public_url(self, object_path: str) -> str:
        return f"{self.public_base_url}{self.mount_path}/{object_path}"

    def _write(self, object_path: str, data: bytes) -> None:
        target = self._resolve(object_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(f"{target.suffix}.{os.getpid()}.tmp")
        tmp.write_bytes(data)
        # Concurrent writers of the same key race here; the last rename wins
        os.replace(tmp, target)

    async def save(self, object_path: str, data: bytes) -> None:
        await asyncio.to_thread(self._write, object_path, data)
        logger.debug("Stored %d bytes at %s", len(data), object_path)
