from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

from signdesk.core.exceptions import NotFoundError


class DocumentStorage(Protocol):
    async def read(self, file_path: str) -> bytes:
        ...


class LocalDocumentStorage:
    """Stored documents as files below one root directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def _resolve(self, file_path: str) -> Path:
        candidate = (self.root / file_path.lstrip("/")).resolve()
        if not candidate.is_relative_to(self.root):
            raise NotFoundError("Failed to download document")
        return candidate

    async def read(self, file_path: str) -> bytes:
        path = self._resolve(file_path)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise NotFoundError("Failed to download document") from exc
