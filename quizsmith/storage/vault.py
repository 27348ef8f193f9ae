"""Vault storage - Persists the quiz library.

Encryption at rest is not handled here; stores keep the plaintext vault.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from quizsmith.errors import VaultStoreError
from quizsmith.models.quiz import VaultData

logger = logging.getLogger(__name__)


class VaultStore(Protocol):
    """Durable get/set of the whole vault."""

    async def load(self) -> VaultData | None:
        """Return the stored vault, or None when nothing is stored yet."""
        ...

    async def save(self, vault: VaultData) -> None:
        """Store the vault; a later load must observe this write."""
        ...


class InMemoryVaultStore:
    """Vault store that keeps a serialized snapshot in memory."""

    def __init__(self, vault: VaultData | None = None):
        self._data: str | None = vault.model_dump_json() if vault is not None else None
        self.save_count = 0

    async def load(self) -> VaultData | None:
        if self._data is None:
            return None
        return VaultData.model_validate_json(self._data)

    async def save(self, vault: VaultData) -> None:
        self._data = vault.model_dump_json()
        self.save_count += 1


class JsonFileVaultStore:
    """Vault store backed by a JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> VaultData | None:
        if not self.path.exists():
            return None
        try:
            return VaultData.model_validate_json(self.path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise VaultStoreError(f"Vault file {self.path} is unreadable: {e}") from e

    def _write(self, vault: VaultData) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(vault.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    async def load(self) -> VaultData | None:
        return await asyncio.to_thread(self._read)

    async def save(self, vault: VaultData) -> None:
        await asyncio.to_thread(self._write, vault)
        logger.debug("Saved vault to %s (%d quizzes)", self.path, len(vault.quizzes))
