"""Persistence for the quiz library."""

from .vault import InMemoryVaultStore, JsonFileVaultStore, VaultStore

__all__ = ["VaultStore", "InMemoryVaultStore", "JsonFileVaultStore"]
