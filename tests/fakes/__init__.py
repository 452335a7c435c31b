"""Shared test doubles: re-export memory backends."""

from __future__ import annotations

from assetledger.persistence.memory_backend import (
    MemoryAuditStore,
    MemoryCacheBackend,
    MemoryDirectory,
    MemoryRecordStore,
)

__all__ = ["MemoryAuditStore", "MemoryCacheBackend", "MemoryDirectory", "MemoryRecordStore"]
