"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from assetledger.core.protocols import (
    IAuditStore,
    ICacheBackend,
    IDirectory,
    IRecordStore,
)

__all__ = ["IAuditStore", "ICacheBackend", "IDirectory", "IRecordStore"]
