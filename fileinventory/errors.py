"""
Exception types for File Inventory.

Every error carries the path and operation it concerns plus the underlying
cause, so a failure can be diagnosed from its message alone.
"""

from __future__ import annotations

from typing import Optional


class InventoryError(Exception):
    """Base class for all inventory errors."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.operation = operation
        self.cause = cause

    def __str__(self) -> str:
        parts = [self.message]
        if self.operation:
            parts.append(f"operation={self.operation}")
        if self.path:
            parts.append(f"path={self.path}")
        if self.cause is not None:
            parts.append(f"cause={type(self.cause).__name__}: {self.cause}")
        return " | ".join(parts)


class ConfigError(InventoryError):
    """Configuration is missing, malformed or contains duplicate roots."""


class StoreUnavailable(InventoryError):
    """The persisted inventory exists but cannot be parsed."""


class WalkError(InventoryError):
    """Traversal of a root directory failed."""


class ExtractionError(InventoryError):
    """Hashing or metadata extraction failed for a single file."""


class PersistError(InventoryError):
    """Writing the inventory back to disk failed."""


__all__ = [
    'InventoryError',
    'ConfigError',
    'StoreUnavailable',
    'WalkError',
    'ExtractionError',
    'PersistError',
]
