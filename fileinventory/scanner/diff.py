"""
Reconciliation of freshly observed files against the stored inventory.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..models import FileRecord, STATUS_CHANGED, STATUS_NEW, STATUS_UNCHANGED


def reconcile(observed: FileRecord, prior: Optional[FileRecord]) -> FileRecord:
    """
    Decide which record to keep for an observed file.

    Args:
        observed: Record built from the current stat() of the file
        prior: Stored record with the same identity, if any

    Returns:
        `prior` itself when size, mtime and ctime all match (hash and
        metadata carried over), otherwise `observed` with derived fields
        cleared and status set to new or changed.
    """
    if prior is None:
        observed.clear_derived()
        observed.status = STATUS_NEW
        return observed

    if observed.same_stat(prior):
        prior.status = STATUS_UNCHANGED
        return prior

    observed.clear_derived()
    observed.status = STATUS_CHANGED
    return observed


def find_stale(
    prior: dict[tuple[str, str], FileRecord],
    seen: Iterable[tuple[str, str]],
) -> list[FileRecord]:
    """Stored records whose identity was not observed this run, in store order."""
    seen = set(seen)
    return [record for identity, record in prior.items() if identity not in seen]


__all__ = ['reconcile', 'find_stale']
