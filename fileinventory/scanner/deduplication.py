"""
Deduplication module for the scanner package.

Groups records by content hash to find byte-identical files.
"""

from __future__ import annotations

from typing import Iterable

from ..models import DuplicateGroup, FileRecord


def find_duplicate_paths(records: Iterable[FileRecord]) -> dict[str, list[str]]:
    """
    Map each shared content hash to the paths that have it.

    Records without a hash and empty files are ignored. The first record
    seen for a hash seeds its list; a second one promotes the hash into the
    result. Paths keep the order the records were given in, and hashes
    appear in the order they were promoted.

    Args:
        records: Records in scan-discovery order

    Returns:
        {content_hash: [path, ...]} for hashes shared by 2+ files
    """
    seen: dict[str, list[str]] = {}
    duplicates: dict[str, list[str]] = {}

    for record in records:
        if not record.content_hash or record.size == 0:
            continue
        paths = seen.get(record.content_hash)
        if paths is None:
            seen[record.content_hash] = [record.path]
            continue
        paths.append(record.path)
        if record.content_hash not in duplicates:
            duplicates[record.content_hash] = paths

    return duplicates


def find_exact_duplicates(records: Iterable[FileRecord]) -> list[DuplicateGroup]:
    """
    Find byte-identical files.

    Args:
        records: Records in scan-discovery order

    Returns:
        List of DuplicateGroup objects, in promotion order
    """
    records = list(records)
    sizes = {
        record.content_hash: record.size
        for record in records
        if record.content_hash and record.size > 0
    }
    return [
        DuplicateGroup(content_hash=content_hash, paths=paths, size=sizes[content_hash])
        for content_hash, paths in find_duplicate_paths(records).items()
    ]


__all__ = ['find_duplicate_paths', 'find_exact_duplicates']
