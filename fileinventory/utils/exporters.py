"""
Export functionality for File Inventory.

Provides functions to export duplicate detection results to TXT, CSV and
JSON files.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import TextIO

from ..models import DuplicateGroup, format_size

EXPORT_FORMATS = ('txt', 'csv', 'json')


def _export_txt(groups: list[DuplicateGroup], file_handle: TextIO) -> None:
    file_handle.write("DUPLICATE FILE REPORT\n")
    file_handle.write("=" * 70 + "\n")
    for i, group in enumerate(groups, 1):
        file_handle.write(
            f"\nGroup {i}: {group.content_hash} "
            f"({group.file_count} files, {format_size(group.size)} each)\n"
        )
        for path in group.paths:
            file_handle.write(f"  {path}\n")


def _export_csv(groups: list[DuplicateGroup], file_handle: TextIO) -> None:
    writer = csv.writer(file_handle)
    writer.writerow(['group', 'content_hash', 'size', 'path'])
    for i, group in enumerate(groups, 1):
        for path in group.paths:
            writer.writerow([i, group.content_hash, group.size, path])


def _export_json(groups: list[DuplicateGroup], file_handle: TextIO) -> None:
    json.dump({'duplicates': [group.to_dict() for group in groups]}, file_handle, indent=2)
    file_handle.write("\n")


def export_results(
    groups: list[DuplicateGroup],
    output_path: str | Path,
    format: str = 'txt',
) -> None:
    """
    Export duplicate groups to a file.

    Args:
        groups: Duplicate groups to export
        output_path: File to write
        format: One of 'txt', 'csv', 'json'

    Raises:
        ValueError: Unknown format
        OSError: The file could not be written
    """
    writers = {'txt': _export_txt, 'csv': _export_csv, 'json': _export_json}
    if format not in writers:
        raise ValueError(f"Unknown export format: {format}")

    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        writers[format](groups, f)


__all__ = ['EXPORT_FORMATS', 'export_results']
