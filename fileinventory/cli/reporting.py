"""
Report formatting and display for the CLI interface.

Provides functions to format and print inventory results in a
human-readable format.
"""

from __future__ import annotations

from ..models import DuplicateGroup, ExtractionStats, FileRecord, ScanStats, format_size


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def _print_duplicate_groups(groups: list[DuplicateGroup]) -> None:
    if not groups:
        return

    _print_section_header("DUPLICATE FILES (identical content)")
    for i, group in enumerate(groups, 1):
        print(f"\nGroup {i} ({group.file_count} files, {format_size(group.size)} each):")
        print(f"  hash: {group.content_hash}")
        for path in group.paths:
            print(f"  {path}")


def _print_removed(stale: list[FileRecord]) -> None:
    if not stale:
        return

    _print_section_header("REMOVED (no longer on disk)")
    for record in stale:
        print(f"  {record.path}")


def print_inventory_report(
    scan_stats: ScanStats,
    extraction_stats: list[ExtractionStats],
    duplicates: list[DuplicateGroup],
    stale: list[FileRecord],
) -> None:
    """
    Print a report of the run.

    Notes:
        - Prints to stdout with formatted sections
        - Shows scan and extraction statistics at top
        - Duplicate groups list paths in discovery order
    """
    print("\n" + "=" * 70)
    print("FILE INVENTORY REPORT")
    print("=" * 70)

    print(f"\nFiles: {scan_stats.total_files:,} "
          f"({scan_stats.added:,} new, {scan_stats.changed:,} changed, "
          f"{scan_stats.unchanged:,} unchanged)")
    print(f"Removed: {scan_stats.removed:,}")
    print(f"Excluded: {scan_stats.excluded_files:,} files, "
          f"{scan_stats.excluded_dirs:,} directories")
    if scan_stats.other_entries:
        print(f"Skipped non-regular entries: {scan_stats.other_entries:,}")

    for stats in extraction_stats:
        line = f"{stats.stage}: {stats.completed:,} extracted, {stats.skipped:,} reused"
        if stats.failed:
            line += f", {stats.failed:,} failed"
        print(line)

    duplicate_files = sum(group.file_count - 1 for group in duplicates)
    print(f"\nDuplicates found: {duplicate_files:,} files in {len(duplicates):,} groups")

    _print_duplicate_groups(duplicates)
    _print_removed(stale)

    total_waste = sum(group.potential_savings for group in duplicates)
    print("\n" + "=" * 70)
    print(f"Total space recoverable: {format_size(total_waste)}")
    print("=" * 70)


__all__ = ['print_inventory_report']
