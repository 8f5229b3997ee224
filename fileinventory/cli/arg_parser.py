"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
file inventory command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..utils.exporters import EXPORT_FORMATS


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog='fileinventory',
        description='Build an incremental inventory of files and report duplicates',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
      Scan all enabled roots from ~/.fileinventory/config.json

  %(prog)s --config nas.json --inventory nas-inventory.json
      Use a specific config and inventory file

  %(prog)s --force-exif
      Re-read image metadata for every image, even unchanged ones

  %(prog)s --dry-run --export dupes.csv --export-format csv
      Report duplicates to a CSV file without saving the inventory
        """
    )

    parser.add_argument(
        '-c', '--config',
        type=Path,
        default=None,
        help='Config file. Default: $FILEINVENTORY_CONFIG or ~/.fileinventory/config.json'
    )

    parser.add_argument(
        '-i', '--inventory',
        type=Path,
        default=None,
        help='Inventory file (overrides the config file)'
    )

    parser.add_argument(
        '-w', '--workers',
        type=int,
        default=None,
        help='Number of parallel workers per extraction stage'
    )

    # Force-recompute flags, one per stage
    parser.add_argument(
        '--force-hash',
        action='store_true',
        help='Re-hash every file'
    )
    parser.add_argument(
        '--force-tags',
        action='store_true',
        help='Re-read audio tags for every audio file'
    )
    parser.add_argument(
        '--force-exif',
        action='store_true',
        help='Re-read metadata for every image file'
    )
    parser.add_argument(
        '--force-all',
        action='store_true',
        help='Recompute everything'
    )

    parser.add_argument(
        '-n', '--dry-run', '--no-save',
        action='store_true',
        dest='dry_run',
        help='Do not save the inventory'
    )

    # Export options
    parser.add_argument(
        '-e', '--export',
        type=Path,
        help='Export duplicate report to file'
    )

    parser.add_argument(
        '--export-format',
        choices=list(EXPORT_FORMATS),
        default='txt',
        help='Export format. Default: txt'
    )

    # Output options
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output (traces every walked entry)'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Examples:
        >>> args = parse_arguments(['--config', 'nas.json', '--force-hash'])
        >>> args.force_hash
        True
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
