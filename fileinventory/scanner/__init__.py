"""
Scanner package for File Inventory.

Walks configured roots, reconciles what it finds against the stored
inventory, extracts hashes and metadata for new or changed files, and
groups identical files.

Public API:
- walk: Depth-first directory walk yielding typed events
- reconcile / find_stale: Decide which stored records survive a scan
- scan_root: Scan one configured root
- calculate_file_hash: Streamed SHA-256 of a file
- extract_audio_tags: title/artist/album/year via mutagen
- extract_image_metadata: Stripped EXIF via Pillow
- ExtractionPipeline: Run all extraction stages with a worker pool
- find_duplicate_paths / find_exact_duplicates: Group files by hash
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .walker import EntryKind, WalkEvent, walk
from .diff import reconcile, find_stale
from .reconciler import RootScanner, scan_root
from .hashing import calculate_file_hash
from .tags import extract_audio_tags
from .exif import extract_image_metadata
from .parallel import run_stage
from .pipeline import (
    Stage,
    HASH_STAGE,
    AUDIO_TAG_STAGE,
    IMAGE_METADATA_STAGE,
    DEFAULT_STAGES,
    ExtractionPipeline,
)
from .deduplication import find_duplicate_paths, find_exact_duplicates

from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    # Walking
    'EntryKind',
    'WalkEvent',
    'walk',
    # Reconciliation
    'reconcile',
    'find_stale',
    'RootScanner',
    'scan_root',
    # Extraction
    'calculate_file_hash',
    'extract_audio_tags',
    'extract_image_metadata',
    'run_stage',
    'Stage',
    'HASH_STAGE',
    'AUDIO_TAG_STAGE',
    'IMAGE_METADATA_STAGE',
    'DEFAULT_STAGES',
    'ExtractionPipeline',
    # Duplicate detection
    'find_duplicate_paths',
    'find_exact_duplicates',
    # Feature detection
    'has_heif_support',
]
