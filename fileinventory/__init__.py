"""
File Inventory
==============
Keeps a durable inventory of the files under a set of directory roots.

Features:
- Incremental re-scans: unchanged files keep their stored hash and metadata
- Regex exclusion rules with subtree pruning
- SHA-256 content hashing with a bounded worker pool
- Audio tags (mutagen) and image metadata (Pillow) extraction
- Duplicate detection by content hash
- Human-diffable JSON inventory, written atomically
"""

__version__ = "1.0.0"

from .models import FileRecord, RootConfig, DuplicateGroup, ScanStats, ExtractionStats
from .errors import (
    InventoryError,
    ConfigError,
    StoreUnavailable,
    WalkError,
    ExtractionError,
    PersistError,
)
from .matcher import PathMatcher, should_exclude_dir, should_exclude_file
from .store import InventoryStore
from .user_config import UserConfig, get_user_config
from .scanner import (
    reconcile,
    find_stale,
    scan_root,
    calculate_file_hash,
    extract_audio_tags,
    extract_image_metadata,
    ExtractionPipeline,
    find_duplicate_paths,
    find_exact_duplicates,
)
from .engine import InventoryEngine

__all__ = [
    "FileRecord",
    "RootConfig",
    "DuplicateGroup",
    "ScanStats",
    "ExtractionStats",
    "InventoryError",
    "ConfigError",
    "StoreUnavailable",
    "WalkError",
    "ExtractionError",
    "PersistError",
    "PathMatcher",
    "should_exclude_dir",
    "should_exclude_file",
    "InventoryStore",
    "UserConfig",
    "get_user_config",
    "reconcile",
    "find_stale",
    "scan_root",
    "calculate_file_hash",
    "extract_audio_tags",
    "extract_image_metadata",
    "ExtractionPipeline",
    "find_duplicate_paths",
    "find_exact_duplicates",
    "InventoryEngine",
]
