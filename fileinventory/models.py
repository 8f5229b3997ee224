"""
Data models for File Inventory.

Contains dataclasses for tracked file records, configured roots, duplicate
groups and per-run statistics.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

# Record status values. Status is per-run and never persisted.
STATUS_NEW = 'new'
STATUS_CHANGED = 'changed'
STATUS_UNCHANGED = 'unchanged'


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


@dataclass
class FileRecord:
    """
    Stores what is known about one tracked file.

    Attributes:
        root_dir: Configured root the file belongs to
        relative_name: Path relative to root_dir
        size: Size in bytes at last scan
        mtime: Modification time in nanoseconds at last scan
        ctime: Status change time in nanoseconds at last scan
        content_hash: Hex digest of the file contents, once hashed
        audio_tags: title/artist/album/year for recognized audio files
        image_metadata: Stripped image/EXIF metadata for recognized images
        status: new, changed or unchanged for the current run (not persisted)
    """
    root_dir: str
    relative_name: str
    size: int = 0
    mtime: int = 0
    ctime: int = 0
    content_hash: Optional[str] = None
    audio_tags: Optional[dict] = None
    image_metadata: Optional[dict] = None
    status: str = field(default=STATUS_NEW, compare=False)

    @property
    def identity(self) -> tuple[str, str]:
        """(root_dir, relative_name), unique within an inventory."""
        return (self.root_dir, self.relative_name)

    @property
    def path(self) -> str:
        """Full path to the file."""
        return os.path.join(self.root_dir, self.relative_name)

    @property
    def extension(self) -> str:
        """Lowercased file extension including the dot."""
        return os.path.splitext(self.relative_name)[1].lower()

    def same_stat(self, other: 'FileRecord') -> bool:
        """True if size, mtime and ctime are all equal."""
        return (
            self.size == other.size
            and self.mtime == other.mtime
            and self.ctime == other.ctime
        )

    def clear_derived(self) -> None:
        """Drop hash and metadata so every stage recomputes them."""
        self.content_hash = None
        self.audio_tags = None
        self.image_metadata = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'root_dir': self.root_dir,
            'relative_name': self.relative_name,
            'size': self.size,
            'mtime': self.mtime,
            'ctime': self.ctime,
            'content_hash': self.content_hash,
            'audio_tags': self.audio_tags,
            'image_metadata': self.image_metadata,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'FileRecord':
        """Create FileRecord from dictionary."""
        return cls(
            root_dir=data['root_dir'],
            relative_name=data['relative_name'],
            size=data['size'],
            mtime=data['mtime'],
            ctime=data['ctime'],
            content_hash=data.get('content_hash'),
            audio_tags=data.get('audio_tags'),
            image_metadata=data.get('image_metadata'),
            status=STATUS_UNCHANGED,
        )


@dataclass
class RootConfig:
    """
    One configured directory to scan.

    Attributes:
        directory: Normalized absolute root path
        enabled: Disabled roots are skipped entirely
        exclude: Regex patterns (root-specific followed by global)
    """
    directory: str
    enabled: bool = True
    exclude: list = field(default_factory=list)


@dataclass
class DuplicateGroup:
    """
    Files sharing one content hash.

    Attributes:
        content_hash: The shared hash
        paths: Full paths in scan-discovery order
        size: Size of each file in bytes
    """
    content_hash: str
    paths: list = field(default_factory=list)
    size: int = 0

    @property
    def file_count(self) -> int:
        """Number of files in this group."""
        return len(self.paths)

    @property
    def potential_savings(self) -> int:
        """Bytes that could be saved by keeping only the first copy."""
        return self.size * max(0, len(self.paths) - 1)

    @property
    def potential_savings_formatted(self) -> str:
        """Human-readable potential savings."""
        return format_size(self.potential_savings)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'content_hash': self.content_hash,
            'size': self.size,
            'file_count': self.file_count,
            'paths': list(self.paths),
            'potential_savings': self.potential_savings,
        }


@dataclass
class ScanStats:
    """Counts gathered while scanning roots."""
    added: int = 0
    changed: int = 0
    unchanged: int = 0
    excluded_files: int = 0
    excluded_dirs: int = 0
    other_entries: int = 0
    removed: int = 0

    @property
    def total_files(self) -> int:
        """Files kept in the inventory this run."""
        return self.added + self.changed + self.unchanged

    def merge(self, other: 'ScanStats') -> None:
        """Add another root's counts into this one."""
        self.added += other.added
        self.changed += other.changed
        self.unchanged += other.unchanged
        self.excluded_files += other.excluded_files
        self.excluded_dirs += other.excluded_dirs
        self.other_entries += other.other_entries
        self.removed += other.removed


@dataclass
class ExtractionStats:
    """Counts for one extraction stage."""
    stage: str
    pending: int = 0
    completed: int = 0
    failed: int = 0
    skipped: int = 0


__all__ = [
    'STATUS_NEW',
    'STATUS_CHANGED',
    'STATUS_UNCHANGED',
    'format_size',
    'FileRecord',
    'RootConfig',
    'DuplicateGroup',
    'ScanStats',
    'ExtractionStats',
]
