"""
Scan reconciler.

Walks one configured root and turns every regular file into the record to
keep for this run, reusing stored records whose stat is unchanged.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

from ..errors import WalkError
from ..matcher import PathMatcher
from ..models import FileRecord, RootConfig, ScanStats, STATUS_CHANGED, STATUS_NEW
from .diff import reconcile
from .walker import EntryKind, WalkEvent, walk

logger = logging.getLogger(__name__)

_SPECIAL_KINDS = {
    EntryKind.SYMLINK: 'symlink',
    EntryKind.BLOCK_DEVICE: 'block device',
    EntryKind.CHAR_DEVICE: 'character device',
    EntryKind.FIFO: 'fifo',
    EntryKind.SOCKET: 'socket',
    EntryKind.OTHER: 'special file',
}


class RootScanner:
    """
    Scans a single root against the stored inventory.

    Usage:
        scanner = RootScanner(root, prior)
        records = scanner.scan()
        scanner.stats.added, scanner.stats.unchanged, ...
    """

    def __init__(
        self,
        root: RootConfig,
        prior: dict[tuple[str, str], FileRecord],
        skip_file: Optional[Callable[[str], bool]] = None,
    ):
        self.root = root
        self.prior = prior
        self.skip_file = skip_file
        self.matcher = PathMatcher(root.exclude)
        self.stats = ScanStats()
        self.records: list[FileRecord] = []

    def _relative(self, path: str) -> str:
        return os.path.relpath(path, self.root.directory)

    def _filter_dir(self, path: str, st: os.stat_result) -> bool:
        if self.matcher.exclude_dir(path):
            logger.debug(f"Skipping excluded directory {self._relative(path)} and children")
            self.stats.excluded_dirs += 1
            return False
        return True

    def _on_directory(self, event: WalkEvent) -> None:
        logger.debug(f"Directory: {self._relative(event.path)}")

    def _on_file(self, event: WalkEvent) -> None:
        relative_name = self._relative(event.path)
        if self.skip_file is not None and self.skip_file(event.path):
            logger.debug(f"Skipping inventory file: {relative_name}")
            self.stats.excluded_files += 1
            return
        if self.matcher.exclude_file(relative_name):
            logger.debug(f"Excluded file: {relative_name}")
            self.stats.excluded_files += 1
            return

        st = event.stat
        observed = FileRecord(
            root_dir=self.root.directory,
            relative_name=relative_name,
            size=st.st_size,
            mtime=st.st_mtime_ns,
            ctime=st.st_ctime_ns,
        )
        record = reconcile(observed, self.prior.get(observed.identity))

        if record.status == STATUS_NEW:
            self.stats.added += 1
        elif record.status == STATUS_CHANGED:
            self.stats.changed += 1
        else:
            self.stats.unchanged += 1
        logger.debug(f"File ({record.status}): {relative_name}")
        self.records.append(record)

    def _on_special(self, event: WalkEvent) -> None:
        self.stats.other_entries += 1
        logger.debug(f"Skipping {_SPECIAL_KINDS[event.kind]}: {self._relative(event.path)}")

    def _on_error(self, event: WalkEvent) -> None:
        raise WalkError(
            f"Walk of root '{self.root.directory}' failed",
            path=event.path,
            operation='walk',
            cause=event.error,
        )

    def _on_end(self, event: WalkEvent) -> None:
        logger.debug(f"All files traversed under {self.root.directory}")

    def scan(self) -> list[FileRecord]:
        """
        Walk the root and reconcile every file found.

        Returns:
            Records to keep, in discovery order

        Raises:
            WalkError: Any traversal error; the root's records are discarded
        """
        handlers = {
            EntryKind.DIRECTORY: self._on_directory,
            EntryKind.FILE: self._on_file,
            EntryKind.ERROR: self._on_error,
            EntryKind.END: self._on_end,
        }
        logger.info(f"Scanning {self.root.directory}...")
        for event in walk(self.root.directory, filter_dir=self._filter_dir):
            handler = handlers.get(event.kind, self._on_special)
            handler(event)
        return self.records


def scan_root(
    root: RootConfig,
    prior: dict[tuple[str, str], FileRecord],
    stats: Optional[ScanStats] = None,
    skip_file: Optional[Callable[[str], bool]] = None,
) -> list[FileRecord]:
    """
    Scan one root and return the records to keep.

    Args:
        root: Root to walk
        prior: Stored records keyed by identity
        stats: Optional ScanStats to accumulate this root's counts into
        skip_file: Optional predicate on absolute paths; matching files are
            counted as excluded and never recorded

    Raises:
        WalkError: The walk failed
    """
    scanner = RootScanner(root, prior, skip_file)
    records = scanner.scan()
    if stats is not None:
        stats.merge(scanner.stats)
    return records


__all__ = ['RootScanner', 'scan_root']
