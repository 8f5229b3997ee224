"""
Inventory engine.

Owns all state for one run (stored records, the records kept this run,
stale records, duplicate groups and statistics) and drives the phases:
load -> scan -> extract -> detect -> persist. Any fatal error leaves the
store on disk untouched.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import DuplicateGroup, ExtractionStats, FileRecord, RootConfig, ScanStats
from .scanner import ExtractionPipeline, find_exact_duplicates, find_stale, scan_root
from .store import InventoryStore

logger = logging.getLogger(__name__)


class InventoryEngine:
    """
    Runs the incremental inventory for a set of roots.

    Usage:
        engine = InventoryEngine(roots, InventoryStore(path))
        engine.run()
        engine.duplicates, engine.stale, engine.scan_stats
    """

    def __init__(
        self,
        roots: list[RootConfig],
        store: InventoryStore,
        pipeline: Optional[ExtractionPipeline] = None,
    ):
        self.roots = list(roots)
        self.store = store
        self.pipeline = pipeline or ExtractionPipeline()

        self.prior: dict[tuple[str, str], FileRecord] = {}
        self.records: list[FileRecord] = []
        self.stale: list[FileRecord] = []
        self.duplicates: list[DuplicateGroup] = []
        self.scan_stats = ScanStats()
        self.extraction_stats: list[ExtractionStats] = []
        self.persisted = False

    @property
    def enabled_roots(self) -> list[RootConfig]:
        return [root for root in self.roots if root.enabled]

    def load(self) -> None:
        """Load the stored inventory. Raises StoreUnavailable if malformed."""
        self.prior = self.store.load()
        logger.info(f"Loaded {len(self.prior):,} stored records")

    def scan(self) -> None:
        """
        Scan every enabled root and work out stale records.

        The store file and its temporary files are never recorded, even when
        the store lives under a root.

        Raises:
            WalkError: A root could not be walked; the run must abort
        """
        records: list[FileRecord] = []
        stats = ScanStats()

        for root in self.roots:
            if not root.enabled:
                logger.info(f"Skipping disabled root {root.directory}")
                continue
            root_stats = ScanStats()
            root_records = scan_root(root, self.prior, root_stats, self.store.owns_path)
            logger.info(
                f"{root.directory}: {root_stats.added:,} new, {root_stats.changed:,} changed, "
                f"{root_stats.unchanged:,} unchanged, {root_stats.excluded_files:,} excluded files, "
                f"{root_stats.excluded_dirs:,} excluded directories"
            )
            stats.merge(root_stats)
            records.extend(root_records)

        self.records = records
        self.stale = find_stale(self.prior, (record.identity for record in records))
        stats.removed = len(self.stale)
        self.scan_stats = stats

        for record in self.stale:
            logger.debug(f"Removed: {record.path}")
        logger.info(
            f"Scan: {stats.added:,} new, {stats.changed:,} changed, "
            f"{stats.unchanged:,} unchanged, {stats.removed:,} removed"
        )

    def extract(self) -> None:
        """Run the extraction pipeline over all kept records."""
        self.extraction_stats = self.pipeline.run(self.records)

    def detect(self) -> None:
        """Group kept records by content hash."""
        self.duplicates = find_exact_duplicates(self.records)
        logger.info(f"Found {len(self.duplicates):,} duplicate groups")

    def persist(self) -> None:
        """Overwrite the store with the kept records. Raises PersistError."""
        count = self.store.save(self.records)
        self.persisted = True
        logger.info(f"Saved {count:,} records to {self.store.path}")

    def run(self, persist: bool = True) -> None:
        """Run every phase in order; exceptions abort before persistence."""
        self.load()
        self.scan()
        self.extract()
        self.detect()
        if persist:
            self.persist()


__all__ = ['InventoryEngine']
