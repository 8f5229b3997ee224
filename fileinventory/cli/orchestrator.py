"""
CLI workflow orchestration for File Inventory.

Provides the CLIOrchestrator class that coordinates a run from argument
parsing through final persistence.
"""

from __future__ import annotations

import logging

from ..engine import InventoryEngine
from ..errors import ConfigError, InventoryError
from ..scanner import ExtractionPipeline
from ..store import InventoryStore
from ..user_config import FORCE_KEYS, get_user_config
from ..utils.exporters import export_results
from .arg_parser import parse_arguments
from .reporting import print_inventory_report


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI workflow.

    Any InventoryError (config, store, walk, persist) ends the run with exit
    code 1 before the inventory is written.
    """

    def __init__(self, argv=None):
        """Initialize the orchestrator."""
        self.argv = argv
        self.logger = None
        self.args = None
        self.engine = None

    def run(self) -> int:
        """
        Execute the complete CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)

        Workflow phases:
        1. Setup & argument parsing
        2. Configuration
        3. Load stored inventory
        4. Scan roots
        5. Extract hashes and metadata
        6. Duplicate detection & reporting
        7. Persist
        """
        # Phase 1: Setup
        self._setup_phase()

        try:
            # Phase 2: Configuration
            self._configure_phase()

            # Phase 3-5: Load, scan, extract
            self.engine.load()
            self.engine.scan()
            self.engine.extract()

            # Phase 6: Detection & Reporting
            self.engine.detect()
            self._report_phase()

            # Phase 7: Persist
            self._persist_phase()
        except InventoryError as e:
            self.logger.error(f"{type(e).__name__}: {e}")
            self.logger.error("Aborted; inventory not saved.")
            return 1

        return 0

    def _setup_phase(self) -> None:
        """Phase 1: Parse arguments and setup logging."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

    def _configure_phase(self) -> None:
        """
        Phase 2: Build the engine from config file, environment and flags.

        Raises:
            ConfigError: Config is missing or invalid
        """
        config = get_user_config(self.args.config)
        self.logger.debug(f"Using config file {config.config_file_path}")

        roots = config.roots
        inventory_file = str(self.args.inventory) if self.args.inventory else config.inventory_file
        workers = self.args.workers if self.args.workers is not None else config.workers
        if workers < 1:
            raise ConfigError(f"--workers must be at least 1, got {workers}", operation='configure')

        force = config.force
        if self.args.force_all:
            force = {key: True for key in FORCE_KEYS}
        if self.args.force_hash:
            force['hash'] = True
        if self.args.force_tags:
            force['audio_tags'] = True
        if self.args.force_exif:
            force['image_metadata'] = True
        forced = [key for key, value in force.items() if value]
        if forced:
            self.logger.info(f"Forcing recompute: {', '.join(forced)}")

        pipeline = ExtractionPipeline(
            max_workers=workers,
            force=force,
            show_progress=not self.args.no_progress,
        )
        self.engine = InventoryEngine(roots, InventoryStore(inventory_file), pipeline)
        self.logger.info(
            f"{len(self.engine.enabled_roots)} of {len(roots)} roots enabled, "
            f"inventory: {inventory_file}"
        )

    def _report_phase(self) -> None:
        """Phase 6b: Print report, handle exports."""
        print_inventory_report(
            self.engine.scan_stats,
            self.engine.extraction_stats,
            self.engine.duplicates,
            self.engine.stale,
        )

        if self.args.export:
            try:
                export_results(self.engine.duplicates, self.args.export, self.args.export_format)
                self.logger.info(f"Results exported to: {self.args.export}")
            except OSError as e:
                self.logger.error(f"Export to {self.args.export} failed: {e}")

    def _persist_phase(self) -> None:
        """Phase 7: Save the inventory unless this is a dry run."""
        if self.args.dry_run:
            self.logger.info("[DRY RUN MODE - inventory not saved]")
            return
        self.engine.persist()


__all__ = ['CLIOrchestrator', 'setup_logging']
