"""
Parallel processing module for the scanner package.

Runs one extraction stage over its pending records with a bounded thread
pool, with progress tracking and callback support.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Any, TYPE_CHECKING

from ..config import DEFAULT_WORKERS
from ..errors import ExtractionError
from ..models import ExtractionStats, FileRecord
from .dependencies import HAS_TQDM, _tqdm_class

if TYPE_CHECKING:
    from .pipeline import Stage

logger = logging.getLogger(__name__)


def run_stage(
    stage: 'Stage',
    pending: list[FileRecord],
    max_workers: int = DEFAULT_WORKERS,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
) -> ExtractionStats:
    """
    Extract one field for every pending record.

    Workers only compute values; results are assigned to records here, on
    the calling thread, so each record field has a single writer. A failed
    extraction is logged and leaves the field as None.

    Args:
        stage: Stage to run
        pending: Records that need this stage
        max_workers: Number of parallel workers
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar

    Returns:
        ExtractionStats for the stage
    """
    stats = ExtractionStats(stage=stage.name, pending=len(pending))
    if not pending:
        return stats

    pbar: Optional[Any] = None
    if HAS_TQDM and show_progress and _tqdm_class is not None:
        pbar = _tqdm_class(
            total=len(pending),
            desc=stage.description,
            unit="file",
            ncols=80,
        )

    # Batch progress callbacks to reduce overhead
    last_callback_time = time.time()
    callback_interval = 1.0  # seconds

    try:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(stage.extract, record.path): record
                for record in pending
            }

            for i, future in enumerate(as_completed(futures)):
                record = futures[future]
                try:
                    setattr(record, stage.field, future.result())
                    stats.completed += 1
                except ExtractionError as e:
                    setattr(record, stage.field, None)
                    stats.failed += 1
                    logger.warning(f"{stage.description} failed: {e}")

                if pbar is not None:
                    pbar.update(1)

                if progress_callback:
                    current_time = time.time()
                    if (current_time - last_callback_time >= callback_interval
                            or i == len(pending) - 1):
                        progress_callback(i + 1, len(pending))
                        last_callback_time = current_time
    finally:
        if pbar is not None:
            pbar.close()

    return stats


__all__ = ['run_stage']
