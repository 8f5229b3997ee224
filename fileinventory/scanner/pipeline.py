"""
Extraction pipeline.

Three independent selective-recompute stages run over the unified record
list: content hash, audio tags and image metadata. A stage only touches
records it applies to that lack its field (or all of them when forced),
and every stage finishes before the next one starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import AUDIO_EXTENSIONS, DEFAULT_WORKERS, IMAGE_EXTENSIONS
from ..models import ExtractionStats, FileRecord
from .dependencies import HAS_HEIF_SUPPORT
from .exif import extract_image_metadata
from .hashing import calculate_file_hash
from .parallel import run_stage
from .tags import extract_audio_tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    """
    One extraction pass.

    Attributes:
        name: Key used for force flags and statistics
        field: FileRecord attribute the stage fills
        description: Label for logs and progress bars
        extract: Callable taking a path and returning the field value
        extensions: Extensions the stage applies to (None = every file)
    """
    name: str
    field: str
    description: str
    extract: Callable[[str], object]
    extensions: Optional[frozenset] = None

    def applies(self, record: FileRecord) -> bool:
        return self.extensions is None or record.extension in self.extensions

    def needs(self, record: FileRecord, force: bool = False) -> bool:
        """True if the stage must (re)compute this record's field."""
        if not self.applies(record):
            return False
        return force or getattr(record, self.field) is None


def _image_extensions() -> frozenset:
    if HAS_HEIF_SUPPORT:
        return frozenset(IMAGE_EXTENSIONS)
    return frozenset(ext for ext in IMAGE_EXTENSIONS if ext not in {'.heic', '.heif'})


HASH_STAGE = Stage(
    name='hash',
    field='content_hash',
    description='Hashing',
    extract=calculate_file_hash,
)

AUDIO_TAG_STAGE = Stage(
    name='audio_tags',
    field='audio_tags',
    description='Reading audio tags',
    extract=extract_audio_tags,
    extensions=frozenset(AUDIO_EXTENSIONS),
)

IMAGE_METADATA_STAGE = Stage(
    name='image_metadata',
    field='image_metadata',
    description='Reading image metadata',
    extract=extract_image_metadata,
    extensions=_image_extensions(),
)

DEFAULT_STAGES = (HASH_STAGE, AUDIO_TAG_STAGE, IMAGE_METADATA_STAGE)


class ExtractionPipeline:
    """
    Runs every stage over a record list.

    Args:
        stages: Stages to run, in order
        max_workers: Worker pool size per stage
        force: Stage name -> recompute even when the field is present
        show_progress: Whether to show tqdm progress bars
    """

    def __init__(
        self,
        stages=DEFAULT_STAGES,
        max_workers: int = DEFAULT_WORKERS,
        force: Optional[dict[str, bool]] = None,
        show_progress: bool = True,
    ):
        self.stages = tuple(stages)
        self.max_workers = max_workers
        self.force = dict(force or {})
        self.show_progress = show_progress

    def pending(self, stage: Stage, records: list[FileRecord]) -> list[FileRecord]:
        """Records the stage has to process."""
        force = self.force.get(stage.name, False)
        return [record for record in records if stage.needs(record, force)]

    def run(self, records: list[FileRecord]) -> list[ExtractionStats]:
        """Run all stages to completion; returns one ExtractionStats per stage."""
        results = []
        for stage in self.stages:
            pending = self.pending(stage, records)
            applicable = sum(1 for record in records if stage.applies(record))
            logger.info(f"{stage.description}: {len(pending):,} of {applicable:,} files pending")

            stats = run_stage(
                stage,
                pending,
                max_workers=self.max_workers,
                show_progress=self.show_progress,
            )
            stats.skipped = applicable - len(pending)
            if stats.failed:
                logger.warning(f"{stage.description}: {stats.failed:,} files failed")
            results.append(stats)
        return results


__all__ = [
    'Stage',
    'HASH_STAGE',
    'AUDIO_TAG_STAGE',
    'IMAGE_METADATA_STAGE',
    'DEFAULT_STAGES',
    'ExtractionPipeline',
]
