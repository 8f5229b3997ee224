"""
JSON-backed inventory store.

The store is a single indented JSON document holding every current
FileRecord. It is loaded once per run and fully rewritten at the end of a
successful run; writes go to a temporary file that atomically replaces the
previous store.

Document shape:
{
    "version": 1,
    "files": [ {FileRecord.to_dict()}, ... ]
}
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Iterable, Optional

from .config import INVENTORY_FILE, STORE_VERSION
from .errors import PersistError, StoreUnavailable
from .models import FileRecord

logger = logging.getLogger(__name__)

_TMP_PREFIX = '.inventory-'
_TMP_SUFFIX = '.tmp'

_REQUIRED_FIELDS = {
    'root_dir': str,
    'relative_name': str,
    'size': int,
    'mtime': int,
    'ctime': int,
}
_OPTIONAL_FIELDS = {
    'content_hash': str,
    'audio_tags': dict,
    'image_metadata': dict,
}


def _validate_entry(entry, index: int, path: str) -> None:
    if not isinstance(entry, dict):
        raise StoreUnavailable(
            f"Record #{index} is not an object", path=path, operation='load'
        )
    for key, expected in _REQUIRED_FIELDS.items():
        value = entry.get(key)
        # bool is an int subclass; reject it for numeric fields
        if not isinstance(value, expected) or isinstance(value, bool):
            raise StoreUnavailable(
                f"Record #{index} has missing or invalid field '{key}'",
                path=path,
                operation='load',
            )
    for key, expected in _OPTIONAL_FIELDS.items():
        value = entry.get(key)
        if value is not None and not isinstance(value, expected):
            raise StoreUnavailable(
                f"Record #{index} has invalid field '{key}'",
                path=path,
                operation='load',
            )


class InventoryStore:
    """
    Loads and persists the inventory.

    Usage:
        store = InventoryStore(path)
        prior = store.load()          # {identity: FileRecord}
        ...
        store.save(records)
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or INVENTORY_FILE

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def owns_path(self, path: str) -> bool:
        """True for the store file itself and its in-progress temporary files."""
        path = os.path.abspath(path)
        store_path = os.path.abspath(self.path)
        if path == store_path:
            return True
        name = os.path.basename(path)
        return (
            os.path.dirname(path) == os.path.dirname(store_path)
            and name.startswith(_TMP_PREFIX)
            and name.endswith(_TMP_SUFFIX)
        )

    def load(self) -> dict[tuple[str, str], FileRecord]:
        """
        Load previously persisted records keyed by identity.

        A missing store is an empty inventory.

        Raises:
            StoreUnavailable: The store exists but is malformed or unreadable
        """
        if not os.path.exists(self.path):
            logger.info(f"No inventory at {self.path}, starting empty")
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StoreUnavailable(
                "Inventory store could not be read", path=self.path, operation='load', cause=e
            ) from e

        if not isinstance(document, dict) or not isinstance(document.get('files'), list):
            raise StoreUnavailable(
                "Inventory store has no 'files' list", path=self.path, operation='load'
            )
        version = document.get('version', STORE_VERSION)
        if version != STORE_VERSION:
            raise StoreUnavailable(
                f"Unsupported inventory version {version!r}", path=self.path, operation='load'
            )

        records: dict[tuple[str, str], FileRecord] = {}
        for index, entry in enumerate(document['files']):
            _validate_entry(entry, index, self.path)
            record = FileRecord.from_dict(entry)
            if record.identity in records:
                raise StoreUnavailable(
                    f"Duplicate record for {record.path}", path=self.path, operation='load'
                )
            records[record.identity] = record

        logger.debug(f"Loaded {len(records):,} records from {self.path}")
        return records

    def save(self, records: Iterable[FileRecord]) -> int:
        """
        Overwrite the store with the given records.

        Returns:
            Number of records written

        Raises:
            PersistError: The store could not be written; the previous store
                is left untouched
        """
        entries = [record.to_dict() for record in records]
        document = {'version': STORE_VERSION, 'files': entries}

        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=_TMP_PREFIX, suffix=_TMP_SUFFIX, dir=directory
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, sort_keys=True)
                f.write('\n')
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as e:
            raise PersistError(
                "Failed to write inventory", path=self.path, operation='save', cause=e
            ) from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug(f"Wrote {len(entries):,} records to {self.path}")
        return len(entries)


__all__ = ['InventoryStore']
