"""
Content hashing for the scanner package.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from ..config import HASH_ALGORITHM, HASH_CHUNK_SIZE
from ..errors import ExtractionError


def calculate_file_hash(filepath: str | Path, algorithm: str = HASH_ALGORITHM) -> str:
    """
    Calculate cryptographic hash of a file.

    The file is streamed in fixed-size chunks, so memory use does not
    depend on file size.

    Args:
        filepath: Path to the file
        algorithm: Hash algorithm to use (default: sha256)

    Returns:
        Hex digest of the file hash

    Raises:
        ExtractionError: The file could not be read
    """
    hasher = hashlib.new(algorithm)
    try:
        with open(filepath, 'rb') as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b''):
                hasher.update(chunk)
    except OSError as e:
        raise ExtractionError(
            "File hash calculation failed", path=str(filepath), operation='hash', cause=e
        ) from e
    return hasher.hexdigest()


__all__ = ['calculate_file_hash']
