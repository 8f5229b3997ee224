"""
Audio tag extraction via mutagen.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import AUDIO_TAG_FIELDS
from ..errors import ExtractionError
from .dependencies import mutagen


def _first_value(tags, key: str) -> Optional[str]:
    values = tags.get(key) if tags is not None else None
    if not values:
        return None
    value = values[0] if isinstance(values, list) else values
    value = str(value).replace('\x00', '').strip()
    return value or None


def _year(tags) -> Optional[str]:
    # easy tags expose the recording date as 'date' (e.g. "1997-05-21")
    date = _first_value(tags, 'date') or _first_value(tags, 'year')
    if not date:
        return None
    return date[:4]


def extract_audio_tags(filepath: str | Path) -> dict:
    """
    Read title, artist, album and year from an audio file.

    Embedded null characters are removed; missing tags are None.

    Raises:
        ExtractionError: mutagen failed or did not recognize the file
    """
    try:
        audio = mutagen.File(filepath, easy=True)
    except Exception as e:
        # mutagen raises MutagenError and plain struct/IO errors on bad input
        raise ExtractionError(
            "Audio tag extraction failed", path=str(filepath), operation='audio_tags', cause=e
        ) from e

    if audio is None:
        raise ExtractionError(
            "Unrecognized audio format", path=str(filepath), operation='audio_tags'
        )

    tags = audio.tags
    result = {
        'title': _first_value(tags, 'title'),
        'artist': _first_value(tags, 'artist'),
        'album': _first_value(tags, 'album'),
        'year': _year(tags),
    }
    return {key: result[key] for key in AUDIO_TAG_FIELDS}


__all__ = ['extract_audio_tags']
