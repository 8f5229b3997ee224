"""
Image metadata extraction via Pillow.

Only the image header and EXIF block are read; pixel data is never
decoded. Large or opaque fields (thumbnail, maker notes, GPS processing
method, interoperability IFD) are dropped before the metadata is stored.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

from ..config import STRIPPED_EXIF_TAGS
from ..errors import ExtractionError
from .dependencies import Image, ExifTags

# Marker for values that cannot be stored as JSON text
_DROP = object()


def _clean_text(value: str) -> str:
    return value.replace('\x00', '').strip()


def _to_json_value(value: Any) -> Any:
    """Convert an EXIF value to something JSON can hold, or _DROP."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return _clean_text(value)
    if isinstance(value, bytes):
        try:
            text = value.decode('utf-8')
        except UnicodeDecodeError:
            return _DROP
        text = _clean_text(text)
        if not text.isprintable():
            return _DROP
        return text
    if isinstance(value, (tuple, list)):
        items = [_to_json_value(item) for item in value]
        if any(item is _DROP for item in items):
            return _DROP
        return items
    try:
        # IFDRational and other numeric types
        number = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return _DROP
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _named_tags(ifd, names: dict) -> dict:
    tags = {}
    for tag_id, raw in ifd.items():
        name = names.get(tag_id, f"Tag{tag_id:#06x}")
        if name in STRIPPED_EXIF_TAGS:
            continue
        value = _to_json_value(raw)
        if value is _DROP:
            continue
        tags[name] = value
    return tags


def strip_metadata(exif) -> dict[str, dict]:
    """
    Flatten an `Image.Exif` into JSON-safe `exif` and `gps` sections.

    IFD0 and the Exif sub-IFD are merged into `exif`. The thumbnail IFD and
    the interoperability IFD are never read.
    """
    merged = _named_tags(exif, ExifTags.TAGS)
    merged.update(_named_tags(exif.get_ifd(ExifTags.IFD.Exif), ExifTags.TAGS))
    gps = _named_tags(exif.get_ifd(ExifTags.IFD.GPSInfo), ExifTags.GPSTAGS)
    return {'exif': merged, 'gps': gps}


def extract_image_metadata(filepath: str | Path) -> dict:
    """
    Read image format, dimensions and stripped EXIF.

    Returns:
        {"format", "width", "height", "mode", "exif": {...}, "gps": {...}}

    Raises:
        ExtractionError: Pillow could not identify or parse the image
    """
    try:
        with Image.open(filepath) as img:
            metadata = {
                'format': img.format or "",
                'width': img.width,
                'height': img.height,
                'mode': img.mode,
            }
            metadata.update(strip_metadata(img.getexif()))
    except Image.UnidentifiedImageError as e:
        raise ExtractionError(
            "Not a valid image file", path=str(filepath), operation='image_metadata', cause=e
        ) from e
    except Exception as e:
        # Pillow surfaces corrupt headers as assorted exception types
        raise ExtractionError(
            "Image metadata extraction failed",
            path=str(filepath),
            operation='image_metadata',
            cause=e,
        ) from e
    return metadata


__all__ = ['strip_metadata', 'extract_image_metadata']
