"""
Configuration constants for File Inventory.

This module contains all fixed settings including:
- Extensions recognized as audio and image files
- Hashing and worker pool defaults
- Image metadata fields stripped before storage
"""

import os

# Files with these extensions go through the audio-tag stage
AUDIO_EXTENSIONS = {
    '.mp3', '.flac', '.ogg', '.oga', '.opus', '.m4a', '.m4b', '.mp4',
    '.aac', '.wma', '.wav', '.aif', '.aiff', '.ape', '.wv', '.mpc',
}

# Files with these extensions go through the image-metadata stage
IMAGE_EXTENSIONS = {
    # Common formats
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    # RAW formats Pillow can read a header from
    '.dng',
    # Other formats
    '.heic', '.heif', '.avif',
}

# Content hash algorithm (any hashlib name; must be collision-resistant)
HASH_ALGORITHM = 'sha256'

# Bytes read per chunk while hashing
HASH_CHUNK_SIZE = 65536

# Default number of parallel workers per extraction stage
DEFAULT_WORKERS = 4

# Inventory store document version
STORE_VERSION = 1

# EXIF tags dropped from stored image metadata (large or opaque)
STRIPPED_EXIF_TAGS = {
    'MakerNote',
    'GPSProcessingMethod',
    'JPEGInterchangeFormat',
    'JPEGInterchangeFormatLength',
    'ExifInteroperabilityOffset',
    'InteropOffset',
    'PrintImageMatching',
    'ExifOffset',
    'GPSInfo',
}

# Audio tags kept from the extractor output
AUDIO_TAG_FIELDS = ('title', 'artist', 'album', 'year')

# Config / inventory file locations
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.fileinventory')
CONFIG_FILE = os.path.join(CONFIG_DIR, 'config.json')
INVENTORY_FILE = os.path.join(CONFIG_DIR, 'inventory.json')
