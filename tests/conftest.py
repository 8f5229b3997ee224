"""
Pytest configuration and shared fixtures for test suite.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_tree(temp_dir):
    """
    Create a small directory tree to inventory.

    Layout under <temp_dir>/root:
        a.txt            "hello"  (5 bytes)
        b.txt            "hello"  (5 bytes, same content as a.txt)
        empty1.dat       0 bytes
        empty2.dat       0 bytes
        notes.tmp        excluded by pattern
        docs/c.txt       unique content
        node_modules/x.js  inside excluded directory
        photo.png        small PNG image
    """
    root = temp_dir / "root"
    (root / "docs").mkdir(parents=True)
    (root / "node_modules").mkdir()

    (root / "a.txt").write_bytes(b"hello")
    (root / "b.txt").write_bytes(b"hello")
    (root / "empty1.dat").write_bytes(b"")
    (root / "empty2.dat").write_bytes(b"")
    (root / "notes.tmp").write_text("scratch")
    (root / "docs" / "c.txt").write_text("unique content")
    (root / "node_modules" / "x.js").write_text("module.exports = 1")

    Image.new('RGB', (20, 10), color='red').save(root / "photo.png", 'PNG')

    return root


@pytest.fixture
def inventory_path(temp_dir):
    """Location for the persisted inventory."""
    return str(temp_dir / "state" / "inventory.json")


@pytest.fixture
def write_config(temp_dir):
    """Return a function writing a config dict to <temp_dir>/config.json."""
    def _write(config: dict) -> Path:
        path = temp_dir / "config.json"
        path.write_text(json.dumps(config), encoding='utf-8')
        return path
    return _write


@pytest.fixture
def clean_env(monkeypatch):
    """Remove FILEINVENTORY_* variables so tests see only their own config."""
    for key in list(os.environ):
        if key.startswith('FILEINVENTORY_'):
            monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def make_record():
    """Factory for FileRecord objects with sensible defaults."""
    from fileinventory.models import FileRecord

    def _make(relative_name="a.txt", root_dir="/data", **kwargs):
        values = {'size': 10, 'mtime': 1_000, 'ctime': 2_000}
        values.update(kwargs)
        return FileRecord(root_dir=root_dir, relative_name=relative_name, **values)
    return _make
