"""
Utilities package for File Inventory.

Provides:
- exporters: Export duplicate results to files
"""

from __future__ import annotations

from . import exporters

from .exporters import EXPORT_FORMATS, export_results

__all__ = [
    'exporters',
    'EXPORT_FORMATS',
    'export_results',
]
