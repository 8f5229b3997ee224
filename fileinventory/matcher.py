"""
Path exclusion rules.

Each pattern is a regular expression searched (not anchored) in the
candidate path. Anything matching at least one pattern is excluded.
"""

from __future__ import annotations

import os
import re
from typing import Iterable, Pattern

from .errors import ConfigError


def compile_patterns(patterns: Iterable[str]) -> list[Pattern]:
    """
    Compile exclusion patterns.

    Raises:
        ConfigError: A pattern is not a valid regular expression
    """
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise ConfigError(
                f"Invalid exclusion pattern {pattern!r}",
                operation='compile_pattern',
                cause=e,
            ) from e
    return compiled


def should_exclude_file(path: str, patterns: Iterable[Pattern]) -> bool:
    """True if any pattern matches the file's (relative) path."""
    return any(p.search(path) for p in patterns)


def should_exclude_dir(path: str, patterns: Iterable[Pattern]) -> bool:
    """
    True if any pattern matches the directory's basename or its full path.

    A full-path match lets rules like ``^/etc/pam\\.d$`` target a single
    directory while ``^node_modules$`` prunes it everywhere.
    """
    name = os.path.basename(path.rstrip(os.sep)) or path
    return any(p.search(name) or p.search(path) for p in patterns)


class PathMatcher:
    """Exclusion rules for one root, compiled once."""

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = list(patterns)
        self._compiled = compile_patterns(self.patterns)

    def exclude_dir(self, path: str) -> bool:
        return should_exclude_dir(path, self._compiled)

    def exclude_file(self, path: str) -> bool:
        return should_exclude_file(path, self._compiled)


__all__ = [
    'compile_patterns',
    'should_exclude_file',
    'should_exclude_dir',
    'PathMatcher',
]
