"""
Depth-first directory walker.

Yields one WalkEvent per filesystem entry. Entries within a directory are
visited in name order, so the walk order is deterministic for an unchanged
tree. Symlinks are reported, never followed.
"""

from __future__ import annotations

import enum
import os
import stat
from dataclasses import dataclass
from typing import Callable, Iterator, Optional


class EntryKind(enum.Enum):
    DIRECTORY = 'directory'
    FILE = 'file'
    SYMLINK = 'symlink'
    BLOCK_DEVICE = 'block_device'
    CHAR_DEVICE = 'char_device'
    FIFO = 'fifo'
    SOCKET = 'socket'
    OTHER = 'other'
    ERROR = 'error'
    END = 'end'


@dataclass
class WalkEvent:
    """
    A single walker observation.

    Attributes:
        kind: What was found
        path: Full path of the entry (None for END)
        stat: lstat() result for the entry, if available
        error: The OSError for ERROR events
    """
    kind: EntryKind
    path: Optional[str] = None
    stat: Optional[os.stat_result] = None
    error: Optional[OSError] = None


# Called before descending into a directory; return False to prune it.
DirFilter = Callable[[str, os.stat_result], bool]


def classify(st: os.stat_result) -> EntryKind:
    """Map an lstat() mode to an EntryKind."""
    mode = st.st_mode
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    if stat.S_ISBLK(mode):
        return EntryKind.BLOCK_DEVICE
    if stat.S_ISCHR(mode):
        return EntryKind.CHAR_DEVICE
    if stat.S_ISFIFO(mode):
        return EntryKind.FIFO
    if stat.S_ISSOCK(mode):
        return EntryKind.SOCKET
    return EntryKind.OTHER


def _list_dir(path: str) -> list[os.DirEntry]:
    with os.scandir(path) as it:
        return sorted(it, key=lambda entry: entry.name)


def walk(root: str, filter_dir: Optional[DirFilter] = None) -> Iterator[WalkEvent]:
    """
    Walk `root` depth-first, yielding events.

    The root itself is reported as the first DIRECTORY event and is never
    passed to `filter_dir`. A directory rejected by `filter_dir` is neither
    reported nor listed. Errors are reported as ERROR events and the walk
    continues with the next entry; END is always the final event.

    Args:
        root: Directory to walk
        filter_dir: Optional veto consulted before descending
    """
    try:
        root_stat = os.stat(root)
        if not stat.S_ISDIR(root_stat.st_mode):
            raise NotADirectoryError(20, "Not a directory", root)
        entries = _list_dir(root)
    except OSError as e:
        yield WalkEvent(EntryKind.ERROR, root, error=e)
        yield WalkEvent(EntryKind.END)
        return

    yield WalkEvent(EntryKind.DIRECTORY, root, root_stat)

    stack = [iter(entries)]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        try:
            st = entry.stat(follow_symlinks=False)
        except OSError as e:
            yield WalkEvent(EntryKind.ERROR, entry.path, error=e)
            continue

        kind = classify(st)
        if kind is not EntryKind.DIRECTORY:
            yield WalkEvent(kind, entry.path, st)
            continue

        if filter_dir is not None and not filter_dir(entry.path, st):
            continue

        yield WalkEvent(EntryKind.DIRECTORY, entry.path, st)
        try:
            children = _list_dir(entry.path)
        except OSError as e:
            yield WalkEvent(EntryKind.ERROR, entry.path, error=e)
            continue
        stack.append(iter(children))

    yield WalkEvent(EntryKind.END)


__all__ = ['EntryKind', 'WalkEvent', 'DirFilter', 'classify', 'walk']
