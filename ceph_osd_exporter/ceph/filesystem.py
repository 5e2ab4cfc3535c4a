# ceph_osd_exporter/ceph/filesystem.py - Filesystem access used for discovery
"""
Minimal filesystem interface for admin socket discovery.

Discovery only needs a recursive walk, so that is all an implementation
has to provide. Tests swap in an in-memory tree.
"""

import os
from abc import ABC, abstractmethod
from typing import Iterator, List, Tuple

WalkEntry = Tuple[str, List[str], List[str]]


class Filesystem(ABC):
    """
    Recursive directory listing.

    walk() follows os.walk semantics: one (dirpath, dirnames, filenames)
    tuple per directory, top-down. Anything that is not a directory,
    sockets included, is reported in filenames.
    """

    @abstractmethod
    def walk(self, root: str) -> Iterator[WalkEntry]:
        """
        Walk the tree rooted at root.

        Args:
            root: Directory to start from

        Raises:
            OSError: If root or any directory below it cannot be listed
        """


def _raise(error: OSError):
    raise error


class OSFilesystem(Filesystem):
    """Filesystem backed by the local disk."""

    def walk(self, root: str) -> Iterator[WalkEntry]:
        # os.walk swallows listing errors unless onerror is given
        yield from os.walk(root, onerror=_raise)
