# tests/conftest.py - Shared fixtures
"""
Fixtures for admin socket tests: an in-memory filesystem and a fake
admin socket server listening on a real unix socket.
"""

import errno
import json
import posixpath
import shutil
import socket
import struct
import tempfile
import threading
import time
from typing import Iterator, List, Optional

import pytest

from ceph_osd_exporter.ceph.filesystem import Filesystem


class MemoryFilesystem(Filesystem):
    """In-memory directory tree implementing the discovery interface."""

    def __init__(self):
        self.dirs = {'/': set()}
        self.files = set()
        self.unreadable = set()

    def mkdir_all(self, path: str):
        path = posixpath.normpath(path)
        if path in self.dirs:
            return
        parent = posixpath.dirname(path)
        self.mkdir_all(parent)
        self.dirs[parent].add(posixpath.basename(path))
        self.dirs[path] = set()

    def write_file(self, path: str):
        path = posixpath.normpath(path)
        parent = posixpath.dirname(path)
        self.mkdir_all(parent)
        self.dirs[parent].add(posixpath.basename(path))
        self.files.add(path)

    def walk(self, root: str) -> Iterator:
        root = posixpath.normpath(root)
        if root not in self.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", root)
        if root in self.unreadable:
            raise PermissionError(errno.EACCES, "Permission denied", root)

        children = sorted(self.dirs[root])
        dirnames = [n for n in children if posixpath.join(root, n) in self.dirs]
        filenames = [n for n in children if posixpath.join(root, n) in self.files]
        yield root, dirnames, filenames

        for name in dirnames:
            yield from self.walk(posixpath.join(root, name))


def frame(body: bytes) -> bytes:
    """Prefix a response body with its big-endian length."""
    return struct.pack('>I', len(body)) + body


def frame_json(obj) -> bytes:
    return frame(json.dumps(obj).encode('utf-8'))


class FakeAdminSocketServer:
    """
    Answers a single admin socket request.

    Reads the request up to the NUL terminator, then writes each chunk
    in turn. With hang=True it keeps the connection open without
    answering until closed.
    """

    def __init__(self, path: str, chunks: List[bytes], delay: float = 0.0,
                 hang: bool = False):
        self.path = path
        self.chunks = chunks
        self.delay = delay
        self.hang = hang
        self.requests: List[bytes] = []

        self._release = threading.Event()
        self._listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._listener.settimeout(5)
        self._listener.bind(path)
        self._listener.listen(1)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return

        with conn:
            request = b''
            while not request.endswith(b'\x00'):
                chunk = conn.recv(1024)
                if not chunk:
                    break
                request += chunk
            self.requests.append(request)

            if self.hang:
                self._release.wait(5)
                return

            for chunk in self.chunks:
                try:
                    conn.sendall(chunk)
                except OSError:
                    # client gave up and hung up
                    return
                if self.delay:
                    time.sleep(self.delay)

    def close(self):
        self._release.set()
        self._thread.join(timeout=5)
        self._listener.close()


@pytest.fixture
def memory_fs() -> MemoryFilesystem:
    return MemoryFilesystem()


@pytest.fixture
def socket_dir() -> Iterator[str]:
    # Keep paths short, AF_UNIX addresses are limited to 108 bytes
    path = tempfile.mkdtemp(prefix='ceph-', dir='/tmp')
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def admin_socket_server():
    """Factory starting fake servers, all closed after the test."""
    servers = []

    def start(path: str, chunks: Optional[List[bytes]] = None, **kwargs) -> FakeAdminSocketServer:
        server = FakeAdminSocketServer(path, chunks or [], **kwargs)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.close()
