# ceph_osd_exporter/ceph/errors.py - Admin socket error hierarchy
"""
Errors raised while discovering and talking to Ceph admin sockets.

Discovery errors abort a whole collection cycle. Every other error is
scoped to a single admin socket and is recovered by the collector.
"""

from typing import Any, Optional


class CephError(Exception):
    """Base class for all admin socket errors."""


class DiscoveryError(CephError):
    """Scanning the run directory for admin sockets failed."""


class SocketConnectionError(CephError):
    """Could not connect to an admin socket."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class CommandWriteError(SocketConnectionError):
    """Sending the command to an admin socket failed."""


class ProtocolFramingError(CephError):
    """The response frame was malformed or truncated."""

    def __init__(self, path: str, message: str, expected: int = 0, received: int = 0):
        self.path = path
        self.expected = expected
        self.received = received
        super().__init__(f"{path}: {message}")


class HeaderReadError(ProtocolFramingError):
    """The 4-byte length header could not be read."""


class BodyReadError(ProtocolFramingError):
    """The response body could not be read in full."""


class DecodeError(CephError):
    """The response body is not a JSON object."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class SchemaError(CephError):
    """A response field is missing or has an unexpected type."""

    def __init__(self, message: str, response: Optional[Any] = None):
        self.response = response
        super().__init__(message)
