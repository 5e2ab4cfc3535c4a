# ceph_osd_exporter/ceph/admin_socket.py - Ceph admin socket client
"""
Client for the Ceph daemon admin socket protocol.

A request is a JSON command object terminated by a single NUL byte.
The daemon answers with a 4-byte big-endian length followed by that
many bytes of JSON. One connection carries exactly one round trip.
"""

import json
import logging
import socket
import struct
import time
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import (
    BodyReadError,
    CommandWriteError,
    DecodeError,
    HeaderReadError,
    SocketConnectionError,
)
from .response import AdminSocketResponse

LENGTH_HEADER = struct.Struct(">I")
RECV_CHUNK_SIZE = 65536

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSocketCommand:
    """
    Command sent to an admin socket.

    format is left out of the request when empty.
    """
    prefix: str
    format: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        command = {'prefix': self.prefix}
        if self.format:
            command['format'] = self.format
        return command

    def encode(self) -> bytes:
        """Encode as compact JSON followed by the NUL terminator."""
        return json.dumps(self.to_dict(), separators=(',', ':')).encode('utf-8') + b'\x00'


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def _arm(sock: socket.socket, deadline: Optional[float]):
    """Set the socket timeout to whatever is left until deadline."""
    if deadline is None:
        return
    left = deadline - time.monotonic()
    if left <= 0:
        raise socket.timeout("timed out")
    sock.settimeout(left)


def _recv_exact(sock: socket.socket, size: int, deadline: Optional[float] = None) -> bytes:
    """
    Read exactly size bytes.

    Returns fewer bytes only if the peer closed the connection early.
    """
    chunks = []
    remaining = size
    while remaining > 0:
        _arm(sock, deadline)
        chunk = sock.recv(min(remaining, RECV_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b''.join(chunks)


@dataclass(frozen=True)
class AdminSocket:
    """
    Admin socket of a single OSD daemon.
    """
    path: str

    @property
    def osd(self) -> str:
        """
        OSD id taken from the socket name.

        For .../ceph-osd.<id>.asok the id is the second to last
        dot-separated part of the full path.
        """
        parts = self.path.split('.')
        return parts[-2]

    def send_command(self, command: AdminSocketCommand,
                     timeout: Optional[float] = None) -> AdminSocketResponse:
        """
        Run one command against the daemon.

        Args:
            command: Command to send
            timeout: Seconds allowed for the whole round trip
                (None blocks indefinitely)

        Returns:
            Decoded response object

        Raises:
            SocketConnectionError: Connecting failed
            CommandWriteError: Sending the command failed
            HeaderReadError: The length header could not be read
            BodyReadError: The response body was truncated
            DecodeError: The body is not a JSON object
        """
        request = command.encode()
        deadline = time.monotonic() + timeout if timeout is not None else None

        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            try:
                _arm(sock, deadline)
                sock.connect(self.path)
            except OSError as e:
                raise SocketConnectionError(self.path, f"connect failed: {e}") from e

            try:
                _arm(sock, deadline)
                sock.sendall(request)
            except OSError as e:
                raise CommandWriteError(self.path, f"write failed: {e}") from e

            try:
                header = _recv_exact(sock, LENGTH_HEADER.size, deadline)
            except OSError as e:
                raise HeaderReadError(self.path, f"reading length header failed: {e}",
                                      expected=LENGTH_HEADER.size) from e
            if len(header) != LENGTH_HEADER.size:
                raise HeaderReadError(
                    self.path,
                    f"short length header: got {len(header)} of {LENGTH_HEADER.size} bytes",
                    expected=LENGTH_HEADER.size,
                    received=len(header),
                )

            (length,) = LENGTH_HEADER.unpack(header)

            try:
                body = _recv_exact(sock, length, deadline)
            except OSError as e:
                raise BodyReadError(self.path, f"reading response body failed: {e}",
                                    expected=length) from e
            if len(body) != length:
                raise BodyReadError(
                    self.path,
                    f"short response body: got {len(body)} of {length} bytes",
                    expected=length,
                    received=len(body),
                )

        logger.debug(f"Received {length} byte response from {self.path}")

        try:
            data = json.loads(body.decode('utf-8'), parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            raise DecodeError(self.path, f"invalid JSON response: {e}") from e

        if not isinstance(data, dict):
            raise DecodeError(self.path, f"expected JSON object, got {type(data).__name__}")

        return AdminSocketResponse(data)
