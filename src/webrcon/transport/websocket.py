"""WebSocket transport.

A thin wrapper around the synchronous :mod:`websockets` client that maps the
library's exceptions onto the transport-agnostic ones in
:mod:`webrcon.transport.base`, and provides per-call deadlines for reads and
writes.
"""

from __future__ import annotations

import logging
import socket
import struct
import sys
import threading
from typing import Optional, Tuple, Union
from urllib.parse import quote

from websockets.exceptions import (
    ConnectionClosed,
    InvalidHandshake,
    InvalidMessage,
    InvalidURI,
)
from websockets.protocol import State
from websockets.sync.client import ClientConnection, connect

from ..errors import AuthenticationFailed
from .base import Transport, TransportConnectionError, TransportTimeout


logger = logging.getLogger(__name__)

SCHEME = "ws"

# A server rejecting the secret answers the handshake with a bare WebSocket
# close frame (normal closure) instead of an HTTP response.
REJECTED = b"\x88\x02\x03\xe8"

# Characters left unescaped in the secret, the same set as a URL path
# segment accepts verbatim.
PATH_SAFE = "$&+,/:;=@"


def endpoint(address: str, secret: str) -> str:
    """Return the handshake URL for *address*; the *secret* is the path."""

    path = quote(secret, safe=PATH_SAFE)
    if not path.startswith("/"):
        path = "/" + path
    return f"{SCHEME}://{address}{path}"


def rejected(head: bytes) -> bool:
    """Whether *head*, the start of a handshake reply, rejects the secret."""
    return head.startswith(REJECTED)


class HandshakeConnection(ClientConnection):
    """Client connection that keeps the first bytes of the handshake reply.

    ``websockets`` reports any reply that is not HTTP as
    :class:`~websockets.exceptions.InvalidMessage`, without the bytes that
    were received; those bytes are what separates a rejected secret from a
    server that is simply not speaking WebSocket.
    """

    head_limit = 64

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.head = bytearray()

        receive_data = self.protocol.receive_data

        def record(data: bytes) -> None:
            missing = self.head_limit - len(self.head)
            if missing > 0 and self.protocol.state is State.CONNECTING:
                self.head += data[:missing]
            receive_data(data)

        self.protocol.receive_data = record

    def handshake(self, *args, **kwargs) -> None:
        try:
            super().handshake(*args, **kwargs)
        except InvalidMessage as exc:
            if rejected(bytes(self.head)):
                raise AuthenticationFailed("authentication failed") from exc
            raise


def _timed_out(exc: BaseException) -> bool:
    """Whether a timeout is anywhere in the exception chain of *exc*."""

    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, (TimeoutError, BlockingIOError)):
            return True
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return False


def _send_timeout(seconds: Optional[float]) -> bytes:
    """Encode *seconds* for SO_SNDTIMEO; zero means no timeout."""

    seconds = seconds or 0

    if sys.platform == "win32":
        millis = int(seconds * 1000)
        if seconds > 0 and millis == 0:
            millis = 1
        return struct.pack("L", millis)

    whole = int(seconds)
    micro = int((seconds - whole) * 1_000_000)
    if seconds > 0 and whole == 0 and micro == 0:
        micro = 1
    return struct.pack("ll", whole, micro)


class WebSocketTransport(Transport):
    """Text-frame transport over a single WebSocket connection.

    The connection target is ``ws://<address>/<secret>``; the server accepts
    or rejects the secret during the opening handshake.
    """

    def __init__(self, address: str, secret: str):
        self.address = address
        self.uri = endpoint(address, secret)
        self.connection: Optional[ClientConnection] = None
        self._send_lock = threading.Lock()
        self._local: Optional[Tuple] = None
        self._remote: Optional[Tuple] = None

    def __repr__(self) -> str:
        # Never show the secret.
        return f"<{type(self).__name__} {SCHEME}://{self.address}/***>"

    def open(self, timeout: Optional[float] = None) -> None:
        if not timeout:
            timeout = None

        logger.debug("opening %r, timeout %s", self, timeout)

        try:
            self.connection = connect(
                self.uri,
                open_timeout=timeout,
                compression=None,
                max_size=None,
                create_connection=HandshakeConnection,
            )
        except TimeoutError as exc:
            raise TransportTimeout(
                f"{self.address}: handshake timed out after {timeout} sec"
            ) from exc
        except (InvalidHandshake, InvalidURI, OSError) as exc:
            raise TransportConnectionError(f"{self.address}: {exc}") from exc

        self._local = self.connection.local_address
        self._remote = self.connection.remote_address

    def close(self) -> None:
        connection = self.connection
        if connection is None:
            return

        logger.debug("closing %r", self)
        connection.close()

    def send(self, frame: str, timeout: Optional[float] = None) -> None:
        connection = self._require()

        with self._send_lock:
            try:
                # SO_SNDTIMEO bounds writes without touching the read side,
                # which the websockets receive thread has to itself.
                connection.socket.setsockopt(
                    socket.SOL_SOCKET, socket.SO_SNDTIMEO, _send_timeout(timeout)
                )
                connection.send(frame)
            except (ConnectionClosed, OSError) as exc:
                if _timed_out(exc):
                    raise TransportTimeout(
                        f"write {self._endpoints()}: i/o timeout"
                    ) from exc
                raise TransportConnectionError(
                    f"write {self._endpoints()}: {exc}"
                ) from exc

    def recv(self, timeout: Optional[float] = None) -> Union[str, bytes]:
        connection = self._require()

        if not timeout:
            timeout = None

        try:
            return connection.recv(timeout)
        except TimeoutError as exc:
            raise TransportTimeout(
                f"read {self._endpoints()}: i/o timeout"
            ) from exc
        except ConnectionClosed as exc:
            raise TransportConnectionError(
                f"read {self._endpoints()}: {exc}"
            ) from exc

    @property
    def local_address(self) -> Optional[Tuple]:
        return self._local

    @property
    def remote_address(self) -> Optional[Tuple]:
        return self._remote

    # --- internal ---
    def _require(self) -> ClientConnection:
        if self.connection is None:
            raise TransportConnectionError(f"{self.address}: not connected")
        return self.connection

    def _endpoints(self) -> str:
        if self._local is None:
            return self.address
        return f"{_format(self._local)}->{_format(self._remote)}"


def _format(address: Optional[Tuple]) -> str:
    if not address:
        return "?"
    return f"{address[0]}:{address[1]}"
