"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`webrcon.protocol` so the protocol remains
transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union

from ..errors import WebRconError


# Transport agnostic exceptions

class TransportError(WebRconError):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError, TimeoutError):
    """A handshake, read, or write did not complete before its deadline."""


class TransportConnectionError(TransportError, ConnectionError):
    """The transport could not establish or maintain a connection."""


class Transport(ABC):
    """Minimal contract for a message-oriented, full-duplex transport."""

    @abstractmethod
    def open(self, timeout: Optional[float] = None) -> None:
        """Establish the underlying connection, bounded by *timeout*."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection."""

    @abstractmethod
    def send(self, frame: str, timeout: Optional[float] = None) -> None:
        """Send one text frame; *timeout* bounds this write only."""

    @abstractmethod
    def recv(self, timeout: Optional[float] = None) -> Union[str, bytes]:
        """Receive the next frame; *timeout* bounds this read only."""

    @property
    def local_address(self) -> Optional[Tuple]:
        return None

    @property
    def remote_address(self) -> Optional[Tuple]:
        return None
