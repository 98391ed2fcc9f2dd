"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`easycrypto.protocol` so the protocol remains
transport-agnostic: a transport moves opaque datagram bytes, nothing more.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """No datagram arrived within the requested timeout."""


class TransportClosed(TransportError):
    """The transport is closed, or was closed while receiving."""


class Transport(ABC):
    """Minimal contract for a datagram transport.

    Sending is fire-and-forget: there is no acknowledgement, and a datagram
    may be silently lost. One thread may send while another receives
    without any external locking.
    """

    @abstractmethod
    def send(self, data: bytes, address: str, port: int) -> None:
        """Send one datagram to *address* and *port*."""

    @abstractmethod
    def receive(self, timeout: Optional[float] = None) -> Tuple[bytes, Tuple[str, int]]:
        """Block until a datagram arrives; return (data, (address, port)).

        Raises :class:`TransportTimeout` if *timeout* seconds pass first,
        and :class:`TransportClosed` if the transport is closed.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying socket. Calling this more than once is
        harmless."""

    @property
    def closed(self) -> bool:
        """Whether the transport has been closed."""
        return False
