"""Byte-stream transport contract.

The request engine and the handshake only ever talk to a :class:`Transport`;
the TCP implementation and the in-memory test double both satisfy it, and
neither knows anything about the frames passing through.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..errors import (
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)


class Transport(ABC):
    """Minimal contract for a byte-stream transport.

    Any send/receive failure must close the underlying connection before
    the exception propagates; callers never retry on a half-open socket.
    """

    @abstractmethod
    def connect(self, host: str, port: int) -> None:
        """Establish the underlying connection, or take one from a pool."""

    @abstractmethod
    def send(self, data: bytes) -> int:
        """Send all of *data*, return the number of bytes written."""

    @abstractmethod
    def receive(self, size: int) -> bytes:
        """Return exactly *size* bytes; short reads are failures."""

    @abstractmethod
    def set_timeout(self, timeout: int) -> None:
        """Set the timeout, in milliseconds, for all socket operations."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection."""

    @abstractmethod
    def reuse_count(self) -> int:
        """Zero for a fresh connection, otherwise how often it was pooled."""

    @abstractmethod
    def release_to_pool(self) -> bool:
        """Offer the connection back to the pool.

        On failure the connection is closed and TransportError is raised.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False
