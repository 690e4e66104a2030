"""TCP socket transport.

One :class:`TcpTransport` owns at most one socket at a time. The socket is
either freshly connected or taken from a :class:`~iproto.transport.pool.Pool`,
in which case :meth:`reuse_count` is non-zero and the caller may skip the
greeting.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

from . import pool as poolmodule
from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)


logger = logging.getLogger(__name__)


class TcpTransport(Transport):
    """Blocking TCP transport with a single timeout for every operation."""

    def __init__(self, timeout: Optional[int] = None, pool: Optional[poolmodule.Pool] = None):
        self.host: Optional[str] = None
        self.port: Optional[int] = None
        self.timeout = timeout
        self.pool = pool if pool is not None else poolmodule.default
        self._socket: Optional[socket.socket] = None
        self._reused = 0

    # --- connection lifecycle ---
    def connect(self, host: str, port: int) -> None:
        if self._socket is not None:
            self.close()

        self.host = host
        self.port = int(port)

        pooled = self.pool.take(self.host, self.port)
        if pooled is not None:
            sock, count = pooled
            self._socket = sock
            self._reused = count + 1
            self._apply_timeout()
            logger.debug("reusing pooled connection to %s:%d (%d)", self.host, self.port, self._reused)
            return

        try:
            sock = socket.create_connection((self.host, self.port), timeout=self._seconds())
        except socket.timeout as exc:
            raise TransportTimeout(f"connect to {self.host}:{self.port} timed out") from exc
        except OSError as exc:
            raise TransportConnectionError(f"failed to connect to {self.host}:{self.port}: {exc}") from exc

        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self._socket = sock
        self._reused = 0
        logger.debug("connected to %s:%d", self.host, self.port)

    def close(self) -> None:
        sock = self._socket
        self._socket = None
        self._reused = 0

        if sock is None:
            return

        try:
            sock.close()
        except OSError:
            pass
        logger.debug("closed connection to %s:%s", self.host, self.port)

    def release_to_pool(self) -> bool:
        sock = self._socket
        if sock is None:
            raise TransportConnectionError("no connection to release")

        if self.pool.put(self.host, self.port, sock, self._reused):
            self._socket = None
            self._reused = 0
            return True

        self.close()
        raise TransportError(f"connection pool for {self.host}:{self.port} is full")

    # --- configuration ---
    def set_timeout(self, timeout: int) -> None:
        self.timeout = timeout
        self._apply_timeout()

    def reuse_count(self) -> int:
        return self._reused

    @property
    def is_open(self) -> bool:
        return self._socket is not None

    # --- data ---
    def send(self, data: bytes) -> int:
        sock = self._require_socket()

        try:
            sock.sendall(data)
        except socket.timeout as exc:
            self._fail("send timed out")
            raise TransportTimeout("send timed out") from exc
        except OSError as exc:
            self._fail(f"send failed: {exc}")
            raise TransportError(str(exc)) from exc

        return len(data)

    def receive(self, size: int) -> bytes:
        sock = self._require_socket()

        chunks = []
        remaining = size

        while remaining > 0:
            try:
                chunk = sock.recv(remaining)
            except socket.timeout as exc:
                self._fail("receive timed out")
                raise TransportTimeout("receive timed out") from exc
            except OSError as exc:
                self._fail(f"receive failed: {exc}")
                raise TransportError(str(exc)) from exc

            if not chunk:
                self._fail("connection closed by server")
                raise TransportConnectionError("connection closed by server")

            chunks.append(chunk)
            remaining -= len(chunk)

        return b"".join(chunks)

    # --- internal ---
    def _seconds(self) -> Optional[float]:
        if self.timeout is None:
            return None
        return self.timeout / 1000.0

    def _apply_timeout(self) -> None:
        if self._socket is not None:
            self._socket.settimeout(self._seconds())

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            raise TransportConnectionError("not connected")
        return self._socket

    def _fail(self, reason: str) -> None:
        logger.warning("closing connection to %s:%s: %s", self.host, self.port, reason)
        self.close()
