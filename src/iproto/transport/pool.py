"""Idle connection pool.

Sockets handed back by :meth:`TcpTransport.release_to_pool` are kept here,
keyed by (host, port), until the next :meth:`TcpTransport.connect` to the
same server picks them up again. This is the only state shared between
connections; it holds no policy beyond a bounded number of idle sockets.
"""

from __future__ import annotations

import socket
import threading
from typing import Dict, List, Optional, Tuple


Entry = Tuple[socket.socket, int]


class Pool:
    """Bounded set of idle sockets per server."""

    def __init__(self, size: int = 30):
        self.size = int(size)
        self._idle: Dict[Tuple[str, int], List[Entry]] = {}
        self._lock = threading.Lock()

    def take(self, host: str, port: int) -> Optional[Entry]:
        """Return the most recently pooled (socket, reuse_count), if any."""
        key = (host, int(port))
        with self._lock:
            idle = self._idle.get(key)
            if not idle:
                return None
            entry = idle.pop()
            if not idle:
                del self._idle[key]
            return entry

    def put(self, host: str, port: int, sock: socket.socket, count: int) -> bool:
        """Keep *sock* for later reuse; False if the pool for this server is full."""
        key = (host, int(port))
        with self._lock:
            idle = self._idle.setdefault(key, [])
            if len(idle) >= self.size:
                return False
            idle.append((sock, count))
            return True

    def clear(self) -> None:
        """Close and forget every idle socket."""
        with self._lock:
            entries = [entry for idle in self._idle.values() for entry in idle]
            self._idle.clear()

        for sock, _count in entries:
            try:
                sock.close()
            except OSError:
                pass

    def __len__(self) -> int:
        with self._lock:
            return sum(len(idle) for idle in self._idle.values())


default = Pool()
