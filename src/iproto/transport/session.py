"""Transport-agnostic request engine."""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from ..errors import ProtocolError
from ..protocol import fields, wire
from ..protocol.message import Request, Response
from .base import Transport, TransportError


logger = logging.getLogger(__name__)


class RequestSession:
    """Client-side request/response pattern logic.

    Exactly one request is outstanding at any time: :meth:`send` writes the
    request and blocks until the matching response has been read. The
    correlation id only detects a desynchronized stream; responses are never
    buffered or reordered.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self.sync = 0
        self._lock = threading.Lock()

    def next_sync(self, requested: Optional[int] = None) -> int:
        """Advance the correlation counter; an explicit id resynchronizes it."""
        self.sync = (self.sync + 1) % fields.SYNC_LIMIT
        if requested is not None:
            self.sync = requested
        return self.sync

    def execute(
        self,
        command: int,
        header: Optional[Dict[int, Any]] = None,
        body: Optional[Dict[int, Any]] = None,
    ) -> Response:
        """Build a request from raw parts and send it."""
        return self.send(Request(command, body, header))

    def send(self, request: Request) -> Response:
        with self._lock:
            return self._roundtrip(request)

    # --- internal ---
    def _roundtrip(self, request: Request) -> Response:
        sync = self.next_sync(request.sync)
        frame = request.encode(sync)

        try:
            self.transport.send(frame)
        except TransportError as exc:
            self.transport.close()
            raise type(exc)(f"failed to send request: {exc}") from exc

        try:
            prefix = self.transport.receive(fields.LENGTH_PREFIX_SIZE)
        except TransportError as exc:
            self.transport.close()
            raise type(exc)(f"failed to get response size: {exc}") from exc

        try:
            size = wire.decode_length_prefix(prefix)
        except ProtocolError:
            self.transport.close()
            raise

        try:
            payload = self.transport.receive(size)
        except TransportError as exc:
            self.transport.close()
            raise type(exc)(f"failed to get response header and body: {exc}") from exc

        try:
            response = Response.decode(payload)
        except ProtocolError:
            self.transport.close()
            raise

        if response.sync != sync:
            self.transport.close()
            raise ProtocolError(
                f"mismatch of response and request ids: req {sync} res {response.sync}"
            )

        logger.debug("request %#04x sync %d -> status %r", request.command, sync, response.status)
        return response
