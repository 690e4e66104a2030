"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)

from . import pool
from .tcp import TcpTransport
from .session import RequestSession
