""" Python client for the IProto binary protocol. This includes the wire
    codec, the greeting handshake and CHAP-SHA1 authentication, translation
    of space and index names into numeric ids, and one method per supported
    command on a :class:`Connection`.
"""

# Submodules used by multiple other components.

from . import errors
from . import config
from . import protocol
from . import transport
from . import schema

# Primary public-facing interfaces.

from . import connection
new = connection.new

from .connection import Connection
from .errors import (
    Error,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
    ProtocolError,
    AuthenticationError,
    DatabaseError,
    SchemaError,
    ConfigurationError,
)
from .protocol.fields import ITERATORS

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
