from . import fields
from . import wire
from . import message
from . import greeting
from . import builder

from .message import Request, Response


"""
IProto Protocol Layer
=====================

This package defines the IProto binary protocol as spoken by the client:
the wire constants, the framing codec, the request/response structures,
the greeting/authentication computations, and one builder per command.

The protocol layer MUST NOT perform any I/O. It turns values into bytes
and bytes into values; moving the bytes is the job of the transport.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Connection (iproto.connection)
    High-level semantic API
    - select() / insert() / replace() / update() / upsert()
    - delete() / call() / eval() / ping()
    Handshake, authentication, uniform error handling

    │
    ▼
Schema Resolver (iproto.schema)
    Space / index names -> numeric ids, cached per connection

    │
    ▼
Command Builders (builder.py)
    One constructor per command
    - Key normalization, operator renumbering, select defaults
    - No transport awareness

    │
    ▼
Request / Response (message.py)
    Header + body for a request, status + data + error for a response

    │
    ▼
Codec (wire.py)
    Length-prefixed MessagePack frames

    │
    ▼
Field Vocabulary (fields.py)
    Header keys, body keys, command codes, iterator codes

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Session Layer (iproto.transport.session)
    Correlation ids, one outstanding request at a time

Transport Layer (iproto.transport)
    Moves bytes
    - TCP sockets
    - idle socket pool

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
