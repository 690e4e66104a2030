from __future__ import annotations

import struct
from typing import Any, Dict, List, Optional, Tuple

import msgpack

from ..errors import ProtocolError
from .fields import LENGTH_PREFIX_SIZE


# The length prefix is always a MessagePack uint32, regardless of how small
# the value is: marker byte 0xce followed by a big-endian 32-bit integer.

_LENGTH = struct.Struct(">BI")
_UINT32 = 0xce


def _packer(bytes_as_str: bool = False) -> msgpack.Packer:
    # Strings that came back undecodable are sent again byte for byte.
    return msgpack.Packer(use_bin_type=not bytes_as_str, unicode_errors="surrogateescape")


def _unpacker() -> msgpack.Unpacker:
    # Header and body maps are keyed by integers. A string that is not
    # valid UTF-8 keeps its raw bytes as surrogates rather than failing
    # the whole frame.
    return msgpack.Unpacker(raw=False, strict_map_key=False, unicode_errors="surrogateescape")


def encode_length(length: int) -> bytes:
    """Return the fixed-size length prefix for *length* bytes of payload."""
    return _LENGTH.pack(_UINT32, length)


def encode_frame(
    header: Dict[int, Any],
    body: Optional[Dict[int, Any]] = None,
    bytes_as_str: bool = False,
) -> bytes:
    """
    Serialize header (+ body) -> bytes

    Layout:
        [length prefix][header][body]

    Body omitted if not present; the length always covers exactly the
    bytes that follow the prefix.

    Byte strings are packed as MessagePack binary unless *bytes_as_str*
    is set, in which case they go out as MessagePack strings; the
    authentication scramble is the only value sent that way.
    """

    packer = _packer(bytes_as_str)
    payload = packer.pack(header)

    if body is not None:
        payload += packer.pack(body)

    return encode_length(len(payload)) + payload


def decode_length_prefix(data: bytes) -> int:
    """Deserialize the length prefix read off the wire."""

    if len(data) != LENGTH_PREFIX_SIZE:
        raise ProtocolError("response has invalid size")

    try:
        length = msgpack.unpackb(data)
    except (ValueError, msgpack.UnpackException) as exc:
        raise ProtocolError("response has invalid size") from exc

    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise ProtocolError("response has invalid size")

    return length


def decode_objects(data: bytes) -> List[Any]:
    """
    Deserialize every packed value in *data*, in order.

    A truncated trailing value is an error: either the whole buffer decodes
    or nothing is returned.
    """

    unpacker = _unpacker()
    unpacker.feed(data)

    objects = list()

    try:
        while unpacker.tell() < len(data):
            objects.append(unpacker.unpack())
    except msgpack.OutOfData as exc:
        raise ProtocolError("response has invalid size") from exc
    except (ValueError, msgpack.UnpackException) as exc:
        raise ProtocolError(f"response could not be decoded: {exc}") from exc

    return objects


def decode_frame(payload: bytes) -> Tuple[Dict[int, Any], Dict[int, Any]]:
    """
    Deserialize the bytes following the length prefix -> (header, body)

    The header must be a mapping. A missing or non-mapping body is treated
    as an empty body.
    """

    objects = decode_objects(payload)

    if not objects:
        raise ProtocolError("invalid header: response is empty")

    header = objects[0]
    if not isinstance(header, dict):
        raise ProtocolError(f"invalid header: {type(header).__name__} (mapping expected)")

    body = objects[1] if len(objects) > 1 else None
    if not isinstance(body, dict):
        body = {}

    return header, body
