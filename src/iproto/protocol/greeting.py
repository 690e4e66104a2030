""" Handling of the server greeting and the CHAP-SHA1 challenge/response
    computation used to authenticate a session.

    The greeting is a fixed 128 byte block sent by the server as soon as a
    connection is established. The first 64 bytes are a line of text that
    identifies the server, including its version; the following 44 bytes
    are a base64-encoded random salt, of which only the first 20 decoded
    bytes are used.
"""

import base64
import binascii
import hashlib
import re

from ..errors import ProtocolError
from . import fields


# The version is the first run of digits, dots and dashes, plus whatever
# alphanumeric suffix immediately follows it: '1.6.8', '2.10.0-beta1', etc.

version_pattern = re.compile(r'[\d.-]+[a-zA-F\d]*')


class Greeting:
    """ The interpreted contents of a server greeting.

        :ivar version: The server version string, or None if the greeting
            did not contain one.
        :ivar salt: The 20 byte session salt.
    """

    def __init__(self, version, salt):
        self.version = version
        self.salt = salt


    def __repr__(self):
        return 'Greeting(version=%r)' % (self.version,)


# end of class Greeting



def parse(data):
    """ Interpret the raw greeting *data* received from the server and
        return a :class:`Greeting` instance.
    """

    if len(data) != fields.GREETING_SIZE:
        raise ProtocolError('greeting has invalid size: %d bytes' % (len(data)))

    text = data[:fields.GREETING_SALT_OFFSET]
    text = text.decode('ascii', errors='replace')

    found = version_pattern.search(text)
    if found is None:
        version = None
    else:
        version = found.group(0)

    salt_end = fields.GREETING_SALT_OFFSET + fields.GREETING_SALT_SIZE
    encoded = data[fields.GREETING_SALT_OFFSET:salt_end]
    encoded = encoded.strip()

    try:
        salt = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ProtocolError('greeting salt is not valid base64') from exc

    if len(salt) < fields.SALT_LENGTH:
        raise ProtocolError('greeting salt is too short: %d bytes' % (len(salt)))

    salt = salt[:fields.SALT_LENGTH]
    return Greeting(version, salt)



def xor(first, second):
    """ Return the byte-wise exclusive or of *first* and *second*. The two
        arguments must have the same length; a mismatch is an error rather
        than a silent truncation.
    """

    if len(first) != len(second):
        raise ValueError('cannot xor %d bytes with %d bytes' % (len(first), len(second)))

    return bytes(a ^ b for a, b in zip(first, second))



def scramble(password, salt):
    """ Compute the CHAP-SHA1 response to the server challenge: the SHA-1
        digest of the *password*, xored with the SHA-1 digest of the *salt*
        followed by the doubly-hashed password. The password itself is
        never sent to the server.
    """

    if isinstance(password, str):
        password = password.encode('utf-8')

    first = hashlib.sha1(password).digest()
    second = hashlib.sha1(first).digest()
    last = hashlib.sha1(salt[:fields.SALT_LENGTH] + second).digest()

    return xor(first, last)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
