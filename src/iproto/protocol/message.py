""" Class representations of IProto requests and responses.
"""

from ..errors import DatabaseError
from . import fields
from . import wire


class Request:
    """ The :class:`Request` is a thin encapsulation of a single IProto
        request: the *command* code, the command-specific *body* mapping,
        and any additional *header* fields. The body is None for commands
        that do not carry one, such as a ping.

        The correlation id is not known when a :class:`Request` is built;
        it is assigned by the session that puts the request on the wire,
        unless the caller already placed one in the *header*.

        Byte strings in the body are sent as MessagePack binary, unless
        *bytes_as_str* is set.
    """

    def __init__(self, command, body=None, header=None, bytes_as_str=False):

        self.command = command
        self.body = body
        self.bytes_as_str = bytes_as_str

        if header is None:
            header = dict()
        else:
            header = dict(header)

        header[fields.TYPE] = command
        self.header = header


    def __repr__(self):
        return 'Request(%#04x, %r, %r)' % (self.command, self.header, self.body)


    @property
    def sync(self):
        return self.header.get(fields.SYNC)


    def encode(self, sync):
        """ Return the bytes representation of this request, using *sync*
            as the correlation id.
        """

        self.header[fields.SYNC] = sync
        return wire.encode_frame(self.header, self.body, self.bytes_as_str)


# end of class Request



class Response:
    """ A decoded response from the server. The *status* is the type field
        of the response header: zero if the request succeeded, otherwise an
        error status with the server error number in the low bits. The
        *data* is the sequence of result tuples, if any; the *error* is the
        server-provided error message, if any.
    """

    def __init__(self, status, sync=None, data=None, error=None):

        self.status = status
        self.sync = sync
        self.data = data
        self.error = error


    def __repr__(self):
        return 'Response(status=%r, sync=%r, data=%r, error=%r)' % (self.status, self.sync, self.data, self.error)


    @classmethod
    def decode(cls, payload):
        """ Construct a :class:`Response` from the bytes that followed the
            length prefix on the wire.
        """

        header, body = wire.decode_frame(payload)

        status = header.get(fields.TYPE)
        sync = header.get(fields.SYNC)
        data = body.get(fields.DATA)
        error = body.get(fields.ERROR)

        return cls(status, sync, data, error)


    @property
    def ok(self):
        return self.status == fields.OK


    @property
    def code(self):
        """ The server error number, or None for a successful response.
        """

        if self.ok:
            return None

        try:
            return self.status & fields.ERROR_CODE_MASK
        except TypeError:
            return None


    def check(self):
        """ Raise :class:`iproto.errors.DatabaseError` if the server reported
            an error, otherwise return this response. A non-ok status with no
            error message is reported as an internal error.
        """

        if self.ok:
            return self

        error = self.error
        if not error:
            error = 'internal error'

        raise DatabaseError(self.code, error)


# end of class Response


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
