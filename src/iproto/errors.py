""" Exception classes raised by the :mod:`iproto` client. Every failure is
    raised as a subclass of :class:`Error`, so that a caller can choose to
    handle all client failures in one place, or pick out the specific kind
    of failure it cares about.

    The transport failures are also re-exported by :mod:`iproto.transport`,
    next to the transport contract that raises them.
"""


class Error(Exception):
    """ Base class for all :mod:`iproto` errors.
    """


# Transport agnostic exceptions

class TransportError(Error):
    """ Base class for all transport-layer errors. The socket is always
        closed before one of these is raised.
    """


class TransportTimeout(TransportError):
    """ A send or receive did not complete within the socket timeout.
    """


class TransportConnectionError(TransportError):
    """ The transport could not establish or maintain a connection.
    """


class ProtocolError(Error):
    """ The byte stream from the server could not be interpreted: the length
        prefix was invalid, the header was not a mapping, or the response
        answered some other request. The connection is closed before this
        exception is raised; it cannot be trusted for further requests.
    """


class _ServerError(Error):
    """ Common base for errors carrying a server-provided error number and
        message.
    """

    def __init__(self, code, message):

        self.code = code
        self.message = message

        if code is None:
            Error.__init__(self, message)
        else:
            Error.__init__(self, '(%d) %s' % (code, message))


class AuthenticationError(_ServerError):
    """ The server rejected the supplied credentials, or the challenge could
        not be computed. The connection is left closed.
    """


class DatabaseError(_ServerError):
    """ The server answered with a non-ok status. The *code* is the server
        error number, the *message* is the error text provided by the server.
        The connection remains usable.
    """


class SchemaError(Error):
    """ A space or index name could not be resolved to a numeric id. The
        connection remains usable.
    """


class ConfigurationError(Error, ValueError):
    """ Invalid client configuration, detected before any network I/O.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
