""" The :class:`Connection` is the principal entry point for users of the
    :mod:`iproto` client: one instance represents one session with one
    server. It performs the greeting handshake and authentication, resolves
    space and index names, and issues every supported command.

    Errors are always raised, never returned; see :mod:`iproto.errors` for
    which failures leave the connection usable.
"""

import logging

from . import config
from . import schema
from .errors import AuthenticationError, ProtocolError, TransportError
from .protocol import builder
from .protocol import fields
from .protocol import greeting
from .protocol.message import Request
from .transport import TcpTransport, TransportConnectionError
from .transport.session import RequestSession


logger = logging.getLogger(__name__)


# Handshake states. A connection taken from the pool goes straight from
# DISCONNECTED to READY, as does an anonymous connection once greeted.

DISCONNECTED = 'DISCONNECTED'
GREETED = 'GREETED'
AUTHENTICATED = 'AUTHENTICATED'
READY = 'READY'

usable = set((AUTHENTICATED, READY))


class Connection:
    """ A client session with a single server. The *params* mapping and any
        keyword arguments are the options described in
        :data:`iproto.config.defaults`. The *transport* argument replaces the
        default :class:`iproto.transport.TcpTransport`; the *pool* argument
        selects the :class:`iproto.transport.pool.Pool` that the default
        transport uses for :func:`set_keepalive`.

        Creating a :class:`Connection` does not perform any network I/O;
        call :func:`connect` to establish the session.
    """

    def __init__(self, params=None, transport=None, pool=None, **kwargs):

        self.config = config.Configuration(params, **kwargs)

        if transport is None:
            transport = TcpTransport(self.config.socket_timeout, pool)
        else:
            transport.set_timeout(self.config.socket_timeout)

        self.transport = transport
        self.session = RequestSession(transport)
        self.schema = schema.Cache()
        self.resolver = schema.Resolver(self, self.schema)

        self.state = DISCONNECTED
        self.version = None
        self.salt = None
        self.server = None


    def __repr__(self):
        return 'Connection(%s:%s, %s)' % (self.config.host, self.config.port, self.state)


    @property
    def call_semantics(self):
        return self.config.call_semantics


    @call_semantics.setter
    def call_semantics(self, semantics):
        builder.call_code(semantics)
        self.config.call_semantics = semantics


    @property
    def ready(self):
        return self.state in usable


    def connect(self, host=None, port=None):
        """ Connect to the server at *host* and *port*, defaulting to the
            configured values, and perform the handshake. A connection
            taken from the pool is already authenticated; no greeting is
            read and no credentials are sent.

            Connecting to a different server than last time discards any
            cached space and index ids.
        """

        if host is None:
            host = self.config.host
        if port is None:
            port = self.config.port

        # Cached ids only hold for the server they were looked up on.

        server = (host, int(port))
        if server != self.server:
            self.schema.clear()
            self.server = server

        self.state = DISCONNECTED
        self.transport.connect(host, port)

        try:
            self._handshake()
        except Exception:
            self.state = DISCONNECTED
            self.transport.close()
            raise

        return True


    def _handshake(self):

        if self.transport.reuse_count() > 0:
            logger.debug('reused connection, skipping greeting')
            self.state = READY
            return

        data = self.transport.receive(fields.GREETING_SIZE)
        interpreted = greeting.parse(data)

        self.version = interpreted.version
        self.salt = interpreted.salt
        self.state = GREETED
        logger.debug('greeted by server version %s', self.version)

        self._authenticate()


    def _authenticate(self):
        """ Authenticate the session with the configured credentials. If no
            user is configured the session remains anonymous.
        """

        user = self.config.user

        if not user:
            self.state = READY
            return

        try:
            scramble = greeting.scramble(self.config.password, self.salt)
        except ValueError as e:
            raise AuthenticationError(None, str(e))

        request = builder.auth(user, scramble)
        response = self.session.send(request)

        if not response.ok:
            error = response.error
            if not error:
                error = 'internal error'
            raise AuthenticationError(response.code, error)

        logger.debug('authenticated as %s', user)
        self.state = AUTHENTICATED


    def disconnect(self):
        """ Close the connection to the server.
        """

        self.state = DISCONNECTED
        self.transport.close()
        return True


    def set_keepalive(self):
        """ Hand the connection back to the pool for reuse by a later
            :func:`connect` to the same server. If the pool will not take
            it, the connection is closed and the error raised.
        """

        if not self.transport.is_open:
            raise TransportConnectionError('not connected')

        self.state = DISCONNECTED
        return self.transport.release_to_pool()


    def set_timeout(self, timeout):
        """ Set the timeout, in milliseconds, for every subsequent operation
            on the socket.
        """

        self.config.socket_timeout = int(timeout)
        self.transport.set_timeout(self.config.socket_timeout)
        return True


    def send(self, request):
        """ Send a fully formed :class:`iproto.protocol.message.Request` and
            return the :class:`iproto.protocol.message.Response`. The status
            of the response is not checked here.
        """

        if self.state not in usable:
            raise TransportConnectionError('not connected')

        try:
            return self.session.send(request)
        except (TransportError, ProtocolError):
            # The session closes the transport before raising.
            self.state = DISCONNECTED
            raise


    def execute(self, command, header=None, body=None):
        """ Issue a raw request with the given *command* code, optional extra
            *header* fields, and optional *body*. Returns the
            :class:`iproto.protocol.message.Response` without checking its
            status.
        """

        request = Request(command, body, header)
        return self.send(request)


    def _data(self, request):
        response = self.send(request).check()
        return response.data


    def ping(self):
        self._data(builder.ping())
        return 'PONG'


    def select(self, space, index=0, key=None, limit=None, offset=None, iterator=None):
        """ Select tuples from *space* using *index*. The *key* may be a
            single value, a sequence of values for a composite index, or
            None to match everything. The *iterator* is one of the names in
            :data:`iproto.protocol.fields.ITERATORS`; equality is assumed if
            it is omitted or not recognized.
        """

        space_id = self.resolver.space(space)
        index_id = self.resolver.index(space_id, index)

        request = builder.select(space_id, index_id, key, limit, offset, iterator)
        return self._data(request)


    def insert(self, space, values):
        """ Insert a new tuple. The tuple must include the primary key.
        """

        space_id = self.resolver.space(space)
        return self._data(builder.insert(space_id, values))


    def replace(self, space, values):
        """ Insert a tuple, replacing any existing tuple with the same primary
            key.
        """

        space_id = self.resolver.space(space)
        return self._data(builder.replace(space_id, values))


    def delete(self, space, key):
        """ Delete the tuple identified by *key*, which must be a value of
            the primary index.
        """

        space_id = self.resolver.space(space)
        return self._data(builder.delete(space_id, key))


    def update(self, space, index, key, operations):
        """ Apply the *operations* to the tuple identified by *key* in the
            unique *index*. Each operation is (operator, field, value), with
            fields numbered the same way as in the console: the first field
            is field 1.
        """

        space_id = self.resolver.space(space)
        index_id = self.resolver.index(space_id, index)

        request = builder.update(space_id, index_id, key, operations)
        return self._data(request)


    def upsert(self, space, key, operations, new_tuple):
        """ Insert *new_tuple* if no tuple matches *key*, otherwise apply the
            *operations* as :func:`update` would. The server does not report
            which of the two happened; an empty result means success.
        """

        space_id = self.resolver.space(space)

        request = builder.upsert(space_id, key, operations, new_tuple)
        data = self._data(request)

        if data is None:
            data = []

        return data


    def call(self, procedure, args=None):
        """ Invoke the stored procedure named *procedure* with *args*.
        """

        request = builder.call(self.config.call_semantics, procedure, args)
        return self._data(request)


    def eval(self, expression, args=None):
        """ Evaluate *expression* on the server, with *args* available to it
            as '...'.
        """

        request = builder.evaluate(expression, args)
        return self._data(request)


# end of class Connection



def new(params=None, **kwargs):
    """ Create a new :class:`Connection`. This does not connect; call
        :func:`Connection.connect` on the result.
    """

    return Connection(params, **kwargs)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
