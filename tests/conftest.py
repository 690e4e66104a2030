import base64
import hashlib

import msgpack
import pytest

import iproto
from iproto.protocol import fields
from iproto.protocol import wire
from iproto.transport import Transport, TransportError, TransportConnectionError


SALT = bytes(range(32))
UUID = '8d3c8a8c-4f6e-4d55-9d1a-2a4c4f1e5a10'


def make_greeting(version='1.6.8', salt=SALT):
    """ Build a 128 byte greeting block the way the server lays it out: two
        64 byte lines, the first naming the server, the second holding the
        base64-encoded salt.
    """

    line = 'Tarantool %s (Binary) %s' % (version, UUID)
    line = line.encode()[:63].ljust(63) + b'\n'

    encoded = base64.b64encode(salt)
    encoded = encoded.ljust(63) + b'\n'

    return line + encoded


def expected_scramble(password, salt=SALT):
    first = hashlib.sha1(password.encode()).digest()
    second = hashlib.sha1(first).digest()
    last = hashlib.sha1(salt[:20] + second).digest()
    return bytes(a ^ b for a, b in zip(first, last))


def decode_request(frame):
    """ Decode a request frame as the server would. The scramble is sent as
        a MessagePack string but is not valid UTF-8, hence the error handler.
    """

    length = wire.decode_length_prefix(frame[:fields.LENGTH_PREFIX_SIZE])
    payload = frame[fields.LENGTH_PREFIX_SIZE:]
    assert length == len(payload)

    unpacker = msgpack.Unpacker(raw=False, strict_map_key=False, unicode_errors='surrogateescape')
    unpacker.feed(payload)
    objects = list(unpacker)

    header = objects[0]
    if len(objects) > 1:
        body = objects[1]
    else:
        body = None

    return header, body



class FakeServer:
    """ Scripted server side of a connection. Knows one user space,
        'activities', with a primary index and a 'price' index; answers the
        metadata lookups, authentication, and every command. Every decoded
        request is kept in *requests* for later inspection.
    """

    def __init__(self):

        self.spaces = {'activities': 512, 'accounts': 513}
        self.indexes = {
            (512, 'primary'): 0,
            (512, 'price'): 1,
            (513, 'primary'): 0,
            (513, 'owner'): 3,
        }
        self.users = dict()
        self.salt = SALT
        self.tuples = [[1, 'hiking', 300], [2, 'rowing', 150]]

        self.requests = list()
        self.handlers = dict()
        self.crafted = list()
        self.sync_offset = 0


    def commands(self, command=None):
        if command is None:
            return [header[fields.TYPE] for header, body in self.requests]

        return [(header, body) for header, body in self.requests if header[fields.TYPE] == command]


    def handle(self, frame):

        header, body = decode_request(frame)
        self.requests.append((header, body))

        if self.crafted:
            return self.crafted.pop(0)

        command = header[fields.TYPE]

        try:
            handler = self.handlers[command]
        except KeyError:
            handler = self.dispatch

        status, reply = handler(command, body)

        response_header = dict()
        response_header[fields.TYPE] = status
        response_header[fields.SYNC] = header[fields.SYNC] + self.sync_offset

        return wire.encode_frame(response_header, reply)


    def dispatch(self, command, body):

        if command == fields.PING:
            return fields.OK, {}

        if command == fields.AUTH:
            return self.authenticate(body)

        if command == fields.SELECT:
            return fields.OK, {fields.DATA: self.select(body)}

        if command in (fields.INSERT, fields.REPLACE):
            return fields.OK, {fields.DATA: [body[fields.TUPLE]]}

        if command in (fields.DELETE, fields.UPDATE):
            return fields.OK, {fields.DATA: [body[fields.KEY] + ['updated']]}

        if command == fields.UPSERT:
            return fields.OK, {}

        if command in (fields.CALL_OLD, fields.CALL_NEW, fields.EVAL):
            return fields.OK, {fields.DATA: body[fields.TUPLE]}

        return 0x8000 | 48, {fields.ERROR: 'Unknown request type %d' % (command)}


    def authenticate(self, body):

        user = body[fields.USERNAME]
        mechanism, scramble = body[fields.TUPLE]
        scramble = scramble.encode('utf-8', 'surrogateescape')

        try:
            password = self.users[user]
        except KeyError:
            return 0x8000 | 45, {fields.ERROR: "User '%s' is not found" % (user)}

        if mechanism != 'chap-sha1' or scramble != expected_scramble(password, self.salt):
            return 0x8000 | 47, {fields.ERROR: "Incorrect password supplied for user '%s'" % (user)}

        return fields.OK, {}


    def select(self, body):

        space = body[fields.SPACE_ID]
        index = body[fields.INDEX_ID]
        key = body[fields.KEY]

        if space == fields.SPACE_SPACE and index == fields.NAME_INDEX:
            name = key[0]
            try:
                space_id = self.spaces[name]
            except KeyError:
                return []
            return [[space_id, 1, name, 'memtx', 0, {}, []]]

        if space == fields.INDEX_SPACE and index == fields.NAME_INDEX:
            space_id, name = key
            try:
                index_id = self.indexes[(space_id, name)]
            except KeyError:
                return []
            return [[space_id, index_id, name, 'tree', {'unique': True}, [[0, 'unsigned']]]]

        return self.tuples


# end of class FakeServer



class FakeTransport(Transport):
    """ In-memory transport wired to a :class:`FakeServer`. Every frame sent
        is answered immediately; the answer is queued for :func:`receive`.
    """

    def __init__(self, server, reused=0):

        self.server = server
        self.reused = reused
        self.inbox = bytearray()
        self.sent = list()
        self.timeout = None
        self.open = False
        self.connects = 0
        self.closes = 0
        self.released = False
        self.pool_accepts = True
        self.fail_send = False
        self.greeting = make_greeting()


    def connect(self, host, port):
        self.host = host
        self.port = port
        self.open = True
        self.connects += 1
        self.inbox = bytearray()

        if self.reused == 0:
            self.inbox += self.greeting


    def send(self, data):
        if not self.open:
            raise TransportConnectionError('not connected')

        if self.fail_send:
            self.close()
            raise TransportError('broken pipe')

        self.sent.append(bytes(data))
        self.inbox += self.server.handle(bytes(data))
        return len(data)


    def receive(self, size):
        if not self.open:
            raise TransportConnectionError('not connected')

        if len(self.inbox) < size:
            self.close()
            raise TransportConnectionError('connection closed by server')

        data = bytes(self.inbox[:size])
        del self.inbox[:size]
        return data


    def set_timeout(self, timeout):
        self.timeout = timeout


    def close(self):
        self.open = False
        self.closes += 1


    def reuse_count(self):
        if self.open:
            return self.reused
        return 0


    def release_to_pool(self):
        if self.pool_accepts:
            self.open = False
            self.released = True
            return True

        self.close()
        raise TransportError('connection pool is full')


    @property
    def is_open(self):
        return self.open


# end of class FakeTransport



@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def transport(server):
    return FakeTransport(server)


@pytest.fixture
def connection(transport):
    connection = iproto.Connection(transport=transport)
    connection.connect()
    return connection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
