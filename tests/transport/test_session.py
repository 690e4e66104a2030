import pytest

import iproto
from iproto.protocol import fields
from iproto.protocol import wire
from iproto.transport.session import RequestSession

from conftest import FakeTransport, decode_request


@pytest.fixture
def session(server):

    # A pooled transport does not send a greeting, which leaves the stream
    # clean for plain request/response exchanges.

    transport = FakeTransport(server, reused=1)
    transport.connect('127.0.0.1', 3301)
    return RequestSession(transport)


def sent_syncs(session):
    return [decode_request(frame)[0][fields.SYNC] for frame in session.transport.sent]


def test_sequential_ids(session):

    for expected in (1, 2, 3):
        response = session.execute(fields.PING)
        assert response.ok
        assert response.sync == expected

    assert sent_syncs(session) == [1, 2, 3]


def test_explicit_id_resynchronizes(session):

    session.execute(fields.PING)
    response = session.execute(fields.PING, header={fields.SYNC: 50})
    assert response.sync == 50

    session.execute(fields.PING)
    session.execute(fields.PING)

    assert sent_syncs(session) == [1, 50, 51, 52]


def test_id_wraps(session):

    session.sync = fields.SYNC_LIMIT - 2

    session.execute(fields.PING)
    session.execute(fields.PING)
    session.execute(fields.PING)

    assert sent_syncs(session) == [fields.SYNC_LIMIT - 1, 0, 1]


def test_result_shape(session, server):

    response = session.execute(fields.SELECT, body={
        fields.SPACE_ID: 512,
        fields.INDEX_ID: 0,
        fields.KEY: [],
    })

    assert response.status == fields.OK
    assert response.ok
    assert response.code is None
    assert response.data == server.tuples
    assert response.error is None


def test_error_status(session, server):

    response = session.execute(0x7f, body={})

    assert not response.ok
    assert response.status == 0x8000 | 48
    assert response.code == 48
    assert response.data is None
    assert 'Unknown request type' in response.error

    with pytest.raises(iproto.DatabaseError) as error:
        response.check()

    assert error.value.code == 48

    # Logical errors leave the connection alone.

    assert session.transport.is_open


def test_id_mismatch(session, server):

    server.sync_offset = 5

    with pytest.raises(iproto.ProtocolError) as error:
        session.execute(fields.PING)

    message = str(error.value)
    assert 'mismatch' in message
    assert 'req 1' in message
    assert 'res 6' in message

    assert not session.transport.is_open


def test_send_failure(session):

    session.transport.fail_send = True

    with pytest.raises(iproto.TransportError) as error:
        session.execute(fields.PING)

    assert 'failed to send request' in str(error.value)
    assert not session.transport.is_open


def test_short_response(session, server):

    # The length prefix promises more than the server delivers.

    server.crafted.append(wire.encode_length(50) + b'\x80')

    with pytest.raises(iproto.TransportConnectionError) as error:
        session.execute(fields.PING)

    assert 'failed to get response header and body' in str(error.value)
    assert not session.transport.is_open


def test_invalid_size(session, server):

    server.crafted.append(b'\x01\x02\x03\x04\x05')

    with pytest.raises(iproto.ProtocolError) as error:
        session.execute(fields.PING)

    assert 'invalid size' in str(error.value)
    assert not session.transport.is_open


def test_invalid_header(session, server):

    payload = wire.encode_frame([1, 2, 3])
    server.crafted.append(payload)

    with pytest.raises(iproto.ProtocolError) as error:
        session.execute(fields.PING)

    assert 'invalid header' in str(error.value)
    assert not session.transport.is_open


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
