""" Convenience constructors for every supported IProto request. Each
    function assembles the command-specific body and returns a
    :class:`iproto.protocol.message.Request`; none of them perform any I/O.
    Space and index arguments here are always numeric ids, resolving names
    is the job of :mod:`iproto.schema`.
"""

from ..errors import ConfigurationError
from . import fields
from .message import Request


def prepare_key(key):
    """ The key field is always an array on the wire. None becomes an empty
        array, a scalar becomes a single-element array, and a sequence is
        passed through unchanged.
    """

    if key is None:
        return []

    if isinstance(key, (list, tuple)):
        return key

    return [key]



def prepare_ops(operations):
    """ Renumber the field positions of an update/upsert operator list. The
        field numbers a user sees in the console count the primary key as
        field 1; the wire protocol does not count it at all, so field 2 in
        the console is field 1 here, and so on.

        A new operator list is returned, the caller's list is not modified.
        Named (non-integer) field positions are passed through as-is.
    """

    prepared = list()

    for operation in operations:
        operation = list(operation)
        position = operation[1]

        if isinstance(position, int) and not isinstance(position, bool):
            operation[1] = position - 1

        prepared.append(operation)

    return prepared



def iterator_code(iterator):
    """ Translate an iterator name (or numeric code) into its numeric code.
        Anything unrecognized, including None, means equality.
    """

    if isinstance(iterator, str):
        return fields.ITERATORS.get(iterator.upper(), fields.EQ)

    if isinstance(iterator, int) and not isinstance(iterator, bool):
        if iterator in fields.ITERATORS.values():
            return iterator

    return fields.EQ



def call_code(semantics):
    """ Return the command code for a call, given the configured call
        *semantics*: 'old' wraps each returned value in an extra tuple,
        'new' does not.
    """

    try:
        return fields.CALL[semantics]
    except (KeyError, TypeError):
        raise ConfigurationError('incorrect value for call_semantics: ' + repr(semantics))



def ping():
    return Request(fields.PING)


def auth(user, scramble):
    """ The scramble is raw bytes, but the server expects it as a
        MessagePack string.
    """

    body = dict()
    body[fields.USERNAME] = user
    body[fields.TUPLE] = [fields.AUTH_MECHANISM, scramble]
    return Request(fields.AUTH, body, bytes_as_str=True)



def select(space_id, index_id, key=None, limit=None, offset=None, iterator=None):
    """ Build a select request. The *limit* defaults to the largest value
        the protocol can represent, the *offset* defaults to zero, and the
        *iterator* defaults to equality.
    """

    if limit is None:
        limit = fields.MAX_LIMIT
    else:
        limit = int(limit)

    if isinstance(offset, bool) or not isinstance(offset, int):
        offset = 0

    body = dict()
    body[fields.SPACE_ID] = space_id
    body[fields.INDEX_ID] = index_id
    body[fields.LIMIT] = limit
    body[fields.OFFSET] = offset
    body[fields.ITERATOR] = iterator_code(iterator)
    body[fields.KEY] = prepare_key(key)

    return Request(fields.SELECT, body)



def insert(space_id, values):
    return _store(fields.INSERT, space_id, values)


def replace(space_id, values):
    return _store(fields.REPLACE, space_id, values)


def _store(command, space_id, values):
    """ Insert and replace share one body layout: the full tuple, including
        the primary key field(s).
    """

    body = dict()
    body[fields.SPACE_ID] = space_id
    body[fields.TUPLE] = values
    return Request(command, body)



def delete(space_id, key):
    body = dict()
    body[fields.SPACE_ID] = space_id
    body[fields.KEY] = prepare_key(key)
    return Request(fields.DELETE, body)



def update(space_id, index_id, key, operations):
    body = dict()
    body[fields.SPACE_ID] = space_id
    body[fields.INDEX_ID] = index_id
    body[fields.KEY] = prepare_key(key)
    body[fields.TUPLE] = prepare_ops(operations)
    return Request(fields.UPDATE, body)



def upsert(space_id, key, operations, new_tuple):
    """ Build an upsert request. The server inserts *new_tuple* if no tuple
        matches *key*, otherwise it applies the *operations*; which of the
        two happened is not reported back.
    """

    body = dict()
    body[fields.SPACE_ID] = space_id
    body[fields.KEY] = prepare_key(key)
    body[fields.TUPLE] = new_tuple
    body[fields.DEF_TUPLE] = prepare_ops(operations)
    return Request(fields.UPSERT, body)



def call(semantics, name, args=None):

    command = call_code(semantics)

    if args is None:
        args = []

    body = dict()
    body[fields.FUNCTION_NAME] = name
    body[fields.TUPLE] = args
    return Request(command, body)



def evaluate(expression, args=None):

    if args is None:
        args = []

    body = dict()
    body[fields.EXPRESSION] = expression
    body[fields.TUPLE] = args
    return Request(fields.EVAL, body)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
