""" Translation of space and index names into the numeric ids required on
    the wire. Names are looked up by selecting from the server's own
    metadata spaces, _space and _index, through their 'name' index; the
    results are cached for the lifetime of the connection.

    The cache is never invalidated implicitly. If the schema changes on the
    server while a connection is open, call :meth:`Cache.clear` to force the
    names to be looked up again.
"""

from .errors import SchemaError
from .protocol import builder
from .protocol import fields


class Cache:
    """ Name to id mappings for one connection. Spaces are keyed by name,
        indexes by (space id, index name), since index names are only
        unique within a space.
    """

    def __init__(self):
        self.spaces = dict()
        self.indexes = dict()


    def __repr__(self):
        return 'schema.Cache: spaces=%r, indexes=%r' % (self.spaces, self.indexes)


    def __len__(self):
        return len(self.spaces) + len(self.indexes)


    def clear(self):
        self.spaces.clear()
        self.indexes.clear()


# end of class Cache



class Resolver:
    """ Resolve space and index identifiers for a single connection. The
        *session* is anything with a send() method accepting a
        :class:`iproto.protocol.message.Request`, normally the owning
        :class:`iproto.Connection`; the *cache* is where resolved names are
        kept.
    """

    def __init__(self, session, cache=None):

        if cache is None:
            cache = Cache()

        self.session = session
        self.cache = cache


    def space(self, space):
        """ Return the numeric id for *space*, which may be a name or already
            a numeric id.
        """

        if _is_numeric(space):
            return space

        if not isinstance(space, str):
            raise TypeError('space must be a name or a numeric id, not ' + type(space).__name__)

        try:
            return self.cache.spaces[space]
        except KeyError:
            pass

        # Each tuple in _space looks like:
        #   [space_id, owner_id, name, engine, field_count, options, format]

        space_id = self._lookup(fields.SPACE_SPACE, space, 0)

        if space_id is None:
            raise SchemaError('cannot find space: ' + space)

        self.cache.spaces[space] = space_id
        return space_id


    def index(self, space, index):
        """ Return the numeric id for *index* within *space*. Either may be
            a name or already a numeric id; the space is resolved first.
        """

        if _is_numeric(index):
            return index

        if not isinstance(index, str):
            raise TypeError('index must be a name or a numeric id, not ' + type(index).__name__)

        space_id = self.space(space)
        key = (space_id, index)

        try:
            return self.cache.indexes[key]
        except KeyError:
            pass

        # Each tuple in _index looks like:
        #   [space_id, index_id, name, type, options, parts]

        index_id = self._lookup(fields.INDEX_SPACE, [space_id, index], 1)

        if index_id is None:
            raise SchemaError('cannot find index: ' + index)

        self.cache.indexes[key] = index_id
        return index_id


    def _lookup(self, system_space, key, position):
        """ Select from one of the system spaces by name, and return the
            numeric field at *position* of the first tuple found. Returns
            None if there is no such tuple, or the field is not numeric.
        """

        request = builder.select(system_space, fields.NAME_INDEX, key)
        response = self.session.send(request).check()
        data = response.data

        if not isinstance(data, (list, tuple)) or len(data) == 0:
            return None

        first = data[0]

        if not isinstance(first, (list, tuple)) or len(first) <= position:
            return None

        value = first[position]

        if _is_numeric(value):
            return value

        return None


# end of class Resolver



def _is_numeric(value):
    return isinstance(value, int) and not isinstance(value, bool)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
