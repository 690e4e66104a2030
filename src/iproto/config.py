""" Connection configuration. A :class:`Configuration` is built for every
    :class:`iproto.Connection` from the module-level :data:`defaults`, an
    optional mapping of parameters, and any keyword arguments, in that order
    of increasing precedence. The defaults themselves are never modified.
"""

from .errors import ConfigurationError
from .protocol import fields


defaults = {
    'host': '127.0.0.1',
    'port': 3301,
    'user': None,
    'password': '',
    'socket_timeout': 5000,         # milliseconds
    'call_semantics': 'old',
}


class Configuration:
    """ A convenience class to represent the settings of one connection.
        Every option in :data:`defaults` is available as an attribute.

        Values are validated as soon as the configuration is built, so that
        a bad setting is reported before any network I/O takes place.
    """

    def __init__(self, params=None, **kwargs):

        settings = dict(defaults)

        for overrides in (params, kwargs):
            if not overrides:
                continue

            for key, value in overrides.items():
                if key not in defaults:
                    raise ConfigurationError('unknown connection option: ' + repr(key))

                # A None value means "not specified", the same as if the
                # option were absent altogether.

                if value is None:
                    continue

                settings[key] = value

        self.host = settings['host']
        self.port = settings['port']
        self.user = settings['user']
        self.password = settings['password']
        self.socket_timeout = settings['socket_timeout']
        self.call_semantics = settings['call_semantics']

        self.validate()


    def __repr__(self):

        if self.password:
            password = '***'
        else:
            password = ''

        return 'Configuration(host=%r, port=%r, user=%r, password=%r, socket_timeout=%r, call_semantics=%r)' % (
            self.host, self.port, self.user, password, self.socket_timeout, self.call_semantics)


    def validate(self):
        """ Raise :class:`iproto.errors.ConfigurationError` if any setting
            is unusable.
        """

        if not isinstance(self.call_semantics, str) or self.call_semantics not in fields.CALL:
            raise ConfigurationError('incorrect value for call_semantics: ' + repr(self.call_semantics))

        try:
            self.port = int(self.port)
        except (TypeError, ValueError):
            raise ConfigurationError('port must be an integer: ' + repr(self.port))

        try:
            self.socket_timeout = int(self.socket_timeout)
        except (TypeError, ValueError):
            raise ConfigurationError('socket_timeout must be an integer number of milliseconds: ' + repr(self.socket_timeout))

        if self.socket_timeout < 0:
            raise ConfigurationError('socket_timeout cannot be negative')

        if self.user is not None and not isinstance(self.user, str):
            raise ConfigurationError('user must be a string')


    def as_dict(self):
        settings = dict()
        for key in defaults.keys():
            settings[key] = getattr(self, key)

        return settings


# end of class Configuration


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
