""" Session settings, and the option functions used to adjust them. A
    :class:`Settings` instance is built once per session: the baseline is
    established first, and each option is applied in order, so a later
    option overrides an earlier one for the same field.

    Options are plain callables that accept a :class:`Settings` instance
    and modify a single field::

        session = webrcon.connect(address, secret, webrcon.deadline(1))
"""

import datetime
import os


DEFAULT_DIAL_TIMEOUT = 5.0
DEFAULT_DEADLINE = 5.0

ENVIRONMENT_DIAL_TIMEOUT = 'WEBRCON_DIAL_TIMEOUT'
ENVIRONMENT_DEADLINE = 'WEBRCON_DEADLINE'


class Settings:
    """ Timeouts for a single session, in seconds.

        :ivar dial_timeout: Upper bound on the opening handshake; zero
            means the handshake is not bounded.
        :ivar deadline: Upper bound on each individual read or write
            during a command exchange; zero disables the deadline.
    """

    __slots__ = ('dial_timeout', 'deadline', '_frozen')

    def __init__(self, dial_timeout=DEFAULT_DIAL_TIMEOUT, deadline=DEFAULT_DEADLINE):

        object.__setattr__(self, '_frozen', False)
        self.dial_timeout = dial_timeout
        self.deadline = deadline


    def __setattr__(self, name, value):
        if self._frozen:
            raise AttributeError('settings are read-only once resolved')

        object.__setattr__(self, name, value)


    def __eq__(self, other):
        if not isinstance(other, Settings):
            return NotImplemented

        return (self.dial_timeout, self.deadline) == (other.dial_timeout, other.deadline)


    def __repr__(self):
        return 'Settings(dial_timeout=%r, deadline=%r)' % (self.dial_timeout, self.deadline)


    @classmethod
    def baseline(cls):
        """ Return the default settings, honoring any overrides set in the
            environment.
        """

        dial = _environment(ENVIRONMENT_DIAL_TIMEOUT, DEFAULT_DIAL_TIMEOUT)
        deadline = _environment(ENVIRONMENT_DEADLINE, DEFAULT_DEADLINE)
        return cls(dial, deadline)


    @classmethod
    def resolve(cls, *options):
        """ Apply *options*, in order, to the baseline and return the result.
            The returned instance can no longer be modified.
        """

        settings = cls.baseline()

        for option in options:
            option(settings)

        object.__setattr__(settings, '_frozen', True)
        return settings


# end of class Settings



def dial_timeout(seconds):
    """ Return an option that bounds the opening handshake to *seconds*,
        which may also be a :class:`datetime.timedelta`.
    """

    seconds = _seconds(seconds, 'dial timeout')

    def option(settings):
        settings.dial_timeout = seconds

    return option


def deadline(seconds):
    """ Return an option that bounds each read and write of a command
        exchange to *seconds*; zero disables the deadline.
    """

    seconds = _seconds(seconds, 'deadline')

    def option(settings):
        settings.deadline = seconds

    return option


def _seconds(value, name):

    if isinstance(value, datetime.timedelta):
        value = value.total_seconds()

    value = float(value)

    if value < 0:
        raise ValueError("%s cannot be negative: %r" % (name, value))

    return value


def _environment(variable, default):

    try:
        raw = os.environ[variable]
    except KeyError:
        return default

    try:
        return _seconds(raw, variable)
    except ValueError:
        raise ValueError("invalid %s: %r" % (variable, raw))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
