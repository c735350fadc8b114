""" A class representation of a WebRCON envelope, and the generator used to
    assign request identifiers.
"""

import itertools
import threading

from . import fields


class Envelope:
    """ The :class:`Envelope` is a very thin encapsulation of what it means
        to be a message in a WebRCON context. Requests and responses share
        the same structure; the only field with protocol meaning is the
        *identifier*, which the server copies verbatim from a request to
        the corresponding response.

        The fields are in order of how they are represented on the wire:
        the *text* of the command or result, the correlation *identifier*,
        the advisory *kind* (one of :data:`fields.KINDS`, empty for
        requests), and an optional diagnostic *trace*.

        :ivar text: The command string, or the textual result.
        :ivar identifier: The integer correlation key.
        :ivar kind: Classification of the message; advisory only.
        :ivar trace: Stack trace reported by the server, if any.
    """

    __slots__ = ('text', 'identifier', 'kind', 'trace')

    def __init__(self, text='', identifier=0, kind='', trace=''):

        self.text = text
        self.identifier = identifier
        self.kind = kind
        self.trace = trace


    def __eq__(self, other):
        if not isinstance(other, Envelope):
            return NotImplemented

        return tuple(self) == tuple(other)


    def __iter__(self):
        return iter((self.text, self.identifier, self.kind, self.trace))


    def __repr__(self):
        return 'Envelope(text=%r, identifier=%r, kind=%r, trace=%r)' % tuple(self)


# end of class Envelope



class Identifiers:
    """ Thread-safe source of request identifiers. Each session owns its own
        instance; identifiers increase monotonically from
        :data:`fields.IDENTIFIER_MIN` and wrap around after
        :data:`fields.IDENTIFIER_MAX`, so they stay unique among the requests
        a session has in flight.
    """

    def __init__(self, start=fields.IDENTIFIER_MIN):

        if start < fields.IDENTIFIER_MIN or start > fields.IDENTIFIER_MAX:
            raise ValueError('identifier out of range: ' + repr(start))

        self._lock = threading.Lock()
        self._ticker = itertools.count(start)


    def __iter__(self):
        return self


    def __next__(self):

        with self._lock:
            identifier = next(self._ticker)

            if identifier >= fields.IDENTIFIER_MAX:
                self._ticker = itertools.count(fields.IDENTIFIER_MIN)

                if identifier > fields.IDENTIFIER_MAX:
                    identifier = next(self._ticker)

        return identifier


# end of class Identifiers



def request(command, identifier):
    """ Return a new request :class:`Envelope` for *command*, tagged with the
        supplied *identifier*. The kind is left blank, as the server ignores
        it on requests.
    """

    return Envelope(command, identifier)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
