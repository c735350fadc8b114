""" Exceptions raised by the WebRCON client. Everything raised on purpose by
    this package derives from :class:`WebRconError`; the transport-specific
    subclasses live in :mod:`webrcon.transport.base` so that the transport
    layer does not depend on the session layer.
"""


class WebRconError(Exception):
    """ Base class for all WebRCON client errors.
    """


class CommandError(WebRconError, ValueError):
    """ A command was rejected before anything was sent to the server.
    """


class EmptyCommand(CommandError):
    """ The command string is empty.
    """

    def __init__(self, message='command is empty'):
        CommandError.__init__(self, message)


class CommandTooLong(CommandError):
    """ The command string is longer than the allowed maximum.
    """

    def __init__(self, length, maximum):
        self.length = length
        self.maximum = maximum
        message = "command too long: %d characters, maximum is %d" % (length, maximum)
        CommandError.__init__(self, message)


class AuthenticationFailed(WebRconError):
    """ The server refused the secret during the opening handshake.
    """


class DecodeError(WebRconError, ValueError):
    """ A received frame could not be interpreted as an envelope.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
