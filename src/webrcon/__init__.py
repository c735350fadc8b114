""" Python client for the WebRCON remote console protocol. A session is
    opened with :func:`connect`, commands are sent with
    :func:`Session.execute`, and responses are matched to their requests
    by identifier.

    >>> import webrcon
    >>> with webrcon.connect('127.0.0.1:28016', 'secret') as session:
    ...     print(session.execute('status'))
"""

# Utility components.

from . import json

# Submodules used by multiple other components.

from . import errors
from . import protocol
from . import transport

from .errors import (
    WebRconError,
    CommandError,
    EmptyCommand,
    CommandTooLong,
    AuthenticationFailed,
    DecodeError,
)
from .transport import TransportError, TransportTimeout, TransportConnectionError

# Primary public-facing interfaces.

from . import settings
from .settings import Settings, dial_timeout, deadline

from .protocol.message import Envelope
from .protocol.fields import MAX_COMMAND_LENGTH

from . import session
from .session import Session, connect

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
