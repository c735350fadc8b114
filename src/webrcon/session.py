""" Classes and methods implemented here implement the command/response
    aspects of the client API: connecting with a secret, sending a command,
    and matching the server's response to it by identifier.
"""

import logging
import threading

from .errors import CommandTooLong, DecodeError, EmptyCommand
from .protocol import fields
from .protocol import message
from .protocol import wire
from .settings import Settings
from .transport import TransportConnectionError, TransportError, TransportTimeout
from .transport import WebSocketTransport


logger = logging.getLogger(__name__)


class PendingCommand:
    """ Client-side helper that ties a request :class:`message.Envelope` to
        the response that will eventually arrive for it. The session's
        reader thread completes the instance; the caller blocks in
        :func:`wait`.

        :ivar request: The request envelope.
        :ivar response: The matching response envelope, once it arrives.
        :ivar error: The exception that prevented a response, if any.
    """

    def __init__(self, request):

        self.request = request
        self.response = None
        self.error = None
        self.done = False
        self.activity = threading.Event()


    @property
    def id(self):
        return self.request.identifier


    def wait(self, deadline):
        """ Block until the command is complete. The *deadline* applies to
            each read performed on behalf of this command: the timer restarts
            every time a frame arrives on the connection, whether or not it
            is the one being waited for. A *deadline* of zero or None blocks
            indefinitely.

            Returns True if the command completed, False if the deadline
            expired first.
        """

        timeout = deadline or None

        while self.done == False:
            if self.activity.wait(timeout) == False:
                return False
            self.activity.clear()

        return True


    def _touch(self):
        """ A frame arrived for some other request; restart the deadline.
        """

        self.activity.set()


    def _complete(self, response):
        """ Locally store the response and signal the caller blocking via
            :func:`wait` to proceed.
        """

        self.response = response
        self.done = True
        self.activity.set()


    def _fail(self, error):

        self.error = error
        self.done = True
        self.activity.set()


# end of class PendingCommand



class Session:
    """ An open, authenticated WebRCON connection. Sessions are normally
        created with :func:`connect` rather than directly.

        Requests are written by the calling thread; responses are read by a
        dedicated background thread, which hands each one to the
        :class:`PendingCommand` with the same identifier. Frames that do not
        match any pending command, such as console log lines, are discarded.
        A session may therefore be shared between threads.
    """

    def __init__(self, transport, settings=None):

        if settings is None:
            settings = Settings.resolve()

        self.transport = transport
        self._settings = settings
        self._identifiers = message.Identifiers()

        self._pending = dict()
        self._pending_lock = threading.Lock()
        self._closed = False
        self._failure = None

        name = 'webrcon.Session:%s' % (getattr(transport, 'address', id(self)),)
        self._thread = threading.Thread(target=self.run, name=name)
        self._thread.daemon = True
        self._thread.start()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    def __repr__(self):
        state = 'closed' if self._closed else 'open'
        return '<Session %r %s>' % (self.transport, state)


    @property
    def settings(self):
        return self._settings


    @property
    def closed(self):
        return self._closed


    @property
    def local_address(self):
        return self.transport.local_address


    @property
    def remote_address(self):
        return self.transport.remote_address


    def execute(self, command):
        """ Send *command* to the server and return the text of its response.
            See :func:`request` for the exceptions that may be raised.
        """

        return self.request(command).text


    def request(self, command):
        """ Send *command* to the server and block until the response with
            the matching identifier arrives; the full response
            :class:`message.Envelope` is returned.

            :class:`EmptyCommand` and :class:`CommandTooLong` are raised
            before anything is sent. :class:`TransportTimeout` is raised
            if the configured deadline expires on the write, or between
            frames while waiting for the response;
            :class:`TransportConnectionError` if the connection fails or
            is closed; :class:`DecodeError` if the server sends a frame
            that cannot be decoded while this command is waiting.
        """

        if command == '':
            raise EmptyCommand()

        if len(command) > fields.MAX_COMMAND_LENGTH:
            raise CommandTooLong(len(command), fields.MAX_COMMAND_LENGTH)

        request = message.request(command, next(self._identifiers))
        frame = wire.pack_frame(request)
        pending = PendingCommand(request)
        deadline = self._settings.deadline

        with self._pending_lock:
            if self._closed:
                raise TransportConnectionError('write %s: session is closed' % (self._endpoints(),))

            if self._failure is not None:
                raise TransportConnectionError('write %s: %s' % (self._endpoints(), self._failure)) from self._failure

            self._pending[pending.id] = pending

        try:
            self.transport.send(frame, deadline)

            if pending.wait(deadline) == False:
                raise TransportTimeout('read %s: i/o timeout' % (self._endpoints(),))
        finally:
            self._forget(pending)

        # The same failure may reach several waiting threads; each caller
        # gets its own exception, chained to the shared cause.

        error = pending.error

        if isinstance(error, DecodeError):
            raise DecodeError(str(error)) from error
        elif error is not None:
            raise TransportConnectionError(str(error)) from error

        return pending.response


    def close(self):
        """ Close the connection. Any command still waiting for a response
            fails with :class:`TransportConnectionError`. Closing a session
            more than once has no further effect.
        """

        with self._pending_lock:
            if self._closed:
                return
            self._closed = True

        logger.debug("closing %r", self)

        try:
            self.transport.close()
        finally:
            if self._thread is not threading.current_thread():
                self._thread.join()


    def run(self):
        """ This is the 'main' method for the reader thread. It owns the
            read side of the transport, and runs until the connection is
            closed or fails.
        """

        while True:
            try:
                frame = self.transport.recv()
            except TransportError as error:
                self._shutdown(error)
                return

            try:
                response = wire.unpack_frame(frame)
            except DecodeError as error:
                logger.warning("%r: discarding undecodable frame: %s", self, error)
                self._fail_all(error)
                continue

            self._rep_incoming(response)


    def _rep_incoming(self, response):
        """ Hand *response* to the pending command with the same identifier,
            if there is one, and restart the deadline of every other command
            still waiting.
        """

        with self._pending_lock:
            pending = self._pending.pop(response.identifier, None)
            waiting = list(self._pending.values())

        if pending is None:
            logger.debug("%r: discarding %s message %d, no pending request",
                         self, response.kind or 'untyped', response.identifier)
        else:
            pending._complete(response)

        for other in waiting:
            other._touch()


    def _fail_all(self, error):

        with self._pending_lock:
            waiting = list(self._pending.values())
            self._pending.clear()

        for pending in waiting:
            pending._fail(error)


    def _shutdown(self, error):

        with self._pending_lock:
            self._failure = error
            closed = self._closed

        if closed:
            logger.debug("%r: reader stopped", self)
        else:
            logger.debug("%r: connection lost: %s", self, error)

        self._fail_all(error)


    def _forget(self, pending):

        with self._pending_lock:
            if self._pending.get(pending.id) is pending:
                del self._pending[pending.id]


    def _endpoints(self):

        local = self.local_address
        remote = self.remote_address

        if not local or not remote:
            return repr(self.transport)

        return '%s:%s->%s:%s' % (local[0], local[1], remote[0], remote[1])


# end of class Session



def connect(address, secret, *options):
    """ Open an authenticated session to the WebRCON server at *address*,
        a ``host:port`` string. The *secret* is presented as the path of
        the WebSocket handshake; it may be empty. Any *options*, such as
        :func:`webrcon.settings.deadline`, are applied in order to the
        default settings.

        :class:`webrcon.errors.AuthenticationFailed` is raised if the server
        rejects the secret; any other failure to connect raises a
        :class:`TransportError`.
    """

    settings = Settings.resolve(*options)

    transport = WebSocketTransport(address, secret)
    transport.open(settings.dial_timeout)

    logger.debug("connected to %r with %r", transport, settings)
    return Session(transport, settings)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
