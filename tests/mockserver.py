""" A super-simple WebRCON server to act as a foil for the client-facing unit
    tests. It only accepts connections on the path matching the password
    below; anything else is refused with a 404, just like a bad handshake
    against a real server. The servers defined here are started by the
    fixtures in conftest.py.
"""

import base64
import hashlib
import http
import socket
import threading
import time

from websockets.exceptions import ConnectionClosed
from websockets.sync.server import serve

import webrcon
from webrcon.protocol import fields
from webrcon.protocol import wire


password = 'password'

status_text = '''status
hostname: Rust Server [DOCKER]
version : 2260 secure (secure mode enabled, connected to Steam3)
map     : Procedural Map
players : 0 (500 max) (0 queued) (0 joining)

id name ping connected addr owner violation kicks
'''

# How long the 'deadline' command takes to answer, and how far apart the
# frames of the 'drip' command are sent.

slow = 0.5
drip_interval = 0.1
drip_count = 6


def respond(connection, request):
    """ Send the response(s) for a single decoded *request*.
    """

    command = request.text
    identifier = request.identifier

    if command == 'status':
        response = webrcon.Envelope(status_text, identifier, fields.GENERIC)

    elif command == 'deadline':
        time.sleep(slow)
        response = webrcon.Envelope('slept for %.1f seconds' % (slow), identifier, fields.GENERIC)

    elif command == 'noise':
        # Console output is broadcast with identifier 0, which no request
        # will ever carry.
        log = webrcon.Envelope('[event] assets/bundled/prefabs/cargoship.prefab', 0, fields.LOG)
        connection.send(wire.pack_frame(log))
        response = webrcon.Envelope('after the noise', identifier, fields.GENERIC)

    elif command == 'drip':
        for count in range(drip_count):
            time.sleep(drip_interval)
            log = webrcon.Envelope('drip %d' % (count), 0, fields.LOG)
            connection.send(wire.pack_frame(log))
        response = webrcon.Envelope('drained', identifier, fields.GENERIC)

    elif command == 'garbage':
        connection.send('this is not an envelope')
        return

    else:
        response = webrcon.Envelope("Command '%s' not found" % (command), identifier, fields.WARNING)

    connection.send(wire.pack_frame(response))


def handler(connection):

    try:
        for frame in connection:
            try:
                request = wire.unpack_frame(frame)
            except webrcon.DecodeError:
                continue

            respond(connection, request)
    except ConnectionClosed:
        pass


def process_request(connection, request):

    if request.path != '/' + password:
        return connection.respond(http.HTTPStatus.NOT_FOUND, '404 page not found\n')


class Server:
    """ Run the mock console in a background thread, listening on an
        automatically assigned port on the loopback interface.
    """

    def __init__(self):

        self.server = serve(handler, '127.0.0.1', 0, process_request=process_request, compression=None)
        self.thread = threading.Thread(target=self.server.serve_forever)
        self.thread.daemon = True
        self.thread.start()


    @property
    def address(self):
        host, port = self.server.socket.getsockname()[:2]
        return '%s:%d' % (host, port)


    def shutdown(self):
        self.server.shutdown()
        self.thread.join()


# end of class Server



class Rejecter:
    """ Answer every handshake with a fixed *reply* and hang up. The default
        reply is what a real server sends for a wrong password: a bare
        WebSocket close frame instead of an HTTP response.
    """

    signature = b'\x88\x02\x03\xe8'

    def __init__(self, reply=signature):

        self.reply = reply

        self.socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.socket.bind(('127.0.0.1', 0))
        self.socket.listen()

        self.thread = threading.Thread(target=self.run)
        self.thread.daemon = True
        self.thread.start()


    @property
    def address(self):
        host, port = self.socket.getsockname()[:2]
        return '%s:%d' % (host, port)


    def run(self):

        while True:
            try:
                client, _address = self.socket.accept()
            except OSError:
                return

            # Read the whole handshake request first, so that closing the
            # socket sends a clean FIN rather than a reset.

            with client:
                request = b''
                while b'\r\n\r\n' not in request:
                    chunk = client.recv(4096)
                    if chunk == b'':
                        break
                    request += chunk

                if self.reply:
                    client.sendall(self.reply)


    def shutdown(self):
        self.socket.close()


# end of class Rejecter



class Sink(Rejecter):
    """ Complete the WebSocket handshake, then never read another byte. The
        receive buffer is kept small, so a client writing to this server
        blocks as soon as the buffers along the way are full.
    """

    guid = b'258EAFA5-E914-47DA-95CA-C5AB0DC85B11'
    buffer_size = 4096

    def __init__(self):

        self.clients = list()
        Rejecter.__init__(self, reply=None)

        # Connections accepted from now on inherit the small buffer.
        self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, self.buffer_size)


    def run(self):

        while True:
            try:
                client, _address = self.socket.accept()
            except OSError:
                return

            request = b''
            while b'\r\n\r\n' not in request:
                chunk = client.recv(4096)
                if chunk == b'':
                    break
                request += chunk

            key = b''
            for line in request.split(b'\r\n'):
                name, _colon, value = line.partition(b':')
                if name.strip().lower() == b'sec-websocket-key':
                    key = value.strip()

            accept = base64.b64encode(hashlib.sha1(key + self.guid).digest())

            client.sendall(b'HTTP/1.1 101 Switching Protocols\r\n'
                           b'Upgrade: websocket\r\n'
                           b'Connection: Upgrade\r\n'
                           b'Sec-WebSocket-Accept: ' + accept + b'\r\n'
                           b'\r\n')

            # Hold on to the socket without reading from it.
            self.clients.append(client)


    def shutdown(self):

        Rejecter.shutdown(self)

        for client in self.clients:
            client.close()


# end of class Sink



def unused_address():
    """ Return a loopback address that nothing is listening on.
    """

    placeholder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    placeholder.bind(('127.0.0.1', 0))
    host, port = placeholder.getsockname()[:2]
    placeholder.close()

    return '%s:%d' % (host, port)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
