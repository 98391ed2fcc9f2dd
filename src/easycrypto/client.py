""" Client side of the EasyCrypto request/response exchange. A
    :class:`Client` sends requests to one service and keeps a
    :class:`easycrypto.correlator.Correlator` running in the background to
    collect the responses.
"""

import atexit
import itertools
import threading

from . import config
from . import protocol
from . import transport
from .correlator import Correlator, State
from .protocol import fields


class Client:
    """ Issue requests to the service at *address* and *port*, and receive
        responses on *local_port*. Any argument left as None is taken from
        :mod:`easycrypto.config`; a *local_port* of zero picks an ephemeral
        port.

        Requests are fire-and-forget: :func:`send` never waits for the
        response. When *track* is True (the default) each call returns a
        :class:`easycrypto.correlator.Pending` handle the caller may wait
        on, or ignore. Responses nobody is waiting for, including all of
        them when *track* is False, are handed to *observer*.

        Nothing is retried. A request or response lost on the network simply
        never completes.

        :ivar next_id: The id the next request will carry.
    """

    def __init__(self, address=None, port=None, local_port=None, observer=None, track=True, encoding=None):

        if address is None:
            address = config.get('address')
        if port is None:
            port = config.get('port')
        if local_port is None:
            local_port = config.get('client_port')
        if encoding is None:
            encoding = config.get('encoding')

        self.address = address
        self.port = int(port)
        self.encoding = encoding
        self.track = track

        self._ids = itertools.count()
        self._id_lock = threading.Lock()
        self.next_id = 0

        self.transport = transport.udp.Transport(port=local_port)
        self.correlator = Correlator(self.transport, observer, encoding)
        self.correlator.start()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()


    def __repr__(self):
        return '<Client to %s:%d>' % (self.address, self.port)


    def _id_next(self):
        """ Return the next request id for this session. Ids start at zero
            and are never reused.
        """

        with self._id_lock:
            id = next(self._ids)
            self.next_id = id + 1

        return id


    def send(self, operation, method=None, data=''):
        """ Build a request for *operation* and send it. The request gets its
            id here, at send time. Returns a
            :class:`easycrypto.correlator.Pending` handle if this client
            tracks its requests, otherwise None.
        """

        request = protocol.Request(operation, method, data)
        request = request.with_id(self._id_next())
        encoded = protocol.codec.encode(request, self.encoding)

        pending = None
        if self.track:
            pending = self.correlator.expect(request.id)

        try:
            self.transport.send(encoded, self.address, self.port)
        except transport.TransportError:
            self.correlator.forget(request.id)
            raise

        return pending


    def capabilities(self):
        """ Ask the service which cipher methods it supports.
        """

        return self.send(fields.CAPABILITIES)


    def encrypt(self, method, data):
        return self.send(fields.ENCRYPT, method, data)


    def decrypt(self, method, data):
        return self.send(fields.DECRYPT, method, data)


    @property
    def closed(self):
        return self.correlator.state is State.STOPPED


    def close(self):
        """ Stop the background correlator and release the socket.
        """

        self.correlator.stop()


# end of class Client



client_connections = dict()
client_connections_lock = threading.Lock()

def connect(address, port):
    """ Factory function for a :class:`Client` instance. Use of this method is
        encouraged to streamline re-use of established connections; the local
        port is assigned automatically so that several cached clients can
        coexist.
    """

    key = (address, int(port))

    with client_connections_lock:
        instance = client_connections.get(key)

        if instance is None or instance.closed:
            instance = Client(address, port, local_port=0)
            client_connections[key] = instance

    return instance



def shutdown():
    """ Close every client created by :func:`connect`.
    """

    with client_connections_lock:
        instances = list(client_connections.values())
        client_connections.clear()

    for instance in instances:
        instance.close()


atexit.register(shutdown)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
