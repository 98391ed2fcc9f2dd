""" UDP datagram transport. One :class:`Transport` instance owns one bound
    socket; it can send to any peer and receives from every peer.
"""

import logging
import socket
import threading
import zmq

from . import base

logger = logging.getLogger(__name__)


class Transport(base.Transport):
    """ Bind a UDP socket to the given *address* and *port*. An empty
        *address* listens on every interface; a *port* of zero or None asks
        the operating system to assign one, which is then available as
        :attr:`port`.

        Readiness is checked with a :class:`zmq.Poller`, which is happy to
        watch a plain socket file descriptor. The poller is only ever used by
        the receiving thread; :func:`send` goes straight to the socket, and
        the kernel takes care of concurrent sendto()/recvfrom() calls on the
        same UDP socket.

        Closing the transport from another thread does not reliably wake up
        a :func:`receive` that is blocking without a timeout; how that plays
        out depends on the platform. Receivers that need to shut down should
        use a finite timeout and check their own shutdown flag between
        calls, which is what :class:`easycrypto.correlator.Correlator` and
        :class:`easycrypto.service.Server` do.
    """

    maximum_size = 65507

    def __init__(self, address='', port=None):

        if port is None:
            port = 0

        port = int(port)

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

        try:
            sock.bind((address, port))
        except OSError as e:
            sock.close()
            raise base.TransportError('cannot bind %s:%d: %s' % (address, port, e)) from e

        self.socket = sock
        self.address, self.port = sock.getsockname()[:2]

        self.poller = zmq.Poller()
        self.poller.register(sock, zmq.POLLIN)

        self._closed = False
        self._close_lock = threading.Lock()

        logger.debug('UDP transport bound to %s:%d', self.address, self.port)


    def __repr__(self):
        return '<udp.Transport %s:%d%s>' % (self.address, self.port, ' closed' if self._closed else '')


    @property
    def closed(self):
        return self._closed


    def send(self, data, address, port):
        """ Fire off a single datagram. Loss is not detected here; an error
            is only raised for a problem the local network stack reports
            right away, such as an unresolvable *address*.
        """

        if self._closed:
            raise base.TransportClosed('transport is closed')

        if len(data) > self.maximum_size:
            raise base.TransportError('datagram too large: %d bytes' % (len(data)))

        try:
            self.socket.sendto(data, (address, int(port)))
        except OSError as e:
            if self._closed:
                raise base.TransportClosed('transport is closed') from e
            raise base.TransportError('send to %s:%s failed: %s' % (address, port, e)) from e


    def receive(self, timeout=None):
        """ Wait for the next datagram. The *timeout* is in seconds; None
            waits indefinitely.
        """

        if self._closed:
            raise base.TransportClosed('transport is closed')

        if timeout is not None:
            timeout = int(timeout * 1000)

        try:
            ready = self.poller.poll(timeout)
        except (OSError, zmq.ZMQError) as e:
            if self._closed:
                raise base.TransportClosed('transport closed while receiving') from e
            raise base.TransportError('poll failed: ' + str(e)) from e

        if len(ready) == 0:
            if self._closed:
                raise base.TransportClosed('transport closed while receiving')
            raise base.TransportTimeout('no datagram in %s ms' % (timeout,))

        try:
            data, sender = self.socket.recvfrom(self.maximum_size)
        except OSError as e:
            if self._closed:
                raise base.TransportClosed('transport closed while receiving') from e

            # Some platforms report an ICMP port-unreachable from an earlier
            # send as an error on the next receive. The socket is still
            # usable.

            raise base.TransportError('receive failed: ' + str(e)) from e

        return data, sender[:2]


    def close(self):

        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        try:
            self.poller.unregister(self.socket)
        except KeyError:
            pass

        self.socket.close()
        logger.debug('UDP transport on port %d closed', self.port)


# end of class Transport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
