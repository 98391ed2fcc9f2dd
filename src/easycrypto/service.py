""" Service side of the EasyCrypto request/response exchange: receive
    requests over UDP, apply the named cipher method, and answer each one
    with a :class:`easycrypto.protocol.Response` carrying the same id.
"""

import logging
import queue
import threading

from . import config
from . import protocol
from . import registry as registry_module
from . import transport
from .method import ResultCode
from .protocol import fields

logger = logging.getLogger(__name__)


class Server:
    """ Receive requests on *port*, by default on every local interface.
        A *port* of None uses the configured service port; zero picks an
        ephemeral port, which is then available as :attr:`port`. Requests
        are resolved against *registry*, which defaults to
        :func:`easycrypto.registry.default`.

        One thread reads datagrams off the socket and queues them; a small
        pool of worker threads decodes and answers them, so a slow cipher
        method does not hold up the socket.

        :ivar port: The port on which this server is listening.
        :ivar registry: The :class:`easycrypto.registry.Registry` in use.
    """

    interval = 0.1
    worker_count = 4

    def __init__(self, registry=None, address='', port=None, encoding=None):

        if registry is None:
            registry = registry_module.default()
        if port is None:
            port = config.get('port')
        if encoding is None:
            encoding = config.get('encoding')

        self.registry = registry
        self.encoding = encoding

        self.transport = transport.udp.Transport(address, port)
        self.port = self.transport.port

        self.queue = queue.SimpleQueue()

        self.shutdown = False
        self.thread = threading.Thread(target=self.run, name='service-receive')
        self.thread.daemon = True
        self.thread.start()

        self.workers = list()
        for thread_number in range(self.worker_count):
            thread = threading.Thread(target=self._worker_main, name='service-worker-%d' % (thread_number))
            thread.daemon = True
            thread.start()
            self.workers.append(thread)

        logger.debug('service listening on port %d with methods %s', self.port, self.registry.names())


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.stop()


    def handle(self, request):
        """ Compute the :class:`easycrypto.protocol.Response` for a single
            decoded *request*. Failures never escape as exceptions; they are
            returned as failure-coded responses so the client learns what
            happened.
        """

        operation = request.operation

        if operation == fields.CAPABILITIES:
            names = ','.join(self.registry.names())
            return protocol.Response(request.id, operation, ResultCode.SUCCESS, names)

        if operation not in fields.TRANSFORMS:
            return protocol.Response(request.id, operation, ResultCode.NOT_SUPPORTED, 'unknown operation: ' + operation)

        try:
            method = self.registry.resolve(request.method)
        except registry_module.UnknownMethod:
            return protocol.Response(request.id, operation, ResultCode.NOT_SUPPORTED, 'unknown method: ' + request.method)

        if operation == fields.ENCRYPT:
            transform = method.encrypt
        else:
            transform = method.decrypt

        try:
            result = transform(request.data)
        except Exception as e:
            logger.exception('%s %s failed for request %d', request.method, operation, request.id)
            return protocol.Response(request.id, operation, ResultCode.ERROR, '%s: %s' % (e.__class__.__name__, e))

        return protocol.Response(request.id, operation, result.code, result.data)


    def req_incoming(self, data, sender):
        """ Decode one datagram, handle it, and send the response back to
            the *sender*. A datagram that cannot be decoded has no usable id
            to answer with; it is logged and dropped.
        """

        try:
            request = protocol.codec.decode(data, self.encoding)
        except protocol.MalformedMessage as e:
            logger.warning('discarding malformed datagram from %s:%d: %s', sender[0], sender[1], e)
            return

        if not isinstance(request, protocol.Request):
            logger.warning('discarding response %d from %s:%d, expected a request', request.id, sender[0], sender[1])
            return

        response = self.handle(request)
        encoded = protocol.codec.encode(response, self.encoding)

        try:
            self.transport.send(encoded, sender[0], sender[1])
        except transport.TransportClosed:
            return
        except transport.TransportError as e:
            logger.warning('cannot answer request %d from %s:%d: %s', request.id, sender[0], sender[1], e)


    def run(self):

        while self.shutdown == False:
            try:
                data, sender = self.transport.receive(self.interval)
            except transport.TransportTimeout:
                continue
            except transport.TransportClosed:
                break
            except transport.TransportError:
                logger.warning('receive failed, still listening', exc_info=True)
                continue

            self.queue.put((data, sender))


    def stop(self):
        """ Stop all background threads and close the socket. Requests that
            were queued but not yet handled are dropped.
        """

        if self.shutdown == True:
            return

        self.shutdown = True
        self.thread.join()

        # One wake-up per worker; having None in the queue too many times is
        # harmless.

        for thread in self.workers:
            self.queue.put(None)

        for thread in self.workers:
            thread.join()

        self.transport.close()
        logger.debug('service on port %d stopped', self.port)


    def _worker_main(self):
        """ This is the 'main' method for the worker threads responsible for
            handling incoming requests: take a datagram off the queue and feed
            it to :func:`req_incoming`.
        """

        while self.shutdown == False:
            dequeued = self.queue.get()

            if dequeued is None:
                continue

            try:
                self.req_incoming(*dequeued)
            except Exception:
                logger.exception('unhandled error processing request from %s:%d', dequeued[1][0], dequeued[1][1])


# end of class Server


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
