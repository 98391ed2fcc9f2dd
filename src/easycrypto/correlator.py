""" Background handling of incoming responses. A :class:`Correlator` drains
    a transport on its own thread while the foreground keeps issuing
    requests, and routes each decoded :class:`easycrypto.protocol.Response`
    either to the :class:`Pending` handle waiting for that request id, or to
    a generic observer callback.
"""

import enum
import logging
import queue
import threading

from . import protocol
from . import transport as transport_module

logger = logging.getLogger(__name__)


class State(enum.Enum):
    IDLE = 'idle'
    LISTENING = 'listening'
    STOPPED = 'stopped'


class Pending:
    """ Client-side handle for a request that is awaiting its response.
        Responses are never required to arrive: a lost datagram means
        :func:`wait` returns None once the timeout expires.

        :ivar id: The request id this handle is waiting on.
        :ivar response: The response, once it has arrived.
    """

    def __init__(self, id):
        self.id = id
        self.response = None
        self.rep_event = threading.Event()


    def __repr__(self):
        return '<Pending %d: %r>' % (self.id, self.response)


    def _complete(self, response):
        """ Locally store the response and signal any callers blocking via
            :func:`wait` to proceed.
        """

        self.response = response
        self.rep_event.set()


    def poll(self):
        """ Return True if the response has arrived, otherwise False.
        """

        return self.rep_event.is_set()


    def wait(self, timeout=None):
        """ Block until the response arrives or *timeout* seconds pass. The
            response is always returned; it will be None if the request is
            still pending.
        """

        self.rep_event.wait(timeout)
        return self.response


# end of class Pending



class Correlator:
    """ Listen for responses on *transport* and deliver them. Two daemon
        threads do the work once :func:`start` is called: the listener
        blocks in :func:`Transport.receive`, decodes whatever arrives and
        puts good responses on a queue; the dispatcher takes them off the
        queue and hands them to whoever is interested. Keeping the two apart
        means a slow *observer* never holds up the socket.

        A response whose id was registered via :func:`expect` completes
        that :class:`Pending` handle. Any other response goes to the
        *observer*, if there is one. Responses are delivered in the order
        the datagrams arrived, which need not match the order the requests
        were sent.

        The life cycle is one way: IDLE, LISTENING, STOPPED. A stopped
        correlator cannot be restarted; build a new one with a fresh
        transport. An unrecoverable transport failure also moves the
        correlator to STOPPED.

        :ivar state: The current :class:`State`.
    """

    interval = 0.1

    def __init__(self, transport, observer=None, encoding=None):

        self.transport = transport
        self.observer = observer
        self.encoding = encoding
        self.state = State.IDLE

        self.pending = dict()
        self.pending_lock = threading.Lock()

        # The dispatch lock is held while a response is delivered. stop()
        # takes it to change state, which is what guarantees no delivery
        # happens after stop() returns. It is reentrant so that an observer
        # may call stop() itself.

        self.dispatch_lock = threading.RLock()
        self.queue = queue.SimpleQueue()

        self.listen_thread = None
        self.dispatch_thread = None


    def __repr__(self):
        return '<Correlator %s on %r>' % (self.state.value, self.transport)


    def start(self):

        with self.dispatch_lock:
            if self.state is not State.IDLE:
                raise RuntimeError('cannot start a correlator that is ' + self.state.value)

            self.state = State.LISTENING

        self.listen_thread = threading.Thread(target=self._listen, name='correlator-listen')
        self.listen_thread.daemon = True

        self.dispatch_thread = threading.Thread(target=self._dispatch, name='correlator-dispatch')
        self.dispatch_thread.daemon = True

        self.listen_thread.start()
        self.dispatch_thread.start()


    def stop(self):
        """ Stop listening, wait for the background threads to finish, and
            close the transport. Once this returns the observer will not be
            called again and no :class:`Pending` handle will be completed.

            A response that was already dequeued when this was called is
            still delivered before it returns; one that arrives afterwards
            is dropped, either here or by the closed socket. That race is
            inherent in stopping a datagram listener and is not papered
            over.
        """

        with self.dispatch_lock:
            previous = self.state
            self.state = State.STOPPED

        if previous is State.STOPPED:
            return

        # Wake up the dispatcher, which may be blocked on an empty queue.
        self.queue.put(None)

        current = threading.current_thread()

        for thread in (self.listen_thread, self.dispatch_thread):
            if thread is None or thread is current:
                continue
            thread.join()

        with self.pending_lock:
            self.pending.clear()

        self.transport.close()
        logger.debug('correlator on %r stopped', self.transport)


    def expect(self, id):
        """ Register interest in the response for request *id*, returning a
            :class:`Pending` handle that completes when it arrives. Call this
            before sending the request, otherwise a quick response may be
            handed to the observer instead.
        """

        pending = Pending(id)

        with self.pending_lock:
            self.pending[id] = pending

        return pending


    def forget(self, id):
        """ Drop interest in the response for request *id*. Unknown ids are
            ignored.
        """

        with self.pending_lock:
            self.pending.pop(id, None)


    def _deliver(self, response):

        with self.pending_lock:
            pending = self.pending.pop(response.id, None)

        if pending is not None:
            pending._complete(response)
            return

        observer = self.observer
        if observer is None:
            logger.debug('no one is waiting for response %d, dropped', response.id)
            return

        try:
            observer(response)
        except Exception:
            logger.exception('observer failed to handle response %d', response.id)


    def _dispatch(self):

        while True:
            response = self.queue.get()

            if response is None:
                break

            with self.dispatch_lock:
                if self.state is State.STOPPED:
                    break

                self._deliver(response)


    def _listen(self):

        try:
            self._receive_loop()
        finally:
            self._listen_finished()


    def _receive_loop(self):

        transport = self.transport

        while self.state is State.LISTENING:
            try:
                data, sender = transport.receive(self.interval)
            except transport_module.TransportTimeout:
                continue
            except transport_module.TransportClosed:
                break
            except transport_module.TransportError:
                logger.warning('receive failed, still listening', exc_info=True)
                continue
            except Exception:
                logger.exception('unrecoverable receive failure on %r', transport)
                break

            # A single bad datagram never ends the loop, whatever the
            # decoder makes of it.

            try:
                message = protocol.codec.decode(data, self.encoding)
            except protocol.MalformedMessage as e:
                logger.warning('discarding malformed datagram from %s:%d: %s', sender[0], sender[1], e)
                continue
            except Exception:
                logger.exception('discarding undecodable datagram from %s:%d', sender[0], sender[1])
                continue

            if not isinstance(message, protocol.Response):
                logger.warning('discarding %s request from %s:%d, expected a response', message.operation, sender[0], sender[1])
                continue

            self.queue.put(message)


    def _listen_finished(self):
        """ The listener is exiting. Unless stop() is responsible, the
            transport failed underneath us: the correlator is STOPPED either
            way.
        """

        # Only take the lock when the transport went away on its own; an
        # observer calling stop() holds it while joining this thread.

        if self.state is not State.LISTENING:
            return

        with self.dispatch_lock:
            if self.state is State.LISTENING:
                logger.warning('listener on %r ended, correlator stopped', self.transport)
                self.state = State.STOPPED
                self.queue.put(None)


# end of class Correlator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
