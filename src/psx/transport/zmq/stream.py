"""ZeroMQ STREAM transport.

A ZeroMQ STREAM socket talks plain TCP to a peer that knows nothing about
ZeroMQ, which is exactly what a PSX Main Server is. Every message received
on the socket is two frames, the peer's routing id and a chunk of the byte
stream; an empty chunk signals that the peer connected or disconnected.

ZeroMQ sockets are not thread-safe, and closing one does not wake up a
thread blocked receiving on it. While a thread is inside readline(), it is
the only thread touching the STREAM socket: writes and close requests from
other threads are queued, and an inproc PAIR socket polled alongside the
STREAM socket tells the reader to act on them. When nobody is reading, the
calling thread uses the socket directly.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Optional, Tuple

import zmq

from ...errors import TransportFailure
from ..base import Transport, strip_line

logger = logging.getLogger(__name__)

zmq_context = zmq.Context()


class StreamTransport(Transport):
    """ Establish a ZeroMQ STREAM connection to *address*, a (host, port)
        tuple. The constructor blocks until the TCP connection is up, or
        until *timeout* seconds have elapsed; ZeroMQ would otherwise keep
        retrying a refused connection forever.
    """

    routing_id = b'psx'
    linger = 100

    def __init__(self, address: Tuple[str, int], timeout: Optional[float] = None):

        host, port = address
        server = "tcp://%s:%d" % (host, port)

        self.buffer = b''
        self.lock = threading.Lock()
        self.reading = False
        self.closing = False
        self._outbox = queue.SimpleQueue()

        self.socket = zmq_context.socket(zmq.STREAM)
        self.socket.setsockopt(zmq.LINGER, 0)

        # Fixing the routing id of the outbound connection means there's no
        # need to learn it from the first (notification) message.

        self.socket.setsockopt(zmq.CONNECT_ROUTING_ID, self.routing_id)

        internal = "inproc://psx.stream:signal:%d" % (id(self))
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.setsockopt(zmq.LINGER, 0)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.setsockopt(zmq.LINGER, 0)
        self._signal_tx.connect(internal)

        try:
            self.socket.connect(server)
        except zmq.ZMQError as e:
            self._shutdown(notify=False)
            raise TransportFailure("cannot connect to %s: %s" % (server, e)) from e

        self._await_connect(server, timeout)

        self.poller = zmq.Poller()
        self.poller.register(self.socket, zmq.POLLIN)
        self.poller.register(self._signal_rx, zmq.POLLIN)

        logger.debug("ZeroMQ STREAM connection to %s established", server)


    def _await_connect(self, server, timeout):
        """ Wait for the empty message ZeroMQ delivers when the TCP
            connection has been established.
        """

        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)

        if timeout is None:
            milliseconds = None
        else:
            milliseconds = int(timeout * 1000)

        sockets = dict(poller.poll(milliseconds))

        if self.socket not in sockets:
            self._shutdown(notify=False)
            raise TransportFailure("cannot connect to %s: no connection after %ss" % (server, timeout))

        routing_id, data = self.socket.recv_multipart()

        # The notification is normally empty; anything else is the server
        # talking first, and belongs to the first line.

        self.buffer += data


    @property
    def is_open(self) -> bool:
        return self.socket is not None and self.closing == False


    def close(self) -> None:

        with self.lock:
            if self.socket is None or self.closing == True:
                return

            if self.reading == True:
                # The reader closes the socket once it sees the request.
                self.closing = True
                self._signal_tx.send(b'')
            else:
                self._shutdown()


    def _shutdown(self, notify=True):
        """ Close every socket. The caller must either hold the lock, or
            be the only thread with access to the transport.
        """

        sock = self.socket
        self.socket = None
        self.closing = False

        if notify == True:
            # Sending an empty frame to a peer closes its TCP connection.
            try:
                sock.send_multipart((self.routing_id, b''))
            except zmq.ZMQError as e:
                logger.debug("STREAM close notification failed: %s", e)

        sock.close(linger=self.linger)
        self._signal_rx.close()
        self._signal_tx.close()


    def _flush(self):
        """ Clear pending signals and send every queued write. Only called
            by the reading thread, with the lock held.
        """

        while True:
            try:
                self._signal_rx.recv(flags=zmq.NOBLOCK)
            except zmq.Again:
                break

        while True:
            try:
                data = self._outbox.get(block=False)
            except queue.Empty:
                break

            try:
                self.socket.send_multipart((self.routing_id, data))
            except zmq.ZMQError as e:
                raise TransportFailure('write failed: ' + str(e)) from e


    def readline(self) -> str:

        with self.lock:
            if self.socket is None or self.closing == True:
                raise TransportFailure('transport is closed')
            self.reading = True

        try:
            return self._readline()
        finally:
            with self.lock:
                self.reading = False
                try:
                    if self.socket is not None:
                        self._flush()
                finally:
                    if self.closing == True:
                        self._shutdown()


    def _readline(self):

        while b'\n' not in self.buffer:
            try:
                ready = dict(self.poller.poll())
            except zmq.ZMQError as e:
                raise TransportFailure('read failed: ' + str(e)) from e

            if self._signal_rx in ready:
                with self.lock:
                    self._flush()
                    if self.closing == True:
                        raise TransportFailure('transport is closed')

            if self.socket in ready:
                try:
                    routing_id, data = self.socket.recv_multipart()
                except zmq.ZMQError as e:
                    raise TransportFailure('read failed: ' + str(e)) from e

                if data == b'':
                    raise TransportFailure('connection closed by remote host')

                self.buffer += data

        line, newline, self.buffer = self.buffer.partition(b'\n')
        return strip_line(line)


    def write(self, data: bytes) -> int:

        with self.lock:
            if self.socket is None or self.closing == True:
                raise TransportFailure('transport is closed')

            if self.reading == True:
                self._outbox.put(data)
                self._signal_tx.send(b'')
            else:
                try:
                    self.socket.send_multipart((self.routing_id, data))
                except zmq.ZMQError as e:
                    raise TransportFailure('write failed: ' + str(e)) from e

        # ZeroMQ queues whole messages; it never accepts part of one.

        return len(data)


# end of class StreamTransport


def connect(address: Tuple[str, int], timeout: Optional[float] = None) -> StreamTransport:
    return StreamTransport(address, timeout)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
