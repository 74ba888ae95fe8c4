""" Plain TCP transport, using a blocking socket. This is the default
    transport, and is what a PSX Main Server or Router expects to talk to.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional, Tuple

from ..errors import TransportFailure
from .base import Transport, strip_line

logger = logging.getLogger(__name__)


class TcpTransport(Transport):
    """ Wrap a connected *sock*. Use :func:`connect` to establish a new
        connection; the constructor is useful on its own when the socket
        comes from elsewhere, such as :func:`socket.socketpair`.
    """

    def __init__(self, sock: socket.socket):
        self.socket = sock
        self.reader = sock.makefile('rb')


    @property
    def is_open(self) -> bool:
        return self.socket is not None


    def close(self) -> None:

        sock = self.socket
        if sock is None:
            return

        self.socket = None

        # Shutting down first wakes up a listener blocked in readline() on
        # another thread.

        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Already disconnected by the remote end.
            pass

        try:
            self.reader.close()
            sock.close()
        except OSError as e:
            raise TransportFailure('close failed: ' + str(e)) from e


    def readline(self) -> str:

        if self.socket is None:
            raise TransportFailure('transport is closed')

        # makefile() buffers, and readline() keeps reading until it has a
        # full line; a short read is never returned as a line unless the
        # stream ended mid-line.

        try:
            raw = self.reader.readline()
        except (OSError, ValueError) as e:
            raise TransportFailure('read failed: ' + str(e)) from e

        if raw == b'':
            raise TransportFailure('connection closed by remote host')

        return strip_line(raw)


    def write(self, data: bytes) -> int:

        if self.socket is None:
            raise TransportFailure('transport is closed')

        try:
            return self.socket.send(data)
        except OSError as e:
            raise TransportFailure('write failed: ' + str(e)) from e


# end of class TcpTransport



def connect(address: Tuple[str, int], timeout: Optional[float] = None) -> TcpTransport:
    """ Connect to *address*, a (host, port) tuple, and return a
        :class:`TcpTransport`. The *timeout* applies to establishing the
        connection only; reads block indefinitely once connected.
    """

    try:
        sock = socket.create_connection(address, timeout=timeout)
    except OSError as e:
        raise TransportFailure("cannot connect to %s:%d: %s" % (address[0], address[1], e)) from e

    sock.settimeout(None)

    # Protocol lines are tiny and latency matters more than throughput;
    # make sure Nagle is off.

    sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

    logger.debug("TCP connection to %s:%d established", address[0], address[1])
    return TcpTransport(sock)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
