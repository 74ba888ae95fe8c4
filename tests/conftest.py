import queue

import pytest

import psx
from psx.transport.base import Transport


class ScriptedTransport(Transport):
    """ An in-memory transport. Lines queued with :func:`feed` are returned
        by :func:`readline` in order; feeding None simulates the server
        closing the connection. Everything written is kept in *written*.
        Setting *accept* limits how many bytes a single write accepts.
    """

    def __init__(self, lines=()):
        self.incoming = queue.SimpleQueue()
        self.written = list()
        self.closed = False
        self.accept = None

        for line in lines:
            self.feed(line)


    def feed(self, line):
        self.incoming.put(line)


    @property
    def is_open(self):
        return not self.closed


    @property
    def lines(self):
        """Everything written so far, one entry per line, terminators removed."""

        lines = list()
        for data in self.written:
            assert data.endswith(b'\r\n')
            lines.append(data[:-2].decode())
        return lines


    def close(self):
        self.closed = True
        self.incoming.put(None)


    def readline(self):
        if self.closed:
            raise psx.TransportFailure('transport is closed')

        line = self.incoming.get()

        if line is None:
            raise psx.TransportFailure('connection closed by remote host')

        return line


    def write(self, data):
        if self.closed:
            raise psx.TransportFailure('transport is closed')

        if self.accept is not None:
            data = data[:self.accept]

        self.written.append(data)
        return len(data)



@pytest.fixture
def definitions():
    return ('Lh402(K)=KeybCduC', 'Li242(Z)=UplinkBits')


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def opened():
    """ Keep track of every server string the connection opened, so that
        tests can tell how many times the opener ran.
    """

    return list()


@pytest.fixture
def connection(transport, opened):

    def opener(server):
        opened.append(server)
        transport.closed = False
        return transport

    return psx.Connection('localhost:10747', 'test', opener=opener)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
