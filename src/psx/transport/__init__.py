"""Transport layer implementations."""

from .. import config
from .base import Transport, TransportFailure
from . import tcp


def connect(server, backend=None, timeout=None):
    """ Connect to *server*, a 'host:port' string, and return an open
        :class:`Transport`. The *backend* defaults to the PSX_TRANSPORT
        setting; the ZeroMQ backend is only imported when it is used.
        :class:`TransportFailure` is raised if the connection cannot be
        established within *timeout* seconds.
    """

    if backend is None:
        backend = config.transport()

    address = config.split_address(server)

    if backend == 'tcp':
        return tcp.connect(address, timeout)
    elif backend == 'zmq':
        from .zmq import stream
        return stream.connect(address, timeout)
    else:
        raise ValueError(f"unknown transport backend: {backend!r}")
