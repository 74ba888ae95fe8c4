""" Configuration defaults for PSX connections. Every default can be
    overridden with an environment variable, which is consulted each time
    a value is requested rather than once at import time:

    ======================= ===================== ========================
    Variable                Default               Meaning
    ======================= ===================== ========================
    PSX_SERVER              localhost:10747       Main Server or Router
    PSX_CLIENT_NAME         psx.py                Name reported to Router
    PSX_TRANSPORT           tcp                   Transport backend
    PSX_CONNECT_TIMEOUT     10                    Seconds to connect
    ======================= ===================== ========================

    The connect timeout only applies to establishing a connection; once
    connected, reads block for as long as the server stays silent.
"""

import os

DEFAULT_HOST = 'localhost'
DEFAULT_PORT = 10747
DEFAULT_CLIENT_NAME = 'psx.py'
DEFAULT_TRANSPORT = 'tcp'
DEFAULT_CONNECT_TIMEOUT = 10.0

backends = ('tcp', 'zmq')


def server():
    """ The address of the server to connect to, as a 'host:port' string.
    """

    return os.environ.get('PSX_SERVER', DEFAULT_HOST + ':' + str(DEFAULT_PORT))


def client_name():
    return os.environ.get('PSX_CLIENT_NAME', DEFAULT_CLIENT_NAME)


def transport():
    """ The name of the transport backend to use. A ValueError is raised
        if the environment requests a backend that does not exist.
    """

    backend = os.environ.get('PSX_TRANSPORT', DEFAULT_TRANSPORT)
    backend = backend.strip().lower()

    if backend not in backends:
        raise ValueError('unknown PSX_TRANSPORT backend: ' + repr(backend))

    return backend


def connect_timeout():
    """ The timeout, in seconds, for establishing a connection. Setting
        PSX_CONNECT_TIMEOUT to zero or 'none' waits indefinitely, in which
        case None is returned.
    """

    timeout = os.environ.get('PSX_CONNECT_TIMEOUT')

    if timeout is None:
        return DEFAULT_CONNECT_TIMEOUT

    if timeout.strip().lower() in ('', 'none'):
        return None

    timeout = float(timeout)
    if timeout <= 0:
        return None

    return timeout


def split_address(address, default_port=DEFAULT_PORT):
    """ Split a 'host:port' *address* into a (host, port) tuple. The port
        is optional, as is the host; IPv6 addresses with a port must be
        bracketed, as in '[::1]:10747'. A ValueError is raised for a
        malformed address.
    """

    address = address.strip()

    if address.startswith('['):
        host, bracket, rest = address[1:].partition(']')
        if bracket == '':
            raise ValueError('unterminated IPv6 address: ' + repr(address))
        if rest == '':
            port = ''
        elif rest.startswith(':'):
            port = rest[1:]
        else:
            raise ValueError('malformed address: ' + repr(address))

    elif address.count(':') == 1:
        host, port = address.split(':')

    else:
        # Either no port at all, or a bare IPv6 address.
        host = address
        port = ''

    if host == '':
        host = DEFAULT_HOST

    if port == '':
        port = default_port
    else:
        try:
            port = int(port)
        except ValueError:
            raise ValueError('malformed port in address: ' + repr(address))

    if port < 0 or port > 65535:
        raise ValueError('port out of range in address: ' + repr(address))

    return (host, port)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
