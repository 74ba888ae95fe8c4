"""ZeroMQ transport backend."""

from . import stream
