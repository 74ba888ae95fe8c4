"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`psx.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..errors import TransportFailure


class Transport(ABC):
    """ Minimal contract for a reliable, ordered, full-duplex byte stream
        carrying protocol lines.
    """

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def readline(self) -> str:
        """ Block until a complete line has been received, and return it
            with the CRLF or LF terminator removed. Lines split across
            several reads are joined transparently. Raises
            :class:`TransportFailure` when the stream ends or fails.
        """

    @abstractmethod
    def write(self, data: bytes) -> int:
        """ Write *data* and return the number of bytes the stream
            accepted. Raises :class:`TransportFailure` on error.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False


def strip_line(raw: bytes) -> str:
    """ Remove the line terminator from a raw line and decode it. The
        protocol is ASCII; anything else is passed through rather than
        treated as a failure.
    """

    if raw.endswith(b'\n'):
        raw = raw[:-1]
    if raw.endswith(b'\r'):
        raw = raw[:-1]

    return raw.decode('ascii', errors='replace')


__all__ = ('Transport', 'TransportFailure', 'strip_line')
