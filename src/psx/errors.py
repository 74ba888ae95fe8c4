""" Exceptions raised by the psx package. Every exception carries a *kind*
    attribute drawn from the closed :class:`ErrorKind` enumeration, so that
    callers can match on the kind of failure explicitly instead of relying
    on the class hierarchy alone.
"""

import enum


class ErrorKind(enum.Enum):
    SYNTAX = 'syntax'
    NOT_CONNECTED = 'not connected'
    CONNECTION_BUSY = 'connection busy'
    TRANSPORT_FAILURE = 'transport failure'
    SHORT_WRITE = 'short write'


class PsxError(Exception):
    """Base class for all psx errors."""

    kind = None


class LexiconSyntaxError(PsxError, ValueError):
    """ A lexicon definition line could not be parsed. This is never fatal
        to a connection; the offending definition is simply not learned.
    """

    kind = ErrorKind.SYNTAX


class NotConnected(PsxError):
    """An operation requiring a live transport was attempted without one."""

    kind = ErrorKind.NOT_CONNECTED


class ConnectionBusy(PsxError):
    """ The connection cannot be (re)started because a previous listener
        has not yet fully exited, or a listener is already running.
    """

    kind = ErrorKind.CONNECTION_BUSY


class TransportFailure(PsxError):
    """ The underlying byte stream could not be opened, read, or written.
        Always fatal to the listener currently running.
    """

    kind = ErrorKind.TRANSPORT_FAILURE


class ShortWrite(PsxError):
    """ The transport accepted fewer bytes than requested. A partial
        protocol line cannot be resumed; this is an unrecoverable
        condition and must not be retried.
    """

    kind = ErrorKind.SHORT_WRITE


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
