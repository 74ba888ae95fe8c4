""" Python client for the network protocol of Precision Simulator X by
    Aerowinx, including the extensions introduced by Router and SwitchPSX.
    This includes the lexicon the server uses to describe its variables,
    the codec for individual protocol lines, and the connection engine that
    ties them to a live server.
"""

# Submodules used by multiple other components.

from . import errors
from . import config
from . import protocol
from . import transport

# Primary public-facing interfaces.

from .connection import Connection, Phase
from .protocol import Lexicon, Message, MessageDefinition, MessageKind, MessageMode
from .errors import ErrorKind, PsxError, LexiconSyntaxError, NotConnected, ConnectionBusy, TransportFailure, ShortWrite

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
