"""
PSX Protocol Layer
==================

This package defines the line-oriented protocol spoken by a PSX Main
Server (and by the Router/SwitchPSX add-ons in front of one). It knows how
to take a line apart and put it back together, and how to translate the
opaque Q keys to human names; it knows nothing about sockets.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Connection (psx.connection)
    Handshake, lexicon acquisition, subscription, dispatch

    │
    ▼
Lexicon (lexicon.py)
    Learned mapping between Q keys and human names
    - MessageDefinition
    - MessageKind / MessageMode

    │
    ▼
Message Model (message.py)
    One protocol line, with lazy key resolution

    │
    ▼
Field Vocabulary (fields.py)
    Reserved keys and syntax characters

---------------------------------------------------------------------

Below the Protocol Layer
------------------------

Transport Layer (psx.transport)
    Moves lines
    - TCP socket
    - ZeroMQ STREAM socket

---------------------------------------------------------------------
"""

from . import fields
from . import message
from . import lexicon

from .message import Message
from .lexicon import Lexicon, MessageDefinition, MessageKind, MessageMode


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
