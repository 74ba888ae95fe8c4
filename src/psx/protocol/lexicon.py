""" The lexicon is the dictionary a PSX server pushes to each new client,
    mapping its opaque wire keys (Qh402, Qi242, ...) to stable human names
    (KeybCduC, UplinkBits, ...). A :class:`Lexicon` is learned one
    definition line at a time while a connection is new, and is used from
    then on to translate keys in both directions.

    A definition line looks like this::

        Lh402(K)=KeybCduC

    The letter after the L is the kind of the value, the digits are the
    index within that kind, and the letter in parentheses is the update
    mode. The key the definition describes is derived from the kind and
    index: Qh402 in the example above.
"""

import dataclasses
import enum
import logging

from ..errors import LexiconSyntaxError
from . import fields
from .message import Message

logger = logging.getLogger(__name__)


class MessageKind(enum.Enum):
    """The format of the right hand side of a Q message."""

    INTEGER = 'i'
    STRING = 's'
    HUMAN = 'h'


class MessageMode(enum.Enum):
    """ How, and how often, the server sends updates for a Q message. The
        engine preserves the mode but otherwise attaches no meaning to it.
    """

    START = 'S'
    CONT = 'C'
    ECON = 'E'
    DELTA = 'D'
    BIGMOM = 'B'
    MCPMOM = 'M'
    GUAMOM2 = 'G'
    GUAMOM4 = 'F'
    CDUKEYB = 'K'
    RCP = 'R'
    ACP = 'A'
    MIXED = 'X'
    XDELTA = 'Y'
    XECON = 'Z'
    DEMAND = 'N'


@dataclasses.dataclass(frozen=True)
class MessageDefinition:
    """ A single learned lexicon entry. The wire key is always derived
        from *kind* and *index*, so the two can never disagree.
    """

    kind: MessageKind
    mode: MessageMode
    index: int
    human_name: str

    @property
    def key(self):
        """The key used on the wire for this definition, such as Qh402."""
        return fields.KEY_PREFIX + self.kind.value + str(self.index)


def parse_definition(line):
    """ Parse a lexicon definition into a :class:`MessageDefinition`. The
        *line* may be a raw string, or a :class:`Message` already parsed
        from one. A :class:`LexiconSyntaxError` is raised if the definition
        is malformed in any way.
    """

    if isinstance(line, Message):
        message = line
    else:
        message = Message.parse(line)

    key = message.key

    if key[:1] != fields.DEFINITION_PREFIX:
        raise LexiconSyntaxError('not a lexicon definition: ' + repr(key))

    # L + kind (2 characters), at least one digit, and the (M) suffix.

    if len(key) < fields.DEFINITION_MINIMUM:
        raise LexiconSyntaxError('lexicon definition too short: ' + repr(key))

    try:
        kind = MessageKind(key[1])
    except ValueError:
        raise LexiconSyntaxError('unknown kind in lexicon definition: ' + repr(key))

    suffix = key.find(fields.MODE_OPEN)
    if suffix < 0:
        raise LexiconSyntaxError('no mode in lexicon definition: ' + repr(key))

    digits = key[2:suffix]
    if digits == '' or not (digits.isascii() and digits.isdigit()):
        raise LexiconSyntaxError('bad index in lexicon definition: ' + repr(key))

    try:
        mode = MessageMode(key[suffix + 1])
    except (IndexError, ValueError):
        raise LexiconSyntaxError('unknown mode in lexicon definition: ' + repr(key))

    return MessageDefinition(kind, mode, int(digits), message.value)



class Lexicon:
    """ Bidirectional mapping between wire keys and human names. Both
        indices always describe the same set of :class:`MessageDefinition`
        instances.

        Registering a definition whose key or human name is already known
        replaces the earlier definition: the most recent registration wins,
        and the displaced definition is dropped from both indices.

        The :func:`key_for` and :func:`human_name_for` lookups return an
        empty string when nothing matches. This is indistinguishable from
        a definition registered with an empty name; use
        :func:`definition_for` or :func:`definition_named` when the
        difference matters.
    """

    def __init__(self):
        self._by_key = dict()
        self._by_name = dict()


    def __contains__(self, key):
        return key in self._by_key


    def __len__(self):
        return len(self._by_key)


    def __iter__(self):
        return iter(list(self._by_key.values()))


    def register(self, line):
        """ Parse and learn a definition line. The new definition is
            returned; :class:`LexiconSyntaxError` propagates to the caller
            if the line is malformed, in which case nothing is learned.
        """

        definition = parse_definition(line)
        self.add(definition)
        return definition


    def add(self, definition):
        """Learn an already parsed :class:`MessageDefinition`."""

        key = definition.key
        name = definition.human_name

        displaced = self._by_key.get(key)
        if displaced is not None and displaced != definition:
            logger.debug("%s redefined: %s -> %s", key, displaced.human_name, name)
            if self._by_name.get(displaced.human_name) is displaced:
                del self._by_name[displaced.human_name]

        displaced = self._by_name.get(name)
        if displaced is not None and displaced != definition:
            logger.debug("%s redefined: %s -> %s", name, displaced.key, key)
            if self._by_key.get(displaced.key) is displaced:
                del self._by_key[displaced.key]

        self._by_key[key] = definition
        self._by_name[name] = definition


    def definition_for(self, key):
        """Return the definition for a wire *key*, or None."""
        return self._by_key.get(key)


    def definition_named(self, human_name):
        """Return the definition for a *human_name*, or None."""
        return self._by_name.get(human_name)


    def key_for(self, human_name):
        """ Return the wire key for *human_name*; the empty string is
            returned if the name is not known.
        """

        definition = self._by_name.get(human_name)
        if definition is None:
            return ''
        return definition.key


    def human_name_for(self, key):
        """ Return the human name for a wire *key*; the empty string is
            returned if the key is not known.
        """

        definition = self._by_key.get(key)
        if definition is None:
            return ''
        return definition.human_name


# end of class Lexicon


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
