""" A class representation of a single PSX protocol line. Each line is
    either a bare key, or a key and a value separated by the first equals
    sign::

        load1
        Qh402=34
        Qs121=-12;45;0

    The key of a Q message is opaque; the :class:`Message` resolves it
    through a :class:`psx.protocol.lexicon.Lexicon` to find the human
    name for it. Resolution is lazy: a message parsed before the relevant
    definition was learned will pick up the definition the next time it
    is asked for its name.
"""

import weakref

from . import fields


class Message:
    """ The :class:`Message` is a very thin encapsulation of one line on
        the wire. The *lexicon* is referenced weakly; a message never keeps
        a lexicon alive, and a message without a lexicon simply never
        resolves its key.

        The key is manipulated via the :attr:`key` property so that the
        cached definition stays consistent with it.

        :ivar has_value: True if the line carries a value (right hand side).
        :ivar value: The raw value, empty if there is none.
    """

    def __init__(self, lexicon=None):

        self._key = ''
        self._definition = None

        if lexicon is None:
            self._lexicon = None
        else:
            self._lexicon = weakref.ref(lexicon)

        self.has_value = False
        self.value = ''


    @classmethod
    def parse(cls, line, lexicon=None):
        """ Return a new :class:`Message` populated from a *line* of network
            input, with the line terminator already removed.
        """

        message = cls(lexicon)
        message.load(line)
        return message


    def __repr__(self):
        return '<Message ' + repr(self.wire_string()) + '>'


    def __str__(self):
        """ The display form of the message: the human name, if known, and
            the value.
        """

        if self.has_value:
            return self.decoded_key + fields.ASSIGN + self.value
        else:
            return self._key


    def load(self, line):
        """ Populate this message from a *line* of network input. Only the
            first equals sign separates the key from the value; any others
            are part of the value.
        """

        key, assign, value = line.partition(fields.ASSIGN)

        if assign:
            self.has_value = True
            self.value = value
        else:
            self.has_value = False
            self.value = ''

        self.key = key


    @property
    def key(self):
        """ The key exactly as it appears on the wire. Assigning a new key
            discards the cached definition and attempts a fresh lookup.
        """

        return self._key


    @key.setter
    def key(self, key):
        self._key = key
        self._relink()


    @property
    def lexicon(self):
        """The associated lexicon, or None if there isn't one (any more)."""

        if self._lexicon is None:
            return None
        return self._lexicon()


    def _relink(self):
        """ Look up the definition for the current key, or clear the cached
            definition so that the next access can retry it.
        """

        lexicon = self.lexicon

        if lexicon is None:
            self._definition = None
        else:
            self._definition = lexicon.definition_for(self._key)


    @property
    def definition(self):
        """ The :class:`psx.protocol.lexicon.MessageDefinition` for this
            message's key, or None if it is not (yet) known. An empty cache
            is always retried, so definitions learned after the message was
            parsed will be found.
        """

        if self._definition is None:
            self._relink()

        return self._definition


    @property
    def decoded_key(self):
        """ The human name for this message's key, if one can be resolved;
            otherwise the raw key, so there is always something to dispatch
            on.
        """

        definition = self.definition

        if definition is None:
            return self._key
        return definition.human_name


    def set_decoded_key(self, human_name):
        """ Set the key from a *human_name*. If the lexicon does not know
            the name, the name itself becomes the key; this is how literal
            keys like 'demand' or not-yet-learned Q keys are sent.
        """

        lexicon = self.lexicon

        if lexicon is None:
            definition = None
        else:
            definition = lexicon.definition_named(human_name)

        if definition is None:
            self._key = human_name
            self._definition = None
        else:
            self._key = definition.key
            self._definition = definition


    def wire_string(self):
        """ Return the message as it would be sent on the wire, without
            the line terminator.
        """

        if self.has_value:
            return self._key + fields.ASSIGN + self.value
        else:
            return self._key


    def values(self):
        """ Split a multi-field value on semicolons and return the fields
            as a list. A message without a value returns an empty list.
        """

        if self.has_value:
            return self.value.split(fields.SEPARATOR)
        else:
            return list()


    def value_at(self, index):
        """ Return the field at position *index* of a semicolon-delimited
            value. None is returned if there is no such field.
        """

        parts = self.values()

        if index < 0 or index >= len(parts):
            return None

        return parts[index]


# end of class Message


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
