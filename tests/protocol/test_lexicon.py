import dataclasses

import pytest

import psx
from psx.protocol.lexicon import Lexicon, MessageKind, MessageMode, parse_definition


def test_parse_cdukeyb():

    definition = parse_definition('Lh402(K)=KeybCduC')

    assert definition.human_name == 'KeybCduC'
    assert definition.index == 402
    assert definition.kind is MessageKind.HUMAN
    assert definition.mode is MessageMode.CDUKEYB
    assert definition.key == 'Qh402'


def test_parse_xecon():

    definition = parse_definition('Li242(Z)=UplinkBits')

    assert definition.human_name == 'UplinkBits'
    assert definition.index == 242
    assert definition.kind is MessageKind.INTEGER
    assert definition.mode is MessageMode.XECON
    assert definition.key == 'Qi242'


def test_parse_message():
    """ A definition can be parsed from a line that has already been
        turned into a Message, which is how the listener hands them over.
    """

    message = psx.Message.parse('Ls35(E)=FltDeckLights')
    definition = parse_definition(message)

    assert definition.kind is MessageKind.STRING
    assert definition.mode is MessageMode.ECON
    assert definition.key == 'Qs35'


@pytest.mark.parametrize('letter,mode', (
    ('S', MessageMode.START),
    ('C', MessageMode.CONT),
    ('E', MessageMode.ECON),
    ('D', MessageMode.DELTA),
    ('B', MessageMode.BIGMOM),
    ('M', MessageMode.MCPMOM),
    ('G', MessageMode.GUAMOM2),
    ('F', MessageMode.GUAMOM4),
    ('K', MessageMode.CDUKEYB),
    ('R', MessageMode.RCP),
    ('A', MessageMode.ACP),
    ('X', MessageMode.MIXED),
    ('Y', MessageMode.XDELTA),
    ('Z', MessageMode.XECON),
    ('N', MessageMode.DEMAND),
))
def test_modes(letter, mode):

    definition = parse_definition('Li7(' + letter + ')=Something')
    assert definition.mode is mode


@pytest.mark.parametrize('line', (
    '',
    'Qh402(K)=KeybCduC',
    'Lh4(K',
    'Lx402(K)=KeybCduC',
    'Lh402K)=KeybCduC',
    'Lh(KK)=KeybCduC',
    'Lh-40(K)=KeybCduC',
    'Lh4a2(K)=KeybCduC',
    'Lh402(Q)=KeybCduC',
    'Lh4023(',
))
def test_syntax_errors(line):

    with pytest.raises(psx.LexiconSyntaxError) as caught:
        parse_definition(line)

    assert caught.value.kind is psx.ErrorKind.SYNTAX
    assert isinstance(caught.value, ValueError)


def test_immutable():

    definition = parse_definition('Lh402(K)=KeybCduC')

    with pytest.raises(dataclasses.FrozenInstanceError):
        definition.index = 403


def test_lookups():

    lexicon = Lexicon()
    lexicon.register('Lh402(K)=KeybCduC')
    lexicon.register('Li242(Z)=UplinkBits')

    assert len(lexicon) == 2
    assert 'Qh402' in lexicon
    assert 'Qs1' not in lexicon

    assert lexicon.key_for('KeybCduC') == 'Qh402'
    assert lexicon.key_for('UplinkBits') == 'Qi242'
    assert lexicon.human_name_for('Qh402') == 'KeybCduC'
    assert lexicon.human_name_for('Qi242') == 'UplinkBits'

    definition = lexicon.definition_for('Qi242')
    assert definition is lexicon.definition_named('UplinkBits')

    names = sorted(definition.human_name for definition in lexicon)
    assert names == ['KeybCduC', 'UplinkBits']


def test_misses():
    """ Lookup misses are an empty string, not an exception. """

    lexicon = Lexicon()
    lexicon.register('Lh402(K)=KeybCduC')

    assert lexicon.key_for('NoSuchThing') == ''
    assert lexicon.human_name_for('Qs9999') == ''
    assert lexicon.definition_for('Qs9999') is None
    assert lexicon.definition_named('NoSuchThing') is None


def test_empty_name():
    """ A definition with no name is learned under the empty name, which
        is why misses and empty names can't be told apart by key_for().
    """

    lexicon = Lexicon()
    lexicon.register('Lh1(S)')

    assert lexicon.human_name_for('Qh1') == ''
    assert lexicon.key_for('') == 'Qh1'
    assert lexicon.definition_for('Qh1') is not None


def test_bad_line_not_learned():

    lexicon = Lexicon()

    with pytest.raises(psx.LexiconSyntaxError):
        lexicon.register('Lh402(Q)=KeybCduC')

    assert len(lexicon) == 0
    assert lexicon.key_for('KeybCduC') == ''


def test_redefined_key():
    """ Registering the same key twice keeps only the latest definition,
        under either lookup.
    """

    lexicon = Lexicon()
    lexicon.register('Lh402(K)=First')
    second = lexicon.register('Lh402(K)=Second')

    assert len(lexicon) == 1
    assert lexicon.human_name_for('Qh402') == 'Second'
    assert lexicon.key_for('Second') == 'Qh402'
    assert lexicon.key_for('First') == ''
    assert lexicon.definition_for('Qh402') is second


def test_redefined_name():

    lexicon = Lexicon()
    lexicon.register('Lh402(K)=Shared')
    lexicon.register('Li7(S)=Shared')

    assert len(lexicon) == 1
    assert lexicon.key_for('Shared') == 'Qi7'
    assert lexicon.human_name_for('Qi7') == 'Shared'
    assert lexicon.human_name_for('Qh402') == ''


def test_repeated_definition():

    lexicon = Lexicon()
    lexicon.register('Lh402(K)=KeybCduC')
    lexicon.register('Lh402(K)=KeybCduC')

    assert len(lexicon) == 1
    assert lexicon.key_for('KeybCduC') == 'Qh402'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
