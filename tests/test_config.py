import pytest

import psx
from psx import config


def test_defaults(monkeypatch):

    for name in ('PSX_SERVER', 'PSX_CLIENT_NAME', 'PSX_TRANSPORT', 'PSX_CONNECT_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)

    assert config.server() == 'localhost:10747'
    assert config.client_name() == 'psx.py'
    assert config.transport() == 'tcp'
    assert config.connect_timeout() == 10.0


def test_environment(monkeypatch):

    monkeypatch.setenv('PSX_SERVER', 'router.local:10748')
    monkeypatch.setenv('PSX_CLIENT_NAME', 'unittest')
    monkeypatch.setenv('PSX_TRANSPORT', 'ZMQ')
    monkeypatch.setenv('PSX_CONNECT_TIMEOUT', '2.5')

    assert config.server() == 'router.local:10748'
    assert config.client_name() == 'unittest'
    assert config.transport() == 'zmq'
    assert config.connect_timeout() == 2.5


@pytest.mark.parametrize('setting', ('0', 'none', ''))
def test_no_timeout(monkeypatch, setting):

    monkeypatch.setenv('PSX_CONNECT_TIMEOUT', setting)
    assert config.connect_timeout() is None


def test_bad_transport(monkeypatch):

    monkeypatch.setenv('PSX_TRANSPORT', 'carrier-pigeon')

    with pytest.raises(ValueError):
        config.transport()


@pytest.mark.parametrize('address,expected', (
    ('localhost:10747', ('localhost', 10747)),
    ('simhost', ('simhost', 10747)),
    (':10749', ('localhost', 10749)),
    ('192.168.1.20:10748', ('192.168.1.20', 10748)),
    ('[::1]:10748', ('::1', 10748)),
    ('[::1]', ('::1', 10747)),
    ('::1', ('::1', 10747)),
))
def test_split_address(address, expected):
    assert config.split_address(address) == expected


@pytest.mark.parametrize('address', (
    'localhost:port',
    'localhost:70000',
    '[::1',
    '[::1]10747',
))
def test_bad_address(address):

    with pytest.raises(ValueError):
        config.split_address(address)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
