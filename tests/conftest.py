import easycrypto
import os
import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """ Keep the tests away from any real ~/.easycrypto configuration or
        EASYCRYPTO_* environment variables on the machine running them.
    """

    for variable in list(os.environ):
        if variable.startswith('EASYCRYPTO_'):
            monkeypatch.delenv(variable)

    monkeypatch.setattr(easycrypto.config.directory, 'found', str(tmp_path))
    easycrypto.config.reset()

    yield tmp_path

    easycrypto.config.reset()


@pytest.fixture
def server():

    server = easycrypto.Server(address='127.0.0.1', port=0)

    yield server

    server.stop()


@pytest.fixture
def client(server):

    client = easycrypto.Client('127.0.0.1', server.port, local_port=0)

    yield client

    client.close()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
