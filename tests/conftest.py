import pytest

import mockserver


@pytest.fixture(scope="session")
def run_mockserver():

    server = mockserver.Server()

    yield server

    server.shutdown()


@pytest.fixture(scope="session")
def run_rejecter():

    rejecter = mockserver.Rejecter()

    yield rejecter

    rejecter.shutdown()


@pytest.fixture
def run_silent_rejecter():

    rejecter = mockserver.Rejecter(reply=b'')

    yield rejecter

    rejecter.shutdown()


@pytest.fixture
def run_banner_rejecter():

    rejecter = mockserver.Rejecter(reply=b'SSH-2.0-OpenSSH_9.6\r\n')

    yield rejecter

    rejecter.shutdown()


@pytest.fixture
def run_sink():

    sink = mockserver.Sink()

    yield sink

    sink.shutdown()


@pytest.fixture
def refused_address():
    return mockserver.unused_address()

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
