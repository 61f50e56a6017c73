# std imports
import platform

# 3rd party
import pytest

# local
from .accessories import TestEnvironment

IS_WINDOWS = platform.system() == 'Windows'

all_xterm_terms_params = 'xterm xterm-256color'.split()


@pytest.fixture
def anyio_backend():
    """Run asynchronous tests by asyncio, the event loop :func:`~.probe_terminal` requires."""
    return 'asyncio'


@pytest.fixture(params=all_xterm_terms_params)
def xterm_term(request):
    """Values of TERM advertised by terminals claiming to be xterm."""
    return request.param


@pytest.fixture
def env():
    """Interactive :class:`TestEnvironment` with no environment variables set."""
    environment = TestEnvironment()
    yield environment
    environment.close()
