import pytest

from formtree.components import Context
from formtree.core.config import RawConfig
from formtree.core.config import read_config
from formtree.core.context import create_context
from formtree.testing.cli import FormtreeCliRunner
from formtree.testing.models import Model


@pytest.fixture(scope='session')
def rc() -> RawConfig:
    rc = read_config()
    rc.add('pytest', {
        'env': 'test',
    })
    rc.lock()
    return rc


@pytest.fixture(scope='session')
def _context(rc: RawConfig) -> Context:
    return create_context('pytest', rc)


@pytest.fixture()
def context(_context: Context) -> Context:
    with _context.fork('test') as context:
        yield context


@pytest.fixture()
def journal():
    Model.journal = []
    yield Model.journal
    Model.journal = []


@pytest.fixture()
def cli():
    yield FormtreeCliRunner()
