import pathlib
import site

import pytest
from sqlbuild.options import BuilderOptions, set_default_options

HERE = pathlib.Path(pathlib.Path(__file__).resolve()).parent
site.addsitedir(HERE)


@pytest.fixture(autouse=True)
def reset_options():
    """Reset default options around each test."""
    set_default_options(BuilderOptions())
    yield
    set_default_options(BuilderOptions())


pytest_plugins = [
    'tests.fixtures.mocks',
    'tests.fixtures.values',
]
