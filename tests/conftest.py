import io

import pytest

from opsdeploy.reporting import Reporter
from opsdeploy.storage import LocalStorage


@pytest.fixture
def output():
    return io.StringIO(), io.StringIO()


@pytest.fixture
def reporter(output):
    out, err = output
    return Reporter(out=out, err=err)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage({'root': str(tmp_path / 'store')})


@pytest.fixture
def sleeps():
    return []
