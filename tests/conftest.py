import pytest

from mp_psi import runtime

from helpers import make_small_config


@pytest.fixture(autouse=True)
def clean_runtime():
    runtime.shutdown()
    yield
    runtime.shutdown()


@pytest.fixture
def config8():
    return make_small_config(8)


@pytest.fixture
def initialized(config8):
    return runtime.initialize(config8)
