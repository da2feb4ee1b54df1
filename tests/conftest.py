import pytest

from pipeshell import history


@pytest.fixture(autouse=True)
def empty_history():
    history.clear_history()
    yield
    history.clear_history()
