import sys, pathlib, threading

import pytest
from fastapi.testclient import TestClient

# Ensure the project root is importable when running pytest without installing
PROJECT_ROOT = pathlib.Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from catalog.config import Settings  # noqa: E402
from catalog.errors import IOFailure  # noqa: E402
from catalog.main import create_app  # noqa: E402


class FlakyStorage:
    """In-memory stand-in for JsonFileStorage whose saves can be made to fail."""

    def __init__(self, fail: bool = False):
        self.path = "memory"
        self.fail = fail
        self.saves = []
        self.threads = []

    def load(self):
        return None

    def save(self, products):
        self.threads.append(threading.get_ident())
        if self.fail:
            raise IOFailure(self.path, "disk full")
        self.saves.append(products)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "products.json"


@pytest.fixture
def settings(data_file):
    return Settings(data_file=str(data_file), seed=False)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
