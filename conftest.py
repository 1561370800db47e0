import shutil
from pathlib import Path

import pytest

from ordo_manager.storage import Storage
from ordo_manager.store import Store

TEST_DATA_DIR = Path("data-tests")


@pytest.fixture(autouse=True)
def clean_test_data():
    """Wipe data-tests/ before every test."""
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    yield
    # leave data-tests around after tests for inspection; CI can ignore it


@pytest.fixture
def storage() -> Storage:
    return Storage(TEST_DATA_DIR)


@pytest.fixture
def store(storage: Storage) -> Store:
    return Store(storage)
