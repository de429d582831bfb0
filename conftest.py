from unittest.mock import MagicMock

import pytest

import database
from database import RecordStore
from library import Library


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    # Every test gets its own data directory
    path = str(tmp_path / "data")
    monkeypatch.setattr(database, "DATA_DIR", path)
    return path


@pytest.fixture
def lib(data_dir):
    return Library(RecordStore(data_dir))


@pytest.fixture
def store():
    """A record store double that starts empty and records every save."""
    mock = MagicMock(spec=RecordStore)
    mock.load.return_value = []
    return mock
