from datetime import datetime

import pytest

from fakes import InMemoryStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 15, 9, 30)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
