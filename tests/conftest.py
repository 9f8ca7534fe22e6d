import datetime

import pytest

from recordkit.records import ClassLoader, RecordRegistry
from tests.fixtures.person.troll import Troll


@pytest.fixture
def registry():
    return RecordRegistry(ClassLoader({"Person": "tests.fixtures.person"}))


@pytest.fixture
def troll_type(registry):
    return registry.declare("Person.Troll", Troll)


@pytest.fixture
def now():
    return datetime.datetime.now(datetime.timezone.utc)


@pytest.fixture
def troll_data(now):
    return {
        "id": 0,
        "createdAt": now,
        "name": "Steve Jobs",
        "login": "billgates",
    }
