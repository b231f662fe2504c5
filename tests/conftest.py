import itertools
from datetime import datetime

import pytest

from colors import PaletteColorAssigner
from models import Event, Item, Person
from store import EventStore


@pytest.fixture
def id_factory():
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def store(id_factory):
    """Empty store with predictable ids and colors."""
    return EventStore(id_factory=id_factory, color_assigner=PaletteColorAssigner(["#111111", "#222222"]))


@pytest.fixture
def dinner(store):
    """Event with three people and no items."""
    return store.create_event("Dinner", ["Xavier", "Yara", "Zoe"], date=datetime(2025, 1, 17, 19, 30))


@pytest.fixture
def xy_event():
    """Two people, a shared 30 item and a 20 item for X alone."""
    x = Person("x", "X")
    y = Person("y", "Y")
    items = [
        Item("i1", "Pizza", 30.0, 1, ["x", "y"]),
        Item("i2", "Wine", 20.0, 2, ["x"]),
    ]
    return Event("e1", "Night out", datetime(2025, 1, 17, 20, 0), [x, y], items)
