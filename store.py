"""
In-memory event store for BillSplit.
Holds every event for the process lifetime and validates edits.
"""
from __future__ import annotations
import logging
import math
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from colors import ColorAssigner, RandomHueColorAssigner
from models import Event, Item, Person
from utils import new_id, now

logger = logging.getLogger(__name__)

MAX_QUANTITY = 99


class StoreError(Exception):
    """Base exception for event store errors."""
    pass


class ValidationError(StoreError, ValueError):
    """Raised when user input is rejected."""
    pass


class DuplicateNameError(ValidationError):
    """Raised when a person name already exists in the event."""
    pass


class NotFoundError(StoreError, KeyError):
    """Raised when an event, person or item id is unknown."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""


def _clean_name(name: str, what: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(f"{what} name required.")
    return name


def _parse_price(value, what: str = "Price") -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be a number.") from None
    if not math.isfinite(price):
        raise ValidationError(f"{what} must be a number.")
    if price < 0:
        raise ValidationError(f"{what} must be non-negative.")
    return price


def _parse_quantity(value) -> int:
    try:
        qty = int(str(value).strip())
    except ValueError:
        raise ValidationError("Quantity must be a whole number.") from None
    if qty < 1 or qty > MAX_QUANTITY:
        raise ValidationError(f"Quantity must be between 1 and {MAX_QUANTITY}.")
    return qty


class EventStore:
    """CRUD operations on events, their people and their items"""

    def __init__(
        self,
        id_factory: Callable[[], str] = new_id,
        color_assigner: Optional[ColorAssigner] = None
    ):
        self.id_factory = id_factory
        self.color_assigner = color_assigner or RandomHueColorAssigner()
        self._events: List[Event] = []

    # ---------- Events ----------
    def create_event(self, name: str, people_names: Iterable[str], date: Optional[datetime] = None) -> Event:
        """Create an event with its initial people"""
        name = _clean_name(name, "Event")
        people: List[Person] = []
        for pn in people_names:
            pn = _clean_name(pn, "Person")
            self._check_unique(people, pn)
            people.append(Person(self.id_factory(), pn, self.color_assigner.next_color()))
        if not people:
            raise ValidationError("Add at least one person.")

        event = Event(id=self.id_factory(), name=name, date=date or now(), people=people, items=[])
        self._events.append(event)
        logger.info("created event %s '%s' with %d people", event.id, event.name, len(people))
        return event

    def list_events(self) -> List[Event]:
        """All events, newest first"""
        return list(reversed(self._events))

    def get_event(self, event_id: str) -> Event:
        e = next((x for x in self._events if x.id == event_id), None)
        if e is None:
            raise NotFoundError(f"No event with id {event_id}.")
        return e

    def rename_event(self, event_id: str, name: str) -> Event:
        e = self.get_event(event_id)
        e.name = _clean_name(name, "Event")
        logger.info("renamed event %s to '%s'", e.id, e.name)
        return e

    def delete_event(self, event_id: str) -> None:
        e = self.get_event(event_id)
        self._events = [x for x in self._events if x.id != e.id]
        logger.info("deleted event %s '%s'", e.id, e.name)

    # ---------- People ----------
    @staticmethod
    def _check_unique(people: Iterable[Person], name: str, skip_id: Optional[str] = None) -> None:
        key = name.lower()
        for p in people:
            if p.id != skip_id and p.name.lower() == key:
                raise DuplicateNameError(f"'{name}' already exists")

    def _get_person(self, event: Event, person_id: str) -> Person:
        p = event.find_person(person_id)
        if p is None:
            raise NotFoundError(f"No person with id {person_id} in event '{event.name}'.")
        return p

    def add_person(self, event_id: str, name: str) -> Person:
        """Add a participant; names are unique per event, ignoring case"""
        e = self.get_event(event_id)
        name = _clean_name(name, "Person")
        self._check_unique(e.people, name)
        p = Person(self.id_factory(), name, self.color_assigner.next_color())
        e.people.append(p)
        logger.info("event %s: added person %s '%s'", e.id, p.id, p.name)
        return p

    def rename_person(self, event_id: str, person_id: str, name: str) -> Person:
        e = self.get_event(event_id)
        p = self._get_person(e, person_id)
        name = _clean_name(name, "Person")
        self._check_unique(e.people, name, skip_id=p.id)
        p.name = name
        logger.info("event %s: renamed person %s to '%s'", e.id, p.id, p.name)
        return p

    def remove_person(self, event_id: str, person_id: str) -> List[Item]:
        """
        Remove a participant together with every item they share.
        Returns the removed items.
        """
        e = self.get_event(event_id)
        p = self._get_person(e, person_id)
        removed = [i for i in e.items if p.id in i.shared_by]
        e.items = [i for i in e.items if p.id not in i.shared_by]
        e.people = [x for x in e.people if x.id != p.id]
        logger.info("event %s: removed person %s '%s' and %d item(s)", e.id, p.id, p.name, len(removed))
        return removed

    # ---------- Items ----------
    def _check_sharers(self, event: Event, shared_by: Iterable[str]) -> List[str]:
        ids = list(dict.fromkeys(shared_by))
        if not ids:
            raise ValidationError("Select at least one person to share the item.")
        for pid in ids:
            self._get_person(event, pid)
        return ids

    def _get_item(self, event: Event, item_id: str) -> Item:
        i = event.find_item(item_id)
        if i is None:
            raise NotFoundError(f"No item with id {item_id} in event '{event.name}'.")
        return i

    def add_item(
        self,
        event_id: str,
        name: str,
        unit_price,
        quantity=1,
        shared_by: Iterable[str] = ()
    ) -> Item:
        """Add an item; the stored price is unit price times quantity"""
        e = self.get_event(event_id)
        name = _clean_name(name, "Item")
        price = _parse_price(unit_price, "Price per item")
        qty = _parse_quantity(quantity)
        ids = self._check_sharers(e, shared_by)
        total = price * qty
        if not math.isfinite(total):
            raise ValidationError("Total price is too large.")
        item = Item(id=self.id_factory(), name=name, price=total, quantity=qty, shared_by=ids)
        e.items.append(item)
        logger.info("event %s: added item %s '%s' price=%.2f shared by %d", e.id, item.id, item.name,
                    item.price, len(ids))
        return item

    def update_item(
        self,
        event_id: str,
        item_id: str,
        name: Optional[str] = None,
        price=None,
        shared_by: Optional[Iterable[str]] = None
    ) -> Item:
        """Edit an item's name, total price or sharers; omitted fields are kept"""
        e = self.get_event(event_id)
        item = self._get_item(e, item_id)
        # validate everything before touching the item
        new_name = _clean_name(name, "Item") if name is not None else item.name
        new_price = _parse_price(price) if price is not None else item.price
        new_ids = self._check_sharers(e, shared_by) if shared_by is not None else item.shared_by
        item.name = new_name
        item.price = new_price
        item.shared_by = list(new_ids)
        logger.info("event %s: updated item %s '%s'", e.id, item.id, item.name)
        return item

    def remove_item(self, event_id: str, item_id: str) -> Item:
        e = self.get_event(event_id)
        item = self._get_item(e, item_id)
        e.items = [i for i in e.items if i.id != item.id]
        logger.info("event %s: removed item %s '%s'", e.id, item.id, item.name)
        return item
