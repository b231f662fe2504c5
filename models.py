"""
Data models for BillSplit application
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Person:
    """Participant in an event"""
    id: str
    name: str
    color: str = ""  # "#rrggbb", display only


@dataclass
class Item:
    """Line item on the bill"""
    id: str
    name: str
    price: float  # total price (unit price * quantity)
    quantity: int = 1
    shared_by: List[str] = field(default_factory=list)  # person ids

    def __post_init__(self):
        # behaves as a set; keep first-seen order for display
        self.shared_by = list(dict.fromkeys(self.shared_by))

    @property
    def unit_price(self) -> float:
        return self.price / self.quantity if self.quantity else self.price


@dataclass
class Event:
    """One shared bill: the people at the table and what they ordered"""
    id: str
    name: str
    date: datetime
    people: List[Person] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)

    def find_person(self, person_id: str) -> Optional[Person]:
        return next((p for p in self.people if p.id == person_id), None)

    def find_item(self, item_id: str) -> Optional[Item]:
        return next((i for i in self.items if i.id == item_id), None)


@dataclass
class BillSummary:
    """Totals for the whole bill"""
    subtotal: float
    tax_amount: float
    tip_amount: float
    total: float


@dataclass
class ItemShare:
    """One person's portion of an item"""
    item: Item
    amount: float


@dataclass
class PersonBreakdown:
    """What one person owes, with the item shares behind it"""
    person: Person
    subtotal: float
    tax: float
    tip: float
    total: float
    items: List[ItemShare] = field(default_factory=list)


@dataclass
class EventBill:
    """Summary, per-person breakdown and unassigned items of an event"""
    summary: BillSummary
    people: List[PersonBreakdown]
    unassigned_items: List[Item] = field(default_factory=list)

    @property
    def unassigned_total(self) -> float:
        return sum(float(i.price) for i in self.unassigned_items)
