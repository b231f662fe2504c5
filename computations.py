"""
Business logic and computations for BillSplit
"""
from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Tuple

from models import BillSummary, Event, EventBill, Item, ItemShare, Person, PersonBreakdown

logger = logging.getLogger(__name__)


def item_share(item: Item) -> float:
    """Amount each sharer owes for an item; 0 when nobody shares it"""
    n = len(set(item.shared_by))
    if n == 0:
        return 0.0
    return float(item.price) / n


def apply_tax_and_tip(subtotal: float, tax_rate: float, tip_rate: float) -> Tuple[float, float, float]:
    """
    Add tax and tip to a subtotal. Rates are percentages.
    Tip is taken on the tax-inclusive amount.
    Returns (tax, tip, total).
    """
    tax = subtotal * (tax_rate / 100.0)
    tip = (subtotal + tax) * (tip_rate / 100.0)
    return tax, tip, subtotal + tax + tip


def unassigned_items(items: Iterable[Item]) -> List[Item]:
    """Items nobody shares; they count toward the bill but toward no one's share"""
    return [i for i in items if not i.shared_by]


def item_breakdown(event: Event) -> List[Tuple[Item, Optional[float], List[str]]]:
    """
    Rows of (item, per-person share, sharer names) for the event as it is now.
    The share is None when nobody shares the item; dangling ids get no name.
    """
    names = {p.id: p.name for p in event.people}
    return [
        (i, item_share(i) if i.shared_by else None, [names[pid] for pid in i.shared_by if pid in names])
        for i in event.items
    ]


def compute_overall_summary(items: Iterable[Item], tax_rate: float, tip_rate: float) -> BillSummary:
    """Subtotal, tax, tip and total for the whole bill"""
    subtotal = sum((float(i.price) for i in items), 0.0)
    tax, tip, total = apply_tax_and_tip(subtotal, tax_rate, tip_rate)
    return BillSummary(subtotal=subtotal, tax_amount=tax, tip_amount=tip, total=total)


def compute_per_person_breakdown(
    people: Iterable[Person],
    items: Iterable[Item],
    tax_rate: float,
    tip_rate: float
) -> List[PersonBreakdown]:
    """
    Compute what each person owes.
    Every item is split equally among its sharers; each person then pays tax and
    tip on their own subtotal at the bill's rates.
    Sorted by total, largest first; each person's item shares likewise.
    """
    items = list(items)
    out = []
    for p in people:
        shares = [ItemShare(i, item_share(i)) for i in items if p.id in i.shared_by]
        subtotal = sum((s.amount for s in shares), 0.0)
        tax, tip, total = apply_tax_and_tip(subtotal, tax_rate, tip_rate)
        shares.sort(key=lambda s: s.amount, reverse=True)
        out.append(PersonBreakdown(p, subtotal, tax, tip, total, shares))

    out.sort(key=lambda b: b.total, reverse=True)
    return out


def compute_event_bill(event: Event, tax_rate: float, tip_rate: float) -> EventBill:
    """Summary and per-person breakdown for an event, flagging unassigned items"""
    summary = compute_overall_summary(event.items, tax_rate, tip_rate)
    people = compute_per_person_breakdown(event.people, event.items, tax_rate, tip_rate)
    missing = unassigned_items(event.items)
    logger.debug(
        "event %s: subtotal=%.2f tax=%.2f tip=%.2f total=%.2f",
        event.id, summary.subtotal, summary.tax_amount, summary.tip_amount, summary.total
    )
    if missing:
        logger.warning(
            "event %s: %d item(s) shared by nobody (%s); their cost is missing from individual totals",
            event.id, len(missing), ", ".join(i.name for i in missing)
        )
    return EventBill(summary=summary, people=people, unassigned_items=missing)
