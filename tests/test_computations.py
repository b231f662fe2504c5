import logging

import pytest

from computations import (
    apply_tax_and_tip,
    compute_event_bill,
    compute_overall_summary,
    compute_per_person_breakdown,
    item_breakdown,
    item_share,
    unassigned_items,
)
from models import Item, Person


def _by_name(breakdown):
    return {b.person.name: b for b in breakdown}


def test_overall_summary_worked_example(xy_event):
    s = compute_overall_summary(xy_event.items, 10, 20)

    assert s.subtotal == pytest.approx(50.0)
    assert s.tax_amount == pytest.approx(5.0)
    assert s.tip_amount == pytest.approx(11.0)
    assert s.total == pytest.approx(66.0)


def test_per_person_worked_example(xy_event):
    people = _by_name(compute_per_person_breakdown(xy_event.people, xy_event.items, 10, 20))

    x, y = people["X"], people["Y"]
    assert x.subtotal == pytest.approx(35.0)
    assert x.tax == pytest.approx(3.5)
    assert x.tip == pytest.approx(7.7)
    assert x.total == pytest.approx(46.2)
    assert y.subtotal == pytest.approx(15.0)
    assert y.tax == pytest.approx(1.5)
    assert y.tip == pytest.approx(3.3)
    assert y.total == pytest.approx(19.8)
    assert x.total + y.total == pytest.approx(66.0)


def test_tip_is_taken_after_tax():
    tax, tip, total = apply_tax_and_tip(100.0, 10.0, 20.0)
    assert tax == pytest.approx(10.0)
    assert tip == pytest.approx(22.0)  # 20% of 110, not of 100
    assert total == pytest.approx(132.0)


@pytest.mark.parametrize("tax_rate,tip_rate", [(0, 0), (8.875, 15), (15, 30), (250, 100)])
def test_summary_formulas_for_any_non_negative_rate(xy_event, tax_rate, tip_rate):
    s = compute_overall_summary(xy_event.items, tax_rate, tip_rate)

    assert s.subtotal == sum(i.price for i in xy_event.items)
    assert s.tax_amount == pytest.approx(s.subtotal * tax_rate / 100)
    assert s.tip_amount == pytest.approx((s.subtotal + s.tax_amount) * tip_rate / 100)
    assert s.total == pytest.approx(s.subtotal + s.tax_amount + s.tip_amount)


def test_shares_of_an_item_sum_to_its_price():
    people = [Person(str(n), f"P{n}") for n in range(3)]
    item = Item("i", "Cake", 10.0, 1, [p.id for p in people])

    breakdown = compute_per_person_breakdown(people, [item], 0, 0)

    assert [b.items[0].amount for b in breakdown] == [pytest.approx(10.0 / 3)] * 3
    assert sum(b.subtotal for b in breakdown) == pytest.approx(10.0)


def test_item_share_with_no_sharers_is_zero():
    assert item_share(Item("i", "Bread", 5.0, 1, [])) == 0.0


def test_duplicate_sharer_ids_count_once():
    item = Item("i", "Soup", 12.0, 1, ["a", "a", "b"])
    assert item.shared_by == ["a", "b"]
    assert item_share(item) == pytest.approx(6.0)


def test_all_items_assigned_personal_subtotals_add_up(xy_event):
    s = compute_overall_summary(xy_event.items, 8.875, 15)
    breakdown = compute_per_person_breakdown(xy_event.people, xy_event.items, 8.875, 15)

    assert sum(b.subtotal for b in breakdown) == pytest.approx(s.subtotal)
    assert sum(b.total for b in breakdown) == pytest.approx(s.total)


def test_unassigned_item_is_missing_from_personal_subtotals(xy_event):
    items = xy_event.items + [Item("i3", "Bread", 7.5, 1, [])]

    s = compute_overall_summary(items, 10, 20)
    breakdown = compute_per_person_breakdown(xy_event.people, items, 10, 20)

    assert s.subtotal == pytest.approx(57.5)
    personal = sum(b.subtotal for b in breakdown)
    assert personal < s.subtotal
    assert s.subtotal - personal == pytest.approx(7.5)
    assert [i.id for i in unassigned_items(items)] == ["i3"]


def test_dangling_sharer_id_divides_but_credits_nobody():
    people = [Person("a", "A")]
    item = Item("i", "Fries", 8.0, 1, ["a", "ghost"])

    [a] = compute_per_person_breakdown(people, [item], 0, 0)

    assert a.subtotal == pytest.approx(4.0)


def test_breakdown_ordered_by_total_descending():
    people = [Person("a", "A"), Person("b", "B"), Person("c", "C")]
    items = [
        Item("1", "Salad", 9.0, 1, ["a"]),
        Item("2", "Steak", 40.0, 1, ["b"]),
        Item("3", "Pasta", 18.0, 1, ["c"]),
    ]

    breakdown = compute_per_person_breakdown(people, items, 8.875, 15)

    assert [b.person.id for b in breakdown] == ["b", "c", "a"]
    totals = [b.total for b in breakdown]
    assert totals == sorted(totals, reverse=True)


def test_ties_keep_input_order():
    people = [Person("a", "A"), Person("b", "B"), Person("c", "C")]
    items = [Item("1", "Pitcher", 30.0, 1, ["a", "b", "c"])]

    breakdown = compute_per_person_breakdown(people, items, 10, 10)

    assert [b.person.id for b in breakdown] == ["a", "b", "c"]


def test_person_item_shares_ordered_by_amount():
    people = [Person("a", "A"), Person("b", "B")]
    items = [
        Item("1", "Water", 2.0, 1, ["a"]),
        Item("2", "Platter", 50.0, 1, ["a", "b"]),
        Item("3", "Dessert", 12.0, 1, ["a"]),
    ]

    a = _by_name(compute_per_person_breakdown(people, items, 0, 0))["A"]

    assert [s.item.name for s in a.items] == ["Platter", "Dessert", "Water"]
    assert [s.amount for s in a.items] == [pytest.approx(25.0), pytest.approx(12.0), pytest.approx(2.0)]


def test_person_with_no_items_owes_nothing(xy_event):
    people = xy_event.people + [Person("z", "Z")]

    z = _by_name(compute_per_person_breakdown(people, xy_event.items, 10, 20))["Z"]

    assert (z.subtotal, z.tax, z.tip, z.total) == (0.0, 0.0, 0.0, 0.0)
    assert z.items == []


def test_empty_bill():
    s = compute_overall_summary([], 8.875, 15)
    assert (s.subtotal, s.tax_amount, s.tip_amount, s.total) == (0.0, 0.0, 0.0, 0.0)
    assert compute_per_person_breakdown([], [], 8.875, 15) == []


def test_inputs_are_not_mutated(xy_event):
    before = [(i.id, i.price, list(i.shared_by)) for i in xy_event.items]

    compute_event_bill(xy_event, 10, 20)
    compute_event_bill(xy_event, 10, 20)

    assert [(i.id, i.price, list(i.shared_by)) for i in xy_event.items] == before


def test_event_bill_combines_summary_and_breakdown(xy_event):
    bill = compute_event_bill(xy_event, 10, 20)

    assert bill.summary.total == pytest.approx(66.0)
    assert [b.person.name for b in bill.people] == ["X", "Y"]
    assert bill.unassigned_items == []
    assert bill.unassigned_total == 0


def test_event_bill_warns_about_unassigned_items(xy_event, caplog):
    xy_event.items.append(Item("i3", "Bread", 4.0, 1, []))

    with caplog.at_level(logging.WARNING, logger="computations"):
        bill = compute_event_bill(xy_event, 10, 20)

    assert [i.name for i in bill.unassigned_items] == ["Bread"]
    assert bill.unassigned_total == pytest.approx(4.0)
    assert "Bread" in caplog.text


def test_item_breakdown_rows(xy_event):
    xy_event.people.append(Person("z", "Z"))
    xy_event.items.append(Item("i3", "Bread", 4.0, 1, []))
    xy_event.items.append(Item("i4", "Olives", 6.0, 1, ["y", "ghost"]))

    rows = [(i.name, share, names) for i, share, names in item_breakdown(xy_event)]

    assert rows == [
        ("Pizza", pytest.approx(15.0), ["X", "Y"]),
        ("Wine", pytest.approx(20.0), ["X"]),
        ("Bread", None, []),
        ("Olives", pytest.approx(3.0), ["Y"]),
    ]


def test_item_breakdown_follows_edits_to_the_event(store, dinner):
    x, y, _ = dinner.people
    pizza = store.add_item(dinner.id, "Pizza", 30, 1, [x.id, y.id])
    store.add_item(dinner.id, "Salad", 9, 1, [y.id])
    assert [i.name for i, _, _ in item_breakdown(dinner)] == ["Pizza", "Salad"]

    store.remove_item(dinner.id, pizza.id)
    store.rename_person(dinner.id, y.id, "Yasmin")

    assert [(i.name, names) for i, _, names in item_breakdown(dinner)] == [("Salad", ["Yasmin"])]
    assert compute_event_bill(dinner, 0, 0).summary.subtotal == pytest.approx(9.0)
