from uuid import UUID, uuid4

from billsplit.services.split import (
    LineItem,
    Participant,
    allocate_proportionally,
    calculate,
    split_item,
)


def _item(price: int, assigned, quantity: int = 1, name: str = "item") -> LineItem:
    return LineItem(
        id=uuid4(),
        name=name,
        unit_price_cents=price,
        quantity=quantity,
        assigned_participant_ids=list(assigned),
    )


def test_single_participant():
    p1 = Participant(id=uuid4(), name="P1")
    result = calculate([_item(1000, [p1.id], name="Burger")], 100, 200, [p1])

    assert result.total_subtotal_cents == 1000
    assert len(result.participant_results) == 1
    share = result.participant_results[0]
    assert share.subtotal_cents == 1000
    assert share.tax_share_cents == 100
    assert share.tip_share_cents == 200
    assert share.total_cents == 1300


def test_equal_two_way_split():
    p1 = Participant(id=uuid4(), name="P1")
    p2 = Participant(id=uuid4(), name="P2")
    result = calculate([_item(2000, [p1.id, p2.id], name="Pizza")], 200, 400, [p1, p2])

    for participant in (p1, p2):
        share = result.share_for(participant.id)
        assert share is not None
        assert share.subtotal_cents == 1000
        assert share.tax_share_cents == 100
        assert share.tip_share_cents == 200
    assert result.grand_total_cents == 2600


def test_item_remainder_goes_to_first_assignees_in_list_order():
    a = Participant(id=uuid4(), name="A")
    b = Participant(id=uuid4(), name="B")
    c = Participant(id=uuid4(), name="C")
    result = calculate([_item(100, [a.id, b.id, c.id], name="Fries")], 0, 0, [a, b, c])

    assert result.share_for(a.id).subtotal_cents == 34
    assert result.share_for(b.id).subtotal_cents == 33
    assert result.share_for(c.id).subtotal_cents == 33


def test_item_remainder_follows_assignment_order_not_participant_order():
    a = Participant(id="a", name="A")
    b = Participant(id="b", name="B")
    c = Participant(id="c", name="C")
    result = calculate([_item(101, [c.id, b.id, a.id])], 0, 0, [a, b, c])

    assert [s.subtotal_cents for s in result.participant_results] == [33, 34, 34]


def test_tax_and_tip_are_proportional_to_subtotals():
    p1 = Participant(id=uuid4(), name="P1")
    p2 = Participant(id=uuid4(), name="P2")
    items = [_item(1000, [p1.id], name="Cheap"), _item(3000, [p2.id], name="Expensive")]
    result = calculate(items, 400, 800, [p1, p2])

    r1 = result.share_for(p1.id)
    r2 = result.share_for(p2.id)
    assert (r1.tax_share_cents, r1.tip_share_cents) == (100, 200)
    assert (r2.tax_share_cents, r2.tip_share_cents) == (300, 600)


def test_leftover_unit_tie_goes_to_lowest_id():
    p1 = Participant(id=UUID("00000000-0000-0000-0000-000000000001"), name="A")
    p2 = Participant(id=UUID("00000000-0000-0000-0000-000000000002"), name="B")
    p3 = Participant(id=UUID("00000000-0000-0000-0000-000000000003"), name="C")
    items = [_item(100, [p1.id]), _item(100, [p2.id]), _item(100, [p3.id])]

    # Input order must not change who gets the extra cent.
    result = calculate(items, 100, 0, [p3, p1, p2])

    taxes = [share.tax_share_cents for share in result.participant_results]
    assert sum(taxes) == 100
    assert sorted(taxes) == [33, 33, 34]
    assert result.share_for(p1.id).tax_share_cents == 34


def test_largest_fraction_wins_before_id_order():
    subtotals = {"a": 1, "b": 2}
    # raw shares: a = 1/3, b = 2/3 -> b has the larger remainder.
    assert allocate_proportionally(1, subtotals, 3) == {"a": 0, "b": 1}


def test_zero_subtotal_allocates_nothing():
    p1 = Participant(id=uuid4(), name="P1")
    p2 = Participant(id=uuid4(), name="P2")
    result = calculate([], 500, 0, [p1, p2])

    assert all(s.tax_share_cents == 0 and s.tip_share_cents == 0 for s in result.participant_results)
    assert result.total_subtotal_cents == 0
    assert result.total_tax_cents == 500
    assert result.grand_total_cents == 500


def test_unassigned_item_is_excluded():
    p1 = Participant(id=uuid4(), name="P1")
    items = [_item(700, [p1.id]), _item(999, [], name="Nobody's")]
    result = calculate(items, 0, 0, [p1])

    assert result.total_subtotal_cents == 700
    assert result.share_for(p1.id).subtotal_cents == 700
    assert result.grand_total_cents == 700


def test_quantity_multiplies_unit_price():
    p1 = Participant(id=uuid4(), name="P1")
    p2 = Participant(id=uuid4(), name="P2")
    result = calculate([_item(500, [p1.id, p2.id], quantity=2, name="Beer")], 0, 0, [p1, p2])

    assert result.share_for(p1.id).subtotal_cents == 500
    assert result.share_for(p2.id).subtotal_cents == 500


def test_conservation_on_uneven_bill():
    people = [Participant(id=f"p{i}", name=f"P{i}") for i in range(7)]
    ids = [p.id for p in people]
    items = [
        _item(1999, ids[:3]),
        _item(333, ids[2:6], quantity=3),
        _item(1, ids),
        _item(12345, [ids[6]]),
        _item(250, []),
    ]
    result = calculate(items, 1237, 2911, people)

    assert sum(s.subtotal_cents for s in result.participant_results) == result.total_subtotal_cents
    assert sum(s.tax_share_cents for s in result.participant_results) == 1237
    assert sum(s.tip_share_cents for s in result.participant_results) == 2911
    assert sum(s.total_cents for s in result.participant_results) == result.grand_total_cents
    assert result.grand_total_cents == (
        result.total_subtotal_cents + result.total_tax_cents + result.total_tip_cents
    )
    assert all(isinstance(s.total_cents, int) for s in result.participant_results)


def test_repeated_calls_are_identical():
    people = [Participant(id=f"p{i}", name=f"P{i}") for i in range(3)]
    items = [_item(1000, ["p0", "p1", "p2"]), _item(17, ["p1"])]

    assert calculate(items, 101, 203, people) == calculate(items, 101, 203, people)


def test_duplicate_assignee_counts_twice():
    p1 = Participant(id="p1", name="P1")
    p2 = Participant(id="p2", name="P2")
    result = calculate([_item(300, ["p1", "p1", "p2"])], 0, 0, [p1, p2])

    assert result.share_for("p1").subtotal_cents == 200
    assert result.share_for("p2").subtotal_cents == 100


def test_split_item_parts_sum_to_total():
    assert split_item(1001, [1, 2, 3]) == [334, 334, 333]
    assert split_item(5, []) == []
