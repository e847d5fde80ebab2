from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Mapping, Sequence

from billsplit.services.validation import validate_bill_input


@dataclass(slots=True)
class Participant:
    id: Hashable
    name: str


@dataclass(slots=True)
class LineItem:
    id: Hashable
    name: str
    unit_price_cents: int
    quantity: int = 1
    assigned_participant_ids: Sequence[Hashable] = field(default_factory=list)

    @property
    def total_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(slots=True)
class BillInput:
    items: Sequence[LineItem]
    tax_cents: int
    tip_cents: int
    participants: Sequence[Participant]


@dataclass(slots=True)
class ParticipantShare:
    participant_id: Hashable
    subtotal_cents: int
    tax_share_cents: int
    tip_share_cents: int

    @property
    def total_cents(self) -> int:
        return self.subtotal_cents + self.tax_share_cents + self.tip_share_cents


@dataclass(slots=True)
class BillResult:
    participant_results: Sequence[ParticipantShare]
    total_subtotal_cents: int
    total_tax_cents: int
    total_tip_cents: int
    grand_total_cents: int

    def share_for(self, participant_id: Hashable) -> ParticipantShare | None:
        for share in self.participant_results:
            if share.participant_id == participant_id:
                return share
        return None


def split_item(total_cents: int, assignee_ids: Sequence[Hashable]) -> list[int]:
    """Split an item total equally among assignees.

    The first ``total_cents % len(assignee_ids)`` assignees, in list order,
    receive one extra unit each, so the parts always add up to ``total_cents``.
    """
    if not assignee_ids:
        return []

    count = len(assignee_ids)
    base_share, remainder = divmod(total_cents, count)
    return [base_share + (1 if index < remainder else 0) for index in range(count)]


def allocate_proportionally(
    total_amount: int,
    subtotals: Mapping[Hashable, int],
    total_subtotal: int,
) -> dict[Hashable, int]:
    """Largest-remainder allocation of ``total_amount`` weighted by subtotals.

    Every participant first gets the floor of its exact share. The units left
    over go one each to the largest fractional claims; equal claims are
    ordered by ``str(participant_id)``. With ``total_subtotal == 0`` nothing
    can be weighted and every share is 0.
    """
    if total_subtotal == 0:
        return {participant_id: 0 for participant_id in subtotals}

    shares: dict[Hashable, int] = {}
    # All claims share the denominator total_subtotal, so numerators compare exactly.
    claims: list[tuple[int, str, Hashable]] = []
    allocated = 0

    for participant_id, subtotal in subtotals.items():
        floored, fractional = divmod(subtotal * total_amount, total_subtotal)
        shares[participant_id] = floored
        allocated += floored
        claims.append((fractional, str(participant_id), participant_id))

    leftover = total_amount - allocated
    claims.sort(key=lambda claim: (-claim[0], claim[1]))

    for _, _, participant_id in claims[:leftover]:
        shares[participant_id] += 1

    return shares


def calculate(
    items: Sequence[LineItem],
    tax_cents: int,
    tip_cents: int,
    participants: Sequence[Participant],
) -> BillResult:
    validate_bill_input(items, tax_cents, tip_cents, participants)

    subtotals: dict[Hashable, int] = {participant.id: 0 for participant in participants}
    total_subtotal = 0

    for item in items:
        if not item.assigned_participant_ids:
            # Nobody pays for an unassigned item and it stays out of the subtotal.
            continue
        item_total = item.total_cents
        parts = split_item(item_total, item.assigned_participant_ids)
        for participant_id, part in zip(item.assigned_participant_ids, parts):
            subtotals[participant_id] += part
        total_subtotal += item_total

    tax_allocation = allocate_proportionally(tax_cents, subtotals, total_subtotal)
    tip_allocation = allocate_proportionally(tip_cents, subtotals, total_subtotal)

    results = [
        ParticipantShare(
            participant_id=participant.id,
            subtotal_cents=subtotals[participant.id],
            tax_share_cents=tax_allocation[participant.id],
            tip_share_cents=tip_allocation[participant.id],
        )
        for participant in participants
    ]

    return BillResult(
        participant_results=results,
        total_subtotal_cents=total_subtotal,
        total_tax_cents=tax_cents,
        total_tip_cents=tip_cents,
        grand_total_cents=total_subtotal + tax_cents + tip_cents,
    )


def calculate_bill_input(bill: BillInput) -> BillResult:
    return calculate(bill.items, bill.tax_cents, bill.tip_cents, bill.participants)
