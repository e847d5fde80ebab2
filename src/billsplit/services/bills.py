"""Turns stored bills into calculator input."""

from __future__ import annotations

from typing import Protocol, Sequence
from uuid import UUID

from billsplit.db.models import Bill, BillItem, BillParticipant
from billsplit.logging import bind_context, get_logger
from billsplit.services.authz import BillLookup, get_bill_or_404
from billsplit.services.split import BillInput, BillResult, LineItem, Participant, calculate_bill_input


class BillSnapshotSource(BillLookup, Protocol):
    async def get_bill_participants(self, bill_id: UUID | str) -> list[BillParticipant]: ...

    async def get_bill_items(self, bill_id: UUID | str) -> list[BillItem]: ...


def bill_input_from_rows(
    bill: Bill,
    participants: Sequence[BillParticipant],
    items: Sequence[BillItem],
) -> BillInput:
    return BillInput(
        items=[
            LineItem(
                id=item.id,
                name=item.name,
                unit_price_cents=item.unit_price_cents,
                quantity=item.quantity,
                assigned_participant_ids=list(item.assignee_ids),
            )
            for item in items
        ],
        tax_cents=bill.tax_cents,
        tip_cents=bill.tip_cents,
        participants=[Participant(id=participant.id, name=participant.display_name) for participant in participants],
    )


async def calculate_bill(repo: BillSnapshotSource, bill_id: UUID | str) -> BillResult:
    bill = await get_bill_or_404(repo, bill_id)
    with bind_context(bill_id=str(bill.id)):
        participants = await repo.get_bill_participants(bill.id)
        items = await repo.get_bill_items(bill.id)

    result = calculate_bill_input(bill_input_from_rows(bill, participants, items))
    get_logger(__name__).info(
        "bill.calculated",
        bill_id=str(bill.id),
        participants=len(participants),
        items=len(items),
        grand_total_cents=result.grand_total_cents,
    )
    return result
