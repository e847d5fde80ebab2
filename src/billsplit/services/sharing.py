from __future__ import annotations

import secrets
from dataclasses import asdict, dataclass, field
from typing import Any, Optional, Protocol, Sequence
from uuid import UUID

from billsplit.config import get_settings
from billsplit.db.models import Bill, BillItem, BillParticipant
from billsplit.errors import ErrorKind, ServiceError
from billsplit.logging import get_logger
from billsplit.services.authz import assert_bill_owner
from billsplit.services.bills import BillSnapshotSource

UNTITLED_BILL = "Untitled Bill"


class ShareLinkStore(BillSnapshotSource, Protocol):
    async def get_bill_by_active_token(self, token: str) -> Optional[Bill]: ...

    async def set_share_token(self, bill_id: UUID | str, token: str) -> None: ...

    async def clear_share_token(self, bill_id: UUID | str) -> None: ...


@dataclass(slots=True)
class ShareLink:
    token: str
    url: str


@dataclass(slots=True)
class SnapshotItem:
    name: str
    unit_price_cents: int
    quantity: int
    assigned_to: list[str] = field(default_factory=list)


@dataclass(slots=True)
class PublicBillSnapshot:
    """Read-only view of a bill for anyone holding an active share token.

    Carries display names only: no owner id, participant ids or linked user ids.
    """

    title: str
    created_at: str
    currency: str
    tax_cents: int
    tip_cents: int
    items: list[SnapshotItem]
    participants: list[str]

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def generate_share_token() -> str:
    return secrets.token_urlsafe(16)


def build_public_snapshot(
    bill: Bill,
    participants: Sequence[BillParticipant],
    items: Sequence[BillItem],
) -> PublicBillSnapshot:
    return PublicBillSnapshot(
        title=bill.title or UNTITLED_BILL,
        created_at=bill.created_at.isoformat(),
        currency=bill.currency,
        tax_cents=bill.tax_cents,
        tip_cents=bill.tip_cents,
        items=[
            SnapshotItem(
                name=item.name,
                unit_price_cents=item.unit_price_cents,
                quantity=item.quantity,
                assigned_to=list(item.assignee_names),
            )
            for item in items
        ],
        participants=[participant.display_name for participant in participants],
    )


async def create_share_link(repo: ShareLinkStore, user_id: Optional[str], bill_id: UUID | str) -> ShareLink:
    bill = await assert_bill_owner(repo, user_id, bill_id)

    token = generate_share_token()
    await repo.set_share_token(bill.id, token)

    get_logger(__name__).info("share.created", bill_id=str(bill.id))
    return ShareLink(token=token, url=get_settings().share_url(token))


async def revoke_share_link(repo: ShareLinkStore, user_id: Optional[str], bill_id: UUID | str) -> None:
    bill = await assert_bill_owner(repo, user_id, bill_id)
    await repo.clear_share_token(bill.id)
    get_logger(__name__).info("share.revoked", bill_id=str(bill.id))


async def get_public_snapshot(repo: ShareLinkStore, token: Optional[str]) -> PublicBillSnapshot:
    if not token:
        raise ServiceError(ErrorKind.INVALID_ARGUMENT, "Missing token")

    bill = await repo.get_bill_by_active_token(token)
    if bill is None:
        raise ServiceError(ErrorKind.NOT_FOUND, "Bill not found or link expired")

    participants = await repo.get_bill_participants(bill.id)
    items = await repo.get_bill_items(bill.id)
    return build_public_snapshot(bill, participants, items)
