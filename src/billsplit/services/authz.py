from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from billsplit.db.models import Bill
from billsplit.errors import AuthorizationError, ErrorKind, ServiceError


class BillLookup(Protocol):
    async def get_bill(self, bill_id: UUID | str) -> Optional[Bill]: ...


def require_user(user_id: Optional[str]) -> str:
    if not user_id:
        raise ServiceError(ErrorKind.UNAUTHENTICATED, "User must be logged in")
    return user_id


async def get_bill_or_404(repo: BillLookup, bill_id: UUID | str) -> Bill:
    if not bill_id:
        raise ServiceError(ErrorKind.INVALID_ARGUMENT, "Missing bill id")
    try:
        bill_uuid = UUID(str(bill_id))
    except ValueError as exc:
        raise ServiceError(ErrorKind.INVALID_ARGUMENT, "Malformed bill id") from exc
    bill = await repo.get_bill(bill_uuid)
    if bill is None:
        raise ServiceError(ErrorKind.NOT_FOUND, "Bill not found")
    return bill


def is_bill_owner(bill: Bill, user_id: str) -> bool:
    return bill.owner_user_id is not None and bill.owner_user_id == user_id


async def assert_bill_owner(repo: BillLookup, user_id: Optional[str], bill_id: UUID | str) -> Bill:
    owner_id = require_user(user_id)
    bill = await get_bill_or_404(repo, bill_id)
    if not is_bill_owner(bill, owner_id):
        raise AuthorizationError("Only the bill owner can perform this action")
    return bill
