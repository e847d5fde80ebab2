from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(slots=True)
class User:
    id: str
    tg_id: Optional[int]
    display_name: Optional[str]


@dataclass(slots=True)
class Bill:
    id: UUID
    owner_user_id: Optional[str]
    title: str
    created_at: datetime
    currency: str
    tax_cents: int
    tip_cents: int
    share_token: Optional[str] = None
    is_link_active: bool = False


@dataclass(slots=True)
class BillParticipant:
    id: UUID
    bill_id: UUID
    display_name: str
    linked_user_id: Optional[str] = None


@dataclass(slots=True)
class BillItem:
    id: UUID
    bill_id: UUID
    name: str
    unit_price_cents: int
    quantity: int
    # Allocation order (item_allocations.id), which decides who gets remainder cents.
    assignee_ids: list[UUID] = field(default_factory=list)
    assignee_names: list[str] = field(default_factory=list)
