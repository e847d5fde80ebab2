from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

import asyncpg

from billsplit.db.models import Bill, BillItem, BillParticipant, User
from billsplit.logging import get_logger, sql_logger


class Database:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None
        self._log = get_logger(__name__)

    async def connect(self) -> None:
        if self._pool is None:
            # asyncpg expects a plain postgresql:// scheme, without "+asyncpg"
            dsn = self._dsn.replace("+asyncpg", "")
            self._pool = await asyncpg.create_pool(dsn)
            self._log.info("db.pool.created")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._log.info("db.pool.closed")

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetch", query=query, args=args)
        return await self._pool.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetchrow", query=query, args=args)
        return await self._pool.fetchrow(query, *args)

    async def execute(self, query: str, *args: Any) -> str:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.execute", query=query, args=args)
        return await self._pool.execute(query, *args)

    async def _ensure_pool(self) -> None:
        if self._pool is None:
            await self.connect()


def _to_bill(row: Mapping[str, Any]) -> Bill:
    return Bill(
        id=row["id"],
        owner_user_id=row["owner_user_id"],
        title=row["title"],
        created_at=row["created_at"],
        currency=row["currency"],
        tax_cents=int(row["tax_cents"]),
        tip_cents=int(row["tip_cents"]),
        share_token=row.get("share_token"),
        is_link_active=bool(row.get("is_link_active", False)),
    )


def _to_participant(row: Mapping[str, Any]) -> BillParticipant:
    return BillParticipant(
        id=row["id"],
        bill_id=row["bill_id"],
        display_name=row["display_name"],
        linked_user_id=row.get("linked_user_id"),
    )


def _to_item(row: Mapping[str, Any]) -> BillItem:
    return BillItem(
        id=row["id"],
        bill_id=row["bill_id"],
        name=row["name"],
        unit_price_cents=int(row["unit_price_cents"]),
        quantity=int(row["quantity"]),
        assignee_ids=list(row.get("assignee_ids") or []),
        assignee_names=list(row.get("assignee_names") or []),
    )


class BillRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def get_bill(self, bill_id: UUID | str) -> Optional[Bill]:
        row = await self.db.fetchrow("SELECT * FROM bills WHERE id = $1", bill_id)
        return _to_bill(row) if row is not None else None

    async def get_bill_by_active_token(self, token: str) -> Optional[Bill]:
        row = await self.db.fetchrow(
            """
            SELECT * FROM bills
            WHERE share_token = $1 AND is_link_active = true
            LIMIT 1
            """,
            token,
        )
        return _to_bill(row) if row is not None else None

    async def get_bill_participants(self, bill_id: UUID | str) -> list[BillParticipant]:
        rows = await self.db.fetch(
            """
            SELECT * FROM participants
            WHERE bill_id = $1
            ORDER BY created_at, id
            """,
            bill_id,
        )
        return [_to_participant(row) for row in rows]

    async def get_bill_items(self, bill_id: UUID | str) -> list[BillItem]:
        rows = await self.db.fetch(
            """
            SELECT i.*,
                   array_agg(a.participant_id ORDER BY a.id) FILTER (WHERE a.id IS NOT NULL) AS assignee_ids,
                   array_agg(p.display_name ORDER BY a.id) FILTER (WHERE a.id IS NOT NULL) AS assignee_names
            FROM items i
            LEFT JOIN item_allocations a ON a.item_id = i.id
            LEFT JOIN participants p ON p.id = a.participant_id
            WHERE i.bill_id = $1
            GROUP BY i.id
            ORDER BY i.created_at, i.id
            """,
            bill_id,
        )
        return [_to_item(row) for row in rows]

    async def set_share_token(self, bill_id: UUID | str, token: str) -> None:
        await self.db.execute(
            "UPDATE bills SET share_token = $1, is_link_active = true WHERE id = $2",
            token,
            bill_id,
        )

    async def clear_share_token(self, bill_id: UUID | str) -> None:
        await self.db.execute(
            "UPDATE bills SET share_token = NULL, is_link_active = false WHERE id = $1",
            bill_id,
        )

    async def get_user(self, user_id: str) -> Optional[User]:
        row = await self.db.fetchrow("SELECT * FROM users WHERE id = $1", user_id)
        if row is None:
            return None
        return User(id=row["id"], tg_id=row.get("tg_id"), display_name=row.get("display_name"))

