from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from aiogram import Bot

from billsplit.config import Settings, get_settings
from billsplit.db.repo import BillRepository, Database
from billsplit.logging import configure_logging, get_logger
from billsplit.notifications import build_bot
from billsplit.services.gemini import build_text_model
from billsplit.services.receipts import ReceiptStructurer


@dataclass(slots=True)
class AppContext:
    settings: Settings
    db: Database
    repo: BillRepository
    bot: Optional[Bot] = None
    receipts: Optional[ReceiptStructurer] = None


def create_context(settings: Optional[Settings] = None) -> AppContext:
    """Wire the collaborators; optional ones stay None when not configured."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)

    db = Database(settings.database_url)
    ctx = AppContext(settings=settings, db=db, repo=BillRepository(db))
    if settings.bot_token:
        ctx.bot = build_bot(settings)
    if settings.gemini_api_key:
        ctx.receipts = ReceiptStructurer(build_text_model(settings))

    get_logger(__name__).info(
        "app.start",
        notifications=ctx.bot is not None,
        receipts=ctx.receipts is not None,
    )
    return ctx


async def close_context(ctx: AppContext) -> None:
    await ctx.db.close()
    if ctx.bot is not None:
        await ctx.bot.session.close()
    get_logger(__name__).info("app.stop")
