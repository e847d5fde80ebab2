from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from aiogram import Bot

from billsplit.config import Settings
from billsplit.db.models import Bill, BillParticipant, User
from billsplit.logging import get_logger


class MessageSender(Protocol):
    async def send_message(self, chat_id: int, text: str) -> object: ...


class NotificationStore(Protocol):
    async def get_bill(self, bill_id: UUID | str) -> Optional[Bill]: ...

    async def get_user(self, user_id: str) -> Optional[User]: ...


def build_bot(settings: Settings) -> Bot:
    if not settings.bot_token:
        raise RuntimeError("BOT_TOKEN is not configured")
    return Bot(token=settings.bot_token)


def participant_added_text(bill: Optional[Bill]) -> str:
    if bill is not None and bill.title:
        return f"You were added to a bill: {bill.title}"
    return "You were added to a bill."


async def notify_participant_added(
    bot: MessageSender,
    repo: NotificationStore,
    bill_id: UUID | str,
    participant: BillParticipant,
) -> bool:
    log = get_logger(__name__)
    if not participant.linked_user_id:
        return False

    user = await repo.get_user(participant.linked_user_id)
    if user is None or not user.tg_id:
        log.info("notify.skipped", bill_id=str(bill_id), participant_id=str(participant.id))
        return False

    bill = await repo.get_bill(bill_id)
    await bot.send_message(user.tg_id, participant_added_text(bill))
    log.info("notify.sent", bill_id=str(bill_id), participant_id=str(participant.id))
    return True
