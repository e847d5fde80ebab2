from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Protocol
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationError

from billsplit.errors import ErrorKind, ServiceError
from billsplit.logging import get_logger
from billsplit.services.split import LineItem

RECEIPT_PROMPT = """\
Parse this receipt text and extract the items. Return ONLY valid JSON:

{{
  "items": [{{"name": "Item Name", "price": 12.99}}],
  "tax": 2.50,
  "tip": null,
  "total": 45.99
}}

Rules:
- Include ONLY food/product items in the items array
- Do NOT include tax, tip, subtotal, or total as items
- Extract tax, tip, and total as separate fields (null if not found)
- Clean up item names (remove quantities like "1x" or "2 @")
- Prices should be numbers, not strings

Receipt text:
{text}
"""


class TextModel(Protocol):
    async def generate(self, prompt: str) -> str: ...


class ReceiptItem(BaseModel):
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)


class ParsedReceipt(BaseModel):
    items: List[ReceiptItem]
    tax: Optional[Decimal] = Field(None, ge=0)
    tip: Optional[Decimal] = Field(None, ge=0)
    total: Optional[Decimal] = Field(None, ge=0)


@dataclass(slots=True)
class ReceiptDraft:
    """Receipt turned into unassigned line items, pending user review."""

    items: list[LineItem]
    tax_cents: int
    tip_cents: int
    total_cents: Optional[int] = None


def build_receipt_prompt(text: str) -> str:
    return RECEIPT_PROMPT.format(text=text)


def strip_code_fences(text: str) -> str:
    return text.replace("```json", "").replace("```", "").strip()


def parse_receipt_response(text: str) -> ParsedReceipt:
    try:
        return ParsedReceipt.model_validate_json(strip_code_fences(text))
    except ValidationError as exc:
        raise ServiceError(ErrorKind.PARSE_ERROR, "Could not read receipt items") from exc


def to_cents(amount: Optional[Decimal]) -> int:
    if amount is None:
        return 0
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def receipt_to_draft(receipt: ParsedReceipt) -> ReceiptDraft:
    return ReceiptDraft(
        items=[
            LineItem(
                id=uuid4(),
                name=item.name.strip(),
                unit_price_cents=to_cents(item.price),
                quantity=1,
                assigned_participant_ids=[],
            )
            for item in receipt.items
        ],
        tax_cents=to_cents(receipt.tax),
        tip_cents=to_cents(receipt.tip),
        total_cents=to_cents(receipt.total) if receipt.total is not None else None,
    )


class ReceiptStructurer:
    def __init__(self, model: TextModel) -> None:
        self._model = model
        self._log = get_logger(__name__)

    async def structure(self, text: str) -> ParsedReceipt:
        if not text.strip():
            raise ServiceError(ErrorKind.PARSE_ERROR, "Could not read receipt items")

        response = await self._model.generate(build_receipt_prompt(text))
        receipt = parse_receipt_response(response)
        self._log.info("receipt.parsed", items=len(receipt.items))
        return receipt
