from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from billsplit.errors import InvalidInput

if TYPE_CHECKING:
    from billsplit.services.split import LineItem, Participant


# Amounts are stored as BIGINT.
MAX_CENTS = 2**63 - 1


def _require_cents(value: object, label: str) -> int:
    # bool is an int subclass but never a valid amount.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{label} must be an integer number of minor units, got {value!r}")
    if value < 0:
        raise InvalidInput(f"{label} must be non-negative, got {value}")
    if value > MAX_CENTS:
        raise InvalidInput(f"{label} exceeds the supported range")
    return value


def validate_bill_input(
    items: Sequence[LineItem],
    tax_cents: int,
    tip_cents: int,
    participants: Sequence[Participant],
) -> None:
    _require_cents(tax_cents, "tax_cents")
    _require_cents(tip_cents, "tip_cents")

    participant_ids = set()
    # Leftover units are ordered by str(id), so distinct ids must stay distinct as strings.
    id_keys: dict[str, object] = {}
    for participant in participants:
        if participant.id in participant_ids:
            raise InvalidInput(f"duplicate participant id {participant.id!r}")
        key = str(participant.id)
        if key in id_keys:
            raise InvalidInput(f"participant ids {id_keys[key]!r} and {participant.id!r} have the same string form")
        participant_ids.add(participant.id)
        id_keys[key] = participant.id

    subtotal = 0
    for item in items:
        label = f"item {item.name or item.id!r}"
        price = _require_cents(item.unit_price_cents, f"{label} unit_price_cents")
        quantity = item.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidInput(f"{label} quantity must be a positive integer, got {quantity!r}")
        item_total = _require_cents(price * quantity, f"{label} total")

        for participant_id in item.assigned_participant_ids:
            if participant_id not in participant_ids:
                raise InvalidInput(f"{label} is assigned to unknown participant {participant_id!r}")
        if item.assigned_participant_ids:
            subtotal += item_total

    _require_cents(subtotal + tax_cents + tip_cents, "grand total")
