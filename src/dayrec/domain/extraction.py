"""Parsing of extraction collaborator output.

Slip extraction yields ``{date?, total, breakdown}`` and statement extraction
yields a list of ``{date, description, amount}``. This module turns those
loose shapes into typed entities; it is the single place where a breakdown is
validated on the way in.
"""

import logging
from typing import Any, Mapping

from dayrec.domain.entities import (
    BREAKDOWN_FIELDS,
    CardSplit,
    DepositBreakdown,
    ExtractedSlip,
    TransactionCandidate,
)
from dayrec.domain.errors import ValidationError
from dayrec.utils.amount_parser import parse_amount
from dayrec.utils.date_parser import parse_full_date

logger = logging.getLogger(__name__)

CARD_NETWORKS = ("visa", "mastercard", "amex", "discover")

# Accept the camelCase keys extraction services tend to emit
_FIELD_ALIASES = {
    "insuranceChecks": "insurance_checks",
    "creditCards": "credit_cards",
    "insuranceCreditCards": "insurance_credit_cards",
    "careFinancing": "care_financing",
    "careCredit": "care_financing",
    "installmentFinancing": "installment_financing",
    "cherry": "installment_financing",
    "checkList": "check_list",
    "creditCardBreakdown": "card_split",
    "cardSplit": "card_split",
    "masterCard": "mastercard",
}


def _normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_FIELD_ALIASES.get(key, key): value for key, value in data.items()}


def _amount(value: Any, field_name: str):
    if value is None or value == "":
        return parse_amount("0")
    try:
        return parse_amount(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {field_name}: {e}")


def breakdown_from_dict(data: Mapping[str, Any] | None) -> DepositBreakdown:
    """Build and validate a breakdown from extraction output.

    Missing summary fields default to zero; unknown keys are ignored.

    Raises:
        ValidationError: If an amount is unparseable or nested detail does
            not add up to its summary field
    """
    if data is not None and not isinstance(data, Mapping):
        raise ValidationError("Invalid breakdown: expected an object")
    values = _normalize_keys(data or {})
    fields = {name: _amount(values.get(name), name) for name in BREAKDOWN_FIELDS}

    check_list = values.get("check_list")
    if check_list is not None:
        if not isinstance(check_list, (list, tuple)):
            raise ValidationError("Invalid check_list: expected a list of amounts")
        fields["check_list"] = tuple(_amount(v, "check_list") for v in check_list)

    card_split = values.get("card_split")
    if card_split is not None:
        if not isinstance(card_split, Mapping):
            raise ValidationError("Invalid card_split: expected an object")
        split = _normalize_keys(card_split)
        fields["card_split"] = CardSplit(
            **{network: _amount(split.get(network), network) for network in CARD_NETWORKS}
        )

    breakdown = DepositBreakdown(**fields)
    breakdown.validate()
    return breakdown


def slip_from_dict(data: Mapping[str, Any]) -> ExtractedSlip:
    """Build a slip from ``{date?, total?, breakdown}``.

    A missing total is derived from the breakdown. A missing, unreadable or
    incomplete date is left unset; date assignment happens later.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Slip extraction must be a JSON object")

    breakdown = breakdown_from_dict(data.get("breakdown"))
    total = data.get("total")
    total = breakdown.subtotal() if total in (None, "") else _amount(total, "total")

    slip_date = None
    raw_date = data.get("date")
    if raw_date:
        try:
            slip_date = parse_full_date(raw_date)
        except ValueError:
            logger.warning("Ignoring unreadable slip date %r", raw_date)

    source_image = data.get("sourceImage") or data.get("source_image")
    if source_image is not None and not isinstance(source_image, str):
        raise ValidationError("Invalid source_image: expected a string")

    return ExtractedSlip(
        total=total,
        breakdown=breakdown,
        date=slip_date,
        source_image=source_image,
    )


def candidate_from_dict(data: Mapping[str, Any]) -> TransactionCandidate:
    """Build a transaction candidate from ``{date, description, amount}``.

    Raises:
        ValidationError: If date or amount is missing or unparseable
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Statement line must be a JSON object")
    if not data.get("date"):
        raise ValidationError("Missing date")
    if data.get("amount") in (None, ""):
        raise ValidationError("Missing amount")
    try:
        txn_date = parse_full_date(data["date"])
    except ValueError as e:
        raise ValidationError(str(e))
    return TransactionCandidate(
        date=txn_date,
        description=str(data.get("description") or ""),
        amount=_amount(data["amount"], "amount"),
    )
