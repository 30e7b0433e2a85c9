"""
validation.py — Local preconditions checked before anything is signed.

A signed transaction cannot be taken back, so obviously bad input is
refused here, before the wallet is contacted. Address checks are syntactic
only; the ledger program has the final word on whether an account exists.
"""

from __future__ import annotations

import re
from typing import Optional

from .exceptions import AgreementAlreadyFulfilled, AgreementNotFound, ValidationFailed
from .models import PriceAgreement
from .units import U64_LIMIT

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{1,64}")


def is_valid_address(address: Optional[str]) -> bool:
    """True for a 0x-prefixed hex account address of 1 to 64 digits."""
    return bool(address) and _ADDRESS_RE.fullmatch(address) is not None


def validate_create(price_minor: int, quantity: int, buyer_address: str) -> None:
    """
    Check a create_price_agreement request.

    Raises:
        ValidationFailed: non-positive price or quantity, a price, quantity
            or total that does not fit in a u64, or a missing or malformed
            buyer address.
    """
    if price_minor <= 0 or quantity <= 0:
        raise ValidationFailed("Minimum price and quantity must be > 0.")
    if price_minor >= U64_LIMIT or quantity >= U64_LIMIT:
        raise ValidationFailed("Minimum price or quantity is too large for the ledger.")
    # the program computes total_value = price * quantity as a u64
    if price_minor * quantity >= U64_LIMIT:
        raise ValidationFailed("Total agreement value is too large for the ledger.")
    if not buyer_address:
        raise ValidationFailed("Please enter a buyer address.")
    if not is_valid_address(buyer_address):
        raise ValidationFailed(f"'{buyer_address}' is not a valid account address.")


def validate_fulfill(
    agreement: Optional[PriceAgreement],
    farmer_address: str,
    loaded_address: Optional[str] = None,
) -> None:
    """
    Check that the loaded snapshot can be paid.

    ``loaded_address`` is the farmer address the snapshot was read from;
    when given, it must match ``farmer_address``.

    Raises:
        AgreementNotFound:         nothing loaded for this farmer.
        AgreementAlreadyFulfilled: the snapshot is already settled.
    """
    if not farmer_address or agreement is None:
        raise AgreementNotFound("Fetch an agreement first.")
    if loaded_address is not None and loaded_address != farmer_address:
        raise AgreementNotFound(
            f"Loaded agreement belongs to {loaded_address}, not {farmer_address}. "
            "Fetch it first."
        )
    if agreement.is_fulfilled:
        raise AgreementAlreadyFulfilled("Agreement is already fulfilled.")
