"""
models.py — Shared dataclasses for coop-price-agreement.

These are the data structures passed between the reader, writer,
transaction log and controller. Keeping them in one file avoids circular
imports.

All amounts are int minor units. Wire values arrive as decimal strings and
are parsed with int(), never float().
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .exceptions import LedgerReadError
from .units import U64_LIMIT, from_minor_units

ENTRY_FUNCTION_PAYLOAD = "entry_function_payload"

_U64_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class PriceAgreement:
    """
    Snapshot of the on-chain PriceAgreement resource under a farmer account.

    total_value is whatever the ledger program computed at creation. It is
    authoritative and is never recomputed from minimum_price * quantity_tons.
    """
    minimum_price: int       # minor units per ton
    quantity_tons: int
    total_value: int         # minor units
    is_fulfilled: bool
    buyer_address: str

    @classmethod
    def from_resource(cls, data: dict) -> "PriceAgreement":
        """
        Build a snapshot from the resource's ``data`` object.

        Raises:
            LedgerReadError: a field is missing or not in its wire format.
        """
        try:
            return cls(
                minimum_price=_parse_u64(data["minimum_price"]),
                quantity_tons=_parse_u64(data["quantity_tons"]),
                total_value=_parse_u64(data["total_value"]),
                is_fulfilled=_parse_bool(data["is_fulfilled"]),
                buyer_address=str(data["buyer_address"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise LedgerReadError(f"Malformed PriceAgreement resource: {exc}") from exc

    @property
    def status(self) -> str:
        return "Fulfilled" if self.is_fulfilled else "Awaiting Payment"

    def __str__(self) -> str:
        lines = [
            "=== Price Agreement ===",
            f"  Min price (octas/ton) : {self.minimum_price} ({from_minor_units(self.minimum_price)} APT)",
            f"  Quantity (tons)       : {self.quantity_tons}",
            f"  Total (octas)         : {self.total_value} ({from_minor_units(self.total_value)} APT)",
            f"  Buyer                 : {self.buyer_address}",
            f"  Status                : {self.status}",
        ]
        return "\n".join(lines)


@dataclass(frozen=True)
class EntryFunctionPayload:
    """
    A ledger entry function call for the wallet to sign and submit.
    Argument order is part of the wire contract with the program.
    """
    function: str
    arguments: list[str] = field(default_factory=list)
    type_arguments: list[str] = field(default_factory=list)

    def to_wallet_payload(self) -> dict:
        return {
            "type": ENTRY_FUNCTION_PAYLOAD,
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": list(self.arguments),
        }


@dataclass(frozen=True)
class TransactionRecord:
    """One submitted transaction in the session log."""
    tx_hash: str
    timestamp: datetime
    operation: str = ""


class ViewState(Enum):
    """What the last resolved agreement read showed."""
    NO_AGREEMENT = "no_agreement"
    LOADED = "loaded"
    FULFILLED = "fulfilled"


@dataclass
class OperationResult:
    """
    Returned by every AgreementController operation. Failures are reported
    here instead of raised; ``error`` holds the typed exception.
    """
    ok: bool
    message: str
    tx_hash: Optional[str] = None
    agreement: Optional[PriceAgreement] = None
    error: Optional[Exception] = None


# ---------------------------------------------------------------------------
# Wire decoding helpers
# ---------------------------------------------------------------------------

def _parse_u64(value) -> int:
    if not isinstance(value, str) or not _U64_RE.fullmatch(value):
        raise ValueError(f"expected a u64 decimal string, got {value!r}")
    parsed = int(value)
    if parsed >= U64_LIMIT:
        raise ValueError(f"u64 out of range: {value!r}")
    return parsed


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError(f"expected a bool, got {value!r}")
