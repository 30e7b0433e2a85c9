"""
coop-price-agreement — Client controller for on-chain farmer/buyer price agreements.

Public API:
    AgreementConfig          — Immutable startup configuration
    AgreementController      — Session orchestration (create, fetch, fulfill)
    SessionState             — Volatile per-session state
    LedgerReader             — Async reader for the PriceAgreement resource
    LedgerWriter             — Entry function payload builder / submitter
    Wallet                   — Protocol for the external signing wallet
    TransactionLog           — Append-only, newest-first session audit trail
    PriceAgreement           — Deserialized on-chain agreement snapshot
    EntryFunctionPayload     — One entry function call for the wallet
    TransactionRecord        — One submitted transaction
    OperationResult          — Outcome of a controller operation
    ViewState                — NO_AGREEMENT / LOADED / FULFILLED
    to_minor_units           — "1.25" -> 125000000, exact
    from_minor_units         — 125000000 -> "1.25"
    parse_quantity           — Whole-number quantity parsing
    is_valid_address         — 0x-prefixed hex account address check
    validate_create          — Local checks before create_price_agreement
    validate_fulfill         — Local checks before fulfill_agreement
    PriceAgreementError      — Base exception
    WalletUnavailable        — No wallet capability present
    WalletRejected           — User cancelled or signing failed
    ValidationFailed         — Local precondition violated
    OperationInProgress      — Another transaction is pending
    LedgerReadError          — Resource read failed (not 404)
"""

__version__ = "0.1.0"

from .config import AgreementConfig
from .controller import AgreementController, SessionState
from .exceptions import (
    AgreementAlreadyFulfilled,
    AgreementNotFound,
    InvalidAmount,
    LedgerReadError,
    NotConnected,
    OperationInProgress,
    PriceAgreementError,
    ValidationFailed,
    WalletRejected,
    WalletUnavailable,
)
from .models import (
    EntryFunctionPayload,
    OperationResult,
    PriceAgreement,
    TransactionRecord,
    ViewState,
)
from .reader import LedgerReader
from .txlog import TransactionLog
from .units import from_minor_units, parse_quantity, to_minor_units
from .validation import is_valid_address, validate_create, validate_fulfill
from .wallet import Wallet
from .writer import LedgerWriter

__all__ = [
    "__version__",
    "AgreementConfig",
    "AgreementController",
    "SessionState",
    "LedgerReader",
    "LedgerWriter",
    "Wallet",
    "TransactionLog",
    "PriceAgreement",
    "EntryFunctionPayload",
    "TransactionRecord",
    "OperationResult",
    "ViewState",
    "to_minor_units",
    "from_minor_units",
    "parse_quantity",
    "is_valid_address",
    "validate_create",
    "validate_fulfill",
    "PriceAgreementError",
    "WalletUnavailable",
    "WalletRejected",
    "ValidationFailed",
    "InvalidAmount",
    "NotConnected",
    "AgreementNotFound",
    "AgreementAlreadyFulfilled",
    "OperationInProgress",
    "LedgerReadError",
]
