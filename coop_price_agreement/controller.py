"""
controller.py — Session orchestration for farmer/buyer price agreements.

AgreementController owns the only mutable state in the package (the
SessionState) and sequences every user action:

    create:  convert -> validate -> sign+submit -> log
    fetch:   read resource -> replace snapshot
    fulfill: validate snapshot -> sign+submit -> log -> re-read snapshot

Rules:
  - at most one state-changing operation in flight; a second one is
    refused before the wallet is touched
  - the pending flag is cleared on every exit path
  - is_fulfilled is only ever learned from the ledger, never set locally
  - reads take no lock; the most recently *resolved* read wins
  - every operation returns an OperationResult; typed errors are caught
    here, logged, and turned into a short user message
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from .config import AgreementConfig
from .exceptions import (
    LedgerReadError,
    NotConnected,
    OperationInProgress,
    PriceAgreementError,
    ValidationFailed,
    WalletUnavailable,
)
from .models import OperationResult, PriceAgreement, ViewState
from .reader import LedgerReader
from .txlog import TransactionLog
from .units import parse_quantity, to_minor_units
from .validation import validate_create, validate_fulfill
from .wallet import Wallet, connect_wallet, require_wallet
from .writer import CREATE_PRICE_AGREEMENT, FULFILL_AGREEMENT, INIT_COIN_STORE, LedgerWriter

logger = logging.getLogger("coop_price_agreement.controller")

# Headline shown when a collaborator (wallet or node) fails an operation.
_FAILURE_MESSAGES = {
    "connect": "Wallet connection cancelled/failed.",
    INIT_COIN_STORE: "Failed to init coin store.",
    CREATE_PRICE_AGREEMENT: "Failed to create agreement.",
    "fetch_agreement": "Could not fetch agreement.",
    FULFILL_AGREEMENT: "Failed to fulfill agreement.",
}


@dataclass
class SessionState:
    """Volatile per-session state. Lost on restart."""
    identity: Optional[str] = None
    last_agreement: Optional[PriceAgreement] = None
    agreement_address: Optional[str] = None     # farmer the snapshot was read from
    pending_operation: bool = False
    transaction_log: TransactionLog = field(default_factory=TransactionLog)


class AgreementController:
    """
    Usage:
        config = AgreementConfig()
        controller = AgreementController(config, wallet=my_wallet)
        await controller.connect()
        await controller.create_agreement("2.5", "4", "0xB")
        await controller.fetch_agreement("0xFARMER")
        await controller.fulfill_agreement("0xFARMER")
    """

    def __init__(
        self,
        config: AgreementConfig,
        reader: Optional[LedgerReader] = None,
        wallet: Optional[Wallet] = None,
        writer: Optional[LedgerWriter] = None,
        log: Optional[TransactionLog] = None,
    ):
        self._config = config
        self._wallet = wallet
        self._reader = reader or LedgerReader(config)
        self._writer = writer or LedgerWriter(config, wallet)
        self._state = SessionState(transaction_log=log or TransactionLog())
        self._message = ""
        logger.info(
            "AgreementController initialized: module=%s node=%s",
            config.module, config.node_url,
        )

    # ------------------------------------------------------------------
    # Read-only session view
    # ------------------------------------------------------------------

    @property
    def config(self) -> AgreementConfig:
        return self._config

    @property
    def identity(self) -> Optional[str]:
        return self._state.identity

    @property
    def last_agreement(self) -> Optional[PriceAgreement]:
        return self._state.last_agreement

    @property
    def agreement_address(self) -> Optional[str]:
        return self._state.agreement_address

    @property
    def pending(self) -> bool:
        return self._state.pending_operation

    @property
    def transaction_log(self) -> TransactionLog:
        return self._state.transaction_log

    @property
    def message(self) -> str:
        """Last user-visible status message."""
        return self._message

    @property
    def view_state(self) -> ViewState:
        agreement = self._state.last_agreement
        if agreement is None:
            return ViewState.NO_AGREEMENT
        return ViewState.FULFILLED if agreement.is_fulfilled else ViewState.LOADED

    def snapshot(self) -> SessionState:
        """A shallow copy of the session state, for display."""
        return dataclasses.replace(self._state)

    # ------------------------------------------------------------------
    # Wallet
    # ------------------------------------------------------------------

    async def connect(self) -> OperationResult:
        try:
            address = await connect_wallet(self._wallet)
        except PriceAgreementError as exc:
            return self._fail("connect", exc)
        self._state.identity = address
        return self._ok(f"Connected: {address}")

    # ------------------------------------------------------------------
    # State-changing operations
    # ------------------------------------------------------------------

    async def init_coin_store(self) -> OperationResult:
        async def _action() -> OperationResult:
            self._require_session()
            tx_hash = await self._writer.submit(self._writer.build_init_capability())
            self._state.transaction_log.append(tx_hash, INIT_COIN_STORE)
            return self._ok("Coin store initialized.", tx_hash=tx_hash)

        return await self._run_exclusive(INIT_COIN_STORE, _action)

    async def create_agreement(
        self,
        min_price: str,
        quantity: str,
        buyer_address: str,
    ) -> OperationResult:
        """
        Create the farmer's PriceAgreement.

        ``min_price`` is in major units per ton ("2.5"); ``quantity`` is whole
        tons. Both are converted and validated before the wallet is asked to
        sign anything.

        Whether the program rejects or overwrites an existing unfulfilled
        agreement is not known here, so no local guard is applied.
        """
        async def _action() -> OperationResult:
            self._require_session()
            price_minor = to_minor_units(min_price)
            qty = parse_quantity(quantity)
            buyer = (buyer_address or "").strip()
            validate_create(price_minor, qty, buyer)

            payload = self._writer.build_create_agreement(price_minor, qty, buyer)
            tx_hash = await self._writer.submit(payload)
            self._state.transaction_log.append(tx_hash, CREATE_PRICE_AGREEMENT)
            return self._ok("Agreement created on-chain.", tx_hash=tx_hash)

        return await self._run_exclusive(CREATE_PRICE_AGREEMENT, _action)

    async def fulfill_agreement(self, farmer_address: str) -> OperationResult:
        """
        Pay the loaded agreement's total_value to ``farmer_address``.

        The snapshot is re-read after submission and only that re-read
        decides whether the agreement shows as fulfilled.
        """
        async def _action() -> OperationResult:
            self._require_session()
            farmer = (farmer_address or "").strip()
            agreement = self._state.last_agreement
            validate_fulfill(agreement, farmer, self._state.agreement_address)

            payload = self._writer.build_fulfill_agreement(farmer, agreement.total_value)
            tx_hash = await self._writer.submit(payload)
            self._state.transaction_log.append(tx_hash, FULFILL_AGREEMENT)

            try:
                refreshed = await self._reader.fetch_agreement(farmer)
            except LedgerReadError as exc:
                logger.warning(
                    "Payment tx=%s sent but refresh failed for farmer=%s: %s",
                    tx_hash, farmer, exc,
                )
                self._state.last_agreement = None
                self._state.agreement_address = None
                self._message = "Payment sent, but the agreement could not be refreshed. Fetch it again."
                return OperationResult(
                    ok=True, message=self._message, tx_hash=tx_hash, error=exc,
                )

            self._store_snapshot(farmer, refreshed)
            if refreshed is not None and refreshed.is_fulfilled:
                return self._ok(
                    "Payment sent. Agreement fulfilled.",
                    tx_hash=tx_hash, agreement=refreshed,
                )
            return self._ok(
                "Payment sent. The ledger does not show the agreement fulfilled yet.",
                tx_hash=tx_hash, agreement=refreshed,
            )

        return await self._run_exclusive(FULFILL_AGREEMENT, _action)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_agreement(self, farmer_address: str) -> OperationResult:
        farmer = (farmer_address or "").strip()
        if not farmer:
            return self._fail("fetch_agreement", ValidationFailed("Enter a farmer address."))

        try:
            agreement = await self._reader.fetch_agreement(farmer)
        except LedgerReadError as exc:
            return self._fail("fetch_agreement", exc)

        self._store_snapshot(farmer, agreement)
        if agreement is None:
            return self._ok("No agreement found at that farmer address.")
        return self._ok("Agreement fetched from chain.", agreement=agreement)

    async def aclose(self) -> None:
        await self._reader.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run_exclusive(
        self,
        label: str,
        action: Callable[[], Awaitable[OperationResult]],
    ) -> OperationResult:
        # Check-and-set happens before the first await, so it cannot interleave.
        if self._state.pending_operation:
            return self._fail(
                label, OperationInProgress("Another transaction is still pending.")
            )
        self._state.pending_operation = True
        try:
            return await action()
        except PriceAgreementError as exc:
            return self._fail(label, exc)
        finally:
            self._state.pending_operation = False

    def _require_session(self) -> None:
        require_wallet(self._wallet)
        if not self._state.identity:
            raise NotConnected("Connect a wallet first.")

    def _store_snapshot(self, farmer: str, agreement: Optional[PriceAgreement]) -> None:
        self._state.last_agreement = agreement
        self._state.agreement_address = farmer if agreement is not None else None

    def _ok(
        self,
        message: str,
        tx_hash: Optional[str] = None,
        agreement: Optional[PriceAgreement] = None,
    ) -> OperationResult:
        self._message = message
        return OperationResult(ok=True, message=message, tx_hash=tx_hash, agreement=agreement)

    def _fail(self, label: str, exc: PriceAgreementError) -> OperationResult:
        logger.warning("%s failed: %s: %s", label, type(exc).__name__, exc)
        if isinstance(exc, (ValidationFailed, OperationInProgress, WalletUnavailable)):
            message = str(exc)
        else:
            message = _FAILURE_MESSAGES.get(label, f"{label} failed.")
        self._message = message
        return OperationResult(ok=False, message=message, error=exc)
