"""
writer.py — Builds the co-op program's entry function payloads and hands
them to the wallet.

The three entry points and their argument order are the wire contract with
the on-chain program:

    init_coin_store()
    create_price_agreement(minimum_price: u64, quantity_tons: u64, buyer: address)
    fulfill_agreement(farmer: address, total_value: u64)

u64 arguments travel as decimal strings. Signing and submission belong to
the wallet; this module never sees key material.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import AgreementConfig
from .exceptions import WalletRejected
from .models import EntryFunctionPayload
from .wallet import Wallet, require_wallet

logger = logging.getLogger("coop_price_agreement.writer")

INIT_COIN_STORE = "init_coin_store"
CREATE_PRICE_AGREEMENT = "create_price_agreement"
FULFILL_AGREEMENT = "fulfill_agreement"


class LedgerWriter:
    """Payload builder and submitter for the co-op program."""

    def __init__(self, config: AgreementConfig, wallet: Optional[Wallet] = None):
        self._config = config
        self._wallet = wallet

    def build_init_capability(self) -> EntryFunctionPayload:
        """
        Register the connected account's coin store. The program treats a
        repeat call as a no-op; nothing is enforced here.
        """
        return EntryFunctionPayload(function=self._config.function_id(INIT_COIN_STORE))

    def build_create_agreement(
        self,
        price_minor: int,
        quantity: int,
        buyer_address: str,
    ) -> EntryFunctionPayload:
        return EntryFunctionPayload(
            function=self._config.function_id(CREATE_PRICE_AGREEMENT),
            arguments=[str(price_minor), str(quantity), buyer_address],
        )

    def build_fulfill_agreement(
        self,
        farmer_address: str,
        total_value_minor: int,
    ) -> EntryFunctionPayload:
        """
        ``total_value_minor`` must be the total_value last read from the
        ledger so the buyer pays exactly what the program recorded.
        """
        return EntryFunctionPayload(
            function=self._config.function_id(FULFILL_AGREEMENT),
            arguments=[farmer_address, str(total_value_minor)],
        )

    async def submit(self, payload: EntryFunctionPayload) -> str:
        """
        Have the wallet sign and submit ``payload``; return the transaction hash.

        Raises:
            WalletUnavailable: no wallet capability present.
            WalletRejected:    user cancelled, signing failed, or no hash returned.
        """
        wallet = require_wallet(self._wallet)
        try:
            response = await wallet.sign_and_submit_transaction(payload.to_wallet_payload())
        except Exception as exc:
            raise WalletRejected(
                f"[{payload.function}] Wallet rejected transaction: {exc}"
            ) from exc

        tx_hash = response.get("hash") if isinstance(response, dict) else None
        if not tx_hash or not isinstance(tx_hash, str):
            raise WalletRejected(f"[{payload.function}] Wallet returned no transaction hash")
        logger.info("Transaction submitted: function=%s tx=%s", payload.function, tx_hash)
        return tx_hash
