"""
wallet.py — Boundary with the external wallet.

The wallet holds the keys, signs and submits. This package only ever sees
the account address it reports and the transaction hash it returns.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

from .exceptions import WalletRejected, WalletUnavailable

logger = logging.getLogger("coop_price_agreement.wallet")


@runtime_checkable
class Wallet(Protocol):
    """
    Anything that can connect an account and sign-and-submit a payload.

    connect() resolves to ``{"address": "0x..."}``;
    sign_and_submit_transaction() resolves to ``{"hash": "0x..."}``.
    Either may raise when the user cancels or signing fails.
    """

    async def connect(self) -> dict:
        ...

    async def sign_and_submit_transaction(self, payload: dict) -> dict:
        ...


def require_wallet(wallet: Optional[Wallet]) -> Wallet:
    if wallet is None:
        raise WalletUnavailable(
            "No wallet found. Install or enable a wallet extension and retry."
        )
    return wallet


async def connect_wallet(wallet: Optional[Wallet]) -> str:
    """
    Ask the wallet to connect and return the account address.

    Raises:
        WalletUnavailable: no wallet capability present.
        WalletRejected:    the user cancelled or the wallet failed.
    """
    wallet = require_wallet(wallet)
    try:
        response = await wallet.connect()
    except Exception as exc:
        raise WalletRejected(f"Wallet connection cancelled/failed: {exc}") from exc

    address = response.get("address") if isinstance(response, dict) else None
    if not address or not isinstance(address, str):
        raise WalletRejected("Wallet connected but reported no account address.")
    logger.info("Wallet connected: address=%s", address)
    return address
