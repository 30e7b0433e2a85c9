"""
examples/price_agreement_session.py — Farmer creates, buyer fulfills.

Reads go to the real ledger node from COOP_NODE_URL. Signing is done by a
console wallet that only prints what it would sign and returns a made-up
hash, so nothing is ever submitted on-chain.

Run:
    python examples/price_agreement_session.py 0xFARMER_ADDRESS
"""

import asyncio
import logging
import sys
import uuid

from coop_price_agreement import AgreementConfig, AgreementController


class ConsoleWallet:
    """Prints payloads instead of signing them."""

    def __init__(self, address: str):
        self.address = address

    async def connect(self) -> dict:
        return {"address": self.address}

    async def sign_and_submit_transaction(self, payload: dict) -> dict:
        print(f"  would sign: {payload['function']} {payload['arguments']}")
        return {"hash": "0x" + uuid.uuid4().hex}


async def run(farmer_address: str) -> None:
    config = AgreementConfig()
    buyer_address = "0xb0b"

    farmer = AgreementController(config, wallet=ConsoleWallet(farmer_address))
    buyer = AgreementController(config, wallet=ConsoleWallet(buyer_address))

    async with farmer, buyer:
        print("=== Farmer ===")
        for result in (
            await farmer.connect(),
            await farmer.init_coin_store(),
            await farmer.create_agreement("1.25", "10", buyer_address),
        ):
            print(f"  {result.message}")

        print("\n=== Buyer ===")
        print(f"  {(await buyer.connect()).message}")
        fetched = await buyer.fetch_agreement(farmer_address)
        print(f"  {fetched.message}")
        if fetched.agreement is not None:
            print(fetched.agreement)
            print(f"  {(await buyer.fulfill_agreement(farmer_address)).message}")

        print()
        print(farmer.transaction_log)
        print(buyer.transaction_log)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(run(sys.argv[1]))


if __name__ == "__main__":
    main()
