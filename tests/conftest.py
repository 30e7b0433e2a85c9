"""
Shared pytest fixtures for coop-price-agreement tests.

The ledger node is simulated with a FIFO MockTransport behind an
httpx.AsyncClient, and the wallet with a scripted FakeWallet. Nothing
touches the network.

Test modules get everything through fixtures:
    transport, http_client, reader  — mocked ledger node
    wallet, make_wallet             — scripted wallets
    controller                      — controller wired to both
    agreement_body, resource_route  — builders for node responses/routes
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from coop_price_agreement.config import AgreementConfig
from coop_price_agreement.controller import AgreementController
from coop_price_agreement.reader import LedgerReader

NODE_URL = "https://node.test/v1"
MODULE_ADDRESS = "0xC0FFEE"
TYPE_TAG = f"{MODULE_ADDRESS}::FarmerCoOp::PriceAgreement"

FARMER = "0xFA"
BUYER = "0xB"


def _make_response(status_code: int, body: dict | None = None) -> httpx.Response:
    """Build a fake node response without making any network calls."""
    content = json.dumps(body or {}).encode()
    return httpx.Response(
        status_code=status_code,
        content=content,
        headers={"Content-Type": "application/json"},
        request=httpx.Request("GET", "http://test"),
    )


def _agreement_body(
    minimum_price: str = "250000000",
    quantity_tons: str = "4",
    total_value: str = "1000000000",
    is_fulfilled: bool = False,
    buyer_address: str = BUYER,
) -> dict:
    return {
        "type": TYPE_TAG,
        "data": {
            "minimum_price": minimum_price,
            "quantity_tons": quantity_tons,
            "total_value": total_value,
            "is_fulfilled": is_fulfilled,
            "buyer_address": buyer_address,
        },
    }


def _resource_route(farmer: str = FARMER) -> tuple[str, str]:
    """(method, decoded path) the reader hits for ``farmer``."""
    return ("GET", f"/v1/accounts/{farmer}/resource/{TYPE_TAG}")


class MockTransport(httpx.AsyncBaseTransport):
    """
    Configurable async mock transport.

    Usage:
        transport = MockTransport()
        transport.add(_resource_route(), 200, _agreement_body())
        client = httpx.AsyncClient(transport=transport, base_url=NODE_URL)

    Entries play back in FIFO order per route. An entry may be an exception
    instead of a response, to simulate transport failures.
    """

    def __init__(self):
        self._queue: list[tuple[str, str, object]] = []
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method_path: tuple[str, str],
        status: int,
        body: dict | None = None,
    ) -> "MockTransport":
        method, path = method_path
        self._queue.append((method.upper(), path, _make_response(status, body)))
        return self

    def add_raw(self, method_path: tuple[str, str], response: httpx.Response) -> "MockTransport":
        method, path = method_path
        self._queue.append((method.upper(), path, response))
        return self

    def add_error(self, method_path: tuple[str, str], exc: Exception) -> "MockTransport":
        method, path = method_path
        self._queue.append((method.upper(), path, exc))
        return self

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method = request.method.upper()
        path = request.url.path
        for i, (m, p, outcome) in enumerate(self._queue):
            if m == method and path == p:
                self._queue.pop(i)
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise AssertionError(
            f"MockTransport: unexpected request {method} {path}\n"
            f"Remaining queue: {[(m, p) for m, p, _ in self._queue]}"
        )


class FakeWallet:
    """
    Scripted stand-in for the browser wallet.

    Set ``connect_error`` / ``submit_error`` to make the next calls fail,
    ``connect_response`` / ``submit_response`` to return a raw payload,
    ``hashes`` to control returned transaction hashes, and ``gate`` (an
    asyncio.Event created inside the running loop) to hold a submission
    in flight until the test releases it.
    """

    def __init__(self, address: str = "0xA11CE", hashes: list[str] | None = None):
        self.address = address
        self.hashes = list(hashes or [])
        self.connect_error: Exception | None = None
        self.submit_error: Exception | None = None
        self.connect_response: object = None
        self.submit_response: object = None
        self.gate: asyncio.Event | None = None
        self.submitted: list[dict] = []

    async def connect(self) -> dict:
        if self.connect_error is not None:
            raise self.connect_error
        if self.connect_response is not None:
            return self.connect_response
        return {"address": self.address}

    async def sign_and_submit_transaction(self, payload: dict) -> dict:
        self.submitted.append(payload)
        if self.gate is not None:
            await self.gate.wait()
        if self.submit_error is not None:
            raise self.submit_error
        if self.submit_response is not None:
            return self.submit_response
        if self.hashes:
            return {"hash": self.hashes.pop(0)}
        return {"hash": f"0xtx{len(self.submitted)}"}


@pytest.fixture
def config() -> AgreementConfig:
    return AgreementConfig(module_address=MODULE_ADDRESS, node_url=NODE_URL, timeout_seconds=5)


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def http_client(transport):
    client = httpx.AsyncClient(transport=transport, base_url=NODE_URL)
    yield client
    asyncio.run(client.aclose())


@pytest.fixture
def reader(config, http_client) -> LedgerReader:
    return LedgerReader(config, http_client=http_client)


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()


@pytest.fixture
def controller(config, reader, wallet) -> AgreementController:
    return AgreementController(config, reader=reader, wallet=wallet)


@pytest.fixture
def make_wallet():
    """Factory for extra wallets, e.g. a farmer and a buyer in one session."""
    return FakeWallet


@pytest.fixture
def agreement_body():
    """Builder for a 200 resource body; keyword overrides per field."""
    return _agreement_body


@pytest.fixture
def resource_route():
    """Builder for the (method, decoded path) the reader hits for a farmer."""
    return _resource_route
