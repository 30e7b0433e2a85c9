"""
reader.py — Reads the PriceAgreement resource from the ledger node.

One GET per read:
    <node>/accounts/{address}/resource/{urlEncodedTypeTag}

  - 404 means the farmer has no agreement yet: returned as None, not raised
  - any other non-2xx status raises LedgerReadError with the node's message
  - transport failures raise LedgerReadError too; there is no retry, the
    caller re-fetches when it wants fresher data
  - pluggable transport for testing (inject a mock httpx.AsyncClient)
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from .config import AgreementConfig
from .exceptions import LedgerReadError
from .models import PriceAgreement

logger = logging.getLogger("coop_price_agreement.reader")


class LedgerReader:
    """
    Async reader for the co-op program's PriceAgreement resource.

    Usage:
        async with LedgerReader(config) as reader:
            agreement = await reader.fetch_agreement("0xFARMER")
    """

    def __init__(
        self,
        config: AgreementConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._config = config
        self._http = http_client or httpx.AsyncClient(
            base_url=config.node_url,
            headers={"Accept": "application/json"},
            timeout=config.timeout_seconds,
        )

    def resource_path(self, farmer_address: str) -> str:
        type_tag = quote(self._config.agreement_type_tag, safe="")
        return f"/accounts/{farmer_address}/resource/{type_tag}"

    async def fetch_agreement(self, farmer_address: str) -> Optional[PriceAgreement]:
        """
        Return the farmer's agreement, or None if the resource does not exist.

        Raises:
            LedgerReadError: non-404 failure, transport error, or a body that
                does not decode into a PriceAgreement.
        """
        path = self.resource_path(farmer_address)
        try:
            resp = await self._http.get(path)
        except httpx.HTTPError as exc:
            raise LedgerReadError(
                f"[fetch_agreement] Could not reach ledger node: {exc}"
            ) from exc

        if resp.status_code == 404:
            logger.info("No agreement under farmer=%s", farmer_address)
            return None
        _raise_for_status(resp, "fetch_agreement")

        try:
            data = resp.json()["data"]
        except (ValueError, KeyError, TypeError) as exc:
            raise LedgerReadError(
                f"[fetch_agreement] Unexpected resource body: {resp.text}"
            ) from exc

        agreement = PriceAgreement.from_resource(data)
        logger.info(
            "Agreement fetched: farmer=%s total=%d fulfilled=%s",
            farmer_address, agreement.total_value, agreement.is_fulfilled,
        )
        return agreement

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Context manager support
    # ------------------------------------------------------------------

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _raise_for_status(resp: httpx.Response, operation: str) -> None:
    """
    Translate a non-2xx node response into LedgerReadError.

    Node error bodies are expected to be JSON:
      {"message": "...", "error_code": "...", "vm_error_code": ...}
    Anything else falls back to the raw body text.
    """
    if resp.is_success:
        return

    try:
        body = resp.json()
        message = body.get("message") or body.get("error") or resp.text
    except Exception:
        message = resp.text

    raise LedgerReadError(f"[{operation}] Ledger node returned {resp.status_code}: {message}")
