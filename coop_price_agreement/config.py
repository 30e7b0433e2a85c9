"""
config.py — Startup configuration for coop-price-agreement.

The co-op program address and the ledger node URL are fixed for the
lifetime of the process. Build one AgreementConfig at startup and hand it
to the controller; the model is frozen so nothing can reconfigure it later.

All settings have defaults pointing at the deployed testnet program, so a
developer only needs to export COOP_MODULE_ADDRESS to target their own.
"""

import os
import re

from pydantic import BaseModel, ConfigDict, field_validator

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{1,64}")

DEFAULT_MODULE_ADDRESS = (
    "0xa2873261bb7f21fd004fbe1fa90807919206701493291ce7cf38f3e5ce85cbc2"
)
DEFAULT_NODE_URL = "https://fullnode.testnet.aptoslabs.com/v1"


class AgreementConfig(BaseModel):
    """
    Configuration for the price agreement client.

    Reads from environment variables by default:
        COOP_MODULE_ADDRESS — account that published the co-op program
        COOP_MODULE_NAME    — program module name (default: FarmerCoOp)
        COOP_NODE_URL       — ledger node REST base URL (default: testnet)
        COOP_TIMEOUT        — HTTP timeout in seconds (default: 30)
    """

    model_config = ConfigDict(frozen=True)

    module_address: str = os.getenv("COOP_MODULE_ADDRESS", DEFAULT_MODULE_ADDRESS)
    module_name: str = os.getenv("COOP_MODULE_NAME", "FarmerCoOp")
    node_url: str = os.getenv("COOP_NODE_URL", DEFAULT_NODE_URL)
    timeout_seconds: int = int(os.getenv("COOP_TIMEOUT", "30"))

    @field_validator("module_address")
    @classmethod
    def validate_module_address(cls, v: str) -> str:
        if not _ADDRESS_RE.fullmatch(v):
            raise ValueError(f"module_address must be a 0x-prefixed hex address, got '{v}'")
        return v

    @field_validator("module_name")
    @classmethod
    def validate_module_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"module_name must be an identifier, got '{v}'")
        return v

    @field_validator("node_url")
    @classmethod
    def validate_node_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"node_url must be an http(s) URL, got '{v}'")
        return v.rstrip("/")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v < 1 or v > 300:
            raise ValueError("timeout_seconds must be between 1 and 300")
        return v

    @property
    def module(self) -> str:
        """Fully qualified module id, e.g. ``0xabc::FarmerCoOp``."""
        return f"{self.module_address}::{self.module_name}"

    @property
    def agreement_type_tag(self) -> str:
        return f"{self.module}::PriceAgreement"

    def function_id(self, name: str) -> str:
        return f"{self.module}::{name}"
