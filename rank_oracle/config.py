# rank_oracle/config.py
from __future__ import annotations
import os
from typing import Optional
from pydantic import BaseModel
from dotenv import load_dotenv

from .errors import EnvironmentMisconfiguration

load_dotenv()

# env switches
#   RANK_API_URL: base URL of the ranking/price feed hit by the execution phase
#   RANK_ORACLE_PROGRAM_ID: oracle program the driver posts data requests for
#   SEDA_MNEMONIC / SEDA_RPC_ENDPOINT / SEDA_CHAIN_ID: driver signing credentials
#   DR_TIMEOUT_SECONDS / DR_POLLING_INTERVAL_SECONDS: how long the driver waits for a tally


class FeedConfig(BaseModel):
    """Injected configuration of the execution phase (nothing else is read)."""
    feed_base_url: str


class Settings(BaseModel):
    rank_api_url: Optional[str] = os.getenv("RANK_API_URL") or None
    oracle_program_id: Optional[str] = os.getenv("RANK_ORACLE_PROGRAM_ID") or None

    seda_mnemonic: Optional[str] = os.getenv("SEDA_MNEMONIC") or None
    seda_rpc_endpoint: Optional[str] = os.getenv("SEDA_RPC_ENDPOINT") or None
    seda_chain_id: str = os.getenv("SEDA_CHAIN_ID", "seda-1-devnet")

    dr_timeout_seconds: float = float(os.getenv("DR_TIMEOUT_SECONDS", "60"))
    dr_polling_interval_seconds: float = float(os.getenv("DR_POLLING_INTERVAL_SECONDS", "1"))

    def feed_config(self) -> FeedConfig:
        if not self.rank_api_url:
            raise EnvironmentMisconfiguration("Please set the RANK_API_URL in your env file")
        return FeedConfig(feed_base_url=self.rank_api_url)

settings = Settings()
