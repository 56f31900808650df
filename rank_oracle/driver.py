# rank_oracle/driver.py
"""
Request driver: posts ranking data requests to the oracle network and
waits for their tallied result.

Talks to a data-request gateway at the configured RPC endpoint:
  POST {rpc}/data-requests                  -> {"dr_id": ..., "height": ...}
  GET  {rpc}/data-requests/{dr_id}/result   -> 404 until tallied, then the DataResult

This is a stand-in gateway contract, not the chain's transaction format:
submissions are not signed Cosmos transactions. `Signer.sign` is an
HMAC-SHA256 over the JSON body keyed by the mnemonic, which only a gateway
sharing that secret can check. A real node rejects both.
"""
from __future__ import annotations
import base64, hashlib, hmac, json, logging, time
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional
import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from rich.console import Console
from rich.table import Table

from .config import Settings
from .errors import DataRequestError, DataRequestTimeout, EnvironmentMisconfiguration
from .outcome import U128_BYTES, decode_u128

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "0.0.1"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


# =========================
#        SIGNING
# =========================
@dataclass(frozen=True)
class SigningConfig:
    mnemonic: str
    rpc: str
    chain_id: str


def build_signing_config(settings: Settings) -> SigningConfig:
    if not settings.seda_mnemonic:
        raise EnvironmentMisconfiguration("Please set the SEDA_MNEMONIC in your env file")
    if not settings.seda_rpc_endpoint:
        raise EnvironmentMisconfiguration("Please set the SEDA_RPC_ENDPOINT in your env file")
    return SigningConfig(
        mnemonic=settings.seda_mnemonic,
        rpc=settings.seda_rpc_endpoint.rstrip("/"),
        chain_id=settings.seda_chain_id,
    )


class Signer:
    def __init__(self, config: SigningConfig):
        self.config = config
        self.account_id = hashlib.sha256(config.mnemonic.encode("utf-8")).hexdigest()[:40]

    @classmethod
    def from_partial(cls, config: SigningConfig) -> "Signer":
        if not config.mnemonic.strip():
            raise EnvironmentMisconfiguration("mnemonic is empty")
        return cls(config)

    @property
    def endpoint(self) -> str:
        return self.config.rpc

    def sign(self, body: bytes) -> str:
        return hmac.new(self.config.mnemonic.encode("utf-8"), body, hashlib.sha256).hexdigest()


# =========================
#        MODELS
# =========================
class ConsensusOptions(BaseModel):
    method: Literal["none", "mode"] = "none"
    json_path: Optional[str] = None

    @model_validator(mode="after")
    def _json_path_for_mode(self) -> "ConsensusOptions":
        if self.method == "mode" and not self.json_path:
            raise ValueError("consensus method 'mode' needs a json_path")
        return self

    def encode_filter(self) -> bytes:
        # 0x00 = no filter; 0x01 = mode over json_path (u64 big-endian length prefix)
        if self.method == "none":
            return b"\x00"
        path = (self.json_path or "").encode("utf-8")
        return b"\x01" + len(path).to_bytes(8, "big") + path


class GasOptions(BaseModel):
    gas_price: int = 1
    exec_gas_limit: int = 300_000_000_000_000
    tally_gas_limit: int = 50_000_000_000_000


class AwaitOptions(BaseModel):
    timeout_seconds: float = 60.0
    polling_interval_seconds: float = 1.0


class PostDataRequestInput(BaseModel):
    oracle_program_id: str
    dr_inputs: bytes
    tally_inputs: bytes = b""
    consensus_options: ConsensusOptions = Field(default_factory=ConsensusOptions)
    memo: bytes = b""
    replication_factor: int = 1
    exec_program_id: Optional[str] = None
    version: str = DEFAULT_VERSION

    def to_payload(self, gas: GasOptions) -> Dict[str, Any]:
        return {
            "version": self.version,
            "exec_program_id": self.exec_program_id or self.oracle_program_id,
            "tally_program_id": self.oracle_program_id,
            "exec_inputs": b64(self.dr_inputs),
            "tally_inputs": b64(self.tally_inputs),
            "consensus_filter": b64(self.consensus_options.encode_filter()),
            "replication_factor": self.replication_factor,
            "gas_price": str(gas.gas_price),
            "exec_gas_limit": gas.exec_gas_limit,
            "tally_gas_limit": gas.tally_gas_limit,
            "memo": b64(self.memo),
        }


class DataResult(BaseModel):
    model_config = ConfigDict(extra="ignore")
    dr_id: str
    dr_block_height: int = 0
    exit_code: int
    gas_used: int = 0
    result: str = ""  # hex
    block_height: int = 0
    block_timestamp: Optional[str] = None
    consensus: bool = False
    version: str = DEFAULT_VERSION

    @field_validator("result")
    @classmethod
    def _hex_result(cls, v: str) -> str:
        v = v.removeprefix("0x")
        bytes.fromhex(v)  # ValueError surfaces as a ValidationError
        return v

    @property
    def result_bytes(self) -> bytes:
        try:
            return bytes.fromhex(self.result.removeprefix("0x"))
        except ValueError:
            # only reachable when validation was bypassed (model_construct, assignment)
            return b""

    @property
    def result_as_utf8(self) -> str:
        return self.result_bytes.decode("utf-8", errors="replace")

    @property
    def result_as_u128(self) -> Optional[int]:
        raw = self.result_bytes
        if self.exit_code != 0 or len(raw) != U128_BYTES:
            return None
        return decode_u128(raw)


# =========================
#        NETWORK
# =========================
class DataRequestClient:
    def __init__(self, signer: Signer, session: Optional[requests.Session] = None, timeout: float = 30):
        self.signer = signer
        self.session = session or requests.Session()
        self.timeout = timeout

    def post(self, payload: Dict[str, Any]) -> str:
        body = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "X-Seda-Chain-Id": self.signer.config.chain_id,
            "X-Seda-Account": self.signer.account_id,
            "X-Seda-Signature": self.signer.sign(body),
        }
        url = f"{self.signer.endpoint}/data-requests"
        try:
            r = self.session.post(url, data=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise DataRequestError(f"could not reach {url}: {e}") from e
        if r.status_code >= 400:
            raise DataRequestError(f"data request rejected: HTTP {r.status_code} - {r.text}")
        try:
            doc = r.json()
        except ValueError as e:
            raise DataRequestError(f"submission response is not JSON: {r.text}") from e
        dr_id = doc.get("dr_id") if isinstance(doc, dict) else None
        if not dr_id:
            raise DataRequestError(f"no dr_id in submission response: {r.text}")
        return str(dr_id)

    def fetch_result(self, dr_id: str) -> Optional[DataResult]:
        url = f"{self.signer.endpoint}/data-requests/{dr_id}/result"
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise DataRequestError(f"could not reach {url}: {e}") from e
        if r.status_code == 404:
            return None
        if r.status_code >= 400:
            raise DataRequestError(f"result query failed: HTTP {r.status_code} - {r.text}")
        try:
            return DataResult.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            raise DataRequestError(f"unreadable result for data request {dr_id}: {e}") from e


def await_data_result(client: DataRequestClient, dr_id: str, opts: AwaitOptions) -> DataResult:
    deadline = time.monotonic() + opts.timeout_seconds
    while True:
        result = client.fetch_result(dr_id)
        if result is not None:
            return result
        if time.monotonic() >= deadline:
            raise DataRequestTimeout(f"no result for data request {dr_id} after {opts.timeout_seconds}s")
        time.sleep(opts.polling_interval_seconds)


def post_and_await_data_request(signer: Signer, request: PostDataRequestInput, *,
                                gas: Optional[GasOptions] = None,
                                await_options: Optional[AwaitOptions] = None,
                                session: Optional[requests.Session] = None) -> DataResult:
    client = DataRequestClient(signer, session=session)
    dr_id = client.post(request.to_payload(gas or GasOptions()))
    logger.info("posted data request %s (inputs=%r)", dr_id, request.dr_inputs)
    return await_data_result(client, dr_id, await_options or AwaitOptions())


def render_result(result: DataResult, console: Optional[Console] = None) -> Table:
    table = Table(title=f"Data request {result.dr_id}")
    table.add_column("field")
    table.add_column("value")
    for k, v in result.model_dump().items():
        table.add_row(k, str(v))
    table.add_row("result_as_utf8", result.result_as_utf8)
    if result.result_as_u128 is not None:
        table.add_row("result_as_u128", str(result.result_as_u128))
    (console or Console()).print(table)
    return table
