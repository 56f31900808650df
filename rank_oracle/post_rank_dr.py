# rank_oracle/post_rank_dr.py
# Posts ranking data requests one after the other and prints each tallied result.
from __future__ import annotations
import argparse, logging, sys
from datetime import datetime, timezone
from typing import List, Optional
import requests
import yaml
from rich.console import Console

from .config import Settings, settings as default_settings
from .driver import (
    AwaitOptions,
    ConsensusOptions,
    PostDataRequestInput,
    Signer,
    build_signing_config,
    post_and_await_data_request,
    render_result,
)
from .errors import DataRequestError, EnvironmentMisconfiguration

DEFAULT_INPUTS = ["1", "2"]

console = Console()
logger = logging.getLogger(__name__)


def load_batch(path: str) -> List[str]:
    """YAML list of inputs: either plain strings or {input: ...} mappings."""
    with open(path, "r", encoding="utf-8") as f:
        doc = yaml.safe_load(f) or []
    if not isinstance(doc, list):
        raise ValueError(f"{path}: expected a list of inputs")
    out = []
    for item in doc:
        if isinstance(item, dict):
            item = item.get("input")
        if item is None:
            raise ValueError(f"{path}: entry without input")
        out.append(str(item))
    return out


def memo_now() -> bytes:
    return datetime.now(timezone.utc).isoformat().encode("utf-8")


def main(argv: Optional[List[str]] = None, *, cfg: Optional[Settings] = None,
         session: Optional[requests.Session] = None) -> int:
    ap = argparse.ArgumentParser(description="Post ranking data requests and wait for their results.")
    ap.add_argument("--input", action="append", default=None, help="dr input (repeatable); default: 1 and 2")
    ap.add_argument("--batch", default=None, help="YAML file with a list of dr inputs")
    ap.add_argument("--timeout", type=float, default=None, help="seconds to wait for each result")
    args = ap.parse_args(argv)

    cfg = cfg or default_settings
    if not cfg.oracle_program_id:
        raise EnvironmentMisconfiguration("Please set the RANK_ORACLE_PROGRAM_ID in your env file")

    # mnemonic + rpc endpoint come from the env file (SEDA_MNEMONIC, SEDA_RPC_ENDPOINT)
    signer = Signer.from_partial(build_signing_config(cfg))

    inputs = load_batch(args.batch) if args.batch else (args.input or DEFAULT_INPUTS)
    await_opts = AwaitOptions(
        timeout_seconds=args.timeout if args.timeout is not None else cfg.dr_timeout_seconds,
        polling_interval_seconds=cfg.dr_polling_interval_seconds,
    )

    console.log("Posting and waiting for a result, this may take a lil while..")
    failures = 0
    for dr_input in inputs:
        request = PostDataRequestInput(
            oracle_program_id=cfg.oracle_program_id,
            dr_inputs=dr_input.encode("utf-8"),
            tally_inputs=b"",
            consensus_options=ConsensusOptions(method="none"),
            memo=memo_now(),
        )
        try:
            result = post_and_await_data_request(signer, request, await_options=await_opts, session=session)
        except DataRequestError as e:
            failures += 1
            logger.error("data request for input %r failed: %s", dr_input, e)
            console.log({"ok": False, "input": dr_input, "error": str(e)})
            continue
        render_result(result, console)
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
