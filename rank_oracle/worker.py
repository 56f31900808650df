# rank_oracle/worker.py
# Single-shot command line runner for the execution phase.
#   python -m rank_oracle.worker BTC-USDT
#   python -m rank_oracle.worker --hex 4254432d55534454
#   echo -n BTC-USDT | python -m rank_oracle.worker
from __future__ import annotations
import argparse, sys
from typing import Optional, List
from rich.console import Console

from .config import FeedConfig, settings
from .errors import EnvironmentMisconfiguration
from .execution import execution_phase
from .host import ProcessHost

EXIT_MISCONFIGURED = 2

console = Console(stderr=True)


def read_inputs(args: argparse.Namespace) -> bytes:
    if args.hex is not None:
        return bytes.fromhex(args.hex)
    if args.input is not None:
        return args.input.encode("utf-8")
    return sys.stdin.buffer.read()


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Run the ranking execution phase once.")
    ap.add_argument("input", nargs="?", default=None, help="request input text, e.g. BTC-USDT")
    ap.add_argument("--hex", default=None, help="request input as hex bytes")
    ap.add_argument("--feed-url", default=None, help="feed base URL (default: RANK_API_URL)")
    args = ap.parse_args(argv)

    try:
        config = FeedConfig(feed_base_url=args.feed_url) if args.feed_url else settings.feed_config()
    except EnvironmentMisconfiguration as e:
        console.log(f"[red]{e}[/red]")
        return EXIT_MISCONFIGURED

    host = ProcessHost(read_inputs(args))
    outcome = execution_phase(host, config)
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
