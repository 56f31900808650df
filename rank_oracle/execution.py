# rank_oracle/execution.py
"""
Execution phase of a ranking data request.

Fetches the non-deterministic value for one feed entry (e.g. "BTC-USDT")
from the configured feed, validates it and turns it into an unsigned
128-bit integer. Every run ends in exactly one Outcome.
"""
from __future__ import annotations
import logging
from typing import Optional
import httpx

from .config import FeedConfig
from .errors import ExecutionPhaseError, FetchRejected, MalformedResponse
from .feed import build_feed_url, fetch_feed, parse_feed_body, require_message, to_u128
from .host import ConsoleSink, Host, LogSink
from .outcome import Outcome, encode_u128

logger = logging.getLogger(__name__)


def execute(request_input: bytes, config: FeedConfig, *,
            client: Optional[httpx.Client] = None,
            console: Optional[LogSink] = None) -> Outcome:
    # undecodable input is a host contract violation and propagates as-is
    pair = bytes(request_input).decode("utf-8")
    sink = console or ConsoleSink()
    sink.log(pair)
    sink.log(f"Fetching price for pair: {pair}")

    url = build_feed_url(config.feed_base_url, pair)
    try:
        if client is None:
            # no worker-side timeout; the host bounds a stalled fetch
            with httpx.Client(timeout=None) as c:
                response = fetch_feed(c, url)
        else:
            response = fetch_feed(client, url)
    except FetchRejected as e:
        sink.log_error(f"HTTP Response was rejected: {e.status} - {e.body}")
        return Outcome.error(e.outcome_message)

    try:
        data = parse_feed_body(response.content)
        value = to_u128(require_message(data))
    except MalformedResponse as e:
        # reported like a missing message
        sink.log_error(f"Feed response is not a valid ranking payload: {e.detail}")
        return Outcome.error(e.outcome_message)
    except ExecutionPhaseError as e:
        logger.debug("execution phase failed for %r: %s", pair, e.outcome_message)
        return Outcome.error(e.outcome_message)

    return Outcome.success(encode_u128(value))


def execution_phase(host: Host, config: FeedConfig, *,
                    client: Optional[httpx.Client] = None) -> Outcome:
    """Run `execute` on the host's input and report the outcome to the host exactly once."""
    outcome = execute(host.get_inputs(), config, client=client, console=host)
    if outcome.ok:
        host.success(outcome.data)
    else:
        host.error(outcome.data)
    return outcome
