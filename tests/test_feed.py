from __future__ import annotations

import pytest

from rank_oracle.errors import (
    FetchRejected,
    MalformedResponse,
    MissingOrEmptyMessage,
    NumericConversionFailure,
)
from rank_oracle.feed import RankingFeedResponse, build_feed_url, fetch_feed, parse_feed_body, require_message, to_u128
from rank_oracle.outcome import U128_MAX
from tests.conftest import FeedStub


@pytest.mark.parametrize(
    "base,pair,expected",
    [
        ("https://feed.test", "BTC-USDT", "https://feed.test/BTC-USDT"),
        ("https://feed.test/rank", "1", "https://feed.test/rank/1"),
        ("https://feed.test/", "ETH-USDC", "https://feed.test//ETH-USDC"),
        ("https://feed.test", "a?b=c", "https://feed.test/a?b=c"),
    ],
)
def test_build_feed_url_joins_verbatim(base: str, pair: str, expected: str) -> None:
    assert build_feed_url(base, pair) == expected


@pytest.mark.parametrize(
    "message,expected",
    [
        ("0", 0),
        ("65000000000", 65000000000),
        ("0007", 7),
        (str(U128_MAX), U128_MAX),
        ("0" * 60 + "1", 1),
        ("0" * 5000 + "7", 7),
        ("0" * 5000, 0),
    ],
)
def test_to_u128_accepts_decimal_digits(message: str, expected: int) -> None:
    assert to_u128(message) == expected


@pytest.mark.parametrize(
    "message",
    ["", "abc", "+1", "-1", "1.0", "1_000", "1e3", "12 ", "١٢", str(U128_MAX + 1), "9" * 5000],
)
def test_to_u128_rejects_everything_else(message: str) -> None:
    with pytest.raises(NumericConversionFailure) as e:
        to_u128(message)
    assert e.value.outcome_message == f"Error while converting price data: {message}"


def test_parse_feed_body_reads_message() -> None:
    assert parse_feed_body(b'{"message": "12"}') == RankingFeedResponse(message="12")


def test_parse_feed_body_wraps_validation_errors() -> None:
    with pytest.raises(MalformedResponse) as e:
        parse_feed_body(b"not json")
    # malformed bodies share the missing-message report
    assert isinstance(e.value, MissingOrEmptyMessage)
    assert e.value.outcome_message == "Error while parsing price data: "
    assert e.value.detail


def test_require_message_rejects_empty() -> None:
    with pytest.raises(MissingOrEmptyMessage):
        require_message(RankingFeedResponse(message=""))
    with pytest.raises(MissingOrEmptyMessage):
        require_message(RankingFeedResponse())
    assert require_message(RankingFeedResponse(message="5")) == "5"


def test_fetch_feed_raises_on_rejected_status() -> None:
    stub = FeedStub(502, {"error": "bad gateway"})
    with stub.client() as client:
        with pytest.raises(FetchRejected) as e:
            fetch_feed(client, "https://feed.test/BTC-USDT")
    assert e.value.status == 502
    assert "bad gateway" in e.value.body


def test_fetch_feed_returns_ok_response() -> None:
    stub = FeedStub(200, {"message": "1"})
    with stub.client() as client:
        r = fetch_feed(client, "https://feed.test/BTC-USDT")
    assert r.status_code == 200


@pytest.mark.parametrize("pair", ["BTC\nUSDT", "BTC\x00USDT", "A" * 70_000])
def test_fetch_feed_maps_unusable_url_to_rejection(pair: str) -> None:
    stub = FeedStub(200, {"message": "1"})
    with stub.client() as client:
        with pytest.raises(FetchRejected) as e:
            fetch_feed(client, build_feed_url("https://feed.test", pair))
    assert e.value.status == 0
    assert stub.requests == []
