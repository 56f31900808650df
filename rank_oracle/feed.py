# rank_oracle/feed.py
# Ranking/price feed access: one GET, then strict parsing of the "message" field.
from __future__ import annotations
import re
from typing import Optional
import httpx
from pydantic import BaseModel, ValidationError

from .errors import FetchRejected, MalformedResponse, MissingOrEmptyMessage, NumericConversionFailure
from .outcome import U128_MAX

_DIGITS = re.compile(r"[0-9]+")
_U128_MAX_DIGITS = len(str(U128_MAX))


class RankingFeedResponse(BaseModel):
    message: Optional[str] = None


def build_feed_url(feed_base_url: str, pair: str) -> str:
    # plain join, the pair text is not escaped
    return f"{feed_base_url}/{pair}"


def fetch_feed(client: httpx.Client, url: str) -> httpx.Response:
    """Single GET against the feed. Any non-2xx answer raises FetchRejected."""
    try:
        r = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        # no response at all (transport failure or unusable URL); same terminal path as a rejected status
        raise FetchRejected(0, str(e)) from e
    if not r.is_success:
        raise FetchRejected(r.status_code, r.text)
    return r


def parse_feed_body(body: bytes | str) -> RankingFeedResponse:
    try:
        return RankingFeedResponse.model_validate_json(body)
    except ValidationError as e:
        raise MalformedResponse(str(e)) from e


def require_message(data: RankingFeedResponse) -> str:
    if not data.message:
        raise MissingOrEmptyMessage(data.message or "")
    return data.message


def to_u128(message: str) -> int:
    """Decimal digits only; no sign, spaces, fraction or exponent."""
    if not _DIGITS.fullmatch(message):
        raise NumericConversionFailure(message)
    digits = message.lstrip("0")
    if len(digits) > _U128_MAX_DIGITS:
        raise NumericConversionFailure(message)
    value = int(digits or "0")
    if value > U128_MAX:
        raise NumericConversionFailure(message)
    return value
