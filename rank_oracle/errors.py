# rank_oracle/errors.py
"""
Error taxonomy.

Execution phase errors never escape `execute`: each one carries the text
reported to the host through the error outcome. Driver errors are raised
to the caller.
"""
from __future__ import annotations


class RankOracleError(Exception):
    """Base class for everything raised by this package."""


class ExecutionPhaseError(RankOracleError):
    """A failure that terminates the execution phase with an error outcome."""

    def __init__(self, outcome_message: str):
        super().__init__(outcome_message)
        self.outcome_message = outcome_message


class FetchRejected(ExecutionPhaseError):
    """The feed answered with a non-success status (0 means no response at all)."""

    def __init__(self, status: int, body: str):
        super().__init__("Error while fetching price feed")
        self.status = status
        self.body = body


class MissingOrEmptyMessage(ExecutionPhaseError):
    def __init__(self, message: str = ""):
        super().__init__(f"Error while parsing price data: {message}")
        self.message = message


class MalformedResponse(MissingOrEmptyMessage):
    """Body is not JSON of the expected shape; reported like a missing message."""

    def __init__(self, detail: str):
        super().__init__("")
        self.detail = detail


class NumericConversionFailure(ExecutionPhaseError):
    def __init__(self, message: str):
        super().__init__(f"Error while converting price data: {message}")
        self.message = message


class EnvironmentMisconfiguration(RankOracleError):
    """Required configuration or credentials are absent."""


class DataRequestError(RankOracleError):
    """The network rejected a data request submission or result query."""


class DataRequestTimeout(DataRequestError):
    """No tallied result arrived within the await window."""
