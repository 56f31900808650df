# rank_oracle/host.py
# Host boundary of the execution phase: input accessor, log sinks, result reporting.
from __future__ import annotations
import sys
from typing import Optional, Protocol, TextIO
from rich.console import Console

from .outcome import Outcome


class LogSink(Protocol):
    def log(self, msg: str) -> None: ...
    def log_error(self, msg: str) -> None: ...


class Host(LogSink, Protocol):
    def get_inputs(self) -> bytes: ...
    def success(self, data: bytes) -> None: ...
    def error(self, data: bytes) -> None: ...


class ConsoleSink:
    """Info/error log sinks on rich consoles. Observability only."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.err_console = err_console or Console(stderr=True, style="red")

    def log(self, msg: str) -> None:
        self.console.log(msg, markup=False, highlight=False)

    def log_error(self, msg: str) -> None:
        self.err_console.log(msg, markup=False, highlight=False)


class ProcessHost(ConsoleSink):
    """
    Command-line host.

    The request input is handed over as bytes at construction; the reported
    outcome is written as hex to `out` and kept on `self.outcome`. A second
    report raises, so a run can never yield two outcomes.
    """

    def __init__(self, inputs: bytes, out: Optional[TextIO] = None,
                 console: Optional[Console] = None, err_console: Optional[Console] = None):
        super().__init__(console, err_console)
        self._inputs = bytes(inputs)
        self._out = out
        self.outcome: Optional[Outcome] = None

    def get_inputs(self) -> bytes:
        return self._inputs

    def success(self, data: bytes) -> None:
        self._report(Outcome.success(data))

    def error(self, data: bytes) -> None:
        self._report(Outcome.error(data))

    def _report(self, outcome: Outcome) -> None:
        if self.outcome is not None:
            raise RuntimeError("outcome already reported for this invocation")
        self.outcome = outcome
        out = self._out or sys.stdout
        out.write(outcome.data.hex() + "\n")
        out.flush()
