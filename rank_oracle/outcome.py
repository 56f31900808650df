# rank_oracle/outcome.py
from __future__ import annotations
from dataclasses import dataclass

U128_BYTES = 16
U128_MAX = (1 << 128) - 1

EXIT_SUCCESS = 0
EXIT_ERROR = 1


@dataclass(frozen=True)
class Outcome:
    """Terminal result of one execution phase run: success bytes or error bytes."""
    ok: bool
    data: bytes

    @classmethod
    def success(cls, data: bytes) -> "Outcome":
        return cls(ok=True, data=bytes(data))

    @classmethod
    def error(cls, data: bytes | str) -> "Outcome":
        if isinstance(data, str):
            data = data.encode("utf-8")
        return cls(ok=False, data=bytes(data))

    @property
    def exit_code(self) -> int:
        return EXIT_SUCCESS if self.ok else EXIT_ERROR

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


def encode_u128(value: int) -> bytes:
    # host layout for u128: fixed 16 bytes, little-endian
    if value < 0 or value > U128_MAX:
        raise OverflowError(f"{value} does not fit in an unsigned 128-bit integer")
    return value.to_bytes(U128_BYTES, "little")


def decode_u128(data: bytes) -> int:
    if len(data) != U128_BYTES:
        raise ValueError(f"expected {U128_BYTES} bytes, got {len(data)}")
    return int.from_bytes(data, "little")
