"""Identifier codec for transaction ids and `txid:index` references."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any

from .errors import InvalidOutPointFormat, InvalidOutputIndex, InvalidTxid


TXID_HEX_LEN = 64
OUTPOINT_SEPARATOR = ":"
MAX_OUTPUT_INDEX = 0xFFFFFFFF

_HEX64_RE = re.compile(r"^[0-9a-fA-F]{64}$")
_DECIMAL_RE = re.compile(r"^[0-9]+$")


def normalize_txid(value: Any) -> str:
    """Return `value` as a lowercase 64-char hex transaction id."""
    if not isinstance(value, str) or not _HEX64_RE.fullmatch(value):
        raise InvalidTxid(f"txid must be {TXID_HEX_LEN} hex characters, got {value!r}")
    return value.lower()


def _parse_output_index(text: str) -> int:
    if not _DECIMAL_RE.fullmatch(text):
        raise InvalidOutputIndex(f"output index must be an unsigned integer, got {text!r}")
    index = int(text)
    if index > MAX_OUTPUT_INDEX:
        raise InvalidOutputIndex(f"output index {index} exceeds {MAX_OUTPUT_INDEX}")
    return index


@dataclass(frozen=True, order=True)
class OutPoint:
    """Reference to a transaction output: `(txid, vout)`."""

    txid: str
    vout: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "txid", normalize_txid(self.txid))
        if isinstance(self.vout, bool) or not isinstance(self.vout, int):
            raise InvalidOutputIndex(f"output index must be an integer, got {self.vout!r}")
        if not 0 <= self.vout <= MAX_OUTPUT_INDEX:
            raise InvalidOutputIndex(f"output index {self.vout} outside 0..{MAX_OUTPUT_INDEX}")

    @classmethod
    def parse(cls, text: Any) -> "OutPoint":
        """Parse `<64-hex-txid>:<decimal-index>` using fixed-width slicing.

        The txid always occupies the first 64 characters and the separator
        sits at position 64; the remainder is the index.
        """
        if not isinstance(text, str):
            raise InvalidOutPointFormat(f"outpoint must be a string, got {type(text).__name__}")
        if len(text) < TXID_HEX_LEN + 2:
            raise InvalidOutPointFormat(f"outpoint too short: {text!r}")
        if text[TXID_HEX_LEN] != OUTPOINT_SEPARATOR:
            raise InvalidOutPointFormat(
                f"outpoint separator {OUTPOINT_SEPARATOR!r} expected at position {TXID_HEX_LEN}"
            )
        txid = normalize_txid(text[:TXID_HEX_LEN])
        vout = _parse_output_index(text[TXID_HEX_LEN + 1 :])
        return cls(txid=txid, vout=vout)

    def format(self) -> str:
        return f"{self.txid}{OUTPOINT_SEPARATOR}{self.vout}"

    def __str__(self) -> str:
        return self.format()
