"""Ordered label collections and their JSONL import/export."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from functools import total_ordering
import logging
from pathlib import Path
from typing import Any, TextIO, overload

from .errors import (
    LabelContractError,
    LabelFileReadError,
    LabelFileWriteError,
    LabelLineError,
    LabelSerializeError,
)
from .labels import LABEL_TYPE_ORDER, Label, TransactionLabel


logger = logging.getLogger("bip329.collection")


@total_ordering
class Labels(Sequence[Label]):
    """An ordered list of labels; line order is preserved on import and export.

    Duplicates are kept. The collection only grows through `append`/`extend`.
    """

    def __init__(self, labels: Iterable[Label] = ()) -> None:
        self._labels: list[Label] = []
        self.extend(labels)

    # ---------- construction ----------

    @classmethod
    def parse_text(cls, text: str) -> "Labels":
        """Parse JSONL text, failing on the first malformed line.

        Only `\\n` separates records; blank lines (including a trailing one)
        are skipped and line numbers in errors are 1-based.
        """
        labels = cls(_decode_lines(text.split("\n")))
        logger.debug("BIP329 labels parsed from text count=%s", len(labels))
        return labels

    @classmethod
    def parse_file(cls, path: str | Path) -> "Labels":
        """Stream a JSONL file line by line with `parse_text` semantics."""
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8", newline="\n") as handle:
                labels = cls(_decode_lines(_read_lines(handle, path)))
        except OSError as exc:
            raise LabelFileReadError(f"unable to read {path}: {exc}") from exc
        logger.debug("BIP329 labels parsed from file path=%s count=%s", path, len(labels))
        return labels

    # ---------- export ----------

    def export_text(self) -> str:
        """One compact JSON object per line, joined by newlines, no trailing newline."""
        return "\n".join(_encode(label) for label in self._labels)

    def export_to_file(self, path: str | Path) -> None:
        path = Path(path)
        contents = self.export_text()
        try:
            path.write_text(contents, encoding="utf-8", newline="")
        except OSError as exc:
            raise LabelFileWriteError(f"unable to write {path}: {exc}") from exc
        logger.debug("BIP329 labels exported path=%s count=%s", path, len(self._labels))

    def export_to_writer(self, sink: TextIO) -> None:
        """Write every label followed by a newline, including the last one."""
        for label in self._labels:
            line = _encode(label)
            try:
                sink.write(line)
                sink.write("\n")
            except OSError as exc:
                raise LabelFileWriteError(f"unable to write labels: {exc}") from exc

    # ---------- queries ----------

    def transaction_label_record(self) -> TransactionLabel | None:
        for label in self._labels:
            if isinstance(label, TransactionLabel):
                return label
        return None

    def transaction_label(self) -> str | None:
        """Label of the first transaction record, or None if missing or empty."""
        record = self.transaction_label_record()
        if record is None:
            return None
        return record.label_text()

    def counts_by_type(self) -> dict[str, int]:
        counts = {label_type: 0 for label_type in LABEL_TYPE_ORDER}
        for label in self._labels:
            counts[label.TYPE] += 1
        return {label_type: count for label_type, count in counts.items() if count}

    # ---------- mutation ----------

    def append(self, label: Label) -> None:
        if not isinstance(label, Label):
            raise TypeError(f"Labels accepts Label records only, got {type(label).__name__}")
        self._labels.append(label)

    def extend(self, labels: Iterable[Label]) -> None:
        for label in labels:
            self.append(label)

    def to_list(self) -> list[Label]:
        return list(self._labels)

    # ---------- sequence protocol ----------

    @overload
    def __getitem__(self, index: int) -> Label: ...

    @overload
    def __getitem__(self, index: slice) -> "Labels": ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return Labels(self._labels[index])
        return self._labels[index]

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Labels):
            return NotImplemented
        return self._labels == other._labels

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Labels):
            return NotImplemented
        return self._labels < other._labels

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Labels({self._labels!r})"


def _read_lines(handle: TextIO, path: Path) -> Iterator[str]:
    try:
        for line in handle:
            yield line
    except UnicodeDecodeError as exc:
        raise LabelFileReadError(f"{path} is not valid UTF-8: {exc}") from exc


def _decode_lines(lines: Iterable[str]) -> Iterator[Label]:
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            yield Label.parse(line)
        except LabelContractError as exc:
            raise LabelLineError(line_number, exc) from exc


def _encode(label: Label) -> str:
    try:
        return label.to_json()
    except (TypeError, ValueError) as exc:
        raise LabelSerializeError(f"unable to serialize {label!r}: {exc}") from exc
