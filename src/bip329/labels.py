"""BIP-329 label records: one frozen dataclass per `type` discriminant."""

from __future__ import annotations

from dataclasses import dataclass, fields
from functools import total_ordering
import json
from typing import Any, ClassVar, Mapping

from .booleans import decode_flexible_bool
from .errors import LabelContractError
from .outpoint import OutPoint, normalize_txid


# Variant order used for cross-type sorting.
LABEL_TYPE_ORDER: tuple[str, ...] = ("tx", "addr", "pubkey", "input", "output", "xpub")

REF_KIND_TXID = "txid"
REF_KIND_ADDRESS = "address"
REF_KIND_PUBKEY = "pubkey"
REF_KIND_INPUT = "input"
REF_KIND_OUTPUT = "output"
REF_KIND_XPUB = "xpub"


@dataclass(frozen=True)
class LabelRef:
    """Variant-independent identity of the labelled object."""

    kind: str
    value: str | OutPoint

    def as_text(self) -> str:
        return str(self.value)


@total_ordering
class Label:
    """Base of the closed label union.

    Concrete records are the six dataclasses below; `Label.from_payload`
    dispatches on the `type` key and each record's `as_dict` writes it back.
    """

    TYPE: ClassVar[str] = ""

    # ---------- decoding ----------

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Label":
        mapped = _as_mapping(payload, "label")
        if "type" not in mapped:
            raise LabelContractError("label.type is required", code="TYPE_MISSING")
        label_type = mapped["type"]
        record_cls = LABEL_TYPES.get(label_type) if isinstance(label_type, str) else None
        if record_cls is None:
            raise LabelContractError(
                f"label.type must be one of {list(LABEL_TYPE_ORDER)}, got {label_type!r}",
                code="TYPE_UNKNOWN",
            )
        if cls is not Label and record_cls is not cls:
            raise LabelContractError(
                f"expected label.type {cls.TYPE!r}, got {label_type!r}",
                code="TYPE_UNKNOWN",
            )
        if "ref" not in mapped:
            raise LabelContractError(f"{label_type}.ref is required", code="REF_INVALID")
        return record_cls._decode(mapped)

    @classmethod
    def parse(cls, text: str) -> "Label":
        """Decode a single JSON object (one JSONL line)."""
        try:
            payload = json.loads(text)
        except (ValueError, RecursionError) as exc:
            raise LabelContractError(f"invalid JSON: {exc}", code="JSON_INVALID") from exc
        return cls.from_payload(payload)

    @classmethod
    def _decode(cls, mapped: dict[str, Any]) -> "Label":
        raise NotImplementedError

    # ---------- encoding ----------

    def as_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_json(self) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, separators=(",", ":"))

    # ---------- accessors ----------

    def reference(self) -> LabelRef:
        raise NotImplementedError

    def label_text(self) -> str | None:
        """Return the label, treating an empty string as no label."""
        text = getattr(self, "label", None)
        return text or None

    # ---------- structural ordering ----------

    def sort_key(self) -> tuple[Any, ...]:
        values = tuple(_optional_key(getattr(self, item.name)) for item in fields(self))  # type: ignore[arg-type]
        return (LABEL_TYPE_ORDER.index(self.TYPE),) + values

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Label):
            return NotImplemented
        return self.sort_key() < other.sort_key()


@dataclass(frozen=True)
class TransactionLabel(Label):
    TYPE: ClassVar[str] = "tx"

    ref: str
    label: str | None = None
    origin: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ref", _require_txid(self.ref, "tx.ref"))
        _check_optional_text(self.label, "tx.label")
        _check_optional_text(self.origin, "tx.origin")

    @classmethod
    def _decode(cls, mapped: dict[str, Any]) -> "TransactionLabel":
        return cls(ref=mapped["ref"], label=mapped.get("label"), origin=mapped.get("origin"))

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.TYPE, "ref": self.ref}
        if self.label is not None:
            payload["label"] = self.label
        if self.origin is not None:
            payload["origin"] = self.origin
        return payload

    def reference(self) -> LabelRef:
        return LabelRef(kind=REF_KIND_TXID, value=self.ref)


@dataclass(frozen=True)
class AddressLabel(Label):
    """Address label; the address is stored as given, without network checks."""

    TYPE: ClassVar[str] = "addr"

    ref: str
    label: str | None = None

    def __post_init__(self) -> None:
        _require_non_empty_string(self.ref, "addr.ref")
        _check_optional_text(self.label, "addr.label")

    @classmethod
    def _decode(cls, mapped: dict[str, Any]) -> "AddressLabel":
        return cls(ref=mapped["ref"], label=mapped.get("label"))

    def as_dict(self) -> dict[str, Any]:
        return _ref_and_label(self.TYPE, self.ref, self.label)

    def reference(self) -> LabelRef:
        return LabelRef(kind=REF_KIND_ADDRESS, value=self.ref)


@dataclass(frozen=True)
class PublicKeyLabel(Label):
    TYPE: ClassVar[str] = "pubkey"

    ref: str
    label: str | None = None

    def __post_init__(self) -> None:
        _require_non_empty_string(self.ref, "pubkey.ref")
        _check_optional_text(self.label, "pubkey.label")

    @classmethod
    def _decode(cls, mapped: dict[str, Any]) -> "PublicKeyLabel":
        return cls(ref=mapped["ref"], label=mapped.get("label"))

    def as_dict(self) -> dict[str, Any]:
        return _ref_and_label(self.TYPE, self.ref, self.label)

    def reference(self) -> LabelRef:
        return LabelRef(kind=REF_KIND_PUBKEY, value=self.ref)


@dataclass(frozen=True)
class InputLabel(Label):
    TYPE: ClassVar[str] = "input"

    ref: OutPoint
    label: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ref", _coerce_outpoint(self.ref))
        _check_optional_text(self.label, "input.label")

    @classmethod
    def _decode(cls, mapped: dict[str, Any]) -> "InputLabel":
        return cls(ref=OutPoint.parse(mapped["ref"]), label=mapped.get("label"))

    def as_dict(self) -> dict[str, Any]:
        return _ref_and_label(self.TYPE, self.ref.format(), self.label)

    def reference(self) -> LabelRef:
        return LabelRef(kind=REF_KIND_INPUT, value=self.ref)


@dataclass(frozen=True)
class OutputLabel(Label):
    """Output label.

    `spendable` keeps the wire value as-is (None when the key was absent) so
    that re-export preserves omission; `is_spendable` applies the default.
    """

    TYPE: ClassVar[str] = "output"

    ref: OutPoint
    label: str | None = None
    spendable: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ref", _coerce_outpoint(self.ref))
        _check_optional_text(self.label, "output.label")
        if self.spendable is not None and not isinstance(self.spendable, bool):
            raise LabelContractError("output.spendable must be a boolean", code="FIELD_INVALID")

    @property
    def is_spendable(self) -> bool:
        return True if self.spendable is None else self.spendable

    @classmethod
    def _decode(cls, mapped: dict[str, Any]) -> "OutputLabel":
        spendable = decode_flexible_bool(mapped["spendable"]) if "spendable" in mapped else None
        return cls(
            ref=OutPoint.parse(mapped["ref"]),
            label=mapped.get("label"),
            spendable=spendable,
        )

    def as_dict(self) -> dict[str, Any]:
        payload = _ref_and_label(self.TYPE, self.ref.format(), self.label)
        if self.spendable is not None:
            payload["spendable"] = self.spendable
        return payload

    def reference(self) -> LabelRef:
        return LabelRef(kind=REF_KIND_OUTPUT, value=self.ref)


@dataclass(frozen=True)
class ExtendedPublicKeyLabel(Label):
    """Extended public key label; `label` is always written, as null if unset."""

    TYPE: ClassVar[str] = "xpub"

    ref: str
    label: str | None = None

    def __post_init__(self) -> None:
        _require_non_empty_string(self.ref, "xpub.ref")
        _check_optional_text(self.label, "xpub.label")

    @classmethod
    def _decode(cls, mapped: dict[str, Any]) -> "ExtendedPublicKeyLabel":
        return cls(ref=mapped["ref"], label=mapped.get("label"))

    def as_dict(self) -> dict[str, Any]:
        return {"type": self.TYPE, "ref": self.ref, "label": self.label}

    def reference(self) -> LabelRef:
        return LabelRef(kind=REF_KIND_XPUB, value=self.ref)


LABEL_TYPES: dict[str, type[Label]] = {
    record_cls.TYPE: record_cls
    for record_cls in (
        TransactionLabel,
        AddressLabel,
        PublicKeyLabel,
        InputLabel,
        OutputLabel,
        ExtendedPublicKeyLabel,
    )
}


def _as_mapping(payload: Any, field_name: str) -> dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise LabelContractError(f"{field_name} must be a JSON object", code="LABEL_INVALID")
    return dict(payload)


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value:
        raise LabelContractError(f"{field_name} must be a non-empty string", code="REF_INVALID")
    _require_utf8(value, field_name, code="REF_INVALID")
    return value


def _require_txid(value: Any, field_name: str) -> str:
    _require_non_empty_string(value, field_name)
    return normalize_txid(value)


def _check_optional_text(value: Any, field_name: str) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        raise LabelContractError(f"{field_name} must be a string or null", code="FIELD_INVALID")
    _require_utf8(value, field_name, code="FIELD_INVALID")


def _require_utf8(value: str, field_name: str, *, code: str) -> None:
    # JSON \u escapes can decode to lone surrogates, which have no UTF-8 form.
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise LabelContractError(f"{field_name} is not encodable as UTF-8: {exc.reason}", code=code) from exc


def _coerce_outpoint(value: Any) -> OutPoint:
    if isinstance(value, OutPoint):
        return value
    return OutPoint.parse(value)


def _ref_and_label(label_type: str, ref: str, label: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": label_type, "ref": ref}
    if label is not None:
        payload["label"] = label
    return payload


def _optional_key(value: Any) -> tuple[int, Any]:
    if value is None:
        return (0, "")
    return (1, value)
