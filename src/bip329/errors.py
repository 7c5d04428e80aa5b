"""Error taxonomy for BIP-329 label parsing, export and encryption."""

from __future__ import annotations


class Bip329Error(Exception):
    """Base error carrying a stable code and a human readable message."""

    default_code = "BIP329_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        self.code = str(code or "").strip() or self.default_code
        self.message = str(message or "").strip() or self.code
        super().__init__(f"{self.code}:{self.message}")


# -------------------------
# Label contract (decode) errors
# -------------------------


class LabelContractError(Bip329Error, ValueError):
    """Raised when a JSON object does not satisfy a label record contract."""

    default_code = "LABEL_INVALID"


class OutPointParseError(LabelContractError):
    """Raised when a `txid:index` reference cannot be parsed."""

    default_code = "OUTPOINT_INVALID"


class InvalidOutPointFormat(OutPointParseError):
    default_code = "OUTPOINT_FORMAT_INVALID"


class InvalidTxid(OutPointParseError):
    default_code = "TXID_INVALID"


class InvalidOutputIndex(OutPointParseError):
    default_code = "OUTPUT_INDEX_INVALID"


class InvalidBooleanError(LabelContractError):
    """Raised when a boolean field holds something other than true/false."""

    default_code = "BOOLEAN_INVALID"

    def __init__(self, literal: object) -> None:
        self.literal = literal
        super().__init__(f"invalid boolean literal: {literal!r}")


# -------------------------
# Collection parse / export errors
# -------------------------


class ParseError(Bip329Error):
    """Raised when a label collection cannot be parsed."""

    default_code = "PARSE_FAILED"


class LabelFileReadError(ParseError):
    default_code = "FILE_READ_FAILED"


class LabelLineError(ParseError):
    """A single JSONL line failed to decode; the cause is chained."""

    default_code = "LINE_PARSE_FAILED"

    def __init__(self, line_number: int, cause: Exception) -> None:
        self.line_number = int(line_number)
        self.cause = cause
        super().__init__(f"line {self.line_number}: {cause}")


class ExportError(Bip329Error):
    """Raised when a label collection cannot be exported."""

    default_code = "EXPORT_FAILED"


class LabelFileWriteError(ExportError):
    default_code = "FILE_WRITE_FAILED"


class LabelSerializeError(ExportError):
    default_code = "SERIALIZE_FAILED"


# -------------------------
# Encrypted container errors
# -------------------------


class EncryptionError(Bip329Error):
    """Raised by the encrypted label container."""

    default_code = "ENCRYPTION_FAILED"


class EncryptFailedError(EncryptionError):
    default_code = "ENCRYPT_FAILED"


class DecryptFailedError(EncryptionError):
    """Wrong passphrase or corrupt ciphertext."""

    default_code = "DECRYPT_FAILED"


class DecryptedUtf8Error(EncryptionError):
    default_code = "UTF8_INVALID"


class InvalidHexError(EncryptionError):
    default_code = "HEX_INVALID"


class EncryptedParseError(EncryptionError):
    default_code = "PARSE_FAILED"


class EncryptedExportError(EncryptionError):
    default_code = "EXPORT_FAILED"


class EncryptedIOError(EncryptionError):
    default_code = "IO_FAILED"
