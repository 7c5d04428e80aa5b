"""BIP-329 wallet label records, JSONL import/export and encrypted containers."""

from .booleans import decode_flexible_bool
from .collection import Labels
from .encryption import AgeCipher, EncryptedLabels, PassphraseCipher
from .errors import (
    Bip329Error,
    DecryptedUtf8Error,
    DecryptFailedError,
    EncryptedExportError,
    EncryptedIOError,
    EncryptedParseError,
    EncryptFailedError,
    EncryptionError,
    ExportError,
    InvalidBooleanError,
    InvalidHexError,
    InvalidOutPointFormat,
    InvalidOutputIndex,
    InvalidTxid,
    LabelContractError,
    LabelFileReadError,
    LabelFileWriteError,
    LabelLineError,
    LabelSerializeError,
    OutPointParseError,
    ParseError,
)
from .labels import (
    LABEL_TYPE_ORDER,
    LABEL_TYPES,
    AddressLabel,
    ExtendedPublicKeyLabel,
    InputLabel,
    Label,
    LabelRef,
    OutputLabel,
    PublicKeyLabel,
    TransactionLabel,
)
from .outpoint import OutPoint, normalize_txid

__all__ = [
    "LABEL_TYPE_ORDER",
    "LABEL_TYPES",
    "AddressLabel",
    "AgeCipher",
    "Bip329Error",
    "DecryptedUtf8Error",
    "DecryptFailedError",
    "EncryptedExportError",
    "EncryptedIOError",
    "EncryptedLabels",
    "EncryptedParseError",
    "EncryptFailedError",
    "EncryptionError",
    "ExportError",
    "ExtendedPublicKeyLabel",
    "InputLabel",
    "InvalidBooleanError",
    "InvalidHexError",
    "InvalidOutPointFormat",
    "InvalidOutputIndex",
    "InvalidTxid",
    "Label",
    "LabelContractError",
    "LabelFileReadError",
    "LabelFileWriteError",
    "LabelLineError",
    "LabelRef",
    "LabelSerializeError",
    "Labels",
    "OutPoint",
    "OutPointParseError",
    "OutputLabel",
    "ParseError",
    "PassphraseCipher",
    "PublicKeyLabel",
    "TransactionLabel",
    "decode_flexible_bool",
    "normalize_txid",
]
