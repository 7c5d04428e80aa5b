"""Passphrase-encrypted container for an exported label collection.

The container holds exactly the bytes produced by the cipher; no header or
framing of its own is added. The default cipher is age (scrypt passphrase
recipient) via `pyrage`, so `.age` files written by other BIP-329 tools
decrypt here and vice versa.
"""

from __future__ import annotations

import binascii
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Protocol

import pyrage
from pyrage import passphrase as age_passphrase

from .collection import Labels
from .errors import (
    DecryptedUtf8Error,
    DecryptFailedError,
    EncryptedExportError,
    EncryptedIOError,
    EncryptedParseError,
    EncryptFailedError,
    ExportError,
    InvalidHexError,
    ParseError,
)


logger = logging.getLogger("bip329.encryption")


class PassphraseCipher(Protocol):
    def encrypt(self, plaintext: bytes, passphrase: str) -> bytes: ...

    def decrypt(self, ciphertext: bytes, passphrase: str) -> bytes: ...


class AgeCipher:
    """age passphrase encryption backed by pyrage."""

    def encrypt(self, plaintext: bytes, passphrase: str) -> bytes:
        try:
            return age_passphrase.encrypt(plaintext, passphrase)
        except pyrage.EncryptError as exc:
            raise EncryptFailedError(f"age encryption failed: {exc}") from exc

    def decrypt(self, ciphertext: bytes, passphrase: str) -> bytes:
        try:
            return age_passphrase.decrypt(ciphertext, passphrase)
        except pyrage.DecryptError as exc:
            raise DecryptFailedError(f"age decryption failed: {exc}") from exc


DEFAULT_CIPHER: PassphraseCipher = AgeCipher()


@dataclass(frozen=True)
class EncryptedLabels:
    """Opaque ciphertext of a label collection's JSONL export."""

    data: bytes

    @classmethod
    def encrypt(
        cls,
        labels: Labels,
        passphrase: str,
        *,
        cipher: PassphraseCipher | None = None,
    ) -> "EncryptedLabels":
        try:
            plaintext = labels.export_text()
        except ExportError as exc:
            raise EncryptedExportError(f"unable to export labels: {exc}") from exc
        engine = cipher or DEFAULT_CIPHER
        ciphertext = engine.encrypt(plaintext.encode("utf-8"), passphrase)
        logger.debug("BIP329 labels encrypted count=%s bytes=%s", len(labels), len(ciphertext))
        return cls(data=bytes(ciphertext))

    def decrypt(self, passphrase: str, *, cipher: PassphraseCipher | None = None) -> Labels:
        engine = cipher or DEFAULT_CIPHER
        try:
            plaintext = engine.decrypt(self.data, passphrase)
        except DecryptFailedError:
            logger.warning("BIP329 labels decrypt failed bytes=%s", len(self.data))
            raise
        try:
            text = bytes(plaintext).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptedUtf8Error(f"decrypted payload is not valid UTF-8: {exc}") from exc
        try:
            labels = Labels.parse_text(text)
        except ParseError as exc:
            raise EncryptedParseError(f"decrypted payload is not BIP-329 JSONL: {exc}") from exc
        logger.debug("BIP329 labels decrypted count=%s", len(labels))
        return labels

    # ---------- transport ----------

    def to_hex(self) -> str:
        return self.data.hex()

    @classmethod
    def from_hex(cls, text: str) -> "EncryptedLabels":
        try:
            return cls(data=binascii.unhexlify(text.strip()))
        except (binascii.Error, ValueError) as exc:
            raise InvalidHexError(f"invalid hex encoded ciphertext: {exc}") from exc

    def to_bytes(self) -> bytes:
        return self.data

    @classmethod
    def read_from_file(cls, path: str | Path) -> "EncryptedLabels":
        path = Path(path)
        try:
            return cls(data=path.read_bytes())
        except OSError as exc:
            raise EncryptedIOError(f"unable to read {path}: {exc}") from exc

    def write_to_file(self, path: str | Path) -> None:
        path = Path(path)
        try:
            path.write_bytes(self.data)
        except OSError as exc:
            raise EncryptedIOError(f"unable to write {path}: {exc}") from exc

    @classmethod
    def read_hex_file(cls, path: str | Path) -> "EncryptedLabels":
        path = Path(path)
        try:
            text = path.read_text(encoding="ascii")
        except (OSError, UnicodeDecodeError) as exc:
            raise EncryptedIOError(f"unable to read {path}: {exc}") from exc
        return cls.from_hex(text)

    def write_hex_file(self, path: str | Path) -> None:
        path = Path(path)
        try:
            path.write_text(self.to_hex() + "\n", encoding="ascii")
        except OSError as exc:
            raise EncryptedIOError(f"unable to write {path}: {exc}") from exc
