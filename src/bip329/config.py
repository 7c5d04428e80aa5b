"""Profile loader for the bip329 command line tools."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

DEFAULT_PASSPHRASE_ENV = "BIP329_PASSPHRASE"


class EncryptionSettings(BaseModel):
    passphrase_env: str = Field(
        DEFAULT_PASSPHRASE_ENV, description="Environment variable holding the passphrase"
    )
    hex_output: bool = Field(False, description="Write ciphertext as hex text instead of raw bytes")

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(BaseModel):
    level: str = Field("INFO", description="Root log level name")
    log_path: str | None = Field(None, description="Optional file receiving a copy of the log")

    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        name = str(value or "").strip().upper()
        if not isinstance(logging.getLevelName(name), int):
            raise ValueError(f"unknown log level: {value!r}")
        return name

    @field_validator("log_path")
    @classmethod
    def _blank_path_is_none(cls, value: str | None) -> str | None:
        if value is None or not str(value).strip():
            return None
        return value

    def level_number(self) -> int:
        return int(logging.getLevelName(self.level))


class Bip329Profile(BaseModel):
    profile_id: str = "local"
    encryption: EncryptionSettings = Field(default_factory=EncryptionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ConfigDict(extra="forbid")

    def log_paths(self) -> list[str]:
        return [self.logging.log_path] if self.logging.log_path else []


def _expand_str(value: str) -> str:
    def replacer(match: re.Match[str]) -> str:
        token = match.group(1)
        if ":-" in token:
            key, default = token.split(":-", 1)
            actual = os.getenv(key, "")
            return actual if actual.strip() else default
        actual = os.getenv(token, "")
        if not actual.strip():
            raise ValueError(f"missing environment variable: {token}")
        return actual

    return _VAR_PATTERN.sub(replacer, value)


def _expand_payload(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_str(value)
    if isinstance(value, list):
        return [_expand_payload(item) for item in value]
    if isinstance(value, dict):
        return {str(key): _expand_payload(item) for key, item in value.items()}
    return value


def load_profile(path: Path | None) -> Bip329Profile:
    """Load a YAML profile; `None` yields the built-in defaults."""
    if path is None:
        return Bip329Profile()
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML in profile {path}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"profile {path} must be a mapping")
    return Bip329Profile(**_expand_payload(data))
