from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml

from bip329.config import DEFAULT_PASSPHRASE_ENV, Bip329Profile, load_profile


PROFILE_PATH = Path(__file__).resolve().parents[2] / "config" / "profiles" / "local.yaml"


def test_shipped_profile_loads_with_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BIP329_LOG_LEVEL", raising=False)
    monkeypatch.delenv("BIP329_LOG_PATH", raising=False)
    profile = load_profile(PROFILE_PATH)
    assert profile.profile_id == "local"
    assert profile.encryption.passphrase_env == DEFAULT_PASSPHRASE_ENV
    assert profile.encryption.hex_output is False
    assert profile.logging.level == "INFO"
    assert profile.logging.log_path is None
    assert profile.log_paths() == []


def test_profile_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BIP329_LOG_LEVEL", "debug")
    monkeypatch.setenv("BIP329_LOG_PATH", str(tmp_path / "bip329.log"))
    profile = load_profile(PROFILE_PATH)
    assert profile.logging.level == "DEBUG"
    assert profile.logging.level_number() == logging.DEBUG
    assert profile.log_paths() == [str(tmp_path / "bip329.log")]


def test_missing_required_env_var_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BIP329_TEST_UNSET", raising=False)
    path = tmp_path / "profile.yaml"
    path.write_text("profile_id: ${BIP329_TEST_UNSET}\n", encoding="utf-8")
    with pytest.raises(ValueError) as exc:
        load_profile(path)
    assert "BIP329_TEST_UNSET" in str(exc.value)


def test_none_path_yields_defaults() -> None:
    assert load_profile(None) == Bip329Profile()


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_profile(path) == Bip329Profile()


def test_extra_fields_forbidden(tmp_path: Path) -> None:
    data = yaml.safe_load(PROFILE_PATH.read_text(encoding="utf-8"))
    data["encryption"]["cipher"] = "aes"
    path = tmp_path / "extra.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    with pytest.raises(ValueError) as exc:
        load_profile(path)
    assert "cipher" in str(exc.value)


def test_unknown_log_level_rejected(tmp_path: Path) -> None:
    path = tmp_path / "level.yaml"
    path.write_text("logging:\n  level: chatty\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_profile(path)


def test_invalid_yaml_and_non_mapping_rejected(tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("profile_id: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_profile(bad)
    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_profile(listing)
