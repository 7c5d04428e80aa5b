from __future__ import annotations

import json
from pathlib import Path

import pytest

from bip329 import cli
from bip329.collection import Labels
from bip329.errors import DecryptFailedError


DATA_DIR = Path(__file__).resolve().parents[1] / "data"


class _ReverseCipher:
    def encrypt(self, plaintext: bytes, passphrase: str) -> bytes:
        return passphrase.encode("utf-8") + b"|" + plaintext[::-1]

    def decrypt(self, ciphertext: bytes, passphrase: str) -> bytes:
        prefix = passphrase.encode("utf-8") + b"|"
        if not ciphertext.startswith(prefix):
            raise DecryptFailedError("passphrase mismatch")
        return ciphertext[len(prefix):][::-1]


@pytest.fixture(autouse=True)
def _fake_cipher(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("bip329.encryption.DEFAULT_CIPHER", _ReverseCipher())
    monkeypatch.setenv("BIP329_PASSPHRASE", "cli-secret")


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return int(exc.value.code)


def test_validate_reports_counts(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["validate", str(DATA_DIR / "test_vector.jsonl")]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["ok"] is True
    assert report["count"] == 7
    assert report["by_type"] == {"tx": 2, "addr": 1, "pubkey": 1, "input": 1, "output": 1, "xpub": 1}


def test_validate_reports_error_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "bad.jsonl"
    path.write_text('{"type":"bogus","ref":"x"}\n', encoding="utf-8")
    assert _run(["validate", str(path)]) == 1
    report = json.loads(capsys.readouterr().out)
    assert report == {"ok": False, "error_code": "LINE_PARSE_FAILED", "error": report["error"]}
    assert "line 1" in report["error"]


def test_export_normalizes_to_file(tmp_path: Path) -> None:
    out = tmp_path / "normalized.jsonl"
    assert _run(["export", str(DATA_DIR / "test_vector.jsonl"), "--out", str(out)]) == 0
    expected = Labels.parse_file(DATA_DIR / "test_vector.jsonl")
    assert out.read_text(encoding="utf-8") == expected.export_text()


def test_export_to_stdout_uses_line_terminators(capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(["export", str(DATA_DIR / "labels.jsonl")]) == 0
    out = capsys.readouterr().out
    assert out == (DATA_DIR / "labels.jsonl").read_text(encoding="utf-8")


@pytest.mark.parametrize("hex_flag", [[], ["--hex"]])
def test_encrypt_then_decrypt(tmp_path: Path, hex_flag: list[str]) -> None:
    encrypted = tmp_path / "labels.enc"
    decrypted = tmp_path / "labels.jsonl"
    assert _run(["encrypt", str(DATA_DIR / "labels.jsonl"), str(encrypted), *hex_flag]) == 0
    assert _run(["decrypt", str(encrypted), "--out", str(decrypted), *hex_flag]) == 0
    assert Labels.parse_file(decrypted) == Labels.parse_file(DATA_DIR / "labels.jsonl")


def test_decrypt_with_wrong_passphrase_reports_decrypt_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    encrypted = tmp_path / "labels.enc"
    assert _run(["encrypt", str(DATA_DIR / "labels.jsonl"), str(encrypted)]) == 0
    capsys.readouterr()
    monkeypatch.setenv("OTHER_PASSPHRASE", "another")
    assert _run(["decrypt", str(encrypted), "--passphrase-env", "OTHER_PASSPHRASE"]) == 1
    report = json.loads(capsys.readouterr().out)
    assert report["ok"] is False
    assert report["error_code"] == "DECRYPT_FAILED"
