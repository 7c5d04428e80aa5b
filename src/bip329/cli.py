"""CLI entrypoint for BIP-329 label files."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
from pathlib import Path
import sys

from .collection import Labels
from .config import Bip329Profile, load_profile
from .encryption import EncryptedLabels
from .errors import Bip329Error
from .logging_utils import configure_logging


logger = logging.getLogger("bip329.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bip329", description="BIP-329 wallet label tools")
    parser.add_argument("--profile", help="Path to bip329 profile YAML")
    parser.add_argument("--log-level", help="Override the profile log level (e.g. DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Parse a JSONL label file and report a summary")
    validate.add_argument("path", help="Label file (JSONL)")

    export = sub.add_parser("export", help="Parse and re-export a label file in canonical form")
    export.add_argument("path", help="Label file (JSONL)")
    export.add_argument("--out", help="Output path (defaults to stdout)")

    encrypt = sub.add_parser("encrypt", help="Encrypt a label file with a passphrase")
    encrypt.add_argument("path", help="Label file (JSONL)")
    encrypt.add_argument("out", help="Encrypted output path")
    encrypt.add_argument("--hex", action="store_true", help="Write hex text instead of raw bytes")
    encrypt.add_argument("--passphrase-env", help="Environment variable holding the passphrase")

    decrypt = sub.add_parser("decrypt", help="Decrypt an encrypted label file")
    decrypt.add_argument("path", help="Encrypted input path")
    decrypt.add_argument("--out", help="JSONL output path (defaults to stdout)")
    decrypt.add_argument("--hex", action="store_true", help="Input is hex text instead of raw bytes")
    decrypt.add_argument("--passphrase-env", help="Environment variable holding the passphrase")
    return parser


def _resolve_passphrase(args: argparse.Namespace, profile: Bip329Profile) -> str:
    env_name = args.passphrase_env or profile.encryption.passphrase_env
    value = os.getenv(env_name, "")
    if value:
        return value
    if not sys.stdin.isatty():
        raise SystemExit(f"passphrase not provided: set {env_name}")
    return getpass.getpass("Passphrase: ")


def _cmd_validate(args: argparse.Namespace, profile: Bip329Profile) -> int:
    labels = Labels.parse_file(args.path)
    report = {"ok": True, "count": len(labels), "by_type": labels.counts_by_type()}
    print(json.dumps(report, sort_keys=True))
    return 0


def _cmd_export(args: argparse.Namespace, profile: Bip329Profile) -> int:
    labels = Labels.parse_file(args.path)
    if args.out:
        labels.export_to_file(args.out)
        logger.info("BIP329 export wrote %s labels to %s", len(labels), args.out)
    else:
        labels.export_to_writer(sys.stdout)
    return 0


def _cmd_encrypt(args: argparse.Namespace, profile: Bip329Profile) -> int:
    labels = Labels.parse_file(args.path)
    encrypted = EncryptedLabels.encrypt(labels, _resolve_passphrase(args, profile))
    out = Path(args.out)
    if args.hex or profile.encryption.hex_output:
        encrypted.write_hex_file(out)
    else:
        encrypted.write_to_file(out)
    logger.info("BIP329 encrypt wrote %s labels to %s", len(labels), out)
    return 0


def _cmd_decrypt(args: argparse.Namespace, profile: Bip329Profile) -> int:
    path = Path(args.path)
    if args.hex or profile.encryption.hex_output:
        encrypted = EncryptedLabels.read_hex_file(path)
    else:
        encrypted = EncryptedLabels.read_from_file(path)
    labels = encrypted.decrypt(_resolve_passphrase(args, profile))
    if args.out:
        labels.export_to_file(args.out)
        logger.info("BIP329 decrypt wrote %s labels to %s", len(labels), args.out)
    else:
        labels.export_to_writer(sys.stdout)
    return 0


_COMMANDS = {
    "validate": _cmd_validate,
    "export": _cmd_export,
    "encrypt": _cmd_encrypt,
    "decrypt": _cmd_decrypt,
}


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    profile = load_profile(Path(args.profile) if args.profile else None)
    level = profile.logging.level_number()
    if args.log_level:
        level = logging.getLevelName(args.log_level.upper())
        if not isinstance(level, int):
            raise SystemExit(f"unknown log level: {args.log_level}")
    configure_logging(level=level, log_paths=profile.log_paths())

    try:
        exit_code = _COMMANDS[args.command](args, profile)
    except Bip329Error as exc:
        logger.error("BIP329 %s failed: %s", args.command, exc)
        print(json.dumps({"ok": False, "error_code": exc.code, "error": exc.message}, sort_keys=True))
        exit_code = 1
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
