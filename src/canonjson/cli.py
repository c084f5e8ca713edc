"""Command-line interface for canonjson."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from canonjson.canonical import canonical_bytes, is_canonical, loads, sha256_hex
from canonjson.errors import sanitize_exception
from canonjson.signing import (
    generate_keypair,
    load_private_key,
    load_public_key,
    sign_value,
    verify_value,
)
from canonjson.types import SerializerOptions

_logger = logging.getLogger(__name__)

_stderr = Console(stderr=True, highlight=False)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=_stderr, show_path=False)],
        force=True,
    )


def _format_optional_dependency_error(exc: Exception) -> str:
    message = sanitize_exception(exc)
    if isinstance(exc, RuntimeError) and "cryptography" in message and "install" not in message:
        return f"{message} (install \"canonjson[crypto]\")"
    return message


def _fail(command: str, exc: Exception | str) -> None:
    message = exc if isinstance(exc, str) else _format_optional_dependency_error(exc)
    _stderr.print(f"[bold red]{command} failed:[/bold red] {escape(message)}", soft_wrap=True)


def _read_input(path: Path | None) -> bytes:
    if path is None or str(path) == "-":
        return sys.stdin.buffer.read()
    return path.read_bytes()


def _load_document(path: Path | None) -> object:
    raw = _read_input(path)
    _logger.debug("read %d input bytes", len(raw))
    return loads(raw)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="canonjson", add_help=True)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    canon_parser = subparsers.add_parser("canonicalize", help="Write the canonical form of a JSON document")
    canon_parser.add_argument("path", type=Path, nargs="?", help="Input JSON file (default: stdin)")
    canon_parser.add_argument("--output", type=Path, help="Output file path")
    canon_parser.add_argument("--nfc", action="store_true", help="NFC-normalize strings and keys")

    hash_parser = subparsers.add_parser("hash", help="Print SHA-256 of the canonical form")
    hash_parser.add_argument("path", type=Path, nargs="?", help="Input JSON file (default: stdin)")
    hash_parser.add_argument("--nfc", action="store_true", help="NFC-normalize strings and keys")

    check_parser = subparsers.add_parser("check", help="Check that a file is already canonical")
    check_parser.add_argument("path", type=Path, help="JSON file to check")
    check_parser.add_argument("--json", action="store_true", help="Output JSON")

    keygen_parser = subparsers.add_parser("keygen", help="Generate Ed25519 key pair")
    keygen_parser.add_argument("--private-key", type=Path, required=True, help="Path to private key PEM")
    keygen_parser.add_argument("--public-key", type=Path, required=True, help="Path to public key PEM")
    keygen_parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite existing key files",
    )

    sign_parser = subparsers.add_parser("sign", help="Sign the canonical form of a JSON document")
    sign_parser.add_argument("path", type=Path, help="Input JSON file")
    sign_parser.add_argument("--private-key", type=Path, required=True, help="Path to Ed25519 private key PEM")
    sign_parser.add_argument("--output", type=Path, help="Write the signature to this file")
    sign_parser.add_argument("--nfc", action="store_true", help="NFC-normalize strings and keys")

    verify_parser = subparsers.add_parser("verify", help="Verify a signature over a JSON document")
    verify_parser.add_argument("path", type=Path, help="Input JSON file")
    verify_parser.add_argument("--public-key", type=Path, required=True, help="Path to Ed25519 public key PEM")
    verify_parser.add_argument("--signature", required=True, help="Base64 signature")
    verify_parser.add_argument("--nfc", action="store_true", help="NFC-normalize strings and keys")
    verify_parser.add_argument("--json", action="store_true", help="Output JSON")

    return parser.parse_args(argv)


def _cmd_canonicalize(path: Path | None, *, output_path: Path | None, nfc: bool) -> int:
    try:
        value = _load_document(path)
        data = canonical_bytes(value, options=SerializerOptions(normalize_unicode=nfc))
    except (OSError, ValueError) as exc:
        _fail("canonicalize", exc)
        return 1
    if output_path is not None:
        try:
            output_path.write_bytes(data)
        except OSError as exc:
            _fail("canonicalize", exc)
            return 1
        return 0
    out = sys.stdout.buffer
    out.write(data)
    out.flush()
    return 0


def _cmd_hash(path: Path | None, *, nfc: bool) -> int:
    try:
        value = _load_document(path)
        digest = sha256_hex(value, options=SerializerOptions(normalize_unicode=nfc))
    except (OSError, ValueError) as exc:
        _fail("hash", exc)
        return 1
    print(digest)
    return 0


def _cmd_check(path: Path, json_output: bool) -> int:
    if not path.exists():
        _fail("check", "input file not found")
        return 1
    try:
        data = path.read_bytes()
    except OSError as exc:
        _fail("check", exc)
        return 1
    if data.endswith(b"\n"):
        data = data[:-1]
    ok = is_canonical(data)
    if json_output:
        print(json.dumps({"status": "ok" if ok else "failed"}))
    elif ok:
        print("canonical")
    else:
        print("not canonical", file=sys.stderr)
    return 0 if ok else 1


def _write_key(path: Path, data: bytes, *, overwrite: bool) -> None:
    """Write one PEM file; without ``overwrite`` an existing file is an error."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb" if overwrite else "xb") as handle:
        handle.write(data)


def _cmd_keygen(
    *,
    private_key_path: Path,
    public_key_path: Path,
    overwrite: bool,
) -> int:
    if not overwrite and public_key_path.exists():
        _fail("keygen", "key file already exists")
        return 1
    try:
        private_pem, public_pem = generate_keypair()
        _write_key(private_key_path, private_pem, overwrite=overwrite)
        _write_key(public_key_path, public_pem, overwrite=overwrite)
    except FileExistsError:
        _fail("keygen", "key file already exists")
        return 1
    except (OSError, RuntimeError) as exc:
        _fail("keygen", exc)
        return 1
    _logger.debug("wrote Ed25519 key pair")
    return 0


def _cmd_sign(path: Path, *, private_key_path: Path, output_path: Path | None, nfc: bool) -> int:
    try:
        private_key = load_private_key(private_key_path.read_bytes())
        value = _load_document(path)
        signature = sign_value(private_key, value, options=SerializerOptions(normalize_unicode=nfc))
        if output_path is not None:
            output_path.write_text(signature + "\n", encoding="utf-8")
    except (OSError, RuntimeError, ValueError) as exc:
        _fail("sign", exc)
        return 1
    if output_path is None:
        print(signature)
    return 0


def _cmd_verify(
    path: Path,
    *,
    public_key_path: Path,
    signature: str,
    nfc: bool,
    json_output: bool,
) -> int:
    try:
        public_key = load_public_key(public_key_path.read_bytes())
        value = _load_document(path)
        ok = verify_value(
            public_key, value, signature, options=SerializerOptions(normalize_unicode=nfc)
        )
    except (OSError, RuntimeError, ValueError) as exc:
        if json_output:
            print(json.dumps({"status": "failed", "error": _format_optional_dependency_error(exc)}))
        else:
            _fail("verify", exc)
        return 1
    if json_output:
        payload: dict[str, str] = {"status": "ok"} if ok else {"status": "failed", "error": "signature mismatch"}
        print(json.dumps(payload))
    elif ok:
        print("verification ok")
    else:
        _fail("verify", "signature mismatch")
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv or sys.argv[1:])
    _configure_logging(args.verbose)
    if args.command == "canonicalize":
        return _cmd_canonicalize(args.path, output_path=args.output, nfc=args.nfc)
    if args.command == "hash":
        return _cmd_hash(args.path, nfc=args.nfc)
    if args.command == "check":
        return _cmd_check(args.path, args.json)
    if args.command == "keygen":
        return _cmd_keygen(
            private_key_path=args.private_key,
            public_key_path=args.public_key,
            overwrite=args.overwrite,
        )
    if args.command == "sign":
        return _cmd_sign(
            args.path,
            private_key_path=args.private_key,
            output_path=args.output,
            nfc=args.nfc,
        )
    if args.command == "verify":
        return _cmd_verify(
            args.path,
            public_key_path=args.public_key,
            signature=args.signature,
            nfc=args.nfc,
            json_output=args.json,
        )
    print("unknown command", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
