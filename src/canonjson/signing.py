"""Ed25519 signatures over canonical JSON bytes."""

from __future__ import annotations

import base64
import binascii
from typing import TYPE_CHECKING, Any

from .canonical import canonical_bytes
from .types import SerializerOptions

if TYPE_CHECKING:
    # Optional dependency. Keep the import in TYPE_CHECKING for better editor
    # support when installed, but don't require it for type-checking the repo.
    from cryptography.hazmat.primitives.asymmetric.ed25519 import (  # type: ignore[import-not-found]
        Ed25519PrivateKey,
        Ed25519PublicKey,
    )

_ed25519: Any | None = None
_serialization: Any | None = None
_invalid_signature: type[Exception] | None = None

try:
    from cryptography.exceptions import InvalidSignature as _InvalidSignature  # type: ignore[import-not-found]
    from cryptography.hazmat.primitives import serialization as _serialization_mod  # type: ignore[import-not-found]
    from cryptography.hazmat.primitives.asymmetric import ed25519 as _ed25519_mod  # type: ignore[import-not-found]

    _serialization = _serialization_mod
    _ed25519 = _ed25519_mod
    _invalid_signature = _InvalidSignature
except ModuleNotFoundError:
    pass

CRYPTO_AVAILABLE = _serialization is not None and _ed25519 is not None


def _crypto_modules() -> tuple[Any, Any]:
    """Return runtime crypto modules or raise with a friendly message."""
    if _serialization is None or _ed25519 is None:
        raise RuntimeError('cryptography is required for Ed25519 signing (install "canonjson[crypto]")')
    return _serialization, _ed25519


def _pem_pair(private_key: "Ed25519PrivateKey") -> tuple[bytes, bytes]:
    serialization, _ = _crypto_modules()
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


def generate_keypair() -> tuple[bytes, bytes]:
    """Return a fresh (private PEM, public PEM) pair.

    The private key is unencrypted PKCS#8, the public key SubjectPublicKeyInfo.
    """
    _, ed25519 = _crypto_modules()
    return _pem_pair(ed25519.Ed25519PrivateKey.generate())


def _load_pem(data: bytes, *, private: bool) -> Any:
    serialization, ed25519 = _crypto_modules()
    kind = "private" if private else "public"
    try:
        if private:
            key = serialization.load_pem_private_key(data, password=None)
        else:
            key = serialization.load_pem_public_key(data)
    except (TypeError, ValueError) as exc:
        # cryptography raises TypeError for password-protected keys.
        raise ValueError(f"cannot load {kind} key: {exc}") from exc
    expected = ed25519.Ed25519PrivateKey if private else ed25519.Ed25519PublicKey
    if not isinstance(key, expected):
        raise ValueError(f"{kind} key is not Ed25519")
    return key


def load_private_key(data: bytes) -> "Ed25519PrivateKey":
    """Load an unencrypted Ed25519 private key from PEM bytes."""
    return _load_pem(data, private=True)


def load_public_key(data: bytes) -> "Ed25519PublicKey":
    return _load_pem(data, private=False)


def sign_value(
    private_key: "Ed25519PrivateKey",
    value: Any,
    *,
    options: SerializerOptions | None = None,
) -> str:
    """Sign the canonical encoding of ``value``; returns a base64 signature."""
    _crypto_modules()
    signature = private_key.sign(canonical_bytes(value, options=options))
    return base64.b64encode(signature).decode("ascii")


def verify_value(
    public_key: "Ed25519PublicKey",
    value: Any,
    signature_b64: str,
    *,
    options: SerializerOptions | None = None,
) -> bool:
    """Return True if ``signature_b64`` signs the canonical encoding of ``value``.

    Values that cannot be canonicalized raise; only a bad signature is False.
    """
    _crypto_modules()
    payload = canonical_bytes(value, options=options)
    try:
        signature = base64.b64decode(signature_b64, validate=True)
    except (binascii.Error, ValueError):
        return False
    try:
        public_key.verify(signature, payload)
    except _invalid_signature:  # type: ignore[misc]
        return False
    return True
