"""
Keyed Hashing and Comparison Primitives
======================================

This module provides the keyed-hash implementations and the constant-time
comparison used to check message digests.
Uses HMAC-SHA1 by default, matching the 40-character digests of the wire format.

Features:
- HMAC over any hashlib algorithm
- Name-based resolution of hash algorithms
- Constant-time digest comparison
- Secret generation and strength checks

Security Model:
- Digests are compared with hmac.compare_digest, never with ==
- A length mismatch is rejected before the byte comparison
- Secrets are never logged
"""

import hmac
import secrets
import logging
from typing import Any, Callable, Optional, Union

from .error_handling import ConfigError
from .interfaces import KeyedHash

logger = logging.getLogger(__name__)

DEFAULT_DIGEST = "sha1"

# Minimum secret length recommended for the default hash
RECOMMENDED_SECRET_BYTES = 32


class HmacHash(KeyedHash):
    """
    HMAC keyed hash over a hashlib algorithm.

    Accepts either an algorithm name understood by hashlib.new() or a
    hashlib-style constructor such as hashlib.sha256.
    """

    def __init__(self, digestmod: Union[str, Callable[..., Any]] = DEFAULT_DIGEST):
        try:
            check = hmac.new(b"k", b"", digestmod=digestmod)
            check.digest()
            name = check.name
            digest_size = check.digest_size
        except (ValueError, TypeError, AttributeError) as e:
            raise ConfigError(
                f"Unknown hash algorithm: {digestmod}", {"digest": str(digestmod)}
            ) from e

        if not digest_size:
            raise ConfigError(
                f"Hash algorithm has no fixed digest size: {digestmod}",
                {"digest": str(digestmod)},
            )

        self._digestmod = digestmod
        self._name = name
        self._digest_size = digest_size
        logger.debug(f"Keyed hash configured: {self._name} ({self._digest_size} bytes)")

    @property
    def name(self) -> str:
        return self._name

    @property
    def digest_size(self) -> int:
        return self._digest_size

    def new(self, secret: bytes):
        return hmac.new(secret, digestmod=self._digestmod)

    def __repr__(self) -> str:
        return f"HmacHash({self._name!r})"


def resolve_keyed_hash(digest: Optional[Union[str, KeyedHash, Callable[..., Any]]] = None) -> KeyedHash:
    """
    Resolve a digest setting into a KeyedHash.

    Args:
        digest: None for the default (HMAC-SHA1), a hashlib algorithm name,
            a hashlib constructor, or a KeyedHash instance

    Returns:
        KeyedHash ready for use

    Raises:
        ConfigError: If the setting does not name a usable hash
    """
    if digest is None:
        return HmacHash(DEFAULT_DIGEST)
    if isinstance(digest, KeyedHash):
        return digest
    if isinstance(digest, str) or callable(digest):
        return HmacHash(digest)
    raise ConfigError(
        f"Unsupported digest setting: {digest!r}", {"type": type(digest).__name__}
    )


def secure_compare(a: Union[str, bytes], b: Union[str, bytes]) -> bool:
    """
    Compare two digests in constant time.

    The length check runs first; revealing a length mismatch is safe. Equal
    length inputs are compared over every byte without short-circuiting.

    Args:
        a: First digest (str or bytes)
        b: Second digest (str or bytes)

    Returns:
        True if the digests are equal, False otherwise
    """
    a_bytes = a.encode("utf-8") if isinstance(a, str) else bytes(a)
    b_bytes = b.encode("utf-8") if isinstance(b, str) else bytes(b)

    if len(a_bytes) != len(b_bytes):
        return False
    return hmac.compare_digest(a_bytes, b_bytes)


def generate_secret(nbytes: int = RECOMMENDED_SECRET_BYTES) -> bytes:
    """Generate a random signing secret."""
    if nbytes <= 0:
        raise ConfigError("Secret length must be positive", {"nbytes": nbytes})
    return secrets.token_bytes(nbytes)


def coerce_secret(secret: Optional[Union[str, bytes, bytearray]]) -> Optional[bytes]:
    """Normalize a secret to bytes; str secrets are UTF-8 encoded. Empty secrets become None."""
    if secret is None:
        return None
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    elif isinstance(secret, (bytes, bytearray, memoryview)):
        secret = bytes(secret)
    else:
        raise ConfigError(
            "Secret must be str or bytes", {"type": type(secret).__name__}
        )
    return secret or None


def check_secret_strength(secret: bytes, min_length: int = RECOMMENDED_SECRET_BYTES) -> bool:
    """
    Warn when a secret is shorter than recommended.

    Returns:
        True if the secret meets the minimum length, False otherwise
    """
    if len(secret) < min_length:
        logger.warning(
            f"Signing secret is {len(secret)} bytes, shorter than the recommended {min_length}"
        )
        return False
    return True
