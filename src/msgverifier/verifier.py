"""
Message Verifier
================

Generates and verifies messages signed to prevent tampering.

Useful for remember-me tokens, one-click unsubscribe links and similar cases
where a session store isn't suitable or available. A signed message has the
form::

    <base64(serialized value)>--<hex(hmac(secret, base64 string))>

Every collaborator (secret, keyed hash, serializer) is resolved when the
verifier is constructed and never changes afterwards, so one instance can be
shared by any number of threads.

Usage:
    from msgverifier import MessageVerifier

    verifier = MessageVerifier(secret=b"...32 bytes...", serializer="json")
    token = verifier.generate({"user_id": 42})
    data = verifier.verify(token)
"""

import base64
import binascii
import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple, Union

from .config import VerifierConfig
from .error_handling import (
    ConfigError,
    InvalidSignature,
    SerializationError,
    with_error_handling,
)
from .interfaces import KeyedHash, Serializer
from .security import (
    RECOMMENDED_SECRET_BYTES,
    check_secret_strength,
    coerce_secret,
    resolve_keyed_hash,
    secure_compare,
)
from .serialization import DeserializationStrategy, get_serializer

logger = logging.getLogger(__name__)

SEPARATOR = "--"


class MessageVerifier:
    """
    Sign values into tamper-evident strings and verify them back.

    Args:
        secret: Signing key (str secrets are UTF-8 encoded); required
        serializer: Serializer instance or registered name; required
        digest: hashlib algorithm name, hashlib constructor or KeyedHash;
            defaults to HMAC-SHA1
        min_secret_length: Warn when the secret is shorter than this

    Raises:
        ConfigError: If the secret or serializer is missing or invalid
    """

    __slots__ = ("_secret", "_serializer", "_keyed_hash", "_strategy")

    def __init__(
        self,
        secret: Optional[Union[str, bytes]],
        serializer: Optional[Union[str, Serializer]],
        digest: Optional[Union[str, KeyedHash, Any]] = None,
        min_secret_length: int = RECOMMENDED_SECRET_BYTES,
    ):
        self._serializer = get_serializer(serializer) if serializer is not None else None
        self._secret = coerce_secret(secret)
        self._strategy = (
            DeserializationStrategy(self._serializer)
            if self._serializer is not None
            else None
        )
        self.validate()
        self._keyed_hash = resolve_keyed_hash(digest)

        check_secret_strength(self._secret, min_secret_length)
        logger.debug(f"Message verifier ready: {self!r}")

    @classmethod
    def from_config(cls, config: VerifierConfig) -> "MessageVerifier":
        """Build a verifier from a VerifierConfig."""
        serializer = get_serializer(config.serializer, **config.serializer_options)
        return cls(
            secret=config.secret,
            serializer=serializer,
            digest=config.digest,
            min_secret_length=config.min_secret_length,
        )

    @property
    def serializer(self) -> Serializer:
        return self._serializer

    @property
    def keyed_hash(self) -> KeyedHash:
        return self._keyed_hash

    @property
    def digest_size(self) -> int:
        """Digest length in bytes; the hex digest is twice as long."""
        return self._keyed_hash.digest_size

    def __repr__(self) -> str:
        serializer = self._serializer.name if self._serializer else None
        return (
            f"MessageVerifier(digest={self._keyed_hash.name!r}, "
            f"serializer={serializer!r})"
        )

    def validate(self) -> None:
        """
        Check that the verifier is ready for use.

        Raises:
            ConfigError: If the serializer or secret is not set
        """
        if self._serializer is None:
            raise ConfigError("serializer not set")
        if not self._secret:
            raise ConfigError("secret not set")

    def is_valid(self) -> bool:
        """Return True if the verifier is properly configured."""
        try:
            self.validate()
        except ConfigError as e:
            logger.debug(f"Verifier is not valid: {e}")
            return False
        return True

    def generate(self, value: Any) -> str:
        """
        Sign a value.

        Args:
            value: Any value the serializer accepts

        Returns:
            Signed message ``<base64 data>--<hex digest>``

        Raises:
            ConfigError: If the verifier is misconfigured
            SerializationError: If the serializer rejects the value
        """
        self.validate()

        data = self._serialize(value)
        encoded = base64.b64encode(data).decode("ascii")
        return f"{encoded}{SEPARATOR}{self.digest_for(encoded)}"

    def digest_for(self, data: Union[str, bytes]) -> str:
        """
        Compute the hex digest of ``data`` under the verifier's secret.

        Raises:
            ConfigError: If no secret is set
        """
        if not self._secret:
            raise ConfigError("secret not set")

        if isinstance(data, str):
            data = data.encode("utf-8")
        return self._keyed_hash.hexdigest(self._secret, data)

    def verify(
        self,
        signed: str,
        target: Optional[Union[type, Tuple[type, ...]]] = None,
    ) -> Any:
        """
        Verify a signed message and return the value it carries.

        Args:
            signed: Message produced by generate()
            target: Optional type (or tuple of types) the value must have

        Returns:
            The original value

        Raises:
            ConfigError: If the verifier is misconfigured
            InvalidSignature: If the message is empty, malformed, tampered
                with or not canonical base64
            DeserializationError: If the verified payload cannot be decoded
        """
        self.validate()

        if not signed:
            raise InvalidSignature("empty message")
        if isinstance(signed, (bytes, bytearray)):
            try:
                signed = bytes(signed).decode("ascii")
            except UnicodeDecodeError as e:
                raise InvalidSignature("malformed") from e
        if not isinstance(signed, str) or not signed.isascii():
            raise InvalidSignature("malformed")

        parts = signed.split(SEPARATOR)
        if len(parts) != 2 or not all(parts):
            raise InvalidSignature("malformed", {"parts": len(parts)})

        data, digest = parts
        if not secure_compare(digest, self.digest_for(data)):
            raise InvalidSignature("digest mismatch")

        decoded = self._decode_base64(data)
        return self._strategy.run(decoded, target)

    @with_error_handling(SerializationError, {"operation": "generate"})
    def _serialize(self, value: Any) -> bytes:
        data = self._serializer.serialize(value)
        if isinstance(data, str):
            return data.encode("utf-8")
        if not isinstance(data, (bytes, bytearray)):
            raise SerializationError(
                f"Serializer {self._serializer.name} returned {type(data).__name__}, expected bytes",
                {"operation": "generate", "serializer": self._serializer.name},
            )
        return bytes(data)

    @staticmethod
    def _decode_base64(data: str) -> bytes:
        try:
            decoded = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidSignature("bad encoding") from e

        # Reject encodings with non-zero padding bits
        if base64.b64encode(decoded).decode("ascii") != data:
            raise InvalidSignature("bad encoding")
        return decoded


def create_message_verifier(
    secret: Optional[Union[str, bytes]] = None,
    serializer: Optional[Union[str, Serializer]] = None,
    digest: Optional[Union[str, KeyedHash, Any]] = None,
    config: Optional[VerifierConfig] = None,
) -> MessageVerifier:
    """
    Factory function to create a message verifier.

    Explicit arguments override the corresponding ``config`` fields. Without a
    config, the serializer defaults to JSON and the digest to HMAC-SHA1.

    Args:
        secret: Signing key
        serializer: Serializer instance or registered name
        digest: Hash algorithm name, hashlib constructor or KeyedHash
        config: Base configuration

    Returns:
        Configured MessageVerifier instance
    """
    config = config or VerifierConfig()

    overrides: Dict[str, Any] = {}
    if secret is not None:
        overrides["secret"] = secret
    if serializer is not None:
        overrides["serializer"] = serializer
        overrides["serializer_options"] = {}
    if digest is not None:
        overrides["digest"] = digest
    if overrides:
        config = replace(config, **overrides)

    return MessageVerifier.from_config(config)
