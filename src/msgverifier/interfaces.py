"""
Verifier Capability Interfaces
=============================

This module defines the two capabilities a MessageVerifier is built from.
Each interface is small and independent; implementations do not need to
share a base beyond the one they fulfil.
"""

from abc import ABC, abstractmethod
from typing import Any
import logging

logger = logging.getLogger(__name__)


class Serializer(ABC):
    """Interface for converting values to bytes and back."""

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the identifier for this serializer.

        Returns:
            String identifier (e.g., 'json')
        """
        pass

    @abstractmethod
    def serialize(self, value: Any) -> bytes:
        """
        Encode a value for signing.

        Args:
            value: The value to encode

        Returns:
            Encoded bytes

        Raises:
            Exception: Any error if the value cannot be encoded
        """
        pass

    @abstractmethod
    def unserialize(self, data: bytes) -> Any:
        """
        Decode bytes produced by serialize().

        Args:
            data: Encoded bytes

        Returns:
            The decoded value

        Raises:
            Exception: Any error if the bytes cannot be decoded
        """
        pass


class KeyedHash(ABC):
    """Interface for a secret-dependent digest over a byte string."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the identifier for this hash (e.g., 'hmac-sha1')."""
        pass

    @property
    @abstractmethod
    def digest_size(self) -> int:
        """Return the digest length in bytes."""
        pass

    @abstractmethod
    def new(self, secret: bytes) -> Any:
        """
        Start a keyed-hash computation.

        Args:
            secret: The signing key

        Returns:
            An object supporting ``update(bytes)`` and ``digest() -> bytes``
        """
        pass

    def hexdigest(self, secret: bytes, data: bytes) -> str:
        """Compute the lowercase hex digest of ``data`` under ``secret``."""
        mac = self.new(secret)
        mac.update(data)
        return mac.digest().hex()
