"""
Shared fixtures for msgverifier tests.
"""

import pytest

from msgverifier import MessageVerifier


SECRET = b"s3cr3t-32-bytes-minimum-xxxxxxxx"


@pytest.fixture
def secret() -> bytes:
    """Provide a 32-byte signing secret."""
    return SECRET


@pytest.fixture
def verifier(secret) -> MessageVerifier:
    """Provide a JSON verifier with the default HMAC-SHA1 digest."""
    return MessageVerifier(secret=secret, serializer="json")


@pytest.fixture
def pickle_verifier(secret) -> MessageVerifier:
    """Provide a pickle verifier with an HMAC-SHA256 digest."""
    return MessageVerifier(secret=secret, serializer="pickle", digest="sha256")
