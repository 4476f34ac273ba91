"""
msgverifier - Tamper-evident message signing for stateless tokens.

This library signs arbitrary serializable values into compact strings that
can be handed to clients and later verified and decoded, without any
server-side session state. Typical uses are remember-me cookies and one-click
unsubscribe links.

Key Features:
- HMAC signatures (SHA1 by default, any hashlib algorithm)
- Constant-time digest verification
- Pluggable serializers (JSON via orjson, pickle, dill)
- Immutable, thread-safe verifier instances

Quick Start:
    >>> from msgverifier import MessageVerifier
    >>>
    >>> verifier = MessageVerifier(secret=b"s3cr3t-32-bytes-minimum-xxxxxxxx", serializer="json")
    >>>
    >>> # Sign some data
    >>> token = verifier.generate({"user_id": 42})
    >>>
    >>> # Verify it later
    >>> data = verifier.verify(token)
"""

from .config import VerifierConfig, create_verifier_config, load_config_from_env
from .error_handling import (
    ConfigError,
    DeserializationError,
    InvalidSignature,
    SerializationError,
    VerifierError,
)
from .interfaces import KeyedHash, Serializer
from .security import HmacHash, generate_secret, secure_compare
from .serialization import (
    DeserializationStrategy,
    DillSerializer,
    JsonSerializer,
    PickleSerializer,
    get_serializer,
    list_serializers,
    register_serializer,
    unregister_serializer,
)
from .verifier import MessageVerifier, create_message_verifier

__version__ = "0.1.0"

__all__ = [
    # Core classes
    "MessageVerifier",
    "create_message_verifier",
    # Configuration
    "VerifierConfig",
    "create_verifier_config",
    "load_config_from_env",
    # Capabilities
    "Serializer",
    "KeyedHash",
    "HmacHash",
    "JsonSerializer",
    "PickleSerializer",
    "DillSerializer",
    "DeserializationStrategy",
    "get_serializer",
    "list_serializers",
    "register_serializer",
    "unregister_serializer",
    # Helpers
    "secure_compare",
    "generate_secret",
    # Errors
    "VerifierError",
    "ConfigError",
    "InvalidSignature",
    "SerializationError",
    "DeserializationError",
    # Version info
    "__version__",
]
