"""
Payload Serialization for Signed Messages
=========================================

This module provides the serializers that turn values into the bytes that get
signed, a registry for looking them up by name, and the two-phase strategy
used to decode a verified payload.

Built-in serializers:
- json: orjson, compact and portable (default)
- pickle: any picklable Python object
- dill: extends pickle to lambdas, closures and locally defined classes

Only unserialize pickle or dill payloads whose signature has been verified;
the verifier never decodes a payload before checking its digest.
"""

import logging
import pickle
from typing import Any, Dict, List, Optional, Tuple, Type, Union

import dill

from . import json_utils
from .error_handling import ConfigError, DeserializationError
from .interfaces import Serializer

logger = logging.getLogger(__name__)


class JsonSerializer(Serializer):
    """JSON serializer backed by orjson."""

    def __init__(self, sort_keys: bool = False):
        self.sort_keys = sort_keys

    @property
    def name(self) -> str:
        return "json"

    def serialize(self, value: Any) -> bytes:
        return json_utils.dumps(value, sort_keys=self.sort_keys)

    def unserialize(self, data: bytes) -> Any:
        return json_utils.loads(data)


class PickleSerializer(Serializer):
    """Serializer for arbitrary picklable objects."""

    def __init__(self, protocol: int = pickle.DEFAULT_PROTOCOL):
        if not (0 <= protocol <= pickle.HIGHEST_PROTOCOL):
            raise ConfigError(
                f"pickle protocol must be between 0 and {pickle.HIGHEST_PROTOCOL}",
                {"protocol": protocol},
            )
        self.protocol = protocol

    @property
    def name(self) -> str:
        return "pickle"

    def serialize(self, value: Any) -> bytes:
        return pickle.dumps(value, protocol=self.protocol)

    def unserialize(self, data: bytes) -> Any:
        return pickle.loads(data)


class DillSerializer(PickleSerializer):
    """Serializer using dill, for objects the standard pickle module rejects."""

    @property
    def name(self) -> str:
        return "dill"

    def serialize(self, value: Any) -> bytes:
        return dill.dumps(value, protocol=self.protocol)

    def unserialize(self, data: bytes) -> Any:
        return dill.loads(data)


# =============================================================================
# Serializer Registry
# =============================================================================

_serializer_registry: Dict[str, Type[Serializer]] = {}
_builtin_serializers = {"json", "pickle", "dill"}


def _initialize_builtin_serializers():
    _serializer_registry["json"] = JsonSerializer
    _serializer_registry["pickle"] = PickleSerializer
    _serializer_registry["dill"] = DillSerializer


_initialize_builtin_serializers()


def register_serializer(
    name: str, serializer_class: Type[Serializer], force: bool = False
) -> None:
    """
    Register a custom serializer.

    Args:
        name: Unique name for the serializer (e.g., "msgpack")
        serializer_class: Class that implements the Serializer interface
        force: If True, overwrite existing registration

    Raises:
        ValueError: If name already registered and force=False
        ValueError: If serializer_class doesn't inherit from Serializer
    """
    if not isinstance(serializer_class, type):
        raise ValueError(
            f"serializer_class must be a class, got {type(serializer_class)}"
        )

    if not issubclass(serializer_class, Serializer):
        raise ValueError(
            f"Serializer class {serializer_class.__name__} must inherit from Serializer"
        )

    if name in _serializer_registry and not force:
        raise ValueError(
            f"Serializer '{name}' already registered. "
            f"Use force=True to overwrite or unregister_serializer() first."
        )

    _serializer_registry[name] = serializer_class
    logger.info(f"Registered serializer '{name}' ({serializer_class.__name__})")


def unregister_serializer(name: str) -> bool:
    """
    Unregister a serializer.

    Returns:
        True if the serializer was unregistered, False if not found
    """
    if name in _serializer_registry:
        del _serializer_registry[name]
        logger.info(f"Unregistered serializer '{name}'")
        return True

    logger.warning(f"Serializer '{name}' not found for unregistration")
    return False


def get_serializer(serializer: Union[str, Serializer], **options) -> Serializer:
    """
    Resolve a serializer by name, or pass an instance through.

    Args:
        serializer: Registered name or a Serializer instance
        **options: Constructor options when resolving by name

    Returns:
        Serializer instance

    Raises:
        ConfigError: If the name is not registered or options are rejected
    """
    if isinstance(serializer, Serializer):
        if options:
            raise ConfigError(
                f"Serializer options {sorted(options)} cannot be applied to an existing "
                f"{type(serializer).__name__} instance",
                {"serializer": serializer.name},
            )
        return serializer

    if not isinstance(serializer, str):
        raise ConfigError(
            f"Unsupported serializer setting: {serializer!r}",
            {"type": type(serializer).__name__},
        )

    if serializer not in _serializer_registry:
        available = sorted(_serializer_registry.keys())
        raise ConfigError(
            f"Unknown serializer: '{serializer}'. Available serializers: {available}"
        )

    try:
        return _serializer_registry[serializer](**options)
    except TypeError as e:
        raise ConfigError(
            f"Failed to create serializer '{serializer}' with options {options}: {e}"
        ) from e


def list_serializers() -> List[Dict[str, Any]]:
    """
    List all registered serializers.

    Returns:
        List of dictionaries with name, class and is_builtin keys,
        built-in serializers first
    """
    result = []
    for name in sorted(_builtin_serializers):
        if name in _serializer_registry:
            result.append(
                {
                    "name": name,
                    "class": _serializer_registry[name].__name__,
                    "is_builtin": True,
                }
            )
    for name in sorted(_serializer_registry.keys()):
        if name not in _builtin_serializers:
            result.append(
                {
                    "name": name,
                    "class": _serializer_registry[name].__name__,
                    "is_builtin": False,
                }
            )
    return result


# =============================================================================
# Two-Phase Deserialization
# =============================================================================


class DeserializationStrategy:
    """
    Decode a verified payload by trying each candidate form in turn.

    Older producers signed bare text rather than an encoded string, so the
    payload is tried both wrapped in double quotes ("quoted") and as-is
    ("raw"). A phase only succeeds if it yields an instance of the target type,
    when one is given. The quoted phase runs first only for targets that
    cannot hold a str; for no target, or a target accepting str (such as
    object), the raw phase runs first, otherwise JSON scalars such as 42
    would come back as the string "42".
    """

    QUOTED = "quoted"
    RAW = "raw"

    def __init__(self, serializer: Serializer):
        self.serializer = serializer

    @staticmethod
    def quoted_candidate(data: bytes) -> bytes:
        return b'"' + data + b'"'

    @staticmethod
    def raw_candidate(data: bytes) -> bytes:
        return data

    def phases(self, target: Optional[Union[type, Tuple[type, ...]]] = None) -> List[str]:
        if target is None or isinstance("", target):
            return [self.RAW, self.QUOTED]
        return [self.QUOTED, self.RAW]

    def candidate(self, phase: str, data: bytes) -> bytes:
        if phase == self.QUOTED:
            return self.quoted_candidate(data)
        if phase == self.RAW:
            return self.raw_candidate(data)
        raise ValueError(f"Unknown deserialization phase: {phase}")

    def try_phase(
        self,
        phase: str,
        data: bytes,
        target: Optional[Union[type, Tuple[type, ...]]] = None,
    ) -> Any:
        """
        Run a single phase.

        Raises:
            Exception: Whatever the serializer raises, or TypeError when the
                decoded value is not an instance of ``target``
        """
        value = self.serializer.unserialize(self.candidate(phase, data))
        if target is not None and not isinstance(value, target):
            raise TypeError(
                f"expected {_type_name(target)}, got {type(value).__name__}"
            )
        return value

    def run(
        self,
        data: bytes,
        target: Optional[Union[type, Tuple[type, ...]]] = None,
    ) -> Any:
        """
        Run the phases in order and return the first successful value.

        Raises:
            DeserializationError: If every phase fails; ``errors`` maps each
                phase name to its exception
        """
        errors: Dict[str, Exception] = {}
        for phase in self.phases(target):
            try:
                value = self.try_phase(phase, data, target)
            except Exception as e:
                errors[phase] = e
                continue
            logger.debug(f"Payload decoded by {phase} phase ({self.serializer.name})")
            return value

        raise DeserializationError(
            "failed to unserialize both quoted and raw data",
            errors,
            {"serializer": self.serializer.name},
        )


def _type_name(target: Union[type, Tuple[type, ...]]) -> str:
    if isinstance(target, tuple):
        return " or ".join(t.__name__ for t in target)
    return target.__name__
