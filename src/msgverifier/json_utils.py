"""
High-Performance JSON Utilities
===============================

Thin wrappers around orjson used by the JSON serializer.

orjson works in bytes end to end, which is what gets base64 encoded and
signed, and handles datetime, UUID and dataclass values natively.
"""

import logging
from typing import Any, Callable, Optional, Union

import orjson

logger = logging.getLogger(__name__)

JSON_BACKEND = "orjson"


def dumps(obj: Any, sort_keys: bool = False, default: Optional[Callable[[Any], Any]] = None) -> bytes:
    """
    Serialize object to JSON bytes using orjson.

    Args:
        obj: Object to serialize
        sort_keys: Whether to sort dictionary keys (for canonical output)
        default: Function to handle types orjson does not know

    Returns:
        UTF-8 encoded JSON
    """
    option = 0
    if sort_keys:
        option |= orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=option, default=default)


def loads(s: Union[str, bytes]) -> Any:
    """
    Deserialize JSON using orjson.

    Args:
        s: JSON string or bytes to deserialize

    Returns:
        Deserialized object
    """
    return orjson.loads(s)


def get_json_backend() -> str:
    """Get the active JSON backend name."""
    return JSON_BACKEND
