"""
Standardized Error Handling for msgverifier
==========================================

This module provides the exception hierarchy raised by the message verifier
and a decorator that converts collaborator failures into it.
"""

import functools
import logging
from typing import Any, Callable, Dict, Optional, Type

logger = logging.getLogger(__name__)


class VerifierError(Exception):
    """Base exception for all message verifier errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.context = context or {}
        super().__init__(message)

        # Rejections are routine, keep them out of the error log
        context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
        logger.debug(
            f"Verifier error: {message}" + (f" ({context_str})" if context_str else "")
        )


class ConfigError(VerifierError):
    """Raised when the verifier is missing a secret or serializer, or is misconfigured."""

    pass


class InvalidSignature(VerifierError):
    """Raised when a signed message is empty, malformed, tampered with or badly encoded."""

    def __init__(self, reason: str, context: Optional[Dict[str, Any]] = None):
        self.reason = reason
        super().__init__(f"Invalid signature - {reason}", context)


class SerializationError(VerifierError):
    """Raised when the serializer cannot encode a value for signing."""

    pass


class DeserializationError(VerifierError):
    """Raised when a verified payload cannot be decoded by any deserialization phase."""

    def __init__(
        self,
        message: str,
        errors: Optional[Dict[str, Exception]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.errors = errors or {}
        if self.errors:
            details = "; ".join(
                f"{phase}: {type(err).__name__}: {err}"
                for phase, err in self.errors.items()
            )
            message = f"{message} ({details})"
        super().__init__(message, context)


def with_error_handling(
    error_type: Type[VerifierError] = VerifierError,
    context: Optional[Dict[str, Any]] = None,
):
    """
    Decorator converting foreign exceptions into a VerifierError subclass.

    VerifierError instances pass through untouched; anything else is re-raised
    as ``error_type`` chained from the original exception.

    Args:
        error_type: Type of VerifierError to raise
        context: Additional context to include in error
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except VerifierError:
                raise
            except Exception as e:
                error_context = (context or {}).copy()
                error_context.update(
                    {
                        "function": func.__name__,
                        "original_error": str(e),
                        "original_error_type": type(e).__name__,
                    }
                )
                raise error_type(
                    f"Error in {func.__name__}: {e}", context=error_context
                ) from e

        return wrapper

    return decorator
