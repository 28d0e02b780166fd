"""Liveness decorators for host functions.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from pulseguard.common.interfaces import ILivenessGate

from pulseguard.common.exceptions import LivenessError

logger = logging.getLogger(__name__)


def _resolve_gate(gate: ILivenessGate | str, args: tuple[Any, ...]) -> ILivenessGate:
    if isinstance(gate, str):
        # Attribute name - get from self
        if not args:
            msg = f"Cannot get client attribute '{gate}' without self"
            raise ValueError(msg)
        return getattr(args[0], gate)
    return gate


def requires_liveness(
    client: ILivenessGate | str,
    error_message: str = "Execution halted by liveness check",
    *,
    raise_exception: bool = True,
) -> Callable:
    """Decorator that runs the function only while ``client.poll()`` allows it.

    Args:
        client: SecurityClient instance or the name of an attribute on ``self``
            holding one
        error_message: Message to use when the poll verdict is halt
        raise_exception: Whether to raise LivenessError or return None

    Returns:
        Decorated function that polls once per call
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            gate = _resolve_gate(client, args)
            if not gate.poll():
                if raise_exception:
                    raise LivenessError(error_message)
                logger.warning("Liveness check failed: %s", error_message)
                return None
            return func(*args, **kwargs)

        return wrapper

    return decorator


def liveness_protected(
    get_client: Callable[[], ILivenessGate],
    error_message: str = "Execution halted by liveness check",
    *,
    raise_exception: bool = True,
) -> Callable:
    """Like requires_liveness, but looks the client up on every call.

    Args:
        get_client: Function that returns the SecurityClient
        error_message: Message to use when the poll verdict is halt
        raise_exception: Whether to raise LivenessError or return None
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not get_client().poll():
                if raise_exception:
                    raise LivenessError(error_message)
                logger.warning("Liveness check failed: %s", error_message)
                return None
            return func(*args, **kwargs)

        return wrapper

    return decorator
