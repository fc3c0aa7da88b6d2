"""
Result-or-fallback helper for external lookups.
"""
from typing import Awaitable, Callable, Optional, TypeVar
import asyncio
import logging

from tfgen.resilience.circuit_breaker import CircuitBreakerOpenError, get_circuit_breaker

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_with_fallback(
    service: str,
    func: Callable[[], Awaitable[T]],
    fallback: T,
    timeout: Optional[float] = None
) -> T:
    """
    Await `func()` through the service's circuit breaker.

    Any exception, a timeout, or an open breaker yields `fallback` instead.
    The failure is logged as a warning and never propagated.

    Args:
        service: Breaker name (e.g. "aws_regions")
        func: Zero-argument coroutine factory
        fallback: Value returned on failure
        timeout: Seconds before the call counts as failed (None = no limit)
    """
    breaker = get_circuit_breaker(service)

    async def guarded() -> T:
        if timeout is None:
            return await func()
        return await asyncio.wait_for(func(), timeout=timeout)

    try:
        return await breaker.call(guarded)
    except CircuitBreakerOpenError:
        logger.warning("%s: circuit open, using fallback", service)
    except asyncio.TimeoutError:
        logger.warning("%s: timed out after %ss, using fallback", service, timeout)
    except Exception as error:
        logger.warning("%s: %s, using fallback", service, error)
    return fallback
