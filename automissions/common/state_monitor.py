#!/usr/bin/env python3
"""
state_monitor.py - Waiting on MAVSDK Telemetry Streams

MAVSDK-Python exposes every notification source as a method returning an
async generator: calling the method subscribes, closing the generator
unsubscribes. This module wraps the two ways the automissions wait on
those streams:

- wait_for_state(): one-shot wait for the first value matching a
  predicate, bounded by a timeout (autopilot discovery, takeoff
  confirmation).
- poll_until(): read a fresh value once per interval until a predicate
  holds, optionally capped (health check, landing confirmation).

The subscription opened by wait_for_state() is always closed before it
returns, whatever the outcome.

Usage:
    from mavsdk.telemetry import LandedState
    from automissions.common.state_monitor import MonitorOutcome, wait_for_state

    outcome = await wait_for_state(
        drone.telemetry.landed_state,
        lambda state: state == LandedState.IN_AIR,
        timeout=10.0,
    )
    if outcome is MonitorOutcome.TIMED_OUT:
        ...
"""

import asyncio
import logging
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class MonitorOutcome(Enum):
    """Result of a wait_for_state() call."""

    RESOLVED = "resolved"
    TIMED_OUT = "timed_out"


async def _release(stream: AsyncIterator[Any]) -> None:
    """Close a telemetry stream, ending its subscription."""
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


async def wait_for_state(
    source: Callable[[], AsyncIterator[Any]],
    predicate: Callable[[Any], bool],
    timeout: float,
) -> MonitorOutcome:
    """
    Wait until a notification stream emits a value matching a predicate.

    Subscribes once by calling ``source``. The first matching value
    resolves the wait; the timeout and the match race inside a single
    asyncio.wait_for() so only one of them can produce the outcome. A
    stream that ends without a match counts as timed out because no
    further notification can arrive.

    Args:
        source: Callable opening the stream, e.g. drone.telemetry.landed_state.
        predicate: Selects the terminal value.
        timeout: Maximum wait in seconds.

    Returns:
        MonitorOutcome: RESOLVED on a match, TIMED_OUT otherwise.

    Raises:
        ValueError: If timeout is not positive.
    """
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")

    stream = source()

    async def _first_match() -> bool:
        async for value in stream:
            if predicate(value):
                logger.debug(f"  Matched state: {value}")
                return True
        return False

    try:
        matched = await asyncio.wait_for(_first_match(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.debug(f"  No matching state within {timeout}s")
        return MonitorOutcome.TIMED_OUT
    finally:
        await _release(stream)

    if not matched:
        logger.debug("  Stream ended without a matching state")
        return MonitorOutcome.TIMED_OUT
    return MonitorOutcome.RESOLVED


async def first_value(stream: AsyncIterator[Any]) -> Any:
    """
    Read the current value of a telemetry stream.

    Args:
        stream: Freshly opened stream, e.g. drone.telemetry.in_air().

    Returns:
        The first value emitted.

    Raises:
        LookupError: If the stream ends before emitting anything.
    """
    try:
        async for value in stream:
            return value
    finally:
        await _release(stream)
    raise LookupError("telemetry stream ended without a value")


async def poll_until(
    read: Callable[[], Awaitable[Any]],
    predicate: Callable[[Any], bool],
    interval: float,
    max_polls: Optional[int] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_wait: Optional[Callable[[Any], None]] = None,
) -> bool:
    """
    Poll a value once per interval until a predicate holds.

    Args:
        read: Coroutine function returning the current value.
        predicate: Condition to wait for.
        interval: Seconds to sleep after each unsuccessful poll.
        max_polls: Give up after this many polls (None polls forever).
        sleep: Sleep coroutine, replaceable for tests.
        on_wait: Called with the value after each unsuccessful poll.

    Returns:
        bool: True once the predicate held, False if max_polls ran out.
    """
    polls = 0
    while True:
        value = await read()
        polls += 1
        if predicate(value):
            return True
        if max_polls is not None and polls >= max_polls:
            return False
        if on_wait is not None:
            on_wait(value)
        await sleep(interval)
