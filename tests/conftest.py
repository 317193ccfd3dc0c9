"""
Pytest configuration and shared fixtures for automission tests.

This module provides:
- Async test support via pytest-asyncio
- A fake MAVSDK System whose telemetry streams record subscriptions
- A recording sleep so dwell times can be checked without waiting
- Test markers configuration
"""

import asyncio
import os
from types import SimpleNamespace
from typing import Any, List, Optional, Sequence
from unittest.mock import AsyncMock

import pytest
from mavsdk.action import ActionError, ActionResult
from mavsdk.offboard import OffboardError, OffboardResult
from mavsdk.telemetry import LandedState

# SITL connection URL for flight tests, e.g. udp://:14540
MAVLINK_SITL_URL = os.environ.get("MAVLINK_SITL_URL")


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: mark test as slow running"
    )
    config.addinivalue_line(
        "markers",
        "flight: mark test as requiring actual flight (SITL)"
    )


@pytest.fixture(scope="session")
def event_loop_policy():
    """Set event loop policy for all tests."""
    return asyncio.DefaultEventLoopPolicy()


def make_action_error(origin: str = "arm()") -> ActionError:
    """Build the ActionError MAVSDK raises for a denied command."""
    result = ActionResult(ActionResult.Result.COMMAND_DENIED, "Command denied")
    return ActionError(result, origin)


def make_offboard_error(origin: str = "start()") -> OffboardError:
    """Build the OffboardError MAVSDK raises for a denied mode switch."""
    result = OffboardResult(OffboardResult.Result.COMMAND_DENIED, "Command denied")
    return OffboardError(result, origin)


class _Subscription:
    """Async iterator handed out by a NotificationSource."""

    def __init__(self, source: "NotificationSource", values: Sequence[Any]):
        self._source = source
        self._values = list(values)
        self._index = 0

    def __aiter__(self):
        return self

    async def __anext__(self):
        source = self._source
        if self._index >= len(self._values):
            if source.hang:
                await asyncio.Event().wait()
            raise StopAsyncIteration
        if source.delay:
            await asyncio.sleep(source.delay)
        value = self._values[self._index]
        self._index += 1
        source.emitted += 1
        return value

    async def aclose(self):
        self._source.closed += 1


class NotificationSource:
    """
    Stand-in for a MAVSDK stream method such as telemetry.landed_state.

    Each call opens a subscription that emits ``values`` in order, one
    every ``delay`` seconds, then either waits forever (``hang``) or ends.

    Attributes:
        subscribed: Number of subscriptions opened.
        closed: Number of aclose() calls received.
        emitted: Number of values delivered across subscriptions.
    """

    def __init__(self, values: Sequence[Any] = (), delay: float = 0.0, hang: bool = True):
        self.values = list(values)
        self.delay = delay
        self.hang = hang
        self.subscribed = 0
        self.closed = 0
        self.emitted = 0

    def _values_for_subscription(self) -> Sequence[Any]:
        return self.values

    def __call__(self) -> _Subscription:
        self.subscribed += 1
        return _Subscription(self, self._values_for_subscription())


class PolledValue(NotificationSource):
    """
    Stream method polled for its current value (health_all_ok, in_air).

    Every subscription emits the next scripted value; the last one
    repeats forever.
    """

    def _values_for_subscription(self) -> Sequence[Any]:
        return [self.values[min(self.subscribed - 1, len(self.values) - 1)]]


class FakeOffboard:
    """
    Stand-in for drone.offboard recording every call in ``events``.

    Events are ("set", (forward, right, down, yaw)), ("start",), ("stop",)
    and, when shared with a RecordingSleep, ("sleep", seconds).
    """

    def __init__(self, events: Optional[List[tuple]] = None):
        self.events = events if events is not None else []
        self.start_error: Optional[Exception] = None
        self.stop_error: Optional[Exception] = None
        self.set_error: Optional[Exception] = None

    async def set_velocity_body(self, velocity):
        self.events.append((
            "set",
            (
                velocity.forward_m_s,
                velocity.right_m_s,
                velocity.down_m_s,
                velocity.yawspeed_deg_s,
            ),
        ))
        if self.set_error is not None:
            raise self.set_error

    async def start(self):
        self.events.append(("start",))
        if self.start_error is not None:
            raise self.start_error

    async def stop(self):
        self.events.append(("stop",))
        if self.stop_error is not None:
            raise self.stop_error

    @property
    def sends(self) -> List[tuple]:
        return [event[1] for event in self.events if event[0] == "set"]

    def count(self, name: str) -> int:
        return sum(1 for event in self.events if event[0] == name)


class RecordingSleep:
    """Sleep replacement that records durations instead of waiting."""

    def __init__(self, events: Optional[List[tuple]] = None):
        self.events = events if events is not None else []
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.events.append(("sleep", seconds))
        await asyncio.sleep(0)

    @property
    def total(self) -> float:
        return sum(self.calls)


class FakeDrone:
    """
    Minimal MAVSDK System double for a flight that goes to plan.

    Tests tweak the attributes to script failures.
    """

    def __init__(self):
        self.events: List[tuple] = []
        self.connect = AsyncMock()
        self.core = SimpleNamespace(
            connection_state=NotificationSource([
                SimpleNamespace(is_connected=False),
                SimpleNamespace(is_connected=True),
            ]),
        )
        self.telemetry = SimpleNamespace(
            health_all_ok=PolledValue([False, False, True]),
            landed_state=NotificationSource([
                LandedState.ON_GROUND,
                LandedState.TAKING_OFF,
                LandedState.IN_AIR,
            ]),
            in_air=PolledValue([True, True, False]),
        )
        self.action = SimpleNamespace(
            arm=AsyncMock(),
            takeoff=AsyncMock(),
            land=AsyncMock(),
            set_takeoff_altitude=AsyncMock(),
            set_current_speed=AsyncMock(),
        )
        self.offboard = FakeOffboard(self.events)


@pytest.fixture
def fake_drone():
    """
    Fixture providing a fake MAVSDK System.

    Returns:
        FakeDrone: Drone double that completes a flight.
    """
    return FakeDrone()


@pytest.fixture
def recording_sleep(fake_drone):
    """
    Fixture providing a sleep that shares the fake drone's event log.

    Returns:
        RecordingSleep: Sleep replacement.
    """
    return RecordingSleep(fake_drone.events)
