#!/usr/bin/env python3
"""
flight_routine.py - Linear Automission Flight Routine

Drives one complete automission:

    CONNECTING -> AWAITING_PEER -> AWAITING_HEALTH -> ARMING -> TAKING_OFF
    -> CONFIRMING_AIRBORNE -> RUNNING_SEQUENCE -> LANDING
    -> CONFIRMING_GROUNDED -> FINISHED

Any step may fail instead, which moves the routine to FAILED and raises
the matching FlightError. There is no recovery path and no retry. A
failed offboard sequence does not trigger a landing attempt.

Usage:
    from mavsdk import System
    from automissions.common import FlightConfig, FlightRoutine

    routine = FlightRoutine(System(), "udp://:14540", steps, FlightConfig())
    await routine.run()
"""

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Sequence

from mavsdk.action import ActionError
from mavsdk.telemetry import LandedState

from automissions.common.config import FlightConfig
from automissions.common.errors import (
    ArmFailed,
    ConnectionFailed,
    FlightError,
    HealthCheckNeverReady,
    LandFailed,
    LandingConfirmationTimedOut,
    NoPeerFound,
    TakeoffConfirmationTimedOut,
    TakeoffFailed,
)
from automissions.common.setpoint_sequencer import SequenceStep, run_sequence
from automissions.common.state_monitor import (
    MonitorOutcome,
    first_value,
    poll_until,
    wait_for_state,
)

if TYPE_CHECKING:
    from mavsdk import System

logger = logging.getLogger(__name__)


class FlightState(Enum):
    """States of the flight routine, in flight order."""

    CONNECTING = "connecting"
    AWAITING_PEER = "awaiting_peer"
    AWAITING_HEALTH = "awaiting_health"
    ARMING = "arming"
    TAKING_OFF = "taking_off"
    CONFIRMING_AIRBORNE = "confirming_airborne"
    RUNNING_SEQUENCE = "running_sequence"
    LANDING = "landing"
    CONFIRMING_GROUNDED = "confirming_grounded"
    FINISHED = "finished"
    FAILED = "failed"


TERMINAL_STATES = {FlightState.FINISHED, FlightState.FAILED}


class FlightRoutine:
    """
    Runs connect, takeoff, offboard sequence and landing on one vehicle.

    The MAVSDK plugins (action, offboard, telemetry) are taken from the
    System passed in; nothing is shared between routines.

    Attributes:
        state: Current FlightState.
        history: Every state entered, in order.
    """

    def __init__(
        self,
        drone: "System",
        connection_url: str,
        steps: Sequence[SequenceStep],
        config: Optional[FlightConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize the routine.

        Args:
            drone: MAVSDK System, not yet connected.
            connection_url: Connection URL passed verbatim to MAVSDK.
            steps: Flight script for the offboard sequence.
            config: Flight tunables. Uses defaults if None.
            sleep: Sleep coroutine, replaceable for tests.

        Raises:
            ValueError: If the flight script has no steps.
        """
        if not steps:
            raise ValueError("flight script has no steps")
        self._drone = drone
        self.connection_url = connection_url
        self.steps = list(steps)
        self.config = config or FlightConfig()
        self._sleep = sleep
        self.state = FlightState.CONNECTING
        self.history: List[FlightState] = [FlightState.CONNECTING]

    @property
    def done(self) -> bool:
        """Whether the routine reached FINISHED or FAILED."""
        return self.state in TERMINAL_STATES

    def _enter(self, state: FlightState) -> None:
        logger.debug(f"  State: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    async def run(self) -> None:
        """
        Fly the whole automission.

        Raises:
            FlightError: On the first failure; state is FAILED afterwards.
                Any other exception also leaves the routine in FAILED and
                is re-raised unchanged.
        """
        if len(self.history) > 1:
            raise RuntimeError("FlightRoutine can only run once")

        try:
            await self._connect()
            self._enter(FlightState.AWAITING_PEER)
            await self._await_peer()
            self._enter(FlightState.AWAITING_HEALTH)
            await self._await_health()
            self._enter(FlightState.ARMING)
            await self._arm()
            self._enter(FlightState.TAKING_OFF)
            await self._takeoff()
            self._enter(FlightState.CONFIRMING_AIRBORNE)
            await self._confirm_airborne()
            self._enter(FlightState.RUNNING_SEQUENCE)
            await run_sequence(
                self._drone.offboard,
                self.steps,
                settle_s=self.config.settle_s,
                sleep=self._sleep,
            )
            self._enter(FlightState.LANDING)
            await self._land()
            self._enter(FlightState.CONFIRMING_GROUNDED)
            await self._confirm_grounded()
        except FlightError as e:
            if e.state is None:
                e.state = self.state
            self._enter(FlightState.FAILED)
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {self.state.value}: {e}")
            self._enter(FlightState.FAILED)
            raise

        self._enter(FlightState.FINISHED)
        logger.info("Finished...")

    async def _connect(self) -> None:
        logger.info(f"Connecting to drone: {self.connection_url}")
        try:
            await self._drone.connect(system_address=self.connection_url)
        except Exception as e:
            logger.error(f"Connection failed: {e}")
            raise ConnectionFailed(f"Connection failed: {e}") from e

    async def _await_peer(self) -> None:
        logger.info("Waiting to discover system...")
        outcome = await wait_for_state(
            self._drone.core.connection_state,
            lambda state: state.is_connected,
            timeout=self.config.discovery_timeout_s,
        )
        if outcome is MonitorOutcome.TIMED_OUT:
            logger.error("No autopilot found.")
            raise NoPeerFound(
                f"No autopilot found within {self.config.discovery_timeout_s}s"
            )
        logger.info("Discovered autopilot")

    async def _await_health(self) -> None:
        ready = await poll_until(
            lambda: first_value(self._drone.telemetry.health_all_ok()),
            lambda ok: ok,
            interval=self.config.poll_interval_s,
            max_polls=self.config.health_max_polls,
            sleep=self._sleep,
            on_wait=lambda _: logger.info("Waiting for system to be ready"),
        )
        if not ready:
            logger.error("System never became ready")
            raise HealthCheckNeverReady(
                f"Health checks not OK after {self.config.health_max_polls} polls"
            )
        logger.info("System is ready")

    async def _arm(self) -> None:
        try:
            await self._drone.action.arm()
        except ActionError as e:
            logger.error(f"Arming failed: {e}")
            raise ArmFailed(f"Arming failed: {e}") from e
        logger.info("Armed")

    async def _takeoff(self) -> None:
        action = self._drone.action
        try:
            await action.set_takeoff_altitude(self.config.takeoff_altitude_m)
        except ActionError as e:
            logger.error(f"Setting takeoff altitude failed: {e}")
            raise TakeoffFailed(f"Setting takeoff altitude failed: {e}") from e

        try:
            await action.set_current_speed(self.config.takeoff_speed_m_s)
        except ActionError as e:
            logger.warning(f"Setting climb speed failed, continuing: {e}")

        logger.info(f"Taking off to {self.config.takeoff_altitude_m}m...")
        try:
            await action.takeoff()
        except ActionError as e:
            logger.error(f"Takeoff failed: {e}")
            raise TakeoffFailed(f"Takeoff failed: {e}") from e

    async def _confirm_airborne(self) -> None:
        outcome = await wait_for_state(
            self._drone.telemetry.landed_state,
            lambda state: state == LandedState.IN_AIR,
            timeout=self.config.takeoff_timeout_s,
        )
        if outcome is MonitorOutcome.TIMED_OUT:
            logger.error("Takeoff timed out.")
            raise TakeoffConfirmationTimedOut(
                f"Not in air {self.config.takeoff_timeout_s}s after takeoff"
            )
        logger.info("Taking off has finished")

    async def _land(self) -> None:
        try:
            await self._drone.action.land()
        except ActionError as e:
            logger.error(f"Landing failed: {e}")
            raise LandFailed(f"Landing failed: {e}") from e

    async def _confirm_grounded(self) -> None:
        landed = await poll_until(
            lambda: first_value(self._drone.telemetry.in_air()),
            lambda in_air: not in_air,
            interval=self.config.poll_interval_s,
            max_polls=self.config.grounded_max_polls,
            sleep=self._sleep,
            on_wait=lambda _: logger.info("Vehicle is landing..."),
        )
        if not landed:
            logger.error("Vehicle still in air")
            raise LandingConfirmationTimedOut(
                f"Still in air after {self.config.grounded_max_polls} polls"
            )
        logger.info("Landed!")

        # Wait to ensure safety and auto-disarm
        await self._sleep(self.config.disarm_wait_s)


async def run_flight(
    connection_url: str,
    steps: Sequence[SequenceStep],
    config: Optional[FlightConfig] = None,
    title: str = "Offboard Velocity Control",
) -> bool:
    """
    Connect to a vehicle and fly one automission.

    Args:
        connection_url: MAVSDK connection URL.
        steps: Flight script for the offboard sequence.
        config: Flight tunables. Uses defaults if None.
        title: Banner title for the log.

    Returns:
        bool: True if the automission finished, False on any failure.
    """
    from mavsdk import System

    config = config or FlightConfig()

    logger.info("=" * 50)
    logger.info(title)
    logger.info("=" * 50)
    logger.info(f"  Connection: {connection_url}")
    logger.info(f"  Config: {config}")
    logger.info(f"  Steps: {len(steps)}")
    logger.info("=" * 50)

    routine = FlightRoutine(System(), connection_url, steps, config)
    try:
        await routine.run()
    except FlightError as e:
        state = getattr(e, "state", None)
        logger.error(
            f"Automission failed in {state.value if state else 'unknown'}: {e}"
        )
        return False
    except Exception as e:
        logger.error(f"Error: {e}")
        return False

    logger.info("=" * 50)
    logger.info(f"{title} complete!")
    logger.info("=" * 50)
    return True
