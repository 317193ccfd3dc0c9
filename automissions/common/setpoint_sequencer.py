#!/usr/bin/env python3
"""
setpoint_sequencer.py - Scripted Offboard Velocity Setpoints

Flies an ordered list of body-frame velocity setpoints, each held for a
fixed dwell time, inside one offboard session:

    hover (pre-start) -> start -> hover + settle -> steps... -> hover + settle -> stop

PX4 rejects an offboard start request unless a setpoint was already
streamed, hence the hover sent before start().

Usage:
    from automissions.common.setpoint_sequencer import (
        SequenceStep,
        VelocityCommand,
        run_sequence,
    )

    steps = [SequenceStep(VelocityCommand(forward_m_s=0.5), 4, "Fly forward")]
    await run_sequence(drone.offboard, steps)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from mavsdk.offboard import OffboardError, VelocityBodyYawspeed

from automissions.common.errors import SequenceStartFailed, SequenceStopFailed

logger = logging.getLogger(__name__)

# Hover hold before and after the scripted steps
DEFAULT_SETTLE_S = 2.0


@dataclass(frozen=True)
class VelocityCommand:
    """
    Velocity setpoint in body coordinates (forward-right-down).

    Attributes:
        forward_m_s: Forward velocity in m/s.
        right_m_s: Rightward velocity in m/s.
        down_m_s: Downward velocity in m/s (negative climbs).
        yawspeed_deg_s: Yaw rate in deg/s (positive turns clockwise).
    """

    forward_m_s: float = 0.0
    right_m_s: float = 0.0
    down_m_s: float = 0.0
    yawspeed_deg_s: float = 0.0

    @property
    def is_neutral(self) -> bool:
        """Whether this is the zero (hover) setpoint."""
        return self == HOVER

    def to_mavsdk(self) -> VelocityBodyYawspeed:
        """Convert to the MAVSDK offboard setpoint type."""
        return VelocityBodyYawspeed(
            self.forward_m_s,
            self.right_m_s,
            self.down_m_s,
            self.yawspeed_deg_s,
        )

    def __str__(self) -> str:
        return (
            f"fwd={self.forward_m_s:+.2f} right={self.right_m_s:+.2f} "
            f"down={self.down_m_s:+.2f} yaw={self.yawspeed_deg_s:+.1f}"
        )


HOVER = VelocityCommand()


@dataclass(frozen=True)
class SequenceStep:
    """
    One scripted setpoint and how long to hold it.

    Attributes:
        command: Setpoint to send.
        dwell_s: Whole seconds to hold it before the next step.
        label: Operator-facing description logged when the step starts.
    """

    command: VelocityCommand
    dwell_s: int
    label: str = ""

    def __post_init__(self):
        if self.dwell_s < 0:
            raise ValueError(f"dwell_s must be >= 0, got {self.dwell_s}")


async def _send(offboard, command: VelocityCommand) -> None:
    try:
        await offboard.set_velocity_body(command.to_mavsdk())
    except OffboardError as e:
        # The next setpoint replaces this one; only start and stop are fatal
        logger.warning(f"Setting velocity {command} failed, continuing: {e}")


async def run_sequence(
    offboard,
    steps: Sequence[SequenceStep],
    settle_s: float = DEFAULT_SETTLE_S,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """
    Run scripted velocity steps inside one offboard session.

    Sends len(steps) + 3 setpoints on success. stop() is only called
    once start() succeeded.

    Args:
        offboard: MAVSDK offboard plugin (drone.offboard).
        steps: Non-empty ordered flight script.
        settle_s: Hover hold before and after the steps.
        sleep: Sleep coroutine, replaceable for tests.

    Raises:
        ValueError: If steps is empty.
        SequenceStartFailed: If offboard mode could not be started.
        SequenceStopFailed: If offboard mode could not be stopped.
    """
    if not steps:
        raise ValueError("flight script has no steps")

    logger.info("Starting offboard velocity control in body coordinates")

    logger.debug("  Setting initial setpoint...")
    await _send(offboard, HOVER)

    try:
        await offboard.start()
    except OffboardError as e:
        logger.error(f"Offboard start failed: {e}")
        raise SequenceStartFailed(f"Offboard start failed: {e}") from e
    logger.info("Offboard started")

    logger.info("  Hover")
    await _send(offboard, HOVER)
    await sleep(settle_s)

    for i, step in enumerate(steps, 1):
        label = step.label or str(step.command)
        logger.info(f"  Step {i}/{len(steps)}: {label} ({step.dwell_s}s)")
        await _send(offboard, step.command)
        await sleep(step.dwell_s)

    logger.info("  Hover")
    await _send(offboard, HOVER)
    await sleep(settle_s)

    try:
        await offboard.stop()
    except OffboardError as e:
        logger.error(f"Offboard stop failed: {e}")
        raise SequenceStopFailed(f"Offboard stop failed: {e}") from e
    logger.info("Offboard stopped")
