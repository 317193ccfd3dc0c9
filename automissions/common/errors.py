#!/usr/bin/env python3
"""
errors.py - Flight Failure Taxonomy

Every failure in an automission is terminal: the routine stops at the
first one and the example exits with status 1. Each exception records
the flight state it was raised in so the operator can tell where the
flight stopped.

Usage:
    from automissions.common.errors import FlightError

    try:
        await routine.run()
    except FlightError as e:
        logger.error(f"Flight aborted in {e.state}: {e}")
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from automissions.common.flight_routine import FlightState


class FlightError(Exception):
    """
    Base class for all flight failures.

    Attributes:
        state: FlightState in which the failure happened (may be None
            when raised outside a FlightRoutine).
    """

    def __init__(self, message: str, state: Optional["FlightState"] = None):
        super().__init__(message)
        self.state = state


class ConnectionFailed(FlightError):
    """Adding the connection to MAVSDK failed."""


class NoPeerFound(FlightError):
    """No autopilot was discovered before the discovery timeout."""


class HealthCheckNeverReady(FlightError):
    """The vehicle never reported all health checks OK."""


class ArmFailed(FlightError):
    """The arm command was rejected."""


class TakeoffFailed(FlightError):
    """The takeoff command was rejected."""


class TakeoffConfirmationTimedOut(FlightError):
    """The vehicle never reported being in the air after takeoff."""


class SequenceError(FlightError):
    """Base class for offboard setpoint sequence failures."""


class SequenceStartFailed(SequenceError):
    """Offboard mode could not be started."""


class SequenceStopFailed(SequenceError):
    """Offboard mode could not be stopped."""


class LandFailed(FlightError):
    """The land command was rejected."""


class LandingConfirmationTimedOut(FlightError):
    """The vehicle still reported being in the air after the landing wait."""
