"""
Common utilities for the automission scripts.

This package provides the shared flight machinery used by every
automission, so each script only declares its flight script.

Modules:
    state_monitor: One-shot and polling waits on MAVSDK telemetry streams.
    setpoint_sequencer: Body-frame velocity setpoints with dwell times.
    flight_routine: Connect, take off, run the sequence and land.
    config: Flight tunables with environment overrides.
    errors: Flight failure taxonomy.
    drone_helpers: Logging, argument parsing and the script entry point.
"""

from .errors import (
    FlightError,
    ConnectionFailed,
    NoPeerFound,
    HealthCheckNeverReady,
    ArmFailed,
    TakeoffFailed,
    TakeoffConfirmationTimedOut,
    SequenceError,
    SequenceStartFailed,
    SequenceStopFailed,
    LandFailed,
    LandingConfirmationTimedOut,
)

from .config import FlightConfig

from .state_monitor import (
    MonitorOutcome,
    wait_for_state,
    first_value,
    poll_until,
)

from .setpoint_sequencer import (
    HOVER,
    VelocityCommand,
    SequenceStep,
    run_sequence,
)

from .flight_routine import (
    FlightState,
    FlightRoutine,
    run_flight,
)

from .drone_helpers import (
    CONNECTION_URL_HELP,
    setup_logging,
    create_argument_parser,
    automission_main,
)

__all__ = [
    # errors
    "FlightError",
    "ConnectionFailed",
    "NoPeerFound",
    "HealthCheckNeverReady",
    "ArmFailed",
    "TakeoffFailed",
    "TakeoffConfirmationTimedOut",
    "SequenceError",
    "SequenceStartFailed",
    "SequenceStopFailed",
    "LandFailed",
    "LandingConfirmationTimedOut",
    # config
    "FlightConfig",
    # state_monitor
    "MonitorOutcome",
    "wait_for_state",
    "first_value",
    "poll_until",
    # setpoint_sequencer
    "HOVER",
    "VelocityCommand",
    "SequenceStep",
    "run_sequence",
    # flight_routine
    "FlightState",
    "FlightRoutine",
    "run_flight",
    # drone_helpers
    "CONNECTION_URL_HELP",
    "setup_logging",
    "create_argument_parser",
    "automission_main",
]
