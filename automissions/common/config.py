#!/usr/bin/env python3
"""
config.py - Automission Flight Configuration

Centralized tunables for the offboard automissions. Defaults mirror the
timing of the reference flights (1 s polls, 2 s settle holds, 3 s
discovery window) and can be overridden from the environment or from
code.

Usage:
    from automissions.common.config import FlightConfig

    config = FlightConfig.from_env(defaults={"takeoff_altitude_m": 1.5})

Environment Variables:
    OFFBOARD_TAKEOFF_ALTITUDE    - Takeoff altitude in meters (default: 1.0)
    OFFBOARD_TAKEOFF_SPEED       - Climb speed in m/s (default: 0.25)
    OFFBOARD_DISCOVERY_TIMEOUT   - Seconds to wait for an autopilot (default: 3)
    OFFBOARD_TAKEOFF_TIMEOUT     - Seconds to wait for IN_AIR (default: 13)
    OFFBOARD_POLL_INTERVAL       - Seconds between health/landing polls (default: 1)
    OFFBOARD_HEALTH_MAX_POLLS    - Health polls before giving up, "none" = forever
    OFFBOARD_GROUNDED_MAX_POLLS  - Landing polls before giving up, "none" = forever
    OFFBOARD_SETTLE              - Hover hold around the sequence in seconds (default: 2)
    OFFBOARD_DISARM_WAIT         - Wait after touchdown for auto-disarm (default: 3)
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


# Default configuration values
DEFAULTS = {
    "takeoff_altitude_m": 1.0,
    "takeoff_speed_m_s": 0.25,
    "discovery_timeout_s": 3.0,
    # 10 s wait followed by a 3 s re-check
    "takeoff_timeout_s": 13.0,
    "poll_interval_s": 1.0,
    "health_max_polls": 120,
    "grounded_max_polls": 120,
    "settle_s": 2.0,
    "disarm_wait_s": 3.0,
}

ENV_VARS = {
    "takeoff_altitude_m": "OFFBOARD_TAKEOFF_ALTITUDE",
    "takeoff_speed_m_s": "OFFBOARD_TAKEOFF_SPEED",
    "discovery_timeout_s": "OFFBOARD_DISCOVERY_TIMEOUT",
    "takeoff_timeout_s": "OFFBOARD_TAKEOFF_TIMEOUT",
    "poll_interval_s": "OFFBOARD_POLL_INTERVAL",
    "health_max_polls": "OFFBOARD_HEALTH_MAX_POLLS",
    "grounded_max_polls": "OFFBOARD_GROUNDED_MAX_POLLS",
    "settle_s": "OFFBOARD_SETTLE",
    "disarm_wait_s": "OFFBOARD_DISARM_WAIT",
}


def _parse_max_polls(value: str) -> Optional[int]:
    """Parse a poll cap; "none" or "unbounded" disables the cap."""
    if value.strip().lower() in ("none", "unbounded"):
        return None
    polls = int(value)
    if polls < 1:
        raise ValueError(f"poll cap must be at least 1, got {polls}")
    return polls


PARSERS: Dict[str, Callable[[str], Any]] = {
    "health_max_polls": _parse_max_polls,
    "grounded_max_polls": _parse_max_polls,
}


@dataclass
class FlightConfig:
    """
    Flight tunables for an automission.

    Attributes:
        takeoff_altitude_m: Takeoff altitude in meters.
        takeoff_speed_m_s: Speed requested for the climb in m/s.
        discovery_timeout_s: Seconds to wait for an autopilot to show up.
        takeoff_timeout_s: Seconds to wait for the IN_AIR landed state.
        poll_interval_s: Delay between health and landing polls.
        health_max_polls: Health polls before HealthCheckNeverReady
            (None polls forever).
        grounded_max_polls: Landing polls before LandingConfirmationTimedOut
            (None polls forever).
        settle_s: Hover hold before and after the scripted steps.
        disarm_wait_s: Wait after touchdown so the autopilot can disarm.
    """

    takeoff_altitude_m: float = DEFAULTS["takeoff_altitude_m"]
    takeoff_speed_m_s: float = DEFAULTS["takeoff_speed_m_s"]
    discovery_timeout_s: float = DEFAULTS["discovery_timeout_s"]
    takeoff_timeout_s: float = DEFAULTS["takeoff_timeout_s"]
    poll_interval_s: float = DEFAULTS["poll_interval_s"]
    health_max_polls: Optional[int] = DEFAULTS["health_max_polls"]
    grounded_max_polls: Optional[int] = DEFAULTS["grounded_max_polls"]
    settle_s: float = DEFAULTS["settle_s"]
    disarm_wait_s: float = DEFAULTS["disarm_wait_s"]

    @classmethod
    def from_env(
        cls,
        defaults: Optional[Dict[str, Any]] = None,
        **overrides: Any,
    ) -> "FlightConfig":
        """
        Create configuration from environment variables.

        Precedence, lowest first: field defaults, ``defaults``, environment,
        ``overrides``. Unparseable environment values are reported and
        skipped.

        Args:
            defaults: Per-script defaults (e.g. a higher takeoff altitude).
            **overrides: Field values that take precedence over the
                environment (e.g. takeoff_altitude_m=1.5).

        Returns:
            FlightConfig: Configuration populated from environment.
        """
        values = dict(defaults or {})
        for name, env_var in ENV_VARS.items():
            raw = os.environ.get(env_var)
            if raw is None:
                continue
            parse: Callable[[str], Any] = PARSERS.get(name, float)
            try:
                values[name] = parse(raw)
            except ValueError:
                logger.warning(
                    f"Ignoring {env_var}={raw!r}, keeping default"
                )

        values.update(overrides)
        return cls(**values)

    def __str__(self) -> str:
        """One-line summary for the run banner."""
        return (
            f"altitude {self.takeoff_altitude_m}m @ {self.takeoff_speed_m_s} m/s, "
            f"takeoff timeout {self.takeoff_timeout_s}s"
        )
