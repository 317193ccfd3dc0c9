#!/usr/bin/env python3
"""
offboard_omnidirectional.py - Omnidirectional Velocity Control in Body Coordinates

Takes off to 1.5m and flies, 4 seconds per leg:
1. Four diagonal legs (forward/backward, left/right, up/down)
2. Four quarter circles while yawing at 22.5 deg/s, alternating up and down

Usage:
    offboard-omnidirectional udp://:14540
    python3 -m automissions.offboard_omnidirectional tcp://localhost:5760
"""

from automissions.common import SequenceStep, VelocityCommand, automission_main

TAKEOFF_ALTITUDE_M = 1.5

SPEED_M_S = 0.5
CLIMB_M_S = 0.25
YAW_RATE_DEG_S = 22.5
LEG_S = 4

QUARTER_CIRCLE_UP = SequenceStep(
    VelocityCommand(right_m_s=SPEED_M_S, down_m_s=-CLIMB_M_S, yawspeed_deg_s=YAW_RATE_DEG_S),
    LEG_S,
    "Fly quarter circle up",
)
QUARTER_CIRCLE_DOWN = SequenceStep(
    VelocityCommand(right_m_s=SPEED_M_S, down_m_s=CLIMB_M_S, yawspeed_deg_s=YAW_RATE_DEG_S),
    LEG_S,
    "Fly quarter circle down",
)

OMNIDIRECTIONAL_STEPS = [
    SequenceStep(
        VelocityCommand(forward_m_s=SPEED_M_S, right_m_s=SPEED_M_S, down_m_s=-CLIMB_M_S),
        LEG_S,
        "Fly forward, right, up",
    ),
    SequenceStep(
        VelocityCommand(forward_m_s=SPEED_M_S, right_m_s=-SPEED_M_S, down_m_s=CLIMB_M_S),
        LEG_S,
        "Fly forward, left, down",
    ),
    SequenceStep(
        VelocityCommand(forward_m_s=-SPEED_M_S, right_m_s=-SPEED_M_S, down_m_s=-CLIMB_M_S),
        LEG_S,
        "Fly backward, left, up",
    ),
    SequenceStep(
        VelocityCommand(forward_m_s=-SPEED_M_S, right_m_s=SPEED_M_S, down_m_s=CLIMB_M_S),
        LEG_S,
        "Fly backward, right, down",
    ),
    QUARTER_CIRCLE_UP,
    QUARTER_CIRCLE_DOWN,
    QUARTER_CIRCLE_UP,
    QUARTER_CIRCLE_DOWN,
]


def main():
    """Main entry point."""
    automission_main(
        description="Offboard velocity control: omnidirectional",
        steps=OMNIDIRECTIONAL_STEPS,
        takeoff_altitude_m=TAKEOFF_ALTITUDE_M,
    )


if __name__ == "__main__":
    main()
