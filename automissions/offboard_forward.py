#!/usr/bin/env python3
"""
offboard_forward.py - Orthogonal Velocity Control in Body Coordinates

Takes off to 1.0m, hovers, flies forward at 0.5 m/s for 4 seconds,
hovers again and lands.

Usage:
    offboard-forward udp://:14540
    python3 -m automissions.offboard_forward serial:///dev/ttyACM0:57600
"""

from automissions.common import SequenceStep, VelocityCommand, automission_main

TAKEOFF_ALTITUDE_M = 1.0

FORWARD_STEPS = [
    SequenceStep(VelocityCommand(forward_m_s=0.5), 4, "Fly forward"),
]


def main():
    """Main entry point."""
    automission_main(
        description="Offboard velocity control: fly forward",
        steps=FORWARD_STEPS,
        takeoff_altitude_m=TAKEOFF_ALTITUDE_M,
    )


if __name__ == "__main__":
    main()
