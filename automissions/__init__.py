"""
PX4 Offboard Automissions

This package contains example flights demonstrating offboard velocity
control in body coordinates (forward-right-down) with MAVSDK.

Examples:
    offboard_forward.py         - Take off to 1.0m, fly forward, land
    offboard_omnidirectional.py - Take off to 1.5m, fly diagonal legs and
                                  quarter circles, land

Common Module:
    automissions/common/        - Shared flight machinery for all examples

Connection:
    Every example takes one MAVSDK connection URL:
    - TCP: tcp://[server_host][:server_port]
    - UDP: udp://[bind_host][:bind_port]
    - Serial: serial:///path/to/serial/dev[:baudrate]

Usage:
    # Simulator
    offboard-forward udp://:14540

    # Run as a module
    python3 -m automissions.offboard_omnidirectional udp://:14540
"""
