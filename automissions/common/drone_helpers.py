#!/usr/bin/env python3
"""
drone_helpers.py - Common Automission Plumbing

Provides shared functionality for the automission scripts:
- Logging setup
- Command line parsing (one connection URL argument)
- Script entry point

Usage:
    from automissions.common import automission_main

    def main():
        automission_main(
            description="Fly forward in offboard mode",
            steps=FORWARD_STEPS,
            takeoff_altitude_m=1.0,
        )
"""

import argparse
import asyncio
import logging
import sys
from typing import List, NoReturn, Optional, Sequence

from automissions.common.config import FlightConfig
from automissions.common.flight_routine import run_flight
from automissions.common.setpoint_sequencer import SequenceStep

# Module-level logger
logger = logging.getLogger(__name__)

CONNECTION_URL_HELP = (
    "Connection URL format should be :\n"
    " For TCP : tcp://[server_host][:server_port]\n"
    " For UDP : udp://[bind_host][:bind_port]\n"
    " For Serial : serial:///path/to/serial/dev[:baudrate]\n"
    "For example, to connect to the simulator use URL: udp://:14540\n"
)


def setup_logging(
    level: int = logging.INFO,
    format_string: str = "%(asctime)s [%(levelname)s] %(message)s",
    datefmt: str = "%H:%M:%S",
) -> logging.Logger:
    """
    Configure logging for automission scripts.

    Args:
        level: Logging level (default: INFO).
        format_string: Log message format.
        datefmt: Date format string.

    Returns:
        logging.Logger: Configured root logger.
    """
    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=datefmt,
    )
    return logging.getLogger()


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that prints the connection URL help and exits with 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n{CONNECTION_URL_HELP}")


def create_argument_parser(
    description: str,
    add_verbose: bool = True,
) -> argparse.ArgumentParser:
    """
    Create the standard automission argument parser.

    Args:
        description: Script description.
        add_verbose: Add --verbose flag.

    Returns:
        argparse.ArgumentParser: Configured parser.
    """
    parser = UsageArgumentParser(
        description=description,
        epilog=CONNECTION_URL_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "connection_url",
        help="MAVSDK connection URL, e.g. udp://:14540",
    )

    if add_verbose:
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable verbose logging",
        )

    return parser


def automission_main(
    description: str,
    steps: Sequence[SequenceStep],
    takeoff_altitude_m: float,
    argv: Optional[List[str]] = None,
) -> NoReturn:
    """
    Parse arguments, fly the automission and exit with its status.

    Args:
        description: Script description (also used as the log banner).
        steps: Flight script for the offboard sequence.
        takeoff_altitude_m: Default takeoff altitude for this script;
            OFFBOARD_TAKEOFF_ALTITUDE still overrides it.
        argv: Arguments to parse (default: sys.argv[1:]).
    """
    parser = create_argument_parser(description)
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = FlightConfig.from_env(
        defaults={"takeoff_altitude_m": takeoff_altitude_m}
    )

    try:
        success = asyncio.run(
            run_flight(args.connection_url, steps, config, title=description)
        )
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        success = False

    sys.exit(0 if success else 1)
