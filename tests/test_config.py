#!/usr/bin/env python3
"""
test_config.py - Tests for Flight Configuration

Run with:
    pytest tests/test_config.py -v
"""

import pytest

from automissions.common.config import DEFAULTS, ENV_VARS, FlightConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Make sure no OFFBOARD_* variables leak in from the shell."""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)


class TestFlightConfig:
    """Tests for FlightConfig."""

    def test_defaults(self):
        config = FlightConfig()
        assert config.takeoff_altitude_m == 1.0
        assert config.takeoff_speed_m_s == 0.25
        assert config.discovery_timeout_s == 3.0
        assert config.takeoff_timeout_s == 13.0
        assert config.poll_interval_s == 1.0
        assert config.settle_s == 2.0
        assert config.disarm_wait_s == 3.0
        assert config.health_max_polls == DEFAULTS["health_max_polls"]

    def test_from_env_without_variables(self):
        assert FlightConfig.from_env() == FlightConfig()

    def test_from_env_reads_variables(self, monkeypatch):
        monkeypatch.setenv("OFFBOARD_TAKEOFF_ALTITUDE", "2.5")
        monkeypatch.setenv("OFFBOARD_SETTLE", "1")
        monkeypatch.setenv("OFFBOARD_HEALTH_MAX_POLLS", "30")

        config = FlightConfig.from_env()

        assert config.takeoff_altitude_m == 2.5
        assert config.settle_s == 1.0
        assert config.health_max_polls == 30

    def test_unbounded_polls(self, monkeypatch):
        monkeypatch.setenv("OFFBOARD_GROUNDED_MAX_POLLS", "none")

        assert FlightConfig.from_env().grounded_max_polls is None

    @pytest.mark.parametrize("raw", ["abc", "0", "-3"])
    def test_invalid_poll_cap_falls_back(self, monkeypatch, raw):
        monkeypatch.setenv("OFFBOARD_HEALTH_MAX_POLLS", raw)

        assert FlightConfig.from_env().health_max_polls == DEFAULTS["health_max_polls"]

    def test_invalid_float_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv("OFFBOARD_TAKEOFF_SPEED", "fast")

        config = FlightConfig.from_env()

        assert config.takeoff_speed_m_s == 0.25
        assert "OFFBOARD_TAKEOFF_SPEED" in caplog.text

    def test_precedence(self, monkeypatch):
        """Field defaults < script defaults < environment < overrides."""
        defaults = {"takeoff_altitude_m": 1.5, "settle_s": 1.0}
        assert FlightConfig.from_env(defaults=defaults).takeoff_altitude_m == 1.5

        monkeypatch.setenv("OFFBOARD_TAKEOFF_ALTITUDE", "3")
        config = FlightConfig.from_env(defaults=defaults)
        assert config.takeoff_altitude_m == 3.0
        assert config.settle_s == 1.0

        config = FlightConfig.from_env(defaults=defaults, takeoff_altitude_m=4.0)
        assert config.takeoff_altitude_m == 4.0

    def test_string_representation(self):
        s = str(FlightConfig(takeoff_altitude_m=1.5))
        assert "1.5m" in s
        assert "0.25 m/s" in s
