from __future__ import annotations

import logging
import os
import sys


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


IS_LINUX: bool = sys.platform.startswith("linux")

# Webserver bind (NiceGUI host/port)
SERVER_HOST: str = os.getenv("FLEET_SERVER_IP", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("FLEET_SERVER_PORT", "8080"))

# Status polling cadence
POLL_INTERVAL_S: float = float(os.getenv("FLEET_POLL_INTERVAL_S", "5.0"))
# Per-device ping timeout used by the shell backend (seconds)
PING_TIMEOUT_S: int = int(os.getenv("FLEET_PING_TIMEOUT_S", "1"))

# Remote command attached to "Docker & ROS" sessions
EXTENDED_MODE_COMMAND: str = os.getenv(
    "FLEET_EXTENDED_COMMAND", "ros2_start -- bash -i -c byobu"
)

# Health check pipeline executed over ssh by the shell backend
SYSTEM_CHECK_COMMAND: str = (
    r"""bash -i -c 'ros2_start -- bash -i -c "RCUTILS_CONSOLE_OUTPUT_FORMAT=\"{message}\" """
    r"""ros2 launch system_health_check system_health_check.launch.py """
    r"""| sed -u \"s/^\[component_container_mt-[0-9]\+\][: ]*//g\""'"""
)

# Loopback target tab is only useful when the panel runs on the robot network host
SHOW_LOCAL_TARGET: bool = _env_flag("FLEET_SHOW_LOCAL_TARGET", "1" if IS_LINUX else "0")

# Web dashboards served by the robot
DASHBOARD_HOST: str = os.getenv(
    "FLEET_DASHBOARD_HOST", "localhost" if IS_LINUX else "192.168.9.100"
)
DASHBOARD_PORT: int = 8080
VIEWER_PORT: int = 8081


def _resolve_log_level() -> int:
    s = os.getenv("FLEET_LOG_LEVEL")
    if s:
        name = s.strip().upper()
        mapping = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return mapping.get(name, logging.WARNING)
    else:
        return logging.WARNING


LOG_LEVEL: int = _resolve_log_level()
