from __future__ import annotations

import enum
import logging
import os
import subprocess
import sys

from fleet_commander.services.backend import BackendError

# Variables injected by bundled runtimes (AppImage, venvs) that break the host terminal
_SCRUBBED_ENV = ("PYTHONHOME", "PYTHONPATH", "LD_LIBRARY_PATH", "GIO_MODULE_DIR")


class WindowMode(enum.Enum):
    TAB = "tab"
    NEW_WINDOW = "window"


def applescript_quote(text: str) -> str:
    """Quote ``text`` as an AppleScript string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_terminal_argv(
    shell_command: str, mode: WindowMode, platform: str | None = None
) -> list[str]:
    """Return the argv that opens a host terminal running ``shell_command``."""
    platform = platform or sys.platform
    if platform == "win32":
        flag = "0" if mode is WindowMode.TAB else "-1"
        return ["wt", "-w", flag, "new-tab", "cmd", "/k", shell_command]
    if platform == "darwin":
        quoted = applescript_quote(shell_command)
        if mode is WindowMode.TAB:
            script = (
                'tell application "Terminal" to activate\n'
                'tell application "System Events" to keystroke "t" using command down\n'
                "delay 0.2\n"
                f'tell application "Terminal" to do script {quoted} in front window'
            )
        else:
            script = f'tell application "Terminal" to do script {quoted}'
        return ["osascript", "-e", script]
    if platform.startswith("linux"):
        flag = "--tab" if mode is WindowMode.TAB else "--window"
        return ["gnome-terminal", flag, "--", "bash", "-c", f"{shell_command}; exec bash"]
    raise BackendError(f"Unsupported OS: {platform}")


def _terminal_env() -> dict[str, str]:
    env = os.environ.copy()
    for name in _SCRUBBED_ENV:
        env.pop(name, None)
    return env


def launch_terminal(shell_command: str, mode: WindowMode) -> None:
    """Spawn a terminal and return without waiting for it."""
    argv = build_terminal_argv(shell_command, mode)
    try:
        subprocess.Popen(
            argv,
            env=_terminal_env(),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        raise BackendError(f"Failed to launch terminal ({argv[0]}): {e}") from e
    logging.debug("Terminal launched (%s): %s", mode.value, shell_command)
