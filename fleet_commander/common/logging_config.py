from __future__ import annotations

import logging
import os
import sys
import threading
import weakref

_LEVEL_COLORS = {
    "TRACE": "\033[32m",  # green
    "DEBUG": "\033[36m",  # cyan
    "INFO": "\033[37m",  # light gray
    "WARNING": "\033[33m",  # yellow
    "ERROR": "\033[31m",  # red
    "CRITICAL": "\033[41m",  # red background
}
_RESET = "\033[0m"
_DIM = "\033[2m"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

TRACE_ENABLED = str(os.getenv("FLEET_TRACE", "0")).lower() in ("1", "true", "yes", "on")

LEVEL_NAMES = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AnsiColorFormatter(logging.Formatter):
    """Compact ``HH:MM:SS LEVEL logger: msg`` lines with a colored level."""

    def __init__(self, colored: bool = True) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S"
        )
        self.colored = colored and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        if not self.colored:
            return base
        level = record.levelname.upper()
        color = _LEVEL_COLORS.get(level, "")
        ts, _, rest = base.partition(" ")
        if color:
            rest = rest.replace(level, f"{color}{level}{_RESET}", 1)
        return f"{_DIM}{ts}{_RESET} {rest}"


# ---- Activity log handler ----

_ui_log_targets: set[weakref.ref] = set()
_ui_lock = threading.Lock()

# Loggers whose INFO records belong in the activity log; others only from WARNING up
_APP_LOGGERS = ("root", "fleet_commander")


class AppRecordFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.WARNING:
            return True
        return record.name.split(".", 1)[0] in _APP_LOGGERS


class ActivityLogHandler(logging.Handler):
    """Mirror log records into the panel's ``ui.log`` widgets."""

    def __init__(self, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self.addFilter(AppRecordFilter())
        self.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        if not _ui_log_targets:
            return
        msg = self.format(record)
        stale: list[weakref.ref] = []
        with _ui_lock:
            for ref in list(_ui_log_targets):
                widget = ref()
                if widget is None:
                    stale.append(ref)
                    continue
                try:
                    widget.push(msg)
                except Exception:
                    # Widget belongs to a client that has gone away
                    stale.append(ref)
            for ref in stale:
                _ui_log_targets.discard(ref)


def attach_ui_log(log_widget) -> None:
    """Register a ``ui.log`` widget as a sink for log records."""
    try:
        ref = weakref.ref(log_widget)
    except TypeError:
        return
    with _ui_lock:
        _ui_log_targets.add(ref)


def detach_ui_log(log_widget) -> None:
    try:
        ref = weakref.ref(log_widget)
    except TypeError:
        return
    with _ui_lock:
        _ui_log_targets.discard(ref)


def resolve_level(
    level_name: str | None, verbose: int, quiet: bool, default: int
) -> int:
    """Explicit name beats -v/-q, which beat the environment default."""
    if level_name:
        if level_name.upper() == "TRACE":
            return TRACE
        return getattr(logging, level_name.upper())
    if verbose >= 3 or TRACE_ENABLED:
        return TRACE
    if verbose == 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    if quiet:
        return logging.WARNING
    return default


def configure_logging(
    level: int = logging.INFO, use_color: bool = True, add_ui_handler: bool = True
) -> logging.Logger:
    """
    Configure the root logger with a colored stderr handler and, optionally,
    the activity log handler. Safe to call more than once.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(level)
        console.setFormatter(AnsiColorFormatter(colored=use_color))
        logger.addHandler(console)

    if add_ui_handler and not any(isinstance(h, ActivityLogHandler) for h in logger.handlers):
        # The activity log always shows INFO and up, whatever the console level
        logger.addHandler(ActivityLogHandler(level=logging.INFO))
        if level > logging.INFO:
            logger.setLevel(logging.INFO)

    return logger
