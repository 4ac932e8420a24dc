"""Logging setup for the whole application."""

from __future__ import annotations

import logging
import os
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVELS = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

_TARGETS = (
    "om",
    "nix_rs",
    "omnix-health",
    "omnix-ci",
    "omnix-init",
    "omnix-hack",
)

ENV_VAR = "OMNIX_LOG"


class BareFormatter(logging.Formatter):
    """A formatter that drops everything but the log message."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def log_directives(level: str | None) -> list[str]:
    """Return the filter directives for a verbosity level.

    ``level`` is one of ``None`` (quiet), ``"error"``, ``"warn"``, ``"info"``,
    ``"debug"`` or ``"trace"``. Warnings and errors from everything are always
    allowed.
    """
    if level is None or level == "warn":
        return ["warn"]
    if level == "error":
        return ["error"]
    if level in ("info", "debug", "trace"):
        return ["warn", *(f"{target}={level}" for target in _TARGETS)]
    raise ValueError(f"Unknown log level: {level!r}")


def _parse_directive(directive: str) -> tuple[str | None, int]:
    target, sep, level = directive.strip().rpartition("=")
    if not sep:
        target, level = "", directive.strip()
    try:
        value = _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Invalid log directive: {directive!r}") from None
    return (target or None), value


def _env_directives() -> list[tuple[str | None, int]]:
    parsed = []
    for item in os.environ.get(ENV_VAR, "").split(","):
        if not item.strip():
            continue
        try:
            parsed.append(_parse_directive(item))
        except ValueError:
            continue
    return parsed


def setup_logging(level: str | None = "info", bare: bool = False) -> logging.Handler:
    """Send logs to stderr, filtered by ``OMNIX_LOG`` and the given verbosity.

    Returns the installed handler.
    """
    levels: dict[str | None, int] = {}
    for target, value in _env_directives():
        levels[target] = value
    for directive in log_directives(level):
        target, value = _parse_directive(directive)
        levels[target] = value

    root = logging.getLogger()
    for old in list(root.handlers):
        if getattr(old, "_omnix_handler", False):
            root.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler._omnix_handler = True  # type: ignore[attr-defined]
    if bare:
        handler.setFormatter(BareFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)

    root.setLevel(levels.get(None, logging.ERROR))
    for target, value in levels.items():
        if target is not None:
            logging.getLogger(target).setLevel(value)
    return handler