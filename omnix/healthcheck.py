"""Health checks of a Nix install and the summary of their results."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from omnix.markdown import render_markdown
from omnix.report import WithDetails

logger = logging.getLogger("om.health")

_BOLD = "1"
_DIM = "2"
_RED = "31"
_GREEN = "32"
_YELLOW = "33"


def _style(text: str, *codes: str) -> str:
    if not sys.stderr.isatty():
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


@dataclass(frozen=True)
class CheckResult:
    """The result of a health check: green, or red with a problem description."""

    problem: WithDetails | None = None

    def is_green(self) -> bool:
        """Whether the check passed."""
        return self.problem is None


@dataclass
class Check:
    """A single health check and its result."""

    title: str
    """User-facing title, expected to be unique across all checks."""
    info: str
    """User-facing information used to conduct this check."""
    result: CheckResult
    required: bool
    """Failures are non-critical when this is false."""

    def log(self) -> None:
        """Log the result of this check, rendering its Markdown text."""
        base = Path.cwd()
        problem = self.result.problem
        if problem is None:
            logger.info("✅ %s", _style(self.title, _BOLD, _GREEN))
            logger.info("%s", _style(render_markdown(base, self.info), _DIM))
            return
        solution = render_markdown(
            base, f"**Problem**: {problem.msg}\\\n**Fix**:     {problem.suggestion}\n"
        )
        if self.required:
            level, icon, colour = logging.ERROR, "❌", _RED
        else:
            level, icon, colour = logging.WARNING, "🟧", _YELLOW
        logger.log(level, "%s %s", icon, _style(render_markdown(base, self.title), _BOLD, colour))
        logger.log(level, "%s", _style(render_markdown(base, self.info), _DIM))
        logger.log(level, "%s", solution)


@dataclass
class AllChecksResult:
    """Aggregate of check failures, for the summary at the end."""

    required_failed: bool = False
    optional_failed: bool = False

    def register_failure(self, required: bool) -> None:
        """Record a failed check."""
        if required:
            self.required_failed = True
        else:
            self.optional_failed = True

    def report(self) -> int:
        """Log a summary of the checks and return the exit code."""
        if self.required_failed:
            logger.error("%s", _style("❌ Some required checks failed", _BOLD, _RED))
            return 1
        if self.optional_failed:
            logger.warning(
                "%s, %s",
                _style("✅ Required checks passed", _BOLD, _GREEN),
                _style("but some non-required checks failed", _BOLD, _YELLOW),
            )
            return 0
        logger.info("%s", _style("✅ All checks passed", _BOLD, _GREEN))
        return 0


def report_exit_code(checks: Iterable[Check]) -> int:
    """Log every check and a summary, returning the process exit code."""
    outcome = AllChecksResult()
    for check in checks:
        check.log()
        if not check.result.is_green():
            outcome.register_failure(check.required)
    return outcome.report()