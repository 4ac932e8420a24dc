"""Health reports: green, or red with optional details about the problem."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

D = TypeVar("D")


@dataclass(frozen=True, order=True)
class WithDetails:
    """Details regarding a failed report."""

    msg: str
    """A short message describing the problem."""
    suggestion: str
    """A suggestion for how to fix the problem."""


@dataclass(frozen=True, order=True)
class Report(Generic[D]):
    """A health report.

    A green report means everything is fine. A red report means something is
    wrong; ``details`` then holds what is known about the problem, or ``None``
    when only the binary indicator is kept. Green reports sort before red ones.
    """

    failed: bool = False
    details: D | None = None

    @classmethod
    def green(cls) -> Report[D]:
        """A report saying everything is fine."""
        return cls(failed=False, details=None)

    @classmethod
    def red(cls, details: D | None = None) -> Report[D]:
        """A report saying something is wrong."""
        return cls(failed=True, details=details)

    def is_green(self) -> bool:
        """Whether everything is fine."""
        return not self.failed

    def is_red(self) -> bool:
        """Whether something is wrong."""
        return not self.is_green()

    def without_details(self) -> Report[D]:
        """Return the same report with any problem details dropped."""
        return Report.green() if self.is_green() else Report.red(None)

    def get_red_details(self) -> D | None:
        """Return the problem details, if this report is red."""
        return None if self.is_green() else self.details