"""Prerequisite checks."""

from __future__ import annotations

import shutil


def nix_installed() -> bool:
    """Return whether a ``nix`` executable is on the search path."""
    return shutil.which("nix") is not None