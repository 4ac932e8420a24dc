"""Tests that a template scaffolds what it promises."""

from __future__ import annotations

import copy
import logging
import os
import subprocess
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from omnix.fs import find_paths

if TYPE_CHECKING:
    from omnix.template import FlakeTemplate

logger = logging.getLogger("om.init")


class PathAssertionError(AssertionError):
    """A path was present or absent against expectation."""


@dataclass
class PathAsserts:
    """Path assertions: a true value means the path must exist, false that it must not."""

    paths: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PathAsserts:
        """Build from a mapping of relative path to a boolean."""
        if not isinstance(data, Mapping):
            raise ValueError("path asserts must be a mapping")
        for path, must_exist in data.items():
            if not isinstance(path, str) or not isinstance(must_exist, bool):
                raise ValueError(f"invalid path assertion: {path!r}: {must_exist!r}")
        return cls(dict(data))

    def check(self, directory: str | os.PathLike) -> list[Path]:
        """Verify every assertion under ``directory``; return the paths checked."""
        root = Path(directory)
        checked = []
        for path, must_exist in self.paths.items():
            logger.debug("PathAssert %s; exist? (%s) in %s", path, must_exist, root)
            full = root / path
            if full.exists() != must_exist:
                verb = "exist" if must_exist else "not exist"
                raise PathAssertionError(
                    f"Expected path to {verb}: {path!r} (under {str(root)!r})"
                )
            checked.append(full)
        return checked


def _nix_build(directory: Path, attr: str) -> Path | None:
    result = subprocess.run(
        ["nix", "build", "--no-link", "--print-out-paths", f"{directory}#{attr}"],
        capture_output=True,
        text=True,
        check=True,
    )
    lines = result.stdout.split()
    return Path(lines[0]) if lines else None


@dataclass
class _Asserts:
    source: PathAsserts = field(default_factory=PathAsserts)
    packages: dict[str, PathAsserts] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> _Asserts:
        if not isinstance(data, Mapping):
            raise ValueError("asserts must be a mapping")
        packages = data.get("packages", {})
        if not isinstance(packages, Mapping):
            raise ValueError("asserts field `packages` must be a mapping")
        return cls(
            source=PathAsserts.from_dict(data.get("source", {})),
            packages={name: PathAsserts.from_dict(v) for name, v in packages.items()},
        )

    def check(self, directory: Path) -> None:
        self.source.check(directory)
        for attr, package in self.packages.items():
            out = _nix_build(directory, attr)
            if out is None:
                raise PathAssertionError(f"`nix build` of {attr!r} produced no output")
            package.check(out)


@dataclass
class OmInitTest:
    """A test for a single template."""

    params: dict[str, Any]
    """Parameter values to initialize the template with."""
    asserts: _Asserts
    systems: list[str] | None = None
    """Systems to run on; all when ``None``."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OmInitTest:
        """Build from a config mapping."""
        if not isinstance(data, Mapping):
            raise ValueError("test must be a mapping")
        params = data.get("params")
        if not isinstance(params, Mapping):
            raise ValueError("test field `params` must be a mapping")
        if "asserts" not in data:
            raise ValueError("missing field `asserts`")
        systems = data.get("systems")
        if systems is not None and not (
            isinstance(systems, list) and all(isinstance(s, str) for s in systems)
        ):
            raise ValueError("test field `systems` must be a list of strings")
        return cls(
            params=dict(params),
            asserts=_Asserts.from_dict(data["asserts"]),
            systems=list(systems) if systems is not None else None,
        )

    def can_run_on(self, system: str) -> bool:
        """Whether this test runs on the given system."""
        return self.systems is None or system in self.systems

    def run_test(self, url: str, template: FlakeTemplate) -> list[Path]:
        """Scaffold the template in a temporary directory and check the assertions.

        Returns the scaffolded paths, relative to the output directory.
        """
        template = copy.deepcopy(template)
        logger.info(
            "🧪 [%s] Running test params=%r systems-whitelist=%s",
            url,
            self.params,
            ",".join(self.systems) if self.systems is not None else "all",
        )
        with tempfile.TemporaryDirectory() as temp_dir:
            out_dir = Path(temp_dir) / "output"
            template.template.set_param_values(self.params)
            template.template.scaffold_at(out_dir)
            paths = find_paths(out_dir)
            logger.debug(
                "Template files (under %s): %s", out_dir, "; ".join(str(p) for p in paths)
            )
            self.asserts.check(out_dir)
        return paths