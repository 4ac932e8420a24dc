"""Templates from the ``om.templates`` configuration."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from omnix.action import ActionError
from omnix.asserts import OmInitTest
from omnix.config import OmConfigTree
from omnix.fs import copy_dir_all
from omnix.param import Param

logger = logging.getLogger("om.init")


class TemplateError(Exception):
    """A template could not be loaded or scaffolded."""


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"field `{key}` must be a string")
    return value


@dataclass
class NixTemplate:
    """A Nix flake template (``flake.templates.<name>``)."""

    path: Path
    description: str | None = None
    welcome_text: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NixTemplate:
        """Build from a config mapping."""
        if not isinstance(data, Mapping):
            raise ValueError("template must be a mapping")
        path = data.get("path")
        if not isinstance(path, (str, os.PathLike)):
            raise ValueError("missing field `path`")
        return cls(
            path=Path(path),
            description=_optional_str(data, "description"),
            welcome_text=_optional_str(data, "welcomeText"),
        )


@dataclass
class Template:
    """A template in the ``om.templates`` config."""

    template: NixTemplate
    params: list[Param]
    tests: dict[str, OmInitTest] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Template:
        """Build from a config mapping."""
        if not isinstance(data, Mapping):
            raise ValueError("template entry must be a mapping")
        if "template" not in data:
            raise ValueError("missing field `template`")
        params = data.get("params")
        if not isinstance(params, list):
            raise ValueError("field `params` must be a list")
        tests = data.get("tests", {})
        if not isinstance(tests, Mapping):
            raise ValueError("field `tests` must be a mapping")
        return cls(
            template=NixTemplate.from_dict(data["template"]),
            params=[Param.from_dict(p) for p in params],
            tests={name: OmInitTest.from_dict(tests[name]) for name in sorted(tests)},
        )

    def scaffold_at(self, out_dir: str | os.PathLike) -> Path:
        """Copy the template to ``out_dir`` and apply the parameters.

        Returns the canonical path of the output directory.
        """
        out = Path(out_dir)
        try:
            copy_dir_all(self.template.path, out)
        except OSError as exc:
            raise TemplateError(f"Unable to copy files: {exc}") from exc
        self.apply_actions(out)
        try:
            return out.resolve(strict=True)
        except OSError as exc:
            raise TemplateError(f"Unable to canonicalize path: {exc}") from exc

    def set_param_values(self, values: Mapping[str, Any]) -> None:
        """Set the values of the parameters named in ``values``."""
        for param in self.params:
            if param.name in values:
                param.set_value(values[param.name])

    def apply_actions(self, out_dir: str | os.PathLike) -> None:
        """Apply every parameter's action, pruning before replacing."""
        for param in sorted(self.params, key=lambda p: p.action):
            if param.action.has_value():
                logger.info("%s", param)
            try:
                param.action.apply(out_dir)
            except (ActionError, OSError) as exc:
                raise TemplateError(f"Unable to apply param {param.name}: {exc}") from exc


def _dimmed(text: str) -> str:
    if not sys.stdout.isatty():
        return text
    return f"\x1b[2m{text}\x1b[0m"


@dataclass
class FlakeTemplate:
    """A named template belonging to a flake."""

    flake: str
    template_name: str
    template: Template

    def __str__(self) -> str:
        description = self.template.template.description or ""
        return f"{self.template_name:<15} {_dimmed(f'[{self.flake}]')} {description}"


def templates_from_config(tree: OmConfigTree, flake: str) -> list[FlakeTemplate]:
    """Load the templates under ``templates`` in the config, sorted by name."""
    templates = tree.get("templates", Template.from_dict)
    if templates is None:
        raise TemplateError("No templates found")
    return [
        FlakeTemplate(flake=flake, template_name=name, template=templates[name])
        for name in sorted(templates)
    ]