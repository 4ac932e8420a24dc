"""Omnix configuration, read from ``om.yaml`` in a flake root."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

import yaml

T = TypeVar("T")

_DECODE_ERRORS = (ValueError, TypeError, KeyError)


class OmConfigError(Exception):
    """An error while loading or reading omnix configuration."""


class MissingConfigAttribute(OmConfigError):
    """The referenced configuration attribute does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing configuration attribute: {name}")
        self.name = name


@dataclass
class OmConfigTree:
    """The whole configuration: root key -> name -> raw value."""

    data: dict[str, dict[str, Any]] = field(default_factory=dict)

    def get(self, key: str, parse: Callable[[Any], T]) -> dict[str, T] | None:
        """Parse every sub-config under ``key``; ``None`` if the key is absent."""
        section = self.data.get(key)
        if section is None:
            return None
        try:
            return {name: parse(value) for name, value in section.items()}
        except _DECODE_ERRORS as exc:
            raise OmConfigError(f"Failed to decode: {exc}") from exc


def load_config_tree(text: str) -> OmConfigTree:
    """Parse YAML text into an :class:`OmConfigTree`."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise OmConfigError(f"Failed to parse yaml: {exc}") from exc
    if data is None:
        return OmConfigTree()
    if not isinstance(data, dict) or not all(
        isinstance(section, dict) for section in data.values()
    ):
        raise OmConfigError("Failed to parse yaml: expected a mapping of mappings")
    return OmConfigTree({str(key): dict(section) for key, section in data.items()})


@dataclass
class OmConfig:
    """A config tree along with the flake it came from and the reference into it.

    ``reference`` is the attribute path after ``#`` in the flake URL.
    """

    flake_url: str
    reference: list[str]
    config: OmConfigTree

    @classmethod
    def from_local(
        cls, flake_root: str | os.PathLike, reference: list[str] | None = None
    ) -> OmConfig:
        """Read ``om.yaml`` under ``flake_root``; an empty config if there is none."""
        root = Path(flake_root)
        path = root / "om.yaml"
        if path.exists():
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise OmConfigError(f"Failed to read yaml: {exc}") from exc
            tree = load_config_tree(text)
        else:
            tree = OmConfigTree()
        return cls(flake_url=str(root), reference=list(reference or []), config=tree)

    def get_sub_config_under(
        self,
        root_key: str,
        parse: Callable[[Any], T],
        default: Callable[[], T],
    ) -> tuple[T, list[str]]:
        """Return the referenced sub-config under ``root_key`` and the rest of the reference.

        Without a reference, ``<root_key>.default`` is used. If ``root_key`` is
        absent, ``default()`` is returned with an empty rest.
        """
        configs = self.config.get(root_key, parse)
        if configs is None:
            return default(), []
        if self.reference:
            name, rest = self.reference[0], self.reference[1:]
        else:
            name, rest = "default", []
        if name not in configs:
            raise MissingConfigAttribute(name)
        return configs[name], list(rest)