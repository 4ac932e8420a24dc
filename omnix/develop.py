"""Configuration for preparing to develop on a project."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from omnix.config import OmConfig

DEFAULT_README = """🍾 Welcome to the project

*(Want to show custom instructions here? Add them to the `om.develop.default.readme` field in your `flake.nix` file)*
"""


@dataclass
class Readme:
    """The README to display at the end."""

    markdown: str = DEFAULT_README

    def get_markdown(self) -> str:
        """Return the Markdown text."""
        return self.markdown


@dataclass
class DevelopConfig:
    """The ``om.develop`` configuration."""

    readme: Readme = field(default_factory=Readme)

    @classmethod
    def from_dict(cls, data: Any) -> DevelopConfig:
        """Build from a parsed config mapping; ``readme`` is required."""
        if not isinstance(data, dict):
            raise ValueError("develop config must be a mapping")
        if "readme" not in data:
            raise ValueError("missing field `readme`")
        readme = data["readme"]
        if not isinstance(readme, str):
            raise ValueError("field `readme` must be a string")
        return cls(readme=Readme(readme))

    @classmethod
    def from_om_config(cls, om_config: OmConfig) -> DevelopConfig:
        """Read the referenced ``develop`` sub-config, or the default."""
        config, _rest = om_config.get_sub_config_under("develop", cls.from_dict, cls)
        return config