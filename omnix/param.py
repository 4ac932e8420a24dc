"""Template parameters that initialize a template dynamically."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from omnix.action import Action, ReplaceAction, RetainAction, parse_action


class Prompter(Protocol):
    """Asks the user for parameter values."""

    def text(self, message: str, placeholder: str, default: str | None) -> str:
        """Ask for a line of text."""

    def confirm(self, message: str, default: bool | None) -> bool:
        """Ask a yes/no question."""


class ConsolePrompter:
    """A prompter that reads answers from the terminal."""

    def __init__(self, input_fn: Callable[[str], str] = input) -> None:
        self._input = input_fn

    def text(self, message: str, placeholder: str, default: str | None) -> str:
        hint = f" ({default})" if default is not None else f" [{placeholder}]"
        answer = self._input(f"{message}{hint}: ")
        if not answer and default is not None:
            return default
        return answer

    def confirm(self, message: str, default: bool | None) -> bool:
        if default is True:
            suffix = " (Y/n)"
        elif default is False:
            suffix = " (y/N)"
        else:
            suffix = " (y/n)"
        while True:
            answer = self._input(f"{message}{suffix} ").strip().lower()
            if not answer and default is not None:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False


@dataclass
class Param:
    """A template parameter and the action it drives."""

    name: str
    description: str
    action: Action

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Param:
        """Build from a config mapping holding name, description and action fields."""
        if not isinstance(data, Mapping):
            raise ValueError("param must be a mapping")
        name = data.get("name")
        description = data.get("description")
        if not isinstance(name, str):
            raise ValueError("param field `name` must be a string")
        if not isinstance(description, str):
            raise ValueError("param field `description` must be a string")
        return cls(name=name, description=description, action=parse_action(data))

    def __str__(self) -> str:
        return f"🪃 {self.name} {self.action}"

    def set_value(self, value: Any) -> None:
        """Set the action's value; a value of the wrong kind clears it."""
        if isinstance(self.action, ReplaceAction):
            self.action.value = value if isinstance(value, str) else None
        elif isinstance(self.action, RetainAction):
            self.action.value = value if isinstance(value, bool) else None

    def set_value_by_prompting(self, prompt: Prompter | None = None) -> None:
        """Ask the user for this parameter's value."""
        prompter = prompt if prompt is not None else ConsolePrompter()
        action = self.action
        if isinstance(action, ReplaceAction):
            answer = prompter.text(self.description, action.placeholder, action.value)
            if answer:
                action.value = answer
        elif isinstance(action, RetainAction):
            action.value = prompter.confirm(self.description, action.value)