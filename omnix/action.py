"""Actions that a template parameter performs on a scaffolded directory."""

from __future__ import annotations

import abc
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from omnix.fs import find_paths, remove_all

logger = logging.getLogger("om.init")


class ActionError(Exception):
    """An action could not be applied."""


def _glob_to_regex(pattern: str) -> str:
    """Translate a glob into a regular expression.

    ``*`` and ``?`` also match ``/``. A ``**/`` component matches zero or more
    leading directories. ``[...]`` classes and ``{a,b}`` alternations are
    supported.
    """
    parts: list[str] = []
    depth = 0
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            at_component_start = i == 0 or pattern[i - 1] == "/"
            if j - i >= 2 and at_component_start and j < n and pattern[j] == "/":
                parts.append("(?:.*/)?")
                i = j + 1
            else:
                parts.append(".*")
                i = j
        elif c == "?":
            parts.append(".")
            i += 1
        elif c == "[":
            j = i + 1
            negate = j < n and pattern[j] in "!^"
            if negate:
                j += 1
            start = j
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                raise ValueError(f"unclosed character class in glob {pattern!r}")
            body = pattern[start:j].replace("\\", "\\\\").replace("[", "\\[")
            if not negate and body.startswith("^"):
                body = "\\" + body
            parts.append(f"[{'^' if negate else ''}{body}]")
            i = j + 1
        elif c == "{":
            parts.append("(?:")
            depth += 1
            i += 1
        elif c == "," and depth > 0:
            parts.append("|")
            i += 1
        elif c == "}" and depth > 0:
            parts.append(")")
            depth -= 1
            i += 1
        elif c == "\\":
            if i + 1 >= n:
                raise ValueError(f"dangling escape in glob {pattern!r}")
            parts.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            parts.append(re.escape(c))
            i += 1
    if depth:
        raise ValueError(f"unclosed alternation in glob {pattern!r}")
    return "".join(parts)


class Action(abc.ABC):
    """An action to perform on a template.

    Actions sort so that pruning comes before replacing, since pruning deletes
    files that replacing would otherwise touch.
    """

    _rank: ClassVar[int] = 0

    @abc.abstractmethod
    def has_value(self) -> bool:
        """Whether this action currently has a value."""

    @abc.abstractmethod
    def apply(self, out_dir: str | os.PathLike) -> None:
        """Apply the action to the given directory."""

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return self._rank < other._rank


@dataclass
class ReplaceAction(Action):
    """Replace ``placeholder`` with ``value`` in file contents and names."""

    _rank: ClassVar[int] = 1

    placeholder: str
    value: str | None = None

    def __str__(self) -> str:
        if self.value is None:
            return "replace [disabled]"
        return f"replace [{self.placeholder} => {self.value}]"

    def has_value(self) -> bool:
        return self.value is not None

    def apply(self, out_dir: str | os.PathLike) -> None:
        if self.value is None:
            return
        root = Path(out_dir)
        # Children come before their parents, so renaming a directory never
        # invalidates paths still to be visited.
        for file in reversed(find_paths(root)):
            file_path = root / file
            if file_path.is_file() and not file_path.is_symlink():
                try:
                    content = file_path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    raise ActionError(f"Unable to read file: {file_path}") from exc
                if self.placeholder in content:
                    logger.info("   ✍️ %s", file)
                    file_path.write_text(
                        content.replace(self.placeholder, self.value), encoding="utf-8"
                    )
            if self.placeholder in file.name:
                new_name = file.name.replace(self.placeholder, self.value)
                logger.info("   ✏️ %s => %s", file, new_name)
                file_path.rename(file_path.with_name(new_name))


@dataclass
class RetainAction(Action):
    """Delete the paths matching the globs when ``value`` is false."""

    _rank: ClassVar[int] = 0

    paths: list[str]
    value: bool | None = None
    _regex: re.Pattern[str] | None = field(init=False, repr=False, compare=False, default=None)

    def __post_init__(self) -> None:
        if self.paths:
            self._regex = re.compile(
                "|".join(f"(?:{_glob_to_regex(p)})" for p in self.paths), re.DOTALL
            )

    def __str__(self) -> str:
        if self.value is False:
            return f"prune [{', '.join(self.paths)}]"
        return "prune [disabled]"

    def has_value(self) -> bool:
        return self.value is not None

    def matches(self, path: str | os.PathLike) -> bool:
        """Whether a relative path matches any of the globs."""
        if self._regex is None:
            return False
        return self._regex.fullmatch(Path(path).as_posix()) is not None

    def apply(self, out_dir: str | os.PathLike) -> None:
        if self.value is not False:
            return
        root = Path(out_dir)
        files = find_paths(root)
        to_delete = [file for file in files if self.matches(file)]
        if not to_delete:
            raise ActionError(f"No paths matched in {[str(f) for f in files]}")
        # Reverse-sorted order deletes children before their parent folders.
        for file in sorted(to_delete, reverse=True):
            path = root / file
            if not path.exists() and not path.is_symlink():
                continue
            logger.info("   ❌ %s", file)
            remove_all(path)


def parse_action(data: Mapping[str, Any]) -> Action:
    """Build an action from a config mapping, trying replace first, then prune."""
    if not isinstance(data, Mapping):
        raise ValueError("action must be a mapping")
    value = data.get("value")
    placeholder = data.get("placeholder")
    if isinstance(placeholder, str) and (value is None or isinstance(value, str)):
        return ReplaceAction(placeholder, value)
    paths = data.get("paths")
    if (
        isinstance(paths, list)
        and all(isinstance(p, str) for p in paths)
        and (value is None or isinstance(value, bool))
    ):
        return RetainAction(list(paths), value)
    raise ValueError("data did not match any variant of Action")