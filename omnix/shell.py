"""Check that the user's shell dotfiles are managed by Nix."""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePath

from omnix.healthcheck import Check, CheckResult
from omnix.report import WithDetails

logger = logging.getLogger("om.health")

_ISSUES = "Please file an issue with the project."

_DOTFILES = {
    "zsh": (".zshrc", ".zshenv", ".zprofile"),
    "bash": (".bashrc", ".bash_profile", ".profile"),
}


def is_path_in_nix_store(path: str | os.PathLike) -> bool:
    """Whether the path lies under ``/nix/store``."""
    return PurePath(path).parts[:3] == ("/", "nix", "store")


class Shell(enum.Enum):
    """A Unix shell."""

    ZSH = "zsh"
    BASH = "bash"

    @classmethod
    def from_path(cls, exe_path: str | os.PathLike) -> Shell | None:
        """Look up the shell from its executable path, e.g. ``/bin/zsh``."""
        name = PurePath(exe_path).name
        if not name:
            raise ValueError("Path does not have a file name component")
        try:
            return cls(name)
        except ValueError:
            logger.warning("Unrecognized shell: %r. %s", str(exe_path), _ISSUES)
            return None

    @classmethod
    def current(cls) -> Shell | None:
        """The user's current shell, from ``$SHELL``."""
        shell_path = os.environ.get("SHELL")
        if shell_path is None:
            raise RuntimeError("Environment variable `SHELL` not set")
        return cls.from_path(shell_path)

    def dotfile_names(self) -> list[str]:
        """The dotfile names this shell reads."""
        return list(_DOTFILES[self.value])

    def get_dotfiles(self, home: str | os.PathLike | None = None) -> list[Path]:
        """The dotfiles that exist under ``home`` (``$HOME`` by default)."""
        if home is None:
            home = os.environ.get("HOME")
            if home is None:
                raise RuntimeError("Environment variable `HOME` not set")
        home_dir = Path(home)
        return [home_dir / name for name in self.dotfile_names() if (home_dir / name).exists()]


@dataclass
class ShellCheck:
    """Health check that the shell's dotfiles are managed by Nix."""

    enable: bool = True
    required: bool = False
    """Whether to produce required checks."""

    def check(self) -> list[Check]:
        """Run the check; an empty list means it was skipped."""
        if not self.enable:
            return []
        shell = Shell.current()
        if shell is None:
            msg = f"Unsupported shell. {_ISSUES}"
            if self.required:
                raise RuntimeError(msg)
            logger.warning("Skipping shell dotfile check! %s", msg)
            return []

        managed: dict[Path, Path] = {}
        unmanaged: list[Path] = []
        for path in shell.get_dotfiles():
            try:
                target = Path(os.readlink(path))
            except OSError as err:
                logger.warning("Dotfile %s symlink error: %s; ignoring.", path, err)
                continue
            if is_path_in_nix_store(target):
                managed[path] = target
            else:
                unmanaged.append(path)

        info = (
            f"Shell={shell.name.title()}; "
            f"Managed: {{{', '.join(f'{k} -> {v}' for k, v in managed.items())}}}; "
            f"Unmanaged: [{', '.join(str(p) for p in unmanaged)}]"
        )
        if managed:
            result = CheckResult()
        else:
            result = CheckResult(
                WithDetails(
                    msg=f"Default Shell: {shell.name.title()} is not managed by Nix",
                    suggestion="You can use `home-manager` to manage shell configuration.",
                )
            )
        return [Check(title="Shell dotfiles", info=info, result=result, required=self.required)]