"""The ``om`` command line."""

from __future__ import annotations

import argparse
import json
import logging
import os
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from omnix.action import ActionError
from omnix.asserts import PathAssertionError
from omnix.check import nix_installed
from omnix.config import OmConfig, OmConfigError, OmConfigTree
from omnix.init_core import run, run_tests
from omnix.logsetup import setup_logging
from omnix.template import FlakeTemplate, TemplateError, templates_from_config

logger = logging.getLogger("om")

_LEVELS: tuple[str | None, ...] = (None, "error", "warn", "info", "debug", "trace")
_DEFAULT_LEVEL = 3

_FAILURES = (
    OmConfigError,
    TemplateError,
    ActionError,
    PathAssertionError,
    ValueError,
    LookupError,
    OSError,
    subprocess.CalledProcessError,
)


def parse_params(text: str) -> dict[str, Any]:
    """Parse ``--params`` JSON into a mapping of parameter values."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("params must be a JSON object")
    return data


def _build_parser() -> tuple[argparse.ArgumentParser, argparse.ArgumentParser]:
    parser = argparse.ArgumentParser(prog="om", description="Omnix")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more output")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="less output")
    commands = parser.add_subparsers(dest="command", required=True)
    init = commands.add_parser("init", help="Initialize a new flake project")
    init.add_argument("flake", nargs="?", metavar="FLAKE_URL",
                      help="flake to initialize the template from")
    init.add_argument("-o", "--output", dest="path", metavar="OUTPUT_DIR",
                      help="where to create the template")
    init.add_argument("--params", type=parse_params,
                      help="parameter values to use by default, as JSON")
    init.add_argument("--non-interactive", action="store_true",
                      help="disable all prompting")
    init.add_argument("--test", action="store_true",
                      help="run template tests instead of initializing")
    return parser, init


def _validate_init(init: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.test:
        if args.flake is None:
            init.error("--test requires FLAKE_URL")
        if args.non_interactive or args.params is not None or args.path is not None:
            init.error("--test cannot be used with --non-interactive, --params or --output")
    elif args.path is None:
        init.error("the following arguments are required: -o/--output")


def _verbosity_level(verbose: int, quiet: int) -> str | None:
    index = min(max(_DEFAULT_LEVEL + verbose - quiet, 0), len(_LEVELS) - 1)
    return _LEVELS[index]


def _nix_eval_json(*args: str) -> Any:
    result = subprocess.run(
        ["nix", "eval", "--json", *args], capture_output=True, text=True, check=True
    )
    return json.loads(result.stdout)


def _split_flake(url: str) -> tuple[str, str | None]:
    base, _, attr = url.partition("#")
    return base, (attr or None)


def _flake_root(base: str) -> Path:
    local = Path(base[len("path:"):] if base.startswith("path:") else base)
    if local.exists():
        return local.resolve()
    result = subprocess.run(
        ["nix", "flake", "metadata", "--json", base], capture_output=True, text=True, check=True
    )
    return Path(json.loads(result.stdout)["path"])


def _load_config(base: str, root: Path) -> OmConfig:
    if (root / "om.yaml").exists():
        return OmConfig.from_local(root)
    result = subprocess.run(
        ["nix", "eval", "--json", f"{base}#om"], capture_output=True, text=True, check=False
    )
    if result.returncode != 0:
        if "does not provide attribute" in result.stderr:
            return OmConfig(flake_url=base, reference=[], config=OmConfigTree())
        raise OmConfigError(f"Nix command error: {result.stderr.strip()}")
    data = json.loads(result.stdout) or {}
    return OmConfig(flake_url=base, reference=[], config=OmConfigTree(data))


def _load_templates(base: str) -> list[FlakeTemplate]:
    root = _flake_root(base)
    templates = templates_from_config(_load_config(base, root).config, base)
    for flake_template in templates:
        nix_template = flake_template.template.template
        if not nix_template.path.is_absolute():
            nix_template.path = root / nix_template.path
    return templates


def _select_from_registry() -> str:
    registry = os.environ.get("OM_INIT_REGISTRY")
    if not registry:
        raise LookupError("No FLAKE_URL given and no builtin registry is configured")
    flakes = _nix_eval_json(f"{registry}#registry")
    names = list(flakes)
    for number, name in enumerate(names, start=1):
        print(f"{number:>3}) {name}", file=sys.stderr)
    while True:
        answer = input("Select a flake: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(names):
            return flakes[names[int(answer) - 1]]
        if answer in flakes:
            return flakes[answer]


def _current_system() -> str:
    return _nix_eval_json("--impure", "--expr", "builtins.currentSystem")


def _run_init(args: argparse.Namespace) -> None:
    if args.test:
        base, _ = _split_flake(args.flake)
        run_tests(_current_system(), base, _load_templates(base))
        return
    path = Path(args.path)
    if path.exists():
        # Never risk writing into an existing, possibly wrong, location.
        raise FileExistsError(f"Output directory already exists: {path}")
    flake = args.flake if args.flake is not None else _select_from_registry()
    base, attr = _split_flake(flake)
    run(path, _load_templates(base), attr, args.params or {}, args.non_interactive)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the exit code."""
    parser, init = _build_parser()
    args = parser.parse_args(argv)
    _validate_init(init, args)

    level = _verbosity_level(args.verbose, args.quiet)
    setup_logging(level, bare=level not in ("debug", "trace"))
    logger.debug("Args: %r", args)

    if not nix_installed():
        logger.error("Nix is not installed: https://nixos.asia/en/install")
        return 1
    try:
        _run_init(args)
    except _FAILURES as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())