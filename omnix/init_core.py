"""Initializing templates, and running their tests."""

from __future__ import annotations

import copy
import logging
import os
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from omnix.markdown import print_markdown
from omnix.template import FlakeTemplate

logger = logging.getLogger("om.init")

Selector = Callable[[Sequence[FlakeTemplate]], FlakeTemplate]


def _console_select(templates: Sequence[FlakeTemplate]) -> FlakeTemplate:
    for number, template in enumerate(templates, start=1):
        print(f"{number:>3}) {template}", file=sys.stderr)
    while True:
        answer = input("Select a template: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(templates):
            return templates[int(answer) - 1]
        for template in templates:
            if template.template_name == answer:
                return template


def choose_template(
    templates: Sequence[FlakeTemplate],
    attr: str | None = None,
    non_interactive: bool = False,
    select: Selector | None = None,
) -> FlakeTemplate:
    """Pick the template to initialize; the result is an independent copy.

    ``attr`` names the template explicitly. Otherwise a single template is
    chosen automatically, and with several the user is asked.
    """
    if attr is not None:
        for template in templates:
            if template.template_name == attr:
                return copy.deepcopy(template)
        raise LookupError("Template not found")
    if len(templates) < 2:
        if not templates:
            raise LookupError("No templates available")
        first = templates[0]
        logger.info("Automatically choosing the one template available: %s", first.template_name)
        return copy.deepcopy(first)
    if non_interactive:
        raise ValueError(
            "Non-interactive mode requires exactly one template to be available; "
            f"but {len(templates)} are available. Explicit specify it in flake URL."
        )
    chooser = select if select is not None else _console_select
    return copy.deepcopy(chooser(templates))


def run(
    path: str | os.PathLike,
    templates: Sequence[FlakeTemplate],
    attr: str | None = None,
    default_params: Mapping[str, Any] | None = None,
    non_interactive: bool = False,
) -> Path:
    """Initialize a template at ``path``; return the canonical output path.

    ``default_params`` gives parameter values up front. In non-interactive
    mode every parameter must then have a value; otherwise the user is asked.
    """
    chosen = choose_template(templates, attr, non_interactive)
    chosen.template.set_param_values(default_params or {})

    if non_interactive:
        for param in chosen.template.params:
            if not param.action.has_value():
                raise ValueError(
                    "Non-interactive mode requires all parameters to be set; "
                    f"but {param.name} is missing"
                )
    else:
        for param in chosen.template.params:
            param.set_value_by_prompting()

    logger.info("Initializing template at %s", path)
    out = chosen.template.scaffold_at(path)
    print(file=sys.stderr)
    print_markdown(out, f"## 🥳 Initialized template at `{out}`")
    welcome = chosen.template.template.welcome_text
    if welcome is not None:
        print(file=sys.stderr)
        print_markdown(out, welcome)
    return out


def _with_attr(flake: str, attr: str) -> str:
    return f"{flake.split('#', 1)[0]}#{attr}"


def run_tests(
    current_system: str, flake: str, templates: Sequence[FlakeTemplate]
) -> list[str]:
    """Run every template test that can run on ``current_system``.

    Returns the ``<template>.<test>`` names of the tests that ran.
    """
    ran = []
    for template in templates:
        logger.info("🕍 Testing template: %s#%s", flake, template.template_name)
        for name, test in template.template.tests.items():
            if not test.can_run_on(current_system):
                logger.info("⚠️ Skipping test: %s (cannot run on %s)", name, current_system)
                continue
            logger.info("🧪 Running test: %s (on %s)", name, current_system)
            qualified = f"{template.template_name}.{name}"
            test.run_test(_with_attr(flake, qualified), template)
            ran.append(qualified)
    return ran