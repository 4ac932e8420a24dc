# omnix

Helpers for working on Nix flake projects:

- **Template initialization**: scaffold a project from a template described
  in the `templates` section of a flake's om configuration. Placeholders are
  replaced in file contents and names, and optional paths are pruned.
- **om configuration**: read `om.yaml` from a flake root and look up
  sub-configurations such as `develop` or `templates`.
- **Health-check building blocks**: check results, a shell-dotfile check,
  Cachix cache URL parsing, and a summary that turns into an exit code.

## Installation

```
pip install .
```

With the test extra:

```
pip install ".[test]"
pytest
```

## Command line

The package installs an `om` command with one subcommand, `init`:

```
om --help
om init --help
```

`om` first checks that a `nix` executable is on the search path and exits
with status 1 if not. `-v` and `-q` (repeatable) raise or lower verbosity.

To initialize a template, pass an output directory and a flake. Template
parameter values can be given as a JSON object:

```
om init -o ./my-project ./path/to/flake --params '{"package-name": "hello"}' --non-interactive
```

- The output directory must not exist yet.
- Templates are read from `om.yaml` in the flake root; when there is none,
  from `nix eval --json <flake>#om`.
- A template can be named after `#` in the flake URL. Otherwise a single
  template is picked automatically; with several, you are asked to choose,
  and `--non-interactive` fails.
- In non-interactive mode every parameter needs a value; otherwise you are
  prompted for each one.
- Without a flake URL, a flake is chosen from the registry flake named by
  the `OM_INIT_REGISTRY` environment variable.

To run a flake's template tests instead of initializing:

```
om init --test ./path/to/flake
```

`--test` requires a flake URL and cannot be combined with `--output`,
`--params` or `--non-interactive`.

## Library use

```python
from pathlib import Path

from omnix.config import OmConfig
from omnix.develop import DevelopConfig

om_config = OmConfig.from_local(Path("."), [])
develop = DevelopConfig.from_om_config(om_config)
print(develop.readme.get_markdown())
```

- `omnix.template.templates_from_config` loads `FlakeTemplate`s from an
  `OmConfigTree`; `Template.scaffold_at` copies and applies parameters.
- `omnix.init_core.run` and `omnix.init_core.run_tests` drive
  initialization and template tests.
- `omnix.markdown.render_markdown` renders Markdown for the terminal;
  `print_markdown` prints it to standard error.
- `omnix.healthcheck.report_exit_code` logs a list of `Check`s and returns
  `0` when every required check passed and `1` otherwise.
- `omnix.shell.ShellCheck` checks whether shell dotfiles are symlinks into
  the Nix store; `omnix.caches.CachixCache.from_url` recognises
  `*.cachix.org` caches and `cachix_use` runs `cachix use`.
- `omnix.state.FlakeCache` keeps fetched flakes ordered by recency.

Logging goes to standard error. Set `OMNIX_LOG` to comma-separated filter
directives such as `om=debug` to add to the verbosity's own.

## What it does not do

- `om` has only the `init` command: there is no command to run health
  checks, show flake outputs, build a flake in CI or prepare a development
  shell.
- There is no complete Nix health suite: checks for the Nix version, flake
  support, max-jobs, trusted users, Rosetta or direnv are not included, and
  nothing gathers information about the Nix installation.
- There is no graphical interface; `omnix.state` holds only data types.