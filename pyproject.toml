[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "omnix"
version = "0.1.0"
description = "Tooling for Nix flake projects: template initialization, om configuration and health-check helpers"
requires-python = ">=3.10"
keywords = ["nix", "flakes", "templates", "health-check", "developer-tools"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "pyyaml",
    "rich",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
om = "omnix.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["omnix"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
