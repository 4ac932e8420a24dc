"""Tools for Nix flake projects: template initialization, om configuration and health-check helpers."""

__version__ = "0.1.0"