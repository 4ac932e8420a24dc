import os

from omnix.check import nix_installed


def test_nix_found_on_path(tmp_path, monkeypatch):
    nix = tmp_path / "nix"
    nix.write_text("#!/bin/sh\n")
    nix.chmod(0o755)
    monkeypatch.setenv("PATH", str(tmp_path))
    assert nix_installed() is True


def test_nix_missing_from_path(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    assert nix_installed() is False


def test_non_executable_nix_is_not_installed(tmp_path, monkeypatch):
    nix = tmp_path / "nix"
    nix.write_text("not a program")
    nix.chmod(0o644)
    monkeypatch.setenv("PATH", os.pathsep.join([str(tmp_path)]))
    assert nix_installed() is False