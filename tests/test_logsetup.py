import logging

import pytest

from omnix.logsetup import BareFormatter, log_directives, setup_logging


@pytest.fixture
def clean_logging(monkeypatch):
    monkeypatch.delenv("OMNIX_LOG", raising=False)
    root = logging.getLogger()
    saved_level = root.level
    installed = []
    yield installed
    for handler in installed:
        root.removeHandler(handler)
    root.setLevel(saved_level)
    for name in ("om", "nix_rs", "omnix-health", "custom"):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_quiet_and_warn_directives():
    assert log_directives(None) == ["warn"]
    assert log_directives("warn") == ["warn"]


def test_error_directive():
    assert log_directives("error") == ["error"]


def test_info_directives():
    directives = log_directives("info")
    assert directives[0] == "warn"
    assert "om=info" in directives
    assert "nix_rs=info" in directives
    assert "omnix-init=info" in directives


def test_level_applies_to_every_target():
    for level in ("debug", "trace"):
        directives = log_directives(level)
        assert all(d.endswith(f"={level}") for d in directives[1:])
        assert len(directives) == len(log_directives("info"))


def test_unknown_level_raises():
    with pytest.raises(ValueError):
        log_directives("loud")


def test_bare_formatter_only_message():
    record = logging.LogRecord("om", logging.ERROR, __file__, 1, "hello %s", ("you",), None)
    assert BareFormatter().format(record) == "hello you"


def test_setup_logging_sets_levels(clean_logging):
    handler = setup_logging("debug", True)
    clean_logging.append(handler)
    assert logging.getLogger("om").level == logging.DEBUG
    assert logging.getLogger().level == logging.WARNING
    assert isinstance(handler.formatter, BareFormatter)
    assert handler in logging.getLogger().handlers


def test_setup_logging_replaces_previous_handler(clean_logging):
    first = setup_logging("info", False)
    second = setup_logging("info", False)
    clean_logging.extend([first, second])
    root_handlers = logging.getLogger().handlers
    assert second in root_handlers
    assert first not in root_handlers


def test_setup_logging_reads_env(clean_logging, monkeypatch):
    monkeypatch.setenv("OMNIX_LOG", "custom=error,bogus=???")
    handler = setup_logging("info", False)
    clean_logging.append(handler)
    assert handler in logging.getLogger().handlers
    assert not isinstance(handler.formatter, BareFormatter)
    assert logging.getLogger("custom").level == logging.ERROR
    assert logging.getLogger("om").level == logging.INFO