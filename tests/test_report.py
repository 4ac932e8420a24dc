import pytest

from omnix.report import Report, WithDetails

DETAILS = WithDetails(msg="broken", suggestion="fix it")


def test_green_is_green():
    report = Report.green()
    assert report.is_green()
    assert not report.is_red()


def test_red_is_red():
    report = Report.red(DETAILS)
    assert report.is_red()
    assert not report.is_green()


def test_get_red_details():
    assert Report.red(DETAILS).get_red_details() == DETAILS
    assert Report.green().get_red_details() is None


def test_without_details_keeps_colour():
    stripped = Report.red(DETAILS).without_details()
    assert stripped.is_red()
    assert stripped.get_red_details() is None
    assert Report.green().without_details() == Report.green()


def test_equality():
    assert Report.red(DETAILS) == Report.red(WithDetails("broken", "fix it"))
    assert Report.red(DETAILS) != Report.green()


@pytest.mark.parametrize("details", [None, DETAILS])
def test_green_sorts_before_red(details):
    assert Report.green() < Report.red(details)
    assert sorted([Report.red(details), Report.green()])[0] == Report.green()


def test_details_ordering():
    assert WithDetails("a", "z") < WithDetails("b", "a")