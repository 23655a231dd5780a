"""Shared fixtures: an offscreen QApplication and a few date helpers."""

import datetime
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402


def days_between(first, last):
    return [first + datetime.timedelta(days=i) for i in range((last - first).days + 1)]


def year_of_days(year):
    return days_between(datetime.date(year, 1, 1), datetime.date(year, 12, 31))


class FakeScroller:
    """Records scroll requests; the test decides when an animation finishes."""

    def __init__(self, attached=True):
        self.attached = attached
        self.calls = []
        self.cancelled = False

    def animate_to(self, offset, duration_ms, on_finished):
        if not self.attached:
            return False
        self.calls.append((offset, duration_ms, on_finished))
        return True

    def finish(self, index=-1):
        self.calls[index][2]()

    def cancel(self):
        self.cancelled = True


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def dates_2024():
    return year_of_days(2024)
