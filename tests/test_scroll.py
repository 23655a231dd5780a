import pytest
from PySide6.QtWidgets import QScrollArea, QWidget

from zeatmap.scroll import (
    MIN_FLING_VELOCITY,
    MOMENTUM_DURATION_MS,
    DragVelocityTracker,
    ScrollBarAnimator,
    momentum_distance,
)


def test_velocity_needs_two_samples():
    tracker = DragVelocityTracker()
    assert tracker.velocity() == 0.0
    tracker.add(10, 0)
    assert tracker.velocity() == 0.0


def test_velocity_over_recent_samples():
    tracker = DragVelocityTracker()
    tracker.add(0, 0)
    tracker.add(10, 10)
    tracker.add(30, 20)
    assert tracker.velocity() == pytest.approx(1.5)


def test_old_samples_are_dropped():
    tracker = DragVelocityTracker(window_ms=100)
    tracker.add(0, 0)
    tracker.add(100, 50)
    tracker.add(200, 200)
    # the first sample is older than the window; two are always kept
    assert tracker.velocity() == pytest.approx(100 / 150)


def test_reset_clears_samples():
    tracker = DragVelocityTracker()
    tracker.add(0, 0)
    tracker.add(50, 10)
    tracker.reset()
    assert tracker.velocity() == 0.0


def test_momentum_distance():
    assert momentum_distance(1.5) == pytest.approx(1.5 * MOMENTUM_DURATION_MS / 3)
    assert momentum_distance(-2.0, 300) == pytest.approx(-200.0)


@pytest.fixture
def scroll_area(qapp):
    area = QScrollArea()
    content = QWidget()
    content.setFixedSize(2000, 50)
    area.setWidget(content)
    area.resize(200, 100)
    yield area
    area.close()
    area.deleteLater()


def test_hidden_scroll_area_is_not_attached(scroll_area):
    animator = ScrollBarAnimator(scroll_area)
    assert not animator.is_attached()
    assert animator.animate_to(300, 100) is False


def test_slow_fling_finishes_immediately(scroll_area):
    animator = ScrollBarAnimator(scroll_area)
    finished = []
    assert animator.fling(MIN_FLING_VELOCITY / 2, lambda: finished.append(1)) is False
    assert animator.fling(-0.1, lambda: finished.append(2)) is False
    assert finished == [1, 2]


def test_animate_to_current_value_finishes_synchronously(qapp, scroll_area):
    scroll_area.show()
    qapp.processEvents()
    animator = ScrollBarAnimator(scroll_area)
    finished = []

    assert animator.is_attached()
    assert animator.animate_to(0, 100, lambda: finished.append(True))
    assert finished == [True]
    assert not animator.is_running()


def test_cancel_drops_pending_callback(qapp, scroll_area):
    scroll_area.show()
    qapp.processEvents()
    animator = ScrollBarAnimator(scroll_area)
    finished = []

    animator.animate_to(500, 1000, lambda: finished.append(True))
    assert animator.is_running()
    animator.cancel()
    assert not animator.is_running()
    assert finished == []


def test_jump_to_sets_bar_value(qapp, scroll_area):
    scroll_area.show()
    qapp.processEvents()
    animator = ScrollBarAnimator(scroll_area)
    animator.jump_to(120.6)
    assert animator.value() == 120
