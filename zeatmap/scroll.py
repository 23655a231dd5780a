import logging
from collections import deque

from PySide6.QtCore import QObject, QPropertyAnimation, QEasingCurve

logger = logging.getLogger(__name__)

MOMENTUM_DURATION_MS = 600
MIN_FLING_VELOCITY = 0.3  # px per ms


class DragVelocityTracker:
    """Keeps the last few pointer positions of a drag to estimate release speed."""

    def __init__(self, window_ms=100, max_samples=20):
        self.window_ms = window_ms
        self._samples = deque(maxlen=max_samples)

    def reset(self):
        self._samples.clear()

    def add(self, x, timestamp_ms):
        self._samples.append((timestamp_ms, x))
        # Only the recent part of the drag says anything about the release
        while len(self._samples) > 2 and timestamp_ms - self._samples[0][0] > self.window_ms:
            self._samples.popleft()

    def velocity(self):
        """Pointer velocity in px/ms; positive when moving right."""
        if len(self._samples) < 2:
            return 0.0
        t0, x0 = self._samples[0]
        t1, x1 = self._samples[-1]
        if t1 <= t0:
            return 0.0
        return (x1 - x0) / (t1 - t0)


def momentum_distance(velocity, duration_ms=MOMENTUM_DURATION_MS):
    # An OutCubic curve starts at three times its average speed
    return velocity * duration_ms / 3


class ScrollBarAnimator(QObject):
    """Animates the horizontal scroll bar of a QScrollArea to a pixel offset."""

    def __init__(self, scroll_area, parent=None):
        super().__init__(parent)
        self._scroll_area = scroll_area
        self._bar = scroll_area.horizontalScrollBar()
        self._animation = QPropertyAnimation(self._bar, b"value", self)
        self._animation.finished.connect(self._finish)
        self._on_done = None

    def is_attached(self):
        return self._scroll_area.isVisible() and self._scroll_area.viewport().width() > 0

    def is_running(self):
        return self._animation.state() == QPropertyAnimation.Running

    def animate_to(self, offset, duration_ms, on_finished=None):
        if not self.is_attached():
            return False
        return self._start(offset, duration_ms, QEasingCurve.InOutQuad, on_finished)

    def fling(self, velocity, on_finished=None):
        """Carry on a released drag; ``velocity`` is the pointer speed in px/ms."""
        if abs(velocity) < MIN_FLING_VELOCITY or not self.is_attached():
            if on_finished:
                on_finished()
            return False
        target = self._bar.value() - momentum_distance(velocity)
        logger.debug("Fling at %.2f px/ms towards %d", velocity, target)
        return self._start(target, MOMENTUM_DURATION_MS, QEasingCurve.OutCubic, on_finished)

    def cancel(self):
        self._on_done = None
        self._animation.stop()

    def jump_to(self, offset):
        self._bar.setValue(int(offset))

    def value(self):
        return self._bar.value()

    def _start(self, offset, duration_ms, curve, on_finished):
        # stop() does not emit finished, so a superseded callback is dropped here
        self._animation.stop()
        self._on_done = on_finished

        target = max(0, min(int(offset), self._bar.maximum()))
        if target == self._bar.value():
            self._finish()
            return True

        self._animation.setDuration(duration_ms)
        self._animation.setEasingCurve(curve)
        self._animation.setStartValue(self._bar.value())
        self._animation.setEndValue(target)
        self._animation.start()
        return True

    def _finish(self):
        callback = self._on_done
        self._on_done = None
        if callback:
            callback()
