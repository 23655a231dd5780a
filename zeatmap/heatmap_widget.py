import datetime
import logging

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QComboBox,
    QFrame, QScrollArea, QToolTip, QApplication
)
from PySide6.QtCore import Qt, QTimer, QRectF, QMetaMethod, Signal
from PySide6.QtGui import QPainter, QColor, QBrush, QFont

from .bucketing import Granularity, bucket_start, label, tooltip_label
from .items import default_item, placeholder_item
from .navigation import NavigationController
from .options import HeatmapOptions
from .scroll import DragVelocityTracker, ScrollBarAnimator
from .widgets import LegendBar

logger = logging.getLogger(__name__)

LONG_PRESS_MS = 500
WHEEL_SETTLE_MS = 150

HEADER_TEXT = QColor("#8b9bb4")
TODAY_FILL = QColor(33, 150, 243)
TODAY_TEXT = QColor("#ffffff")


class GridScrollArea(QScrollArea):
    """Horizontal-only scroll area; the wheel can be switched off."""

    wheel_scrolled = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.wheel_enabled = True
        self.setWidgetResizable(False)
        self.setFrameShape(QFrame.NoFrame)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)

    def set_wheel_enabled(self, enabled):
        self.wheel_enabled = enabled
        # The bar stays in place for programmatic scrolling, only hidden
        self.setHorizontalScrollBarPolicy(
            Qt.ScrollBarAsNeeded if enabled else Qt.ScrollBarAlwaysOff
        )

    def wheelEvent(self, event):
        if not self.wheel_enabled:
            event.ignore()
            return
        delta = event.angleDelta()
        step = delta.x() or delta.y()
        bar = self.horizontalScrollBar()
        bar.setValue(bar.value() - step)
        event.accept()
        self.wheel_scrolled.emit()


class HeatmapGrid(QWidget):
    """Painted header rows and cells. Sized to hold every column."""

    def __init__(self, heatmap):
        super().__init__()
        self.heatmap = heatmap
        self.setMouseTracking(True)

        self.velocity = DragVelocityTracker()
        self._press_pos = None
        self._press_item = None
        self._long_pressed = False
        self._dragging = False
        self._drag_origin = None

        self._long_press_timer = QTimer(self)
        self._long_press_timer.setSingleShot(True)
        self._long_press_timer.setInterval(LONG_PRESS_MS)
        self._long_press_timer.timeout.connect(self._on_long_press)

        # Holds a tap back while a second click could still make it a double tap
        self._pending_tap = None
        self._tap_timer = QTimer(self)
        self._tap_timer.setSingleShot(True)
        self._tap_timer.timeout.connect(self._emit_pending_tap)

    @property
    def options(self):
        return self.heatmap.options

    def header_height(self):
        return len(self.options.header_rows()) * self.options.item_size

    def column_x(self, column):
        return self.options.column_spacing + column * self.options.column_stride

    def row_y(self, row):
        return self.header_height() + self.options.row_spacing + row * self.options.row_stride

    def cell_rect(self, row, column):
        size = self.options.item_size
        return QRectF(self.column_x(column), self.row_y(row), size, size)

    def refresh_geometry(self):
        columns = len(self.heatmap.columns())
        width = self.options.column_spacing + columns * self.options.column_stride
        height = self.header_height() + len(self.heatmap.row_headers) * self.options.row_stride
        self.setFixedSize(max(width, 1), max(height, 1))
        self.update()

    def hit_test(self, pos):
        """Return ("header", granularity, column), ("cell", row, column) or None."""
        options = self.options
        size = options.item_size
        local_x = pos.x() - options.column_spacing
        if local_x < 0:
            return None
        column = int(local_x // options.column_stride)
        if local_x - column * options.column_stride >= size:
            return None

        header_rows = options.header_rows()
        if pos.y() < self.header_height():
            if column >= len(self.heatmap.columns()):
                return None
            return ("header", header_rows[int(pos.y() // size)], column)

        local_y = pos.y() - self.header_height() - options.row_spacing
        if local_y < 0:
            return None
        row = int(local_y // options.row_stride)
        if local_y - row * options.row_stride >= size or row >= len(self.heatmap.row_headers):
            return None
        return ("cell", row, column)

    def item_under(self, pos):
        hit = self.hit_test(pos)
        if hit is None or hit[0] != "cell":
            return None
        return self.heatmap.item_at(hit[1], hit[2])

    # -- painting -------------------------------------------------------

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        options = self.options
        stride = options.column_stride
        columns = self.heatmap.columns()
        if not columns:
            return
        clip = event.rect()
        first = max(0, int((clip.left() - options.column_spacing) // stride))
        last = min(len(columns) - 1, int(clip.right() // stride))

        self._paint_headers(painter, columns, first, last)

        radius = options.item_border_radius
        painter.setPen(Qt.NoPen)
        for row in range(len(self.heatmap.row_headers)):
            for column in range(first, last + 1):
                item = self.heatmap.item_at(row, column)
                painter.setBrush(QBrush(item.color))
                painter.drawRoundedRect(self.cell_rect(row, column), radius, radius)

    def _paint_headers(self, painter, columns, first, last):
        options = self.options
        size = options.item_size
        header_rows = options.header_rows()
        today_bucket = bucket_start(self.heatmap.today(), options.granularity)

        font = QFont()
        font.setPointSize(9)
        font.setBold(True)
        painter.setFont(font)

        # Period labels spill over four columns; start early so partial repaints keep them
        start = max(0, first - 4)
        for row, unit in enumerate(header_rows):
            y = row * size
            finest = unit is options.granularity
            previous = bucket_start(columns[start - 1], unit) if start > 0 else None
            for column in range(start, last + 1):
                column_date = columns[column]
                period = bucket_start(column_date, unit)
                new_period = period != previous
                previous = period
                if not finest and not new_period:
                    continue

                x = self.column_x(column)
                if finest:
                    rect = QRectF(x, y, size, size)
                    is_today = options.highlight_today and period == today_bucket
                    if is_today:
                        painter.setPen(Qt.NoPen)
                        painter.setBrush(QBrush(TODAY_FILL))
                        painter.drawEllipse(rect)
                        painter.setPen(TODAY_TEXT)
                    else:
                        painter.setPen(HEADER_TEXT)
                    painter.drawText(rect, Qt.AlignCenter, self._finest_text(column_date, unit))
                else:
                    painter.setPen(HEADER_TEXT)
                    rect = QRectF(x, y, options.column_stride * 4, size)
                    painter.drawText(rect, Qt.AlignLeft | Qt.AlignVCenter, label(column_date, unit))

    def _finest_text(self, column_date, unit):
        if unit is Granularity.DAY and self.heatmap.day_builder:
            return str(self.heatmap.day_builder(column_date))
        return label(column_date, unit)

    # -- pointer --------------------------------------------------------

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        self._press_pos = event.position().toPoint()
        self._press_item = self.item_under(self._press_pos)
        self._long_pressed = False
        self._dragging = False

        global_x = event.globalPosition().x()
        self.velocity.reset()
        self.velocity.add(global_x, event.timestamp())
        self._drag_origin = (global_x, self.heatmap.scroller.value())

        if self._press_item is not None:
            self.heatmap.item_tap_down.emit(self._press_item)
            self._long_press_timer.start()

    def mouseMoveEvent(self, event):
        pos = event.position().toPoint()
        if self._press_pos is not None and event.buttons() & Qt.LeftButton:
            if not self._dragging and (pos - self._press_pos).manhattanLength() >= QApplication.startDragDistance():
                self._cancel_press()
                if self.options.drag_scrolling_enabled:
                    self._dragging = True
                    self.heatmap.scroller.cancel()
                    self.setCursor(Qt.ClosedHandCursor)
            if self._dragging:
                global_x = event.globalPosition().x()
                self.velocity.add(global_x, event.timestamp())
                origin_x, origin_value = self._drag_origin
                self.heatmap.scroller.jump_to(origin_value - (global_x - origin_x))
            return
        self._show_tooltip(event, pos)

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._long_press_timer.stop()
        if self._dragging:
            self._dragging = False
            self.unsetCursor()
            self.heatmap.end_drag(self.velocity.velocity())
        elif self._press_item is not None and not self._long_pressed:
            if self.heatmap.listens_for_double_tap():
                self._pending_tap = self._press_item
                self._tap_timer.start(QApplication.doubleClickInterval())
            else:
                self.heatmap.item_tapped.emit(self._press_item)
        self._press_pos = None
        self._press_item = None

    def mouseDoubleClickEvent(self, event):
        self._tap_timer.stop()
        self._pending_tap = None
        item = self.item_under(event.position().toPoint())
        if item is not None:
            self.heatmap.item_double_tapped.emit(item)

    def leaveEvent(self, event):
        QToolTip.hideText()
        super().leaveEvent(event)

    def cancel_gestures(self):
        self._long_press_timer.stop()
        self._tap_timer.stop()
        self._pending_tap = None

    def _cancel_press(self):
        self._long_press_timer.stop()
        if self._press_item is not None and not self._long_pressed:
            self.heatmap.item_tap_cancel.emit(self._press_item)
        self._press_item = None

    def _emit_pending_tap(self):
        item, self._pending_tap = self._pending_tap, None
        if item is not None:
            self.heatmap.item_tapped.emit(item)

    def _on_long_press(self):
        if self._press_item is not None:
            self._long_pressed = True
            self.heatmap.item_long_pressed.emit(self._press_item)

    def _show_tooltip(self, event, pos):
        hit = self.hit_test(pos)
        text = None
        if hit is not None and hit[0] == "header":
            text = tooltip_label(self.heatmap.columns()[hit[2]], hit[1])
        elif hit is not None:
            text = self.heatmap.item_at(hit[1], hit[2]).tooltip
        if text:
            QToolTip.showText(event.globalPosition().toPoint(), text, self)
        else:
            QToolTip.hideText()


class ZeatMapWidget(QWidget):
    """
    Calendar heatmap: one row per row header, one column per date bucket.

    ``row_header_builder(row_data)`` returns a QWidget or text for the row
    label. ``item_builder(row, column)`` returns the ZeatMapItem for a cell;
    ``column_date(column)`` gives the bucket date of a column. When no
    builder is given weekends are tinted. ``day_builder(date)`` returns the
    text of a day header cell.
    """

    item_tapped = Signal(object)
    item_double_tapped = Signal(object)
    item_long_pressed = Signal(object)
    item_tap_down = Signal(object)
    item_tap_cancel = Signal(object)
    year_changed = Signal(int)

    def __init__(self, dates, row_headers, row_header_builder=None, options=None,
                 item_builder=None, day_builder=None, today=None, parent=None):
        super().__init__(parent)
        self.options = options or HeatmapOptions()
        self.row_headers = list(row_headers)
        self.row_header_builder = row_header_builder or str
        self.item_builder = item_builder
        self.day_builder = day_builder
        self.today = today or datetime.date.today
        self._disposed = False

        self.controller = NavigationController(
            dates,
            granularity=self.options.granularity,
            years=self.options.years,
            selected_year=self.options.selected_year,
            cell_size=self.options.item_size,
            column_gap=self.options.column_spacing,
            today=self.today,
            month_rollover=self.options.month_rollover,
            on_year_changed=self._on_year_changed,
            on_settled=self._on_settled,
        )

        self.setup_ui()
        self.scroller = ScrollBarAnimator(self.scroll_area, self)
        self.controller.scroller = self.scroller

        self._wheel_timer = QTimer(self)
        self._wheel_timer.setSingleShot(True)
        self._wheel_timer.setInterval(WHEEL_SETTLE_MS)
        self._wheel_timer.timeout.connect(self.sync_cursor)
        self.scroll_area.wheel_scrolled.connect(self._on_wheel_scrolled)

        self._resume_timer = QTimer(self)
        self._resume_timer.setSingleShot(True)
        self._resume_timer.setInterval(0)
        self._resume_timer.timeout.connect(self._resume_scroll)

        self.refresh()
        logger.debug("Heatmap with %d rows and %d columns", len(self.row_headers), len(self.columns()))
        # Runs once the scroll area has a size; see showEvent
        self.controller.goto_month(self.controller.current_month, self.controller.current_year)

    def setup_ui(self):
        self.setObjectName("zeatmapCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        if self.options.card_color is not None:
            color = QColor(self.options.card_color).name(QColor.HexArgb)
            self.setStyleSheet(f"QWidget#zeatmapCard {{ background-color: {color}; border-radius: 12px; }}")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(8)

        layout.addLayout(self._build_header())

        divider = QFrame()
        divider.setFrameShape(QFrame.HLine)
        divider.setFrameShadow(QFrame.Sunken)
        layout.addWidget(divider)

        body = QHBoxLayout()
        body.setSpacing(0)
        self.row_header_column = QWidget()
        self.row_header_layout = QVBoxLayout(self.row_header_column)
        self.row_header_layout.setContentsMargins(self.options.column_spacing, 0, 0, 0)
        self.row_header_layout.setSpacing(0)
        self.row_header_column.setFixedWidth(self.options.row_header_width + self.options.column_spacing)
        body.addWidget(self.row_header_column, alignment=Qt.AlignTop)

        self.scroll_area = GridScrollArea()
        self.scroll_area.set_wheel_enabled(self.options.scrolling_enabled)
        self.grid = HeatmapGrid(self)
        self.scroll_area.setWidget(self.grid)
        body.addWidget(self.scroll_area, stretch=1)
        layout.addLayout(body)

        self.legend = None
        self.legend_slot = QVBoxLayout()
        layout.addLayout(self.legend_slot)
        layout.addStretch()

    def _build_header(self):
        header = QHBoxLayout()

        self.title_label = QLabel(self.options.header_title)
        title_font = QFont()
        title_font.setPointSize(20)
        title_font.setBold(True)
        self.title_label.setFont(title_font)
        header.addWidget(self.title_label)
        header.addStretch()

        self.today_btn = QPushButton("Today")
        self.today_btn.clicked.connect(self.goto_current_period)
        header.addWidget(self.today_btn)

        self.year_combo = QComboBox()
        self.year_combo.currentIndexChanged.connect(self._on_year_selected)
        self.year_combo.setVisible(self.options.show_year_dropdown)
        header.addWidget(self.year_combo)

        self.prev_btn = QPushButton("‹")
        self.prev_btn.setFixedWidth(36)
        self.prev_btn.clicked.connect(self.previous)
        header.addWidget(self.prev_btn)

        self.period_label = QLabel()
        self.period_label.setAlignment(Qt.AlignCenter)
        self.period_label.setMinimumWidth(90)
        header.addWidget(self.period_label)

        self.next_btn = QPushButton("›")
        self.next_btn.setFixedWidth(36)
        self.next_btn.clicked.connect(self.next)
        header.addWidget(self.next_btn)
        return header

    # -- data -----------------------------------------------------------

    def columns(self):
        return self.controller.buckets()

    def column_date(self, column):
        columns = self.columns()
        if 0 <= column < len(columns):
            return columns[column]
        return None

    def item_at(self, row, column):
        columns = self.columns()
        if not 0 <= column < len(columns) or not 0 <= row < len(self.row_headers):
            return placeholder_item(row, column)
        if self.item_builder is not None:
            return self.item_builder(row, column)
        weekend_aware = self.options.granularity is Granularity.DAY
        return default_item(row, column, self.row_headers[row], columns[column], weekend_aware)

    def refresh(self):
        self._rebuild_row_headers()
        self.grid.refresh_geometry()
        bar_height = 0
        if self.options.scrolling_enabled:
            bar_height = self.scroll_area.horizontalScrollBar().sizeHint().height()
        self.scroll_area.setFixedHeight(self.grid.height() + bar_height)
        self._rebuild_legend()
        self._update_header()

    def _rebuild_row_headers(self):
        layout = self.row_header_layout
        while layout.count():
            child = layout.takeAt(0)
            if child.widget() is not None:
                child.widget().deleteLater()

        layout.addSpacing(self.grid.header_height())
        for row_data in self.row_headers:
            layout.addSpacing(self.options.row_spacing)
            header = self.row_header_builder(row_data)
            if not isinstance(header, QWidget):
                header = QLabel(str(header))
            header.setFixedHeight(self.options.item_size)
            layout.addWidget(header)
        layout.addStretch()

    def _rebuild_legend(self):
        if self.legend is not None:
            self.legend_slot.removeWidget(self.legend)
            self.legend.deleteLater()
            self.legend = None
        if self.options.show_legend and self.options.legend_items:
            self.legend = LegendBar(self.options.legend_items, self.options.legend_position)
            self.legend_slot.addWidget(self.legend)

    def _update_header(self):
        controller = self.controller
        step = controller.step_name()
        self.period_label.setText(controller.period_label())
        self.prev_btn.setEnabled(controller.has_previous)
        self.next_btn.setEnabled(controller.has_next)
        self.prev_btn.setToolTip(f"Go to previous {step}")
        self.next_btn.setToolTip(f"Go to next {step}")
        self.today_btn.setToolTip(f"Go to current {step}")
        self._sync_year_combo()

    def _sync_year_combo(self):
        years = [str(year) for year in self.controller.available_years]
        current = str(self.controller.current_year)
        if current not in years:
            current = years[0]

        self.year_combo.blockSignals(True)
        if [self.year_combo.itemText(i) for i in range(self.year_combo.count())] != years:
            self.year_combo.clear()
            self.year_combo.addItems(years)
        self.year_combo.setCurrentText(current)
        self.year_combo.blockSignals(False)

    # -- navigation -----------------------------------------------------

    def goto_month(self, month, year):
        request = self.controller.goto_month(month, year)
        self._update_header()
        return request

    def goto_date(self, date):
        request = self.controller.goto_date(date)
        self._update_header()
        return request

    def goto_current_period(self):
        request = self.controller.goto_current_period()
        self._update_header()
        return request

    def set_year(self, year):
        request = self.controller.set_year(year)
        self._update_header()
        return request

    def previous(self):
        request = self.controller.previous()
        self._update_header()
        return request

    def next(self):
        request = self.controller.next()
        self._update_header()
        return request

    def set_dates(self, dates, years=None):
        if years is not None:
            self.options.years = list(years)
        self.controller.set_dates(dates, years, rescroll=False)
        self.refresh()
        # Scroll only once the grid has its new width
        return self.goto_month(self.controller.current_month, self.controller.current_year)

    def set_granularity(self, granularity):
        granularity = Granularity(granularity)
        self.options.granularity = granularity
        self.controller.set_granularity(granularity, rescroll=False)
        self.refresh()
        return self.goto_month(self.controller.current_month, self.controller.current_year)

    def sync_cursor(self):
        """Line the cursor up with whatever column the user scrolled to."""
        self.controller.sync_to_offset(self.scroller.value())
        self._update_header()

    def end_drag(self, velocity):
        self.scroller.fling(velocity, on_finished=self.sync_cursor)

    def dispose(self):
        if self._disposed:
            return
        self._disposed = True
        self.grid.cancel_gestures()
        self._wheel_timer.stop()
        self._resume_timer.stop()
        self.controller.dispose()

    def listens_for_double_tap(self):
        return self.isSignalConnected(QMetaMethod.fromSignal(self.item_double_tapped))

    # -- callbacks ------------------------------------------------------

    def _on_year_selected(self, index):
        if index < 0:
            return
        self.set_year(int(self.year_combo.itemText(index)))

    def _on_year_changed(self, year):
        self.year_changed.emit(year)

    def _on_settled(self, cursor):
        if not self._disposed:
            self._update_header()

    def _on_wheel_scrolled(self):
        self.scroller.cancel()
        self._wheel_timer.start()

    # -- Qt events ------------------------------------------------------

    def showEvent(self, event):
        super().showEvent(event)
        # Layout settles after the show event; resume on the next turn
        self._resume_timer.start()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self.controller.has_deferred:
            self._resume_scroll()

    def closeEvent(self, event):
        self.dispose()
        super().closeEvent(event)

    def _resume_scroll(self):
        if not self._disposed and self.controller.resume():
            logger.debug("Deferred scroll resumed")
