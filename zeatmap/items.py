from enum import Enum

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor

# Semi-transparent, as the cells sit on the card background
WEEKEND_COLOR = QColor(255, 131, 131, 110)
WEEKDAY_COLOR = QColor(221, 221, 221, 110)


class LegendPosition(Enum):
    START = "start"
    CENTER = "center"
    END = "end"

    @property
    def alignment(self):
        if self is LegendPosition.START:
            return Qt.AlignLeft
        if self is LegendPosition.END:
            return Qt.AlignRight
        return Qt.AlignHCenter


class GridPosition:
    def __init__(self, row, column):
        self.row = row
        self.column = column

    def __eq__(self, other):
        if not isinstance(other, GridPosition):
            return NotImplemented
        return (self.row, self.column) == (other.row, other.column)

    def __hash__(self):
        return hash((self.row, self.column))

    def __repr__(self):
        return f"GridPosition({self.row}, {self.column})"


class LegendItem:
    def __init__(self, color, label):
        self.color = QColor(color)
        self.label = label

    def __repr__(self):
        return f"LegendItem({self.color.name()}, {self.label!r})"


class ZeatMapItem:
    """One grid cell as handed to the host: where it is, what it shows."""

    def __init__(self, position, row_data=None, color=None, date=None,
                 tooltip=None, extra_data=None):
        self.position = position
        self.row_data = row_data
        self.color = QColor(color) if color is not None else QColor(Qt.transparent)
        self.date = date
        # Rich text, shown by QToolTip on hover
        self.tooltip = tooltip
        self.extra_data = extra_data

    @property
    def is_placeholder(self):
        return self.date is None and self.row_data is None

    def __repr__(self):
        return f"ZeatMapItem({self.position!r}, date={self.date!r}, row_data={self.row_data!r})"


def placeholder_item(row, column):
    """Neutral cell for a column the current buckets do not cover."""
    return ZeatMapItem(GridPosition(row, column))


def default_item(row, column, row_data, date, weekend_aware=True):
    if weekend_aware and date.weekday() >= 5:
        color = WEEKEND_COLOR
    else:
        color = WEEKDAY_COLOR
    return ZeatMapItem(GridPosition(row, column), row_data=row_data, color=color, date=date)
