from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainter, QColor, QBrush


class ColorSwatch(QWidget):
    def __init__(self, color, size=20, radius=5, parent=None):
        super().__init__(parent)
        self.setFixedSize(size, size)
        self.color = QColor(color)
        self.radius = radius

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setBrush(QBrush(self.color))
        painter.setPen(Qt.NoPen)
        painter.drawRoundedRect(QRectF(self.rect()), self.radius, self.radius)


class LegendBar(QWidget):
    """Row of colour swatches with labels under the grid."""

    def __init__(self, legend_items, position, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 16, 0, 0)
        layout.setSpacing(8)
        self.labels = []

        if position.alignment != Qt.AlignLeft:
            layout.addStretch()

        for item in legend_items:
            entry = QHBoxLayout()
            entry.setSpacing(4)
            entry.addWidget(ColorSwatch(item.color))
            label = QLabel(item.label)
            entry.addWidget(label)
            layout.addLayout(entry)
            self.labels.append(label)

        if position.alignment != Qt.AlignRight:
            layout.addStretch()
