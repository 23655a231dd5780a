from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QDateEdit
)
from PySide6.QtCore import Qt, QDate
from PySide6.QtGui import QFont
import logging

from zeatmap import Granularity, GridPosition, HeatmapOptions, LegendItem, ZeatMapItem, ZeatMapWidget
from .dialogs import SettingsDialog

logger = logging.getLogger(__name__)

LEVEL_COLORS = ["#2d333b", "#0e4429", "#26a641", "#39d353"]
LEVEL_LABELS = ["None", "Low", "Medium", "High"]


class MainWindow(QMainWindow):
    def __init__(self, settings, data):
        super().__init__()
        self.settings = settings
        self.data = data
        self.heatmap = None
        self.setup_ui()
        self.load_theme()

    def setup_ui(self):
        self.setWindowTitle("ZeatMap Demo")
        self.setMinimumSize(900, 480)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        self.main_layout = QVBoxLayout(central_widget)
        self.main_layout.setSpacing(20)
        self.main_layout.setContentsMargins(30, 30, 30, 30)

        self.build_heatmap()

        # Jump to a date
        button_layout = QHBoxLayout()

        self.date_edit = QDateEdit()
        self.date_edit.setDate(QDate.currentDate())
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd")
        button_layout.addWidget(QLabel("Date:"))
        button_layout.addWidget(self.date_edit)

        self.goto_btn = QPushButton("Go to Date")
        self.goto_btn.clicked.connect(self.goto_selected_date)
        self.goto_btn.setMinimumHeight(40)
        button_layout.addWidget(self.goto_btn)

        button_layout.addStretch()

        self.settings_btn = QPushButton("Settings")
        self.settings_btn.clicked.connect(self.show_settings)
        self.settings_btn.setMinimumHeight(40)
        button_layout.addWidget(self.settings_btn)

        self.main_layout.addLayout(button_layout)

        # Status label
        self.status_label = QLabel("Tap a cell")
        self.status_label.setAlignment(Qt.AlignCenter)
        status_font = QFont()
        status_font.setPointSize(12)
        self.status_label.setFont(status_font)
        self.main_layout.addWidget(self.status_label)

    def build_heatmap(self):
        config = self.settings.config
        options = HeatmapOptions(
            granularity=config.get("granularity", "day"),
            show_week=config.get("show_week", False),
            show_year=config.get("show_year", False),
            show_legend=config.get("show_legend", True),
            legend_items=[LegendItem(color, text) for color, text in zip(LEVEL_COLORS, LEVEL_LABELS)],
            scrolling_enabled=config.get("scrolling_enabled", True),
            drag_scrolling_enabled=config.get("drag_scrolling_enabled", True),
            month_rollover=config.get("month_rollover", True),
            header_title="Team Activity",
            row_header_width=120,
        )

        if self.heatmap is not None:
            self.heatmap.dispose()
            self.main_layout.removeWidget(self.heatmap)
            self.heatmap.deleteLater()

        self.heatmap = ZeatMapWidget(
            self.data.dates,
            self.data.members,
            options=options,
            item_builder=self.build_item,
        )
        self.heatmap.item_tapped.connect(self.on_item_tapped)
        self.heatmap.item_long_pressed.connect(self.on_item_long_pressed)
        self.heatmap.year_changed.connect(self.on_year_changed)
        self.main_layout.insertWidget(0, self.heatmap)

    def build_item(self, row, column):
        member = self.data.members[row]
        date = self.heatmap.column_date(column)
        granularity = self.heatmap.options.granularity
        level = self.data.level(member, date, granularity)
        return ZeatMapItem(
            GridPosition(row, column),
            row_data=member,
            color=LEVEL_COLORS[level],
            date=date,
            tooltip=f"<b>{member}</b><br>{date.isoformat()}: {LEVEL_LABELS[level]}",
            extra_data=level,
        )

    def goto_selected_date(self):
        date = self.date_edit.date().toPython()
        if self.heatmap.options.granularity is not Granularity.DAY:
            self.heatmap.goto_month(date.month, date.year)
        elif self.heatmap.goto_date(date) is None:
            self.status_label.setText(f"{date.isoformat()} is not on the map")

    def on_item_tapped(self, item):
        self.status_label.setText(
            f"{item.row_data} on {item.date.isoformat()}: {LEVEL_LABELS[item.extra_data]}"
        )

    def on_item_long_pressed(self, item):
        self.status_label.setText(f"Held {item.row_data} on {item.date.isoformat()}")

    def on_year_changed(self, year):
        logger.info("Showing %d", year)
        self.statusBar().showMessage(f"Now showing {year}", 3000)

    def show_settings(self):
        dialog = SettingsDialog(self.settings.config, self)
        if dialog.exec():
            new_config = dialog.get_config()
            self.settings.config.update(new_config)
            self.settings.save_config()
            self.build_heatmap()
            self.load_theme()

    def load_theme(self):
        theme = self.settings.config.get("theme", "light")
        if theme == "dark":
            self.setStyleSheet("""
                QMainWindow {
                    background-color: #2b2b2b;
                }
                QLabel {
                    color: #ffffff;
                }
                QPushButton {
                    background-color: #3c3c3c;
                    color: white;
                    border: 1px solid #555;
                    padding: 8px;
                    border-radius: 4px;
                }
                QPushButton:hover {
                    background-color: #4c4c4c;
                }
                QPushButton:disabled {
                    color: #777;
                }
                QWidget#zeatmapCard {
                    background-color: #1a1d24;
                    border-radius: 12px;
                }
            """)
        else:
            self.setStyleSheet("")

    def closeEvent(self, event):
        if self.heatmap is not None:
            self.heatmap.dispose()
        super().closeEvent(event)
