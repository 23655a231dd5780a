from PySide6.QtWidgets import (
    QDialog, QFormLayout, QComboBox, QCheckBox, QDialogButtonBox
)

from zeatmap import Granularity


class SettingsDialog(QDialog):
    def __init__(self, config, parent=None):
        super().__init__(parent)
        self.config = config.copy()
        self.setWindowTitle("Settings")
        self.setup_ui()

    def setup_ui(self):
        layout = QFormLayout(self)

        self.granularity_combo = QComboBox()
        self.granularity_combo.addItems([g.value for g in Granularity])
        self.granularity_combo.setCurrentText(self.config.get("granularity", "day"))
        layout.addRow("Granularity:", self.granularity_combo)

        self.theme_combo = QComboBox()
        self.theme_combo.addItems(["light", "dark"])
        self.theme_combo.setCurrentText(self.config.get("theme", "light"))
        layout.addRow("Theme:", self.theme_combo)

        self.show_week_check = QCheckBox()
        self.show_week_check.setChecked(self.config.get("show_week", False))
        layout.addRow("Show week row:", self.show_week_check)

        self.show_year_check = QCheckBox()
        self.show_year_check.setChecked(self.config.get("show_year", False))
        layout.addRow("Show year row:", self.show_year_check)

        self.show_legend_check = QCheckBox()
        self.show_legend_check.setChecked(self.config.get("show_legend", True))
        layout.addRow("Show legend:", self.show_legend_check)

        self.scrolling_check = QCheckBox()
        self.scrolling_check.setChecked(self.config.get("scrolling_enabled", True))
        layout.addRow("Wheel scrolling:", self.scrolling_check)

        self.drag_check = QCheckBox()
        self.drag_check.setChecked(self.config.get("drag_scrolling_enabled", True))
        layout.addRow("Drag scrolling:", self.drag_check)

        self.rollover_check = QCheckBox()
        self.rollover_check.setChecked(self.config.get("month_rollover", True))
        layout.addRow("Step months across years:", self.rollover_check)

        buttons = QDialogButtonBox(
            QDialogButtonBox.Ok | QDialogButtonBox.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    def get_config(self):
        return {
            "granularity": self.granularity_combo.currentText(),
            "theme": self.theme_combo.currentText(),
            "show_week": self.show_week_check.isChecked(),
            "show_year": self.show_year_check.isChecked(),
            "show_legend": self.show_legend_check.isChecked(),
            "scrolling_enabled": self.scrolling_check.isChecked(),
            "drag_scrolling_enabled": self.drag_check.isChecked(),
            "month_rollover": self.rollover_check.isChecked()
        }
