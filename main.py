#!/usr/bin/env python3
"""
ZeatMap demo
Team activity heatmap with every navigation option wired up
"""

import sys
import json
import random
import logging
import datetime
from pathlib import Path
from PySide6.QtWidgets import QApplication

from zeatmap import Granularity, bucket_start
from zeatmap_demo.main_window import MainWindow

logger = logging.getLogger("zeatmap.demo")


class DemoSettings:
    def __init__(self):
        self.config_dir = Path.home() / ".config/zeatmap"
        self.config_path = self.config_dir / "demo.json"
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.load_config()

    def load_config(self):
        """Load or create default configuration"""
        default_config = {
            "granularity": "day",
            "theme": "dark",
            "show_week": False,
            "show_year": False,
            "show_legend": True,
            "scrolling_enabled": True,
            "drag_scrolling_enabled": True,
            "month_rollover": True,
            "years_back": 1,
            "log_level": "INFO",
        }

        self.config = default_config
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    loaded_config = json.load(f)
                self.config = {**default_config, **loaded_config}
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self.config_path, e)
        else:
            self.save_config()

    def save_config(self):
        """Save configuration to file"""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)


class ActivityData:
    """Made-up but stable activity levels for a handful of team members."""

    def __init__(self, members, years_back=1, today=None):
        self.members = members
        today = today or datetime.date.today()
        first = datetime.date(today.year - years_back, 1, 1)
        last = datetime.date(today.year, 12, 31)
        self.dates = [
            first + datetime.timedelta(days=i)
            for i in range((last - first).days + 1)
        ]

    def level(self, member, date, granularity=Granularity.DAY):
        start = bucket_start(date, granularity)
        rng = random.Random(f"{member}:{granularity.value}:{start.isoformat()}")
        if granularity is Granularity.DAY and start.weekday() >= 5:
            return rng.choice([0, 0, 0, 1])
        return rng.randint(0, 3)


def main():
    app = QApplication(sys.argv)
    app.setApplicationName("ZeatMap Demo")

    settings = DemoSettings()
    logging.basicConfig(
        level=getattr(logging, str(settings.config.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    data = ActivityData(
        ["Alice", "Bob", "Chioma", "Dmitri", "Eun-ji"],
        years_back=settings.config.get("years_back", 1),
    )
    logger.info("Loaded %d dates for %d members", len(data.dates), len(data.members))

    window = MainWindow(settings, data)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
