import datetime
import json

import pytest

from main import ActivityData, DemoSettings
from zeatmap import Granularity

D = datetime.date


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def test_settings_written_with_defaults(home):
    settings = DemoSettings()
    assert settings.config_path == home / ".config/zeatmap/demo.json"
    assert settings.config_path.exists()
    assert settings.config["granularity"] == "day"
    assert json.loads(settings.config_path.read_text()) == settings.config


def test_settings_merge_saved_values(home):
    path = home / ".config/zeatmap/demo.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"granularity": "week", "show_week": True}))

    config = DemoSettings().config
    assert config["granularity"] == "week"
    assert config["show_week"] is True
    assert config["show_legend"] is True


def test_unreadable_settings_fall_back_to_defaults(home):
    path = home / ".config/zeatmap/demo.json"
    path.parent.mkdir(parents=True)
    path.write_text("{not json")

    assert DemoSettings().config["theme"] == "dark"


def test_activity_data_covers_whole_years():
    data = ActivityData(["Alice"], years_back=1, today=D(2024, 6, 1))
    assert data.dates[0] == D(2023, 1, 1)
    assert data.dates[-1] == D(2024, 12, 31)
    assert len(data.dates) == 365 + 366


def test_activity_levels_are_stable_per_bucket():
    data = ActivityData(["Alice", "Bob"], today=D(2024, 6, 1))
    for d in data.dates[:60]:
        level = data.level("Alice", d)
        assert 0 <= level <= 3
        assert level == data.level("Alice", d)
    # every day of a week reports the week's level
    assert data.level("Bob", D(2024, 1, 1), Granularity.WEEK) == data.level("Bob", D(2024, 1, 7), Granularity.WEEK)
