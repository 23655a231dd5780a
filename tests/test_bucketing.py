import datetime

import pytest

from zeatmap.bucketing import (
    Granularity,
    available_years,
    bucket,
    bucket_start,
    index_of_date,
    iso_week_number,
    label,
    to_date,
    tooltip_label,
)

from conftest import days_between, year_of_days

D = datetime.date


@pytest.mark.parametrize("value, expected", [
    (D(2024, 1, 1), 1),
    (D(2024, 1, 8), 2),
    (D(2023, 1, 1), 52),
    (D(2020, 12, 31), 53),
    (D(2021, 1, 3), 53),
    (D(2019, 12, 30), 1),
])
def test_iso_week_number_reference_values(value, expected):
    assert iso_week_number(value) == expected


def test_iso_week_number_agrees_with_isocalendar_across_year_edges():
    for d in days_between(D(2018, 12, 20), D(2027, 1, 10)):
        assert iso_week_number(d) == d.isocalendar()[1], d


def test_iso_week_number_ignores_time_of_day():
    assert iso_week_number(datetime.datetime(2020, 12, 31, 23, 59)) == 53


def test_day_bucketing_is_identity():
    dates = days_between(D(2024, 2, 27), D(2024, 3, 2))
    assert bucket(dates, Granularity.DAY) == dates


@pytest.mark.parametrize("granularity", list(Granularity))
def test_empty_dates_give_empty_buckets(granularity):
    assert bucket([], granularity) == []


def test_week_buckets_for_2024():
    weeks = bucket(year_of_days(2024), Granularity.WEEK)
    assert len(weeks) == 53
    assert weeks[0] == D(2024, 1, 1)
    assert weeks[-1] == D(2024, 12, 30)
    assert all(w.weekday() == 0 for w in weeks)


def test_week_bucket_of_midweek_start_is_previous_monday():
    weeks = bucket([D(2024, 1, 3), D(2024, 1, 4), D(2024, 1, 9)], Granularity.WEEK)
    assert weeks == [D(2024, 1, 1), D(2024, 1, 8)]


def test_dates_a_few_days_apart_share_one_bucket():
    dates = [D(2024, 1, 15), D(2024, 1, 20), D(2024, 2, 3)]
    assert bucket(dates, Granularity.MONTH) == [D(2024, 1, 1), D(2024, 2, 1)]
    assert bucket(dates, Granularity.YEAR) == [D(2024, 1, 1)]


@pytest.mark.parametrize("granularity", [Granularity.WEEK, Granularity.MONTH, Granularity.YEAR])
def test_buckets_are_ascending_and_unique(granularity):
    dates = days_between(D(2022, 11, 20), D(2024, 2, 10))
    columns = bucket(dates, granularity)
    keys = [bucket_start(c, granularity) for c in columns]
    assert columns == sorted(columns)
    assert len(set(keys)) == len(keys)
    assert {bucket_start(d, granularity) for d in dates} == set(columns)


def test_bucket_start_accepts_datetimes():
    assert bucket_start(datetime.datetime(2024, 1, 3, 18, 30), Granularity.WEEK) == D(2024, 1, 1)
    assert bucket_start(datetime.datetime(2024, 5, 31, 1, 0), Granularity.MONTH) == D(2024, 5, 1)


def test_to_date_rejects_other_types():
    with pytest.raises(TypeError):
        to_date("2024-01-01")


def test_short_labels():
    assert label(D(2024, 1, 3), Granularity.DAY) == "3"
    assert label(D(2024, 1, 8), Granularity.WEEK) == "W2"
    assert label(D(2024, 1, 1), Granularity.MONTH) == "Jan"
    assert label(D(2024, 1, 1), Granularity.YEAR) == "2024"


def test_tooltip_labels():
    assert tooltip_label(D(2024, 1, 3), Granularity.DAY) == "Wednesday, January 3, 2024"
    assert tooltip_label(D(2024, 1, 3), Granularity.WEEK) == "Jan 1 - Jan 7, 2024"
    assert tooltip_label(D(2024, 1, 1), Granularity.MONTH) == "January 2024"
    assert tooltip_label(D(2024, 1, 1), Granularity.YEAR) == "2024"


def test_week_tooltip_across_new_year():
    assert tooltip_label(D(2024, 12, 30), Granularity.WEEK) == "Dec 30 - Jan 5, 2025"


def test_available_years_prefers_explicit_years():
    assert available_years(year_of_days(2024), years=[2025, 2023, 2025]) == [2023, 2025]


def test_available_years_from_dates():
    dates = days_between(D(2022, 12, 30), D(2024, 1, 2))
    assert available_years(dates) == [2022, 2023, 2024]


def test_available_years_fall_back_to_today():
    assert available_years([], today=D(2031, 5, 5)) == [2031]
    assert available_years([]) == [datetime.date.today().year]


def test_index_of_date():
    dates = days_between(D(2024, 1, 1), D(2024, 1, 10))
    assert index_of_date(dates, D(2024, 1, 4)) == 3
    assert index_of_date(dates, datetime.datetime(2024, 1, 4, 12, 0)) == 3
    assert index_of_date(dates, D(2023, 1, 4)) is None
    assert index_of_date([], D(2024, 1, 4)) is None
