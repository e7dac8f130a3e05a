# tests/test_chart_aggregator.py
from datetime import date

import pytest

from sleep_tracker.config.config_manager import ConfigManager
from sleep_tracker.core.analysis.chart_aggregator import (
    build_monthly_charts,
    build_series,
    build_weekly_charts,
    month_dates,
    month_weeks,
    monthly_duration_values,
    monthly_score_values,
    monthly_weekly_averages,
    week_dates,
    weekly_duration_values,
    weekly_score_values,
)
from sleep_tracker.core.models.data_models import MetricKind
from tests.helpers import make_record

DAYS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']


def test_largest_value_gets_full_height():
    values = [{"day": day, "rawValue": raw} for day, raw in zip(DAYS, [0, 6, 7, 5, 7.5, 4, 8])]
    series = build_series(values, minimum_scale=1)

    assert series.max_value == 8
    assert series.points[-1].scaled_height_ratio == 1.0
    assert series.points[0].scaled_height_ratio == 0.0
    assert series.points[1].scaled_height_ratio == pytest.approx(0.75)


def test_all_zero_week_has_zero_heights():
    series = build_series([(day, 0) for day in DAYS], minimum_scale=1)

    assert series.max_value == 1
    assert series.ratios == [0.0] * 7


def test_minimum_scale_floors_the_denominator():
    series = build_series([(day, 0.5) for day in DAYS], minimum_scale=1)
    assert series.ratios == [0.5] * 7


def test_zero_minimum_scale_with_zero_values_does_not_divide_by_zero():
    series = build_series([(day, 0) for day in DAYS], minimum_scale=0)
    assert series.ratios == [0.0] * 7


def test_order_is_preserved():
    days = ['Sat', 'Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri']
    series = build_series([(day, i) for i, day in enumerate(days)], minimum_scale=1)
    assert series.days == days


def test_duration_display_values():
    series = build_series([("Sun", 7.5), ("Mon", 0), ("Tue", 6.999)], minimum_scale=1)
    assert [p.display_value for p in series.points] == ["7h 30m", "0h 0m", "7h 0m"]


def test_score_display_values():
    series = build_series([("Sun", 85), ("Mon", 72.4)], minimum_scale=10, kind=MetricKind.SCORE)

    assert series.kind == MetricKind.SCORE
    assert [p.display_value for p in series.points] == ["85 pts", "72 pts"]
    assert series.points[0].scaled_height_ratio == 1.0


def test_same_input_gives_same_output():
    values = [(day, i * 1.5) for i, day in enumerate(DAYS)]
    assert build_series(values, 1) == build_series(values, 1)


@pytest.mark.parametrize("reference", [date(2024, 3, 3), date(2024, 3, 6), date(2024, 3, 9)])
def test_week_dates_start_on_sunday(reference):
    dates = week_dates(reference)
    assert dates[0] == date(2024, 3, 3)
    assert dates[-1] == date(2024, 3, 9)
    assert len(dates) == 7


def test_weekly_duration_values_sum_sessions_per_day(week_records):
    records = week_records + [make_record(date(2024, 3, 5), 1800)]
    values = weekly_duration_values(records, date(2024, 3, 6))

    assert [day for day, _ in values] == DAYS
    assert [hours for _, hours in values] == [6.0, 0.0, 8.0, 0.0, 0.0, 0.0, 8.0]


def test_weekly_values_ignore_other_weeks(week_records):
    values = weekly_duration_values(week_records, date(2024, 3, 12))
    assert [hours for _, hours in values] == [0.0] * 7


def test_weekly_score_values_average_scored_sessions(week_records):
    records = week_records + [make_record(date(2024, 3, 5), 1800, score=75), make_record(date(2024, 3, 6), 3600)]
    values = weekly_score_values(records, date(2024, 3, 6))

    assert [score for _, score in values] == [70.0, 0.0, 80.0, 0.0, 0.0, 0.0, 90.0]


def test_weekly_values_for_no_records():
    assert weekly_duration_values([], date(2024, 3, 6)) == [(day, 0.0) for day in DAYS]


def test_build_weekly_charts_uses_config_scales(tmp_path, week_records):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("charts:\n  minimum_scale:\n    duration: 10\n    score: 100\n")
    config = ConfigManager(str(config_file))

    charts = build_weekly_charts(week_records, date(2024, 3, 6), config)

    assert charts["sleep_time"].max_value == 10
    assert charts["sleep_time"].points[-1].scaled_height_ratio == pytest.approx(0.8)
    assert charts["sleep_score"].max_value == 100
    assert charts["sleep_score"].points[-1].display_value == "90 pts"


def test_build_weekly_charts_defaults(week_records):
    charts = build_weekly_charts(week_records, date(2024, 3, 6))

    assert charts["sleep_time"].max_value == 8
    assert charts["sleep_time"].points[2].display_value == "7h 30m"
    assert charts["sleep_score"].max_value == 90


def test_missing_values_count_as_zero():
    series = build_series([("Sun", float('nan')), ("Mon", 4), ("Tue", float('inf'))], minimum_scale=1)

    assert series.max_value == 4
    assert series.ratios == [0.0, 1.0, 0.0]
    assert series.points[0].display_value == "0h 0m"


def test_month_dates():
    dates = month_dates(2024, 2)
    assert dates[0] == date(2024, 2, 1)
    assert dates[-1] == date(2024, 2, 29)
    assert len(dates) == 29


def test_month_weeks_are_seven_day_blocks_from_the_first():
    weeks = month_weeks(2024, 2)

    assert len(weeks) == 5
    assert weeks[0] == (1, date(2024, 2, 1), date(2024, 2, 7))
    assert weeks[-1] == (5, date(2024, 2, 29), date(2024, 2, 29))


@pytest.fixture
def month_records():
    return [
        make_record(date(2024, 3, 1), 6 * 3600, score=70),
        make_record(date(2024, 3, 2), 7 * 3600, score=80),
        make_record(date(2024, 3, 9), 8 * 3600, score=90),
        make_record(date(2024, 3, 30), 5 * 3600),
        make_record(date(2024, 4, 1), 9 * 3600, score=60),
    ]


def test_monthly_values_cover_every_day(month_records):
    hours = monthly_duration_values(month_records, 2024, 3)
    scores = monthly_score_values(month_records, 2024, 3)

    assert len(hours) == 31
    assert hours[0] == ("1", 6.0)
    assert hours[8] == ("9", 8.0)
    assert hours[29] == ("30", 5.0)
    assert hours[30] == ("31", 0.0)
    assert scores[29] == ("30", 0.0)
    assert scores[1] == ("2", 80.0)


def test_monthly_weekly_averages(month_records):
    averages = monthly_weekly_averages(month_records, 2024, 3)

    assert averages['sleep_time'] == [("W1", 6.5), ("W2", 8.0), ("W3", 0.0), ("W4", 0.0), ("W5", 5.0)]
    assert averages['sleep_score'] == [("W1", 75.0), ("W2", 90.0), ("W3", 0.0), ("W4", 0.0), ("W5", 0.0)]


def test_build_monthly_charts(month_records):
    charts = build_monthly_charts(month_records, 2024, 3)

    assert set(charts) == {'sleep_time', 'sleep_score', 'weekly_sleep_time', 'weekly_sleep_score'}
    assert charts['sleep_time'].max_value == 8
    assert charts['sleep_time'].days[:3] == ["1", "2", "3"]
    assert charts['weekly_sleep_time'].points[0].display_value == "6h 30m"
    assert charts['weekly_sleep_score'].points[0].display_value == "75 pts"
    assert charts['weekly_sleep_score'].points[1].scaled_height_ratio == 1.0


def test_monthly_charts_for_no_records():
    charts = build_monthly_charts([], 2024, 3)
    assert charts['sleep_time'].ratios == [0.0] * 31
    assert charts['weekly_sleep_score'].ratios == [0.0] * 5
