"""
Module for turning daily sleep metrics into chart-ready bar series.
"""

import calendar
from datetime import date, timedelta
from typing import Dict, List, Mapping, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from sleep_tracker.core.analysis.sleep_metrics import daily_totals
from sleep_tracker.core.models.data_models import ChartPoint, ChartSeries, MetricKind
from sleep_tracker.utils.constants import chart_defaults, weekdays
from sleep_tracker.utils.time_format import format_hours_minutes, format_score

DayValue = Union[Mapping, Tuple[str, float]]


def _unpack(entry: DayValue) -> Tuple[str, float]:
    if isinstance(entry, Mapping):
        raw = entry.get('rawValue', entry.get('raw_value', 0))
        return str(entry.get('day', '')), float(raw or 0)
    day, raw = entry
    return str(day), float(raw or 0)


def _display_value(value: float, kind: MetricKind, score_unit: str) -> str:
    if kind == MetricKind.DURATION:
        return format_hours_minutes(value)
    return format_score(value, score_unit)


def build_series(values: Sequence[DayValue], minimum_scale: float,
                 kind: MetricKind = MetricKind.DURATION,
                 score_unit: str = chart_defaults['score_unit']) -> ChartSeries:
    """
    Normalize a run of daily values into a bar series.

    Callers supply the entries in calendar order (seven, Sunday first, for a week);
    the order is kept as given and the length is not checked. Missing values
    (NaN, inf) count as 0.

    Args:
        values: Sequence of {day, rawValue} mappings or (day, value) pairs
        minimum_scale: Floor for the normalization constant
        kind: Metric kind, selects the display format
        score_unit: Suffix for score display values

    Returns:
        ChartSeries with one point per input entry
    """
    kind = MetricKind(kind)
    entries = [_unpack(entry) for entry in values]
    raw = np.array([value for _, value in entries], dtype=float)
    raw = np.nan_to_num(raw, nan=0.0, posinf=0.0, neginf=0.0)

    max_value = float(max(raw.max() if raw.size else 0.0, minimum_scale))
    if max_value > 0:
        ratios = np.clip(raw / max_value, 0.0, 1.0)
    else:
        ratios = np.zeros_like(raw)

    points = [
        ChartPoint(
            day=day,
            raw_value=float(value),
            scaled_height_ratio=float(ratio),
            display_value=_display_value(float(value), kind, score_unit),
        )
        for (day, _), value, ratio in zip(entries, raw, ratios)
    ]
    return ChartSeries(kind=kind, max_value=max_value, points=points)


def week_dates(reference: date) -> List[date]:
    """The seven dates of the Sunday-first week containing reference"""
    # date.weekday(): Monday=0 ... Sunday=6
    start = reference - timedelta(days=(reference.weekday() + 1) % 7)
    return [start + timedelta(days=i) for i in range(7)]


def month_dates(year: int, month: int) -> List[date]:
    """Every date of the given month"""
    _, days_in_month = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, days_in_month + 1)]


def month_weeks(year: int, month: int) -> List[Tuple[int, date, date]]:
    """
    Split a month into numbered seven-day blocks starting on the 1st.

    The last block ends on the month's last day, so it may be shorter.
    """
    dates = month_dates(year, month)
    return [
        (number, block[0], block[-1])
        for number, block in enumerate((dates[i:i + 7] for i in range(0, len(dates), 7)), start=1)
    ]


def _column_by_day(records, dates: List[date], column: str) -> pd.Series:
    days = daily_totals(records)
    index = pd.DatetimeIndex([pd.Timestamp(d) for d in dates])
    if days.empty:
        return pd.Series(float('nan'), index=index)
    return days[column].reindex(index)


def _weekly_column(records, reference: date, column: str) -> List[Tuple[str, float]]:
    values = _column_by_day(records, week_dates(reference), column).fillna(0.0)
    return [(weekdays[i], float(value)) for i, value in enumerate(values)]


def weekly_duration_values(records, reference: date) -> List[Tuple[str, float]]:
    """Hours slept per day of the week containing reference, summed over sessions"""
    return _weekly_column(records, reference, 'duration_hours')


def weekly_score_values(records, reference: date) -> List[Tuple[str, float]]:
    """Mean sleep score per day of the week containing reference; 0 for days without a score"""
    return _weekly_column(records, reference, 'sleep_score')


def _monthly_column(records, year: int, month: int, column: str) -> List[Tuple[str, float]]:
    dates = month_dates(year, month)
    values = _column_by_day(records, dates, column).fillna(0.0)
    return [(str(d.day), float(value)) for d, value in zip(dates, values)]


def monthly_duration_values(records, year: int, month: int) -> List[Tuple[str, float]]:
    """Hours slept per day of the month, labelled by day of month"""
    return _monthly_column(records, year, month, 'duration_hours')


def monthly_score_values(records, year: int, month: int) -> List[Tuple[str, float]]:
    """Mean sleep score per day of the month; 0 for days without a score"""
    return _monthly_column(records, year, month, 'sleep_score')


def monthly_weekly_averages(records, year: int, month: int) -> Dict[str, List[Tuple[str, float]]]:
    """
    Average hours and score for each seven-day block of the month.

    Only days with a recorded session count toward the hours average, and only
    scored days toward the score average. Blocks without data are 0. Hours are
    rounded to one decimal and scores to whole points.

    Returns:
        dict with 'sleep_time' and 'sleep_score' lists of (label, value), labels W1, W2, ...
    """
    dates = month_dates(year, month)
    hours = _column_by_day(records, dates, 'duration_hours')
    scores = _column_by_day(records, dates, 'sleep_score')

    averages = {'sleep_time': [], 'sleep_score': []}
    for number, start, end in month_weeks(year, month):
        avg_hours = hours.loc[pd.Timestamp(start):pd.Timestamp(end)].mean()
        avg_score = scores.loc[pd.Timestamp(start):pd.Timestamp(end)].mean()
        label = f"W{number}"
        averages['sleep_time'].append((label, 0.0 if pd.isna(avg_hours) else round(float(avg_hours), 1)))
        averages['sleep_score'].append((label, 0.0 if pd.isna(avg_score) else float(round(avg_score))))
    return averages


def _chart_settings(config):
    def setting(key, default):
        return config.get(key, default) if config is not None else default

    return (
        setting('charts.minimum_scale.duration', chart_defaults['minimum_scale']['duration']),
        setting('charts.minimum_scale.score', chart_defaults['minimum_scale']['score']),
        setting('charts.score_unit', chart_defaults['score_unit']),
    )


def build_weekly_charts(records, reference: date, config=None) -> Dict[str, ChartSeries]:
    """
    Build the sleep time and sleep score series for one week.

    Args:
        records: Sequence of SleepRecord
        reference: Any date in the week to chart
        config: Optional ConfigManager supplying chart settings

    Returns:
        dict with 'sleep_time' and 'sleep_score' series
    """
    duration_scale, score_scale, score_unit = _chart_settings(config)

    return {
        'sleep_time': build_series(
            weekly_duration_values(records, reference), duration_scale, MetricKind.DURATION
        ),
        'sleep_score': build_series(
            weekly_score_values(records, reference), score_scale, MetricKind.SCORE, score_unit
        ),
    }


def build_monthly_charts(records, year: int, month: int, config=None) -> Dict[str, ChartSeries]:
    """
    Build the per-day and per-week series for one month.

    Returns:
        dict with 'sleep_time' and 'sleep_score' (one point per day) and
        'weekly_sleep_time' and 'weekly_sleep_score' (one point per seven-day block)
    """
    duration_scale, score_scale, score_unit = _chart_settings(config)
    weekly = monthly_weekly_averages(records, year, month)

    return {
        'sleep_time': build_series(
            monthly_duration_values(records, year, month), duration_scale, MetricKind.DURATION
        ),
        'sleep_score': build_series(
            monthly_score_values(records, year, month), score_scale, MetricKind.SCORE, score_unit
        ),
        'weekly_sleep_time': build_series(weekly['sleep_time'], duration_scale, MetricKind.DURATION),
        'weekly_sleep_score': build_series(weekly['sleep_score'], score_scale, MetricKind.SCORE, score_unit),
    }
