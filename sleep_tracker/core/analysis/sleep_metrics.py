"""
Module for calculating sleep metrics and statistics from recorded sessions.
"""

import pandas as pd

from sleep_tracker.utils.constants import ideal_sleep_ratios, recommended_sleep, sleep_score_thresholds


def records_to_frame(records):
    """
    Convert sleep records into a DataFrame with one row per session.

    Args:
        records: Sequence of SleepRecord

    Returns:
        DataFrame with columns date, duration_hours, sleep_score
    """
    columns = ['date', 'duration_hours', 'sleep_score']
    if not records:
        return pd.DataFrame(columns=columns)

    return pd.DataFrame(
        [
            {
                'date': pd.Timestamp(record.sleep_date),
                'duration_hours': record.duration_hours,
                'sleep_score': record.sleep_score,
            }
            for record in records
        ],
        columns=columns,
    )


def daily_totals(records):
    """
    Collapse sessions into one row per calendar day.

    Hours are summed over the day's sessions; the score is the mean of the scored ones.
    """
    data = records_to_frame(records)
    if data.empty:
        return pd.DataFrame(columns=['duration_hours', 'sleep_score'], index=pd.DatetimeIndex([], name='date'))

    data['sleep_score'] = pd.to_numeric(data['sleep_score'], errors='coerce')
    return data.groupby('date').agg({
        'duration_hours': 'sum',
        'sleep_score': 'mean',
    })


def calculate_sleep_score(sleep_hours, sleep_efficiency=85, deep_sleep_ratio=20,
                          rem_sleep_ratio=20, awake_ratio=0, noise_event_count=0):
    """
    Calculate a 0-100 sleep score from the night's measurements.

    Args:
        sleep_hours: Total sleep time in hours
        sleep_efficiency: Time asleep over time in bed, in percent
        deep_sleep_ratio: Share of deep sleep, in percent
        rem_sleep_ratio: Share of REM sleep, in percent
        awake_ratio: Share of time awake, in percent
        noise_event_count: Number of noise events detected during the night

    Returns:
        int: Sleep score between 0 and 100
    """
    ideal_min, ideal_max = recommended_sleep['ideal_min'], recommended_sleep['ideal_max']
    deep_low, deep_high = ideal_sleep_ratios['deep']
    rem_low, rem_high = ideal_sleep_ratios['rem']

    score = 50.0

    # Duration, up to 25 points
    if ideal_min <= sleep_hours <= ideal_max:
        score += 25
    elif ideal_min - 1 <= sleep_hours < ideal_min or ideal_max < sleep_hours <= recommended_sleep['max_hours']:
        score += 20
    elif ideal_min - 2 <= sleep_hours < ideal_min - 1:
        score += 15
    else:
        score += 10

    # Efficiency, up to 15 points
    score += (sleep_efficiency / 100) * 15

    # Deep sleep, up to 20 points
    if deep_low <= deep_sleep_ratio <= deep_high:
        score += 20
    elif deep_low - 5 <= deep_sleep_ratio < deep_low or deep_high < deep_sleep_ratio <= deep_high + 5:
        score += 15
    else:
        score += 10

    # REM sleep, up to 15 points
    if rem_low <= rem_sleep_ratio <= rem_high:
        score += 15
    elif rem_low - 5 <= rem_sleep_ratio < rem_low:
        score += 10
    else:
        score += 5

    score -= awake_ratio * 2
    score -= min(noise_event_count, 5)

    return int(round(max(0, min(100, score))))


def classify_sleep_score(score):
    if score >= sleep_score_thresholds['excellent']:
        return 'excellent'
    if score >= sleep_score_thresholds['good']:
        return 'good'
    if score >= sleep_score_thresholds['poor']:
        return 'fair'
    return 'poor'


def summarize_records(records):
    """
    Calculate summary statistics over recorded sessions.

    Args:
        records: Sequence of SleepRecord

    Returns:
        dict: Averages, day counts and sleep quality distribution
    """
    days = daily_totals(records)

    summary = {
        'total_records': len(records),
        'total_days': int(len(days)),
        'avg_hours': 0.0,
        'avg_score': 0,
        'good_sleep_days': 0,
        'normal_sleep_days': 0,
        'poor_sleep_days': 0,
    }
    if days.empty:
        return summary

    summary['avg_hours'] = round(float(days['duration_hours'].mean()), 1)

    scores = days['sleep_score'].dropna()
    if not scores.empty:
        summary['avg_score'] = int(round(float(scores.mean())))
        summary['good_sleep_days'] = int((scores >= sleep_score_thresholds['excellent']).sum())
        summary['normal_sleep_days'] = int(
            ((scores >= sleep_score_thresholds['good']) & (scores < sleep_score_thresholds['excellent'])).sum()
        )
        summary['poor_sleep_days'] = int((scores < sleep_score_thresholds['good']).sum())

    return summary


def profile_stats_patch(records):
    """Derived profile statistics as a profile patch"""
    summary = summarize_records(records)
    patch = {
        'averageSleepHours': summary['avg_hours'],
        'totalDays': summary['total_days'],
    }
    if any(record.sleep_score is not None for record in records):
        patch['averageScore'] = summary['avg_score']
    return patch
