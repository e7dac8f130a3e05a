"""
Analysis module for sleep charts and metrics.

This module contains functions for aggregating sleep records into chart
series and calculating summary statistics.
"""

from sleep_tracker.core.analysis.chart_aggregator import build_monthly_charts, build_series, build_weekly_charts
from sleep_tracker.core.analysis.sleep_metrics import summarize_records

__all__ = ['build_monthly_charts', 'build_series', 'build_weekly_charts', 'summarize_records']
