"""
Module for rendering chart series to image files.
"""

import os

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from sleep_tracker.core.models.data_models import MetricKind

SERIES_COLORS = {
    MetricKind.DURATION: '#00D4AA',
    MetricKind.SCORE: '#3B82F6',
}

SERIES_TITLES = {
    MetricKind.DURATION: 'Sleep Time',
    MetricKind.SCORE: 'Sleep Score',
}


def render_series_chart(series, output_path, title=None):
    """
    Draw a bar chart for a series using its scaled heights.

    Args:
        series: ChartSeries to draw
        output_path: Path of the PNG file to write
        title: Optional chart title, defaults to the metric name

    Returns:
        str: Path to the generated image
    """
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    days = series.days
    ratios = series.ratios

    fig, ax = plt.subplots(figsize=(8, 4))
    bars = ax.bar(days, ratios, color=SERIES_COLORS[series.kind])

    for bar, point in zip(bars, series.points):
        ax.annotate(
            point.display_value,
            (bar.get_x() + bar.get_width() / 2, bar.get_height()),
            ha='center', va='bottom', fontsize=8, xytext=(0, 2), textcoords='offset points'
        )

    # Axis ticks show real values; bar heights are the normalized ratios
    ax.set_ylim(0, 1.1)
    ax.set_yticks([0, 0.5, 1.0])
    if series.kind == MetricKind.DURATION:
        ax.set_yticklabels(['0h', f"{series.max_value * 0.5:.1f}h", f"{series.max_value:.1f}h"])
    else:
        ax.set_yticklabels(['0', f"{round(series.max_value * 0.5)}", f"{round(series.max_value)}"])

    ax.set_title(title or SERIES_TITLES[series.kind])
    ax.grid(True, axis='y', alpha=0.3)
    fig.tight_layout()
    fig.savefig(output_path)
    plt.close(fig)

    return output_path
