"""
Time formatting helpers for sleep durations.
"""


def seconds_to_hours(seconds):
    return seconds / 3600


def format_hours_minutes(hours):
    """Format a duration in hours as 'Hh Mm', rounded to the nearest minute."""
    total_minutes = int(round(max(hours, 0) * 60))
    h, m = divmod(total_minutes, 60)
    return f"{h}h {m}m"


def format_sleep_time(seconds):
    """Format an elapsed sleep duration, dropping the hours part below one hour."""
    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_score(score, unit='pts'):
    return f"{int(round(score))} {unit}"
