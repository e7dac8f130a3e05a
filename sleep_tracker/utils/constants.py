"""
Constants used throughout the Sleep Tracker.
This includes storage keys, chart defaults, and sleep score thresholds.
"""

# Durable store keys
storage_keys = {
    'current_user': 'user',
    'users': 'users',
    'sleep_records': 'sleepRecords',
}

# Weekday labels, Sunday first
weekdays = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']

# Chart defaults
chart_defaults = {
    'minimum_scale': {
        'duration': 1,  # hours
        'score': 10,  # points
    },
    'score_unit': 'pts',
}

# Sleep score thresholds
sleep_score_thresholds = {
    'excellent': 85,
    'good': 70,
    'poor': 50,
}

# Recommended sleep ranges in hours
recommended_sleep = {
    'min_hours': 7,
    'max_hours': 9,
    'ideal_min': 7,
    'ideal_max': 8,
}

# Ideal sleep stage ratios (%)
ideal_sleep_ratios = {
    'deep': (20, 30),
    'light': (45, 55),
    'rem': (15, 25),
}
