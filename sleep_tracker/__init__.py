"""
Sleep Tracker - personal sleep-tracking client core.

This package contains:
- Durable local storage of sleep sessions and user profiles
- Profile reconciliation between the current-user slot and the user collection
- Chart data aggregation for weekly sleep time and sleep score
- A thin HTTP API and CLI on top of the core
"""

__version__ = "0.1.0"
