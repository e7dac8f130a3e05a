"""
Core modules for the Sleep Tracker.

This package contains the core functionality for:
- Sleep record persistence
- Profile reconciliation
- Chart aggregation and sleep metrics
"""
