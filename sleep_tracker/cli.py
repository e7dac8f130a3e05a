#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Sleep Tracker command line interface.

Usage:
    sleep-tracker record --duration 27000 [--memo TEXT] [--score 82]
    sleep-tracker week [--reference YYYY-MM-DD] [--render]
    sleep-tracker month [--month YYYY-MM]
    sleep-tracker profile [--set field=value ...]

Options:
    --config    Path to the YAML configuration file (default: config/config.yaml)
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from datetime import date, datetime, timezone

from sleep_tracker.config.config_manager import ConfigManager
from sleep_tracker.core.analysis.chart_aggregator import (
    build_monthly_charts,
    build_weekly_charts,
    week_dates,
)
from sleep_tracker.core.analysis.chart_rendering import render_series_chart
from sleep_tracker.core.exceptions import InvalidSession, NoActiveUser, StorageUnavailable
from sleep_tracker.core.repositories.record_store import RecordStore
from sleep_tracker.core.repositories.user_repository import UserRepository
from sleep_tracker.core.services.profile_service import ProfileReconciler
from sleep_tracker.core.services.sleep_service import SessionRecorder
from sleep_tracker.core.storage.local_store import LocalStore
from sleep_tracker.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_parser():
    """Create and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='sleep-tracker',
        description='Record sleep sessions, edit your profile and chart the week.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--config', default='config/config.yaml', help='Path to YAML config file')

    subparsers = parser.add_subparsers(dest='command', required=True)

    record = subparsers.add_parser('record', help='Save a sleep session')
    record.add_argument('--duration', type=int, required=True, help='Sleep time in seconds')
    record.add_argument('--memo', default='', help='Free-text sleep memo')
    record.add_argument('--score', type=int, default=None, help='Sleep score (0-100)')

    week = subparsers.add_parser('week', help='Show the weekly sleep time and score series')
    week.add_argument('--reference', type=date.fromisoformat, default=None,
                      help='Any date in the week to show (default: today)')
    week.add_argument('--render', action='store_true', help='Write PNG charts to charts.output_dir')

    month = subparsers.add_parser('month', help='Show the per-day and per-week series for a month')
    month.add_argument('--month', dest='period', type=_parse_month, default=None, metavar='YYYY-MM',
                       help='Month to show (default: this month)')

    profile = subparsers.add_parser('profile', help='Show or update the current profile')
    profile.add_argument('--set', dest='updates', action='append', default=[], metavar='FIELD=VALUE',
                         help='Field to update; may be repeated')

    return parser


def _parse_month(value):
    try:
        year, month = (int(part) for part in value.split('-'))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got '{value}'")
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"Month must be between 1 and 12, got {month}")
    return year, month


def _parse_updates(pairs):
    updates = {}
    for pair in pairs:
        if '=' not in pair:
            raise ValueError(f"Expected FIELD=VALUE, got '{pair}'")
        field, value = pair.split('=', 1)
        updates[field.strip()] = value
    return updates


async def run_record(args, store):
    recorder = SessionRecorder(RecordStore(store))
    result = await recorder.record_session(args.duration, args.memo, args.score)
    if result['saved']:
        print(f"Saved sleep record: {result['sleep_time']} on {result['record'].sleep_date}")
    else:
        print(f"Warning: {result['warning']}")
    return 0


async def run_week(args, store, config):
    reference = args.reference or datetime.now(timezone.utc).date()
    records = await RecordStore(store).read_all()
    charts = build_weekly_charts(records, reference, config)
    dates = week_dates(reference)

    print(f"Week {dates[0]} - {dates[-1]}")
    for name, series in charts.items():
        _print_series(name, series)

    if args.render:
        output_dir = config.get('charts.output_dir', 'reports/charts')
        for name, series in charts.items():
            path = render_series_chart(series, os.path.join(output_dir, f"{name}_{dates[0]}.png"))
            print(f"Chart saved to: {path}")
    return 0


def _print_series(name, series):
    print(f"\n{name}:")
    for point in series.points:
        print(f"  {point.day:>3}  {point.display_value:>10}  {'#' * int(round(point.scaled_height_ratio * 20))}")


async def run_month(args, store, config):
    today = datetime.now(timezone.utc).date()
    year, month = args.period or (today.year, today.month)
    records = await RecordStore(store).read_all()
    charts = build_monthly_charts(records, year, month, config)

    print(f"Month {year}-{month:02d}")
    for name, series in charts.items():
        _print_series(name, series)
    return 0


async def run_profile(args, store):
    reconciler = ProfileReconciler(UserRepository(store))
    if args.updates:
        user = await reconciler.update_profile(_parse_updates(args.updates))
    else:
        user = await reconciler.get_current_user()
    print(json.dumps(user.to_storage(), indent=2, ensure_ascii=False))
    return 0


def main(argv=None):
    """Main entry point for the application."""
    args = create_parser().parse_args(argv)
    config = ConfigManager(args.config)
    setup_logging(config.get('logging.level', 'INFO'), config.get('logging.file'))
    store = LocalStore(config.get('storage.data_dir', 'data/local_store'))

    try:
        if args.command == 'record':
            return asyncio.run(run_record(args, store))
        if args.command == 'week':
            return asyncio.run(run_week(args, store, config))
        if args.command == 'month':
            return asyncio.run(run_month(args, store, config))
        return asyncio.run(run_profile(args, store))
    except NoActiveUser as e:
        print(f"\nProfile Error: {e}", flush=True)
        return 1
    except InvalidSession as e:
        print(f"\nSession Error: {e}", flush=True)
        return 1
    except StorageUnavailable as e:
        print(f"\nStorage Error: {e}", flush=True)
        return 1
    except ValueError as e:
        print(f"\nInput Error: {e}", flush=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
