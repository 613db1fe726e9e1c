#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Business hours and time-of-day bucketing
"""

import logging
import re
from datetime import datetime, time, timedelta

import pandas as pd

from closing_report.core.errors import ConfigError, RecordParseError
from closing_report.core.statistics import average_duration

logger = logging.getLogger(__name__)

TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p", "%I:%M:%S %p", "%I:%M%p")


def validate_increment(value, key="report.time_increment"):
    """Return the increment in minutes, or raise ConfigError"""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise ConfigError(f"TimeIncrement of '{value}' is not valid. Should be an integer", key=key)

    if parsed < 5 or parsed % 5 != 0:
        raise ConfigError(f"TimeIncrement of {parsed} is not a multiple of five, or is lower than five", key=key)
    if 60 % parsed != 0:
        raise ConfigError(f"TimeIncrement of {parsed} does not divide an hour evenly", key=key)
    return parsed


def parse_time_of_day(value, key):
    """Parse 'HH:MM', 'HH:MM:SS' or 'HH:MM AM/PM' into a datetime.time"""
    if isinstance(value, time):
        return value

    s = str(value).strip().upper()
    s = re.sub(r"\s+", " ", s)
    for fmt in TIME_FORMATS:
        try:
            return pd.to_datetime(s, format=fmt).time()
        except (ValueError, TypeError):
            continue
    raise ConfigError(
        f"Unable to convert '{value}' to a time of day. Use 'HH:MM' or 'HH:MM AM/PM'", key=key)


def stamp_to_span(stamp, field="duration"):
    """Parse an H:MM:SS duration"""
    parts = str(stamp).strip().split(":")
    if len(parts) != 3:
        raise RecordParseError(field, stamp, "expected H:MM:SS")
    try:
        hours, minutes, seconds = (int(p) for p in parts)
    except ValueError as e:
        raise RecordParseError(field, stamp, str(e))
    if min(hours, minutes, seconds) < 0:
        raise RecordParseError(field, stamp, "negative component")
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


class TimeManagement:
    """Owns the bucket width and the opening/closing bounds"""

    def __init__(self, increment, opening_time, closing_time):
        self.increment = validate_increment(increment)
        self.opening_time = parse_time_of_day(opening_time, "report.opening_time")
        self.closing_time = parse_time_of_day(closing_time, "report.closing_time")

        if self.opening_time >= self.closing_time:
            raise ConfigError(
                f"Opening time {self.opening_time} must be before closing time {self.closing_time}",
                key="report.opening_time")
        if self.nearest_increment(self.opening_time) != self.opening_time:
            raise ConfigError(
                f"Opening time {self.opening_time} is not on a {self.increment} minute boundary",
                key="report.opening_time")

        logger.debug(f"Business hours {self.opening_time}-{self.closing_time}, "
                     f"buckets of {self.increment} minutes")

    def nearest_increment(self, timestamp):
        """
        Bucket start for a timestamp: the time of day floored to the increment.

        Minute 29 with a 15 minute increment gives minute 15, never 30.
        """
        minutes = (timestamp.minute // self.increment) * self.increment
        return time(hour=timestamp.hour, minute=minutes)

    def is_within_hours(self, value):
        t = value.time() if isinstance(value, datetime) else value
        return self.opening_time <= t <= self.closing_time

    def bucket_keys(self):
        keys = []
        step = timedelta(minutes=self.increment)
        current = datetime.combine(datetime.min.date(), self.opening_time)
        end = datetime.combine(datetime.min.date(), self.closing_time)
        while current <= end:
            keys.append(current.time())
            current += step
        return keys

    average_duration = staticmethod(average_duration)
    stamp_to_span = staticmethod(stamp_to_span)
