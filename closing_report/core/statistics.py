#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Duration averages and rates with defined zero cases"""

import logging
from datetime import timedelta

logger = logging.getLogger(__name__)

HOURS_IN_DAY = 24
MINUTES_IN_HOUR = 60
SECONDS_IN_MINUTE = 60


def _div_carry(value, divisor, conversion_factor):
    """Divide, and convert the remainder into the next smaller unit"""
    quotient, remainder = divmod(value, divisor)
    return quotient, remainder * conversion_factor


def average_duration(durations):
    """
    Average a sequence of timedeltas.

    The total is divided unit by unit (days, hours, minutes, seconds), carrying
    each remainder into the next unit. Anything below one second is dropped.
    An empty sequence averages to zero.
    """
    count = 0
    total = timedelta(0)
    for duration in durations:
        total += duration
        count += 1

    if count == 0:
        logger.warning("Unable to compute average, no durations given")
        return timedelta(0)

    hours, rest = divmod(total.seconds, 3600)
    minutes, seconds = divmod(rest, 60)

    avg_days, hours_left = _div_carry(total.days, count, HOURS_IN_DAY)
    avg_hours, minutes_left = _div_carry(hours + hours_left, count, MINUTES_IN_HOUR)
    avg_minutes, seconds_left = _div_carry(minutes + minutes_left, count, SECONDS_IN_MINUTE)
    avg_seconds = (seconds + seconds_left) // count

    return timedelta(days=avg_days, hours=avg_hours, minutes=avg_minutes, seconds=avg_seconds)


def safe_rate(numerator, denominator):
    if denominator == 0:
        return 0.0
    return numerator / denominator


def format_duration(duration):
    """Render a timedelta as H:MM:SS"""
    total = int(duration.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"
