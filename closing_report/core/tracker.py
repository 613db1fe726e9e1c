#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Named predicates that count communications per time bucket"""

import logging
from collections import OrderedDict

from closing_report.core.errors import OutOfRangeError

logger = logging.getLogger(__name__)

INBOUND = "Inbound"
OUTBOUND = "Outbound"
ABANDONED = "Abandoned"


class TimeTracker:
    def __init__(self, name, predicate, time_management):
        self.name = name
        self.is_trackable = predicate
        self.time_management = time_management
        self.buckets = OrderedDict((key, 0) for key in time_management.bucket_keys())

    @property
    def count(self):
        return sum(self.buckets.values())

    def track_if_supported(self, comm):
        """
        Count comm in its bucket when the predicate accepts it.

        Returns False without touching any bucket when the predicate rejects.
        Raises OutOfRangeError, also without mutating, when an accepted
        communication lies outside business hours.
        """
        if not self.is_trackable(comm):
            return False

        tm = self.time_management
        rounded = tm.nearest_increment(comm.timestamp)
        if not tm.is_within_hours(comm.timestamp) or rounded not in self.buckets:
            raise OutOfRangeError(comm.timestamp, tm.opening_time, tm.closing_time)

        self.buckets[rounded] += 1
        logger.debug(f"{self.name}: added {comm.timestamp} as {rounded}, count now {self.buckets[rounded]}")
        return True

    def reset(self):
        for key in self.buckets:
            self.buckets[key] = 0

    def __iter__(self):
        return iter(self.buckets.items())

    def __repr__(self):
        return f"TimeTracker(name='{self.name}', count={self.count})"


def is_answered_inbound(comm):
    return comm.is_inbound and comm.was_received


def is_outbound(comm):
    return comm.is_outbound


def is_abandoned(comm):
    return not comm.was_received


def build_default_trackers(time_management):
    return [
        TimeTracker(INBOUND, is_answered_inbound, time_management),
        TimeTracker(OUTBOUND, is_outbound, time_management),
        TimeTracker(ABANDONED, is_abandoned, time_management),
    ]
