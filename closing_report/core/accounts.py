#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Accounts and the code directory that routes communications to them
"""

import logging

from closing_report.core.errors import (
    DuplicateAccountCodeError, MissingSentinelAccountError,
    OutOfRangeError, UnsupportedCommunicationError,
)
from closing_report.core.models import Stats, Totals
from closing_report.core.statistics import average_duration, safe_rate
from closing_report.core.tracker import ABANDONED, INBOUND, OUTBOUND

logger = logging.getLogger(__name__)


class Account:
    def __init__(self, name, codes, trackers):
        self.name = name
        self.codes = tuple(codes)
        self.trackers = trackers
        self.communications = []

    def add_communication(self, comm):
        """Offer comm to every tracker, keep it once if any accepted it"""
        was_tracked = False
        for tracker in self.trackers:
            was_tracked = tracker.track_if_supported(comm) or was_tracked

        if not was_tracked:
            raise UnsupportedCommunicationError(comm, self.name)

        self.communications.append(comm)
        logger.debug(f"Added to {self.name}: {comm}")

    def _tracker(self, name):
        for tracker in self.trackers:
            if tracker.name == name:
                return tracker
        return None

    def tracked(self, tracker_name):
        tracker = self._tracker(tracker_name)
        if tracker is None:
            return []
        return [c for c in self.communications if tracker.is_trackable(c)]

    def total_for(self, tracker_name):
        return len(self.tracked(tracker_name))

    @property
    def total_inbound(self):
        return self.total_for(INBOUND)

    @property
    def total_outbound(self):
        return self.total_for(OUTBOUND)

    @property
    def total_abandoned(self):
        return self.total_for(ABANDONED)

    def statistics(self):
        return Stats(
            account_name=self.name,
            inbound_average=average_duration(c.time_spent_pending for c in self.tracked(INBOUND)),
            abandoned_average=average_duration(c.handling_duration for c in self.tracked(ABANDONED)),
            total_inbound=self.total_inbound,
            total_outbound=self.total_outbound,
            total_abandoned=self.total_abandoned,
        )

    def __repr__(self):
        return f"Account(name='{self.name}', codes={list(self.codes)})"


class Accounts:
    """
    Directory of accounts keyed by account code.

    Accounts live once in an ordered list; codes map to a position in that
    list, so several codes can alias one account without it being counted
    twice. Communications whose code is unknown go to the sentinel account.
    """

    def __init__(self, sentinel, definitions, trackers, excluded_codes=()):
        self.sentinel = sentinel
        self.trackers = trackers
        self.excluded_codes = frozenset(excluded_codes)
        self.rejected = []
        self.filtered = 0

        self._accounts = []
        self._index = {}
        for name, codes in definitions:
            account = Account(name, codes, trackers)
            position = len(self._accounts)
            for code in account.codes:
                if code in self._index:
                    existing = self._accounts[self._index[code]]
                    logger.error(f"Account code {code} of '{name}' already used by '{existing.name}'")
                    raise DuplicateAccountCodeError(code, existing.name, name)
                self._index[code] = position
                logger.info(f"Adding account, '{name}' with code, '{code}'")
            self._accounts.append(account)

        if sentinel not in self._index:
            raise MissingSentinelAccountError(sentinel)

    def account_for(self, code):
        position = self._index.get(code)
        if position is None:
            position = self._index[self.sentinel]
        return self._accounts[position]

    def add_communication(self, comm):
        """
        Route comm to its account. Returns True if it was retained.

        Unsupported and out-of-hours communications are logged and skipped.
        """
        if comm.account_code in self.excluded_codes:
            self.filtered += 1
            logger.debug(f"Skipping excluded account code {comm.account_code}: {comm}")
            return False

        account = self.account_for(comm.account_code)
        try:
            account.add_communication(comm)
        except (UnsupportedCommunicationError, OutOfRangeError) as e:
            self.rejected.append((comm, str(e)))
            logger.warning(f"Not adding communication to {account.name}: {e}")
            return False
        return True

    @property
    def inbound_count(self):
        return sum(a.total_inbound for a in self._accounts)

    @property
    def outbound_count(self):
        return sum(a.total_outbound for a in self._accounts)

    @property
    def abandoned_count(self):
        return sum(a.total_abandoned for a in self._accounts)

    @property
    def total_count(self):
        # outbound calls are a separate flow
        return self.inbound_count + self.abandoned_count

    @property
    def abandoned_rate(self):
        return safe_rate(self.abandoned_count, self.total_count)

    def statistics(self):
        for account in self._accounts:
            yield account.statistics()

    def totals(self):
        return Totals(
            total_received=self.total_count,
            inbound=self.inbound_count,
            outbound=self.outbound_count,
            abandoned=self.abandoned_count,
            abandoned_rate=self.abandoned_rate,
        )

    def tracker(self, name):
        for tracker in self.trackers:
            if tracker.name == name:
                return tracker
        raise KeyError(name)

    def __iter__(self):
        return iter(self._accounts)

    def __len__(self):
        return len(self._accounts)
