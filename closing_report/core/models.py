#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Value types shared by the aggregation engine
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class Direction(Enum):
    INBOUND = "Inbound"
    OUTBOUND = "Outbound"


@dataclass(frozen=True)
class Communication:
    """One normalized call record"""

    timestamp: datetime
    account_code: int
    direction: Direction
    was_received: bool
    time_spent_pending: timedelta = timedelta(0)
    handling_duration: timedelta = timedelta(0)
    telephone_number: str = ""
    agent_id: Optional[int] = None

    @property
    def is_inbound(self):
        return self.direction is Direction.INBOUND

    @property
    def is_outbound(self):
        return self.direction is Direction.OUTBOUND

    def __str__(self):
        return (f"Communication(timestamp: {self.timestamp}, account_code: {self.account_code}, "
                f"direction: {self.direction.value}, received: {self.was_received})")


@dataclass(frozen=True)
class Stats:
    account_name: str
    inbound_average: timedelta
    abandoned_average: timedelta
    total_inbound: int
    total_outbound: int
    total_abandoned: int


@dataclass(frozen=True)
class Totals:
    total_received: int
    inbound: int
    outbound: int
    abandoned: int
    abandoned_rate: float
