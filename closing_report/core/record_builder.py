#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Build Communication values from raw CSV rows"""

import logging
import re

import pandas as pd

from closing_report.core.errors import ConfigError, RecordParseError
from closing_report.core.models import Communication, Direction
from closing_report.core.time_management import stamp_to_span

logger = logging.getLogger(__name__)

INBOUND_CATEGORY = "inbound"
OUTBOUND_CATEGORY = "outbound"
ABANDONED_CATEGORY = "abandoned"

# column order of each export
LAYOUTS = {
    INBOUND_CATEGORY: ["first_ring_time", "telephone_number", "call_duration",
                       "agent_id", "account_code", "ring_duration"],
    OUTBOUND_CATEGORY: ["first_ring_time", "telephone_number", "call_duration",
                        "agent_id", "account_code"],
    ABANDONED_CATEGORY: ["first_ring_time", "account_code", "call_duration"],
}

DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p", "%m/%d/%Y %I:%M %p", "%m/%d/%Y %H:%M:%S", "%m/%d/%Y %H:%M",
)


def _fields(category, row):
    layout = LAYOUTS[category]
    if len(row) < len(layout):
        missing = layout[len(row)]
        raise RecordParseError(missing, ",".join(str(v) for v in row), "field missing from row")
    if len(row) > len(layout):
        raise RecordParseError(layout[-1], ",".join(str(v) for v in row),
                               f"expected {len(layout)} fields, found {len(row)}")
    return dict(zip(layout, row))


def parse_timestamp(value, field="first_ring_time"):
    """Parse a full date and time of day; anything less is a parse error"""
    s = re.sub(r"\s+", " ", str(value).strip()).upper()
    if not s:
        raise RecordParseError(field, value, "empty timestamp")
    # keywords such as 'now' or 'today' would be read as the current time
    if not s[0].isdigit():
        raise RecordParseError(field, value, "not a date-time")
    for fmt in DATETIME_FORMATS:
        try:
            parsed = pd.to_datetime(s, format=fmt)
        except (ValueError, TypeError, OverflowError):
            continue
        if not pd.isna(parsed):
            return parsed.to_pydatetime()
    raise RecordParseError(field, value, "expected a date and time such as 'YYYY-MM-DD HH:MM:SS'")


def parse_code(value, sentinel, field="account_code"):
    """Best effort integer, falling back to the sentinel"""
    try:
        return int(str(value).strip())
    except ValueError:
        logger.debug(f"Unable to parse {field} from '{value}', using {sentinel}")
        return sentinel


def from_inbound_record(row, sentinel):
    f = _fields(INBOUND_CATEGORY, row)
    return Communication(
        timestamp=parse_timestamp(f["first_ring_time"]),
        account_code=parse_code(f["account_code"], sentinel),
        direction=Direction.INBOUND,
        was_received=True,
        time_spent_pending=stamp_to_span(f["ring_duration"], "ring_duration"),
        handling_duration=stamp_to_span(f["call_duration"], "call_duration"),
        telephone_number=f["telephone_number"],
        agent_id=parse_code(f["agent_id"], sentinel, "agent_id"),
    )


def from_outbound_record(row, sentinel):
    f = _fields(OUTBOUND_CATEGORY, row)
    return Communication(
        timestamp=parse_timestamp(f["first_ring_time"]),
        account_code=parse_code(f["account_code"], sentinel),
        direction=Direction.OUTBOUND,
        was_received=True,
        handling_duration=stamp_to_span(f["call_duration"], "call_duration"),
        telephone_number=f["telephone_number"],
        agent_id=parse_code(f["agent_id"], sentinel, "agent_id"),
    )


def from_abandoned_record(row, sentinel):
    f = _fields(ABANDONED_CATEGORY, row)
    return Communication(
        timestamp=parse_timestamp(f["first_ring_time"]),
        account_code=parse_code(f["account_code"], sentinel),
        direction=Direction.INBOUND,
        was_received=False,
        handling_duration=stamp_to_span(f["call_duration"], "call_duration"),
    )


BUILDERS = {
    INBOUND_CATEGORY: from_inbound_record,
    OUTBOUND_CATEGORY: from_outbound_record,
    ABANDONED_CATEGORY: from_abandoned_record,
}


def build_communication(category, row, sentinel):
    try:
        builder = BUILDERS[category]
    except KeyError:
        raise ConfigError(f"Unknown record category '{category}'", key="resource.category")
    comm = builder(row, sentinel)
    logger.debug(f"Parsed communication: {comm}")
    return comm
