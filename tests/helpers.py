# tests/helpers.py
# -------------------------------------------------------------
# Constants and builders shared by the test modules.
# -------------------------------------------------------------

from datetime import datetime, timedelta

from closing_report.core.models import Communication, Direction

SENTINEL = 99

ACCOUNT_DEFINITIONS = [
    ("Acme", [1]),
    ("Globex", [2]),
    ("Others", [SENTINEL]),
]


def make_comm(hour=9, minute=0, code=1, kind="inbound", pending=0, handling=0):
    """Build a communication on a fixed day; kind is inbound, outbound or abandoned"""
    direction, received = {
        "inbound": (Direction.INBOUND, True),
        "outbound": (Direction.OUTBOUND, True),
        "abandoned": (Direction.INBOUND, False),
    }[kind]
    return Communication(
        timestamp=datetime(2024, 3, 4, hour, minute, 0),
        account_code=code,
        direction=direction,
        was_received=received,
        time_spent_pending=timedelta(seconds=pending),
        handling_duration=timedelta(seconds=handling),
    )
