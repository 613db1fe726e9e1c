# tests/conftest.py
# -------------------------------------------------------------
# Shared fixtures: business hours 08:00-17:00 in 30 minute
# buckets, the three standard trackers, and a small directory.
# -------------------------------------------------------------

import pytest

from closing_report.core.accounts import Accounts
from closing_report.core.time_management import TimeManagement
from closing_report.core.tracker import build_default_trackers

from tests.helpers import ACCOUNT_DEFINITIONS, SENTINEL


@pytest.fixture
def time_management():
    return TimeManagement(30, "08:00", "17:00")


@pytest.fixture
def trackers(time_management):
    return build_default_trackers(time_management)


@pytest.fixture
def accounts(trackers):
    return Accounts(SENTINEL, ACCOUNT_DEFINITIONS, trackers)
