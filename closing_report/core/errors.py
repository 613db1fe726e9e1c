#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Exceptions raised by the closing report engine"""


class ClosingReportError(Exception):
    """Base class for every error raised by the report"""


class ConfigError(ClosingReportError):
    """Invalid or missing configuration. Always fatal."""

    def __init__(self, message, key=None):
        self.key = key
        if key:
            message = f"[{key}] {message}"
        super().__init__(message)


class DuplicateAccountCodeError(ConfigError):
    def __init__(self, code, existing_account, new_account):
        self.code = code
        self.existing_account = existing_account
        self.new_account = new_account
        super().__init__(
            f"Could not add '{new_account}' with code {code}. "
            f"Account code already used by '{existing_account}'",
            key="accounts",
        )


class MissingSentinelAccountError(ConfigError):
    def __init__(self, sentinel):
        self.sentinel = sentinel
        super().__init__(
            f"Sentinel code {sentinel} is not assigned to any account. "
            f"Add it to an account (usually 'Others')",
            key="report.sentinel",
        )


class ResourceError(ClosingReportError):
    """An input file could not be opened or read"""

    def __init__(self, path, reasons):
        self.path = path
        self.reasons = list(reasons)
        super().__init__(f"Could not read '{path}': {'; '.join(self.reasons)}")


class RecordParseError(ClosingReportError):
    """A raw record field could not be converted"""

    def __init__(self, field, value, reason):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Unable to parse {field} from '{value}': {reason}")


class UnsupportedCommunicationError(ClosingReportError):
    """No tracker accepted the communication"""

    def __init__(self, communication, account_name=None):
        self.communication = communication
        self.account_name = account_name
        super().__init__(f"No tracker supports {communication} for account '{account_name}'")


class OutOfRangeError(ClosingReportError):
    """A tracked timestamp falls outside business hours"""

    def __init__(self, timestamp, opening_time, closing_time):
        self.timestamp = timestamp
        self.opening_time = opening_time
        self.closing_time = closing_time
        super().__init__(
            f"Encountered time outside of opening ({opening_time}) "
            f"and closing ({closing_time}) time: {timestamp}"
        )
