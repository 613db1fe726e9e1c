#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management for the closing report
"""

import configparser
import os
import logging
from dataclasses import dataclass, field
from datetime import time
from pathlib import Path
from typing import List, Tuple

from closing_report.core.errors import ConfigError
from closing_report.core.record_builder import BUILDERS
from closing_report.core.time_management import parse_time_of_day, validate_increment

RESOURCE_PREFIX = 'resource:'

DEFAULT_RESOURCES = [
    ('inbound', 'inbounds.csv'),
    ('outbound', 'outbounds.csv'),
    ('abandoned', 'abandons.csv'),
]


class Config:
    def __init__(self, config_file='config/settings.ini'):
        self.config_file = config_file
        self.config = configparser.ConfigParser(inline_comment_prefixes=(';', '#'), interpolation=None)
        # account names are case sensitive
        self.config.optionxform = str

        config_dir = Path(config_file).parent
        config_dir.mkdir(parents=True, exist_ok=True)

        self.load()

    def load(self):
        """Load configuration from file"""
        if not os.path.exists(self.config_file):
            self.create_default_config()
            logging.info(f"Created default configuration at {self.config_file}")
            return

        try:
            self.config.read(self.config_file, encoding='utf-8')
        except configparser.Error as e:
            raise ConfigError(f"Error loading configuration {self.config_file}: {e}")
        logging.info(f"Configuration loaded from {self.config_file}")

    def create_default_config(self):
        """Create default configuration"""
        self.config['report'] = {
            'sentinel': '99',
            'time_increment': '30',
            'opening_time': '08:00 AM',
            'closing_time': '05:00 PM',
            'skip_header': 'true',
            'parse_error_policy': 'abort',
            'excluded_codes': '',
        }

        self.config['paths'] = {
            'resource_path': 'data',
            'output_path': 'output',
        }

        self.config['accounts'] = {
            'Others': '99',
        }

        for category, path in DEFAULT_RESOURCES:
            self.config[f"{RESOURCE_PREFIX}{Path(path).stem}"] = {
                'path': path,
                'category': category,
            }

        self.config['email'] = {
            'enabled': 'false',
            'smtp_server': '',
            'smtp_port': '587',
            'use_tls': 'true',
            'username': '',
            'password': '',
            'sender': '',
            'recipients': '',
            'subject': 'Closing Report - {date}',
        }

        self.config['logging'] = {
            'level': 'INFO',
            'log_dir': 'logs',
        }

        self.save()

    def get(self, section, option, fallback=None):
        """Get configuration value"""
        return self.config.get(section, option, fallback=fallback)

    def getint(self, section, option, fallback=None):
        """Get integer configuration value"""
        try:
            return self.config.getint(section, option, fallback=fallback)
        except ValueError:
            raise ConfigError(f"'{self.get(section, option)}' is not an integer", key=f"{section}.{option}")

    def getboolean(self, section, option, fallback=None):
        """Get boolean configuration value"""
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except ValueError:
            raise ConfigError(f"'{self.get(section, option)}' is not a boolean", key=f"{section}.{option}")

    def save(self):
        """Save configuration to file"""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                self.config.write(f)
            logging.debug(f"Configuration saved to {self.config_file}")
        except OSError as e:
            logging.error(f"Error saving configuration: {e}")

    def get_all_sections(self):
        """Get all configuration sections"""
        return self.config.sections()

    def get_section_items(self, section):
        """Get all items in a section"""
        if not self.config.has_section(section):
            return {}
        return dict(self.config.items(section))


@dataclass
class EmailSettings:
    enabled: bool = False
    smtp_server: str = ""
    smtp_port: int = 587
    use_tls: bool = True
    username: str = ""
    password: str = ""
    sender: str = ""
    recipients: List[str] = field(default_factory=list)
    subject: str = "Closing Report - {date}"


@dataclass
class ReportSettings:
    """Validated settings for one run"""
    sentinel: int
    time_increment: int
    opening_time: time
    closing_time: time
    accounts: List[Tuple[str, List[int]]]
    resources: List[Tuple[str, str]]
    skip_header: bool = True
    parse_error_policy: str = 'abort'
    excluded_codes: List[int] = field(default_factory=list)
    output_path: str = 'output'
    email: EmailSettings = field(default_factory=EmailSettings)
    log_level: str = 'INFO'
    log_dir: str = 'logs'


def parse_codes(value, key):
    """Parse a comma separated list of integer codes"""
    codes = []
    for part in str(value).split(','):
        part = part.strip()
        if not part:
            continue
        try:
            codes.append(int(part))
        except ValueError:
            raise ConfigError(f"Unable to parse account code '{part}'", key=key)
    return codes


def _split_list(value):
    return [v.strip() for v in str(value or '').split(',') if v.strip()]


def load_settings(config):
    """Validate a Config up front, raising ConfigError on the first bad key"""
    if not config.config.has_option('report', 'sentinel'):
        raise ConfigError("Missing sentinel account code", key='report.sentinel')
    sentinel = config.getint('report', 'sentinel')

    time_increment = validate_increment(config.get('report', 'time_increment', fallback=''))
    opening_time = parse_time_of_day(config.get('report', 'opening_time', fallback=''), 'report.opening_time')
    closing_time = parse_time_of_day(config.get('report', 'closing_time', fallback=''), 'report.closing_time')

    parse_error_policy = config.get('report', 'parse_error_policy', fallback='abort').strip().lower()
    if parse_error_policy not in ('abort', 'skip'):
        raise ConfigError(f"Unknown policy '{parse_error_policy}', use 'abort' or 'skip'",
                          key='report.parse_error_policy')

    accounts = []
    for name, codes in config.get_section_items('accounts').items():
        parsed = parse_codes(codes, f"accounts.{name}")
        if not parsed:
            raise ConfigError(f"Account '{name}' has no codes", key=f"accounts.{name}")
        accounts.append((name, parsed))
    if not accounts:
        raise ConfigError("No accounts configured", key='accounts')

    resource_root = config.get('paths', 'resource_path', fallback='.')
    resources = []
    for section in config.get_all_sections():
        if not section.startswith(RESOURCE_PREFIX):
            continue
        path = config.get(section, 'path', fallback='').strip()
        category = config.get(section, 'category', fallback='').strip().lower()
        if not path:
            raise ConfigError("Resource has no path", key=f"{section}.path")
        if category not in BUILDERS:
            raise ConfigError(f"Unknown category '{category}', use one of {sorted(BUILDERS)}",
                              key=f"{section}.category")
        resources.append((category, os.path.join(resource_root, path)))
    if not resources:
        resources = [(category, os.path.join(resource_root, path)) for category, path in DEFAULT_RESOURCES]

    recipients = _split_list(config.get('email', 'recipients', fallback=''))
    email = EmailSettings(
        enabled=config.getboolean('email', 'enabled', fallback=False),
        smtp_server=config.get('email', 'smtp_server', fallback=''),
        smtp_port=config.getint('email', 'smtp_port', fallback=587),
        use_tls=config.getboolean('email', 'use_tls', fallback=True),
        username=config.get('email', 'username', fallback=''),
        password=config.get('email', 'password', fallback=''),
        sender=config.get('email', 'sender', fallback=''),
        recipients=recipients,
        subject=config.get('email', 'subject', fallback='Closing Report - {date}'),
    )
    try:
        email.subject.format(date='')
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"Subject may only use the {{date}} placeholder, got {e!r}", key='email.subject')
    if email.enabled and not (email.smtp_server and email.sender and email.recipients):
        raise ConfigError("Email is enabled but smtp_server, sender or recipients is missing", key='email')

    return ReportSettings(
        sentinel=sentinel,
        time_increment=time_increment,
        opening_time=opening_time,
        closing_time=closing_time,
        accounts=accounts,
        resources=resources,
        skip_header=config.getboolean('report', 'skip_header', fallback=True),
        parse_error_policy=parse_error_policy,
        excluded_codes=parse_codes(config.get('report', 'excluded_codes', fallback=''),
                                   'report.excluded_codes'),
        output_path=config.get('paths', 'output_path', fallback='output'),
        email=email,
        log_level=config.get('logging', 'level', fallback='INFO'),
        log_dir=config.get('logging', 'log_dir', fallback='logs'),
    )
