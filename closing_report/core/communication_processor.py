#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Read call exports and feed them into the account directory"""

import os
import logging
from dataclasses import dataclass

import pandas as pd

from closing_report.core.errors import ConfigError, RecordParseError, ResourceError
from closing_report.core.record_builder import LAYOUTS, build_communication
from closing_report.utils.file_handler import FileHandler

ABORT = "abort"
SKIP = "skip"
PARSE_ERROR_POLICIES = (ABORT, SKIP)


@dataclass
class ProcessingResult:
    path: str
    category: str
    read: int = 0
    added: int = 0
    rejected: int = 0
    parse_errors: int = 0


class CommunicationProcessor:
    def __init__(self, accounts, sentinel, skip_header=True, parse_error_policy=ABORT,
                 progress_callback=None):
        if parse_error_policy not in PARSE_ERROR_POLICIES:
            raise ConfigError(f"Unknown parse error policy '{parse_error_policy}'",
                              key="report.parse_error_policy")
        self.accounts = accounts
        self.sentinel = sentinel
        self.skip_header = skip_header
        self.parse_error_policy = parse_error_policy
        self.progress_callback = progress_callback

    def update_progress(self, percent, message=""):
        if self.progress_callback:
            self.progress_callback(percent, message)

    def _clean(self, value):
        if value is None or pd.isna(value):
            return ""
        return str(value).strip().strip('"').strip()

    def load_csv_file(self, path, width):
        """Read a CSV as strings into columns 0..width; column `width` holds any overflow"""
        errors, warnings = FileHandler.validate_csv_file(path)
        for w in warnings:
            logging.warning(f"{os.path.basename(path)}: {w}")
        if errors:
            raise ResourceError(path, errors)

        try:
            df = pd.read_csv(path, engine="python", sep=",", dtype=str, header=None,
                             names=list(range(width + 1)), skiprows=1 if self.skip_header else 0,
                             keep_default_na=False, skip_blank_lines=True, index_col=False)
        except pd.errors.EmptyDataError:
            logging.warning(f"No records in {path}")
            return pd.DataFrame()
        except (OSError, pd.errors.ParserError) as e:
            logging.error(f"Error loading {path}: {e}")
            raise ResourceError(path, [str(e)])

        logging.info(f"Loaded {len(df)} rows from {os.path.basename(path)}")
        return df

    def iter_records(self, category, path):
        if category not in LAYOUTS:
            raise ConfigError(f"Unknown record category '{category}'")
        width = len(LAYOUTS[category])
        df = self.load_csv_file(path, width)
        for row in df.itertuples(index=False, name=None):
            record = [self._clean(v) for v in row]
            # an overflowing row keeps its extra field so the builder rejects it
            yield record if record[width] else record[:width]

    def process_file(self, category, path):
        result = ProcessingResult(path=path, category=category)
        for line_no, record in enumerate(self.iter_records(category, path),
                                         start=2 if self.skip_header else 1):
            result.read += 1
            try:
                comm = build_communication(category, record, self.sentinel)
            except RecordParseError as e:
                result.parse_errors += 1
                if self.parse_error_policy == ABORT:
                    logging.error(f"{os.path.basename(path)} line {line_no}: {e}")
                    raise
                logging.warning(f"Skipping {os.path.basename(path)} line {line_no}: {e}")
                continue

            if self.accounts.add_communication(comm):
                result.added += 1
            else:
                result.rejected += 1

        logging.info(f"Processed {result.read} {category} records from {os.path.basename(path)}: "
                     f"{result.added} added, {result.rejected} rejected, {result.parse_errors} unparsable")
        return result

    def process_resources(self, resources):
        """Process (category, path) pairs in order"""
        results = []
        total = len(resources)
        self.update_progress(5, "Starting processing files...")
        for i, (category, path) in enumerate(resources):
            self.update_progress(5 + int(90 * i / max(total, 1)), f"Loading {os.path.basename(path)}")
            results.append(self.process_file(category, path))
        self.update_progress(100, f"Processing complete: {sum(r.added for r in results)} communications")
        return results
