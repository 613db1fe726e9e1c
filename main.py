#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Closing Report - Main Entry Point
Reads the day's call exports, aggregates them per account and time of day,
and writes charts, an HTML summary and an Excel workbook (optionally emailed)
"""

import argparse
import sys
import os
import logging

from closing_report.core.accounts import Accounts
from closing_report.core.charts import render_bar_chart, render_line_chart
from closing_report.core.communication_processor import CommunicationProcessor
from closing_report.core.errors import ClosingReportError
from closing_report.core.excel_generator import ExcelGenerator
from closing_report.core.html_view import HtmlView
from closing_report.core.time_management import TimeManagement
from closing_report.core.tracker import build_default_trackers
from closing_report.utils.config import Config, load_settings
from closing_report.utils.file_handler import FileHandler
from closing_report.utils.logger import PerformanceLogger, setup_logger
from closing_report.utils.mailer import EmailSender

BAR_CHART = "barChart.png"
LINE_CHART = "lineChart.png"
HTML_REPORT = "view.html"
EXCEL_REPORT = "closing_report.xlsx"


class ClosingReportApp:
    def __init__(self, config_file='config/settings.ini', output_path=None,
                 send_email=True, log_level=None):
        self.config = Config(config_file)
        self.settings = load_settings(self.config)
        if output_path:
            self.settings.output_path = output_path
        if log_level:
            self.settings.log_level = log_level
        self.send_email = send_email
        self.accounts = None

    def setup_logging(self):
        """Setup application logging"""
        setup_logger(self.settings.log_level, self.settings.log_dir)

    def handle_exception(self, exc_type, exc_value, exc_traceback):
        """Global exception handler"""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logging.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    def report_progress(self, percent, message=""):
        logging.info(f"[{percent:3d}%] {message}")

    def build_accounts(self):
        settings = self.settings
        time_management = TimeManagement(settings.time_increment, settings.opening_time,
                                         settings.closing_time)
        trackers = build_default_trackers(time_management)
        return Accounts(settings.sentinel, settings.accounts, trackers,
                        excluded_codes=settings.excluded_codes)

    def ingest(self):
        processor = CommunicationProcessor(
            self.accounts,
            self.settings.sentinel,
            skip_header=self.settings.skip_header,
            parse_error_policy=self.settings.parse_error_policy,
            progress_callback=self.report_progress,
        )
        with PerformanceLogger("Ingest call records"):
            return processor.process_resources(self.settings.resources)

    def write_reports(self):
        output_dir = FileHandler.resolve_output_dir(self.settings.output_path)
        if not FileHandler.safe_create_directory(output_dir):
            raise ClosingReportError(f"Could not create output directory {output_dir}")

        paths = {
            'bar': os.path.join(output_dir, BAR_CHART),
            'line': os.path.join(output_dir, LINE_CHART),
            'html': os.path.join(output_dir, HTML_REPORT),
            'excel': os.path.join(output_dir, EXCEL_REPORT),
        }

        with PerformanceLogger("Render reports"):
            render_bar_chart(self.accounts, paths['bar'])
            render_line_chart(self.accounts.trackers, paths['line'])
            HtmlView(self.accounts, images=[
                ("Calls per account", BAR_CHART),
                ("Calls per time of day", LINE_CHART),
            ]).save_to_file(paths['html'])
            ExcelGenerator(progress_callback=self.report_progress).generate_excel(
                self.accounts, paths['excel'])

        return paths

    def email_reports(self, paths):
        html_body = HtmlView(self.accounts, images=[
            ("Calls per account", "cid:barChart"),
            ("Calls per time of day", "cid:lineChart"),
        ]).render()
        return EmailSender(self.settings.email).send_report(
            html_body, images={'barChart': paths['bar'], 'lineChart': paths['line']})

    def run(self):
        """Run the whole batch. Returns the process exit status."""
        self.setup_logging()
        sys.excepthook = self.handle_exception
        logging.info("Starting Closing Report")

        try:
            self.accounts = self.build_accounts()
            results = self.ingest()
            paths = self.write_reports()
        except ClosingReportError as e:
            logging.error(f"Closing report aborted: {e}")
            return 1

        totals = self.accounts.totals()
        logging.info(f"Totals: received {totals.total_received}, inbound {totals.inbound}, "
                     f"outbound {totals.outbound}, abandoned {totals.abandoned} "
                     f"({totals.abandoned_rate:.1%})")
        logging.info(f"{sum(r.read for r in results)} records read, "
                     f"{len(self.accounts.rejected)} rejected, {self.accounts.filtered} filtered")

        if self.send_email and self.settings.email.enabled:
            if not self.email_reports(paths):
                logging.warning("Report was written but could not be emailed")

        return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Closing report for the day's call exports")
    parser.add_argument('--config', default='config/settings.ini', help="Path to the settings file")
    parser.add_argument('--output', help="Output directory, overrides paths.output_path")
    parser.add_argument('--no-email', action='store_true', help="Do not email the report")
    parser.add_argument('--log-level', help="Logging level, overrides logging.level")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    try:
        app = ClosingReportApp(args.config, output_path=args.output,
                               send_email=not args.no_email, log_level=args.log_level)
    except ClosingReportError as e:
        logging.basicConfig(level=logging.INFO)
        logging.error(f"Invalid configuration: {e}")
        return 1
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
