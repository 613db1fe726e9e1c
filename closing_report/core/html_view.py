#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""HTML summary of the closing report"""

import html
import logging
from datetime import datetime

from closing_report.core.statistics import format_duration


class HtmlView:
    def __init__(self, accounts, title="Closing Report", images=None):
        """
        images: optional list of (alt text, src) pairs shown under the tables.
        src is a file name for a saved report or 'cid:<name>' for email.
        """
        self.accounts = accounts
        self.title = title
        self.images = images or []

    def _totals_block(self):
        totals = self.accounts.totals()
        return f"""
            <table class="totals">
                <tr><th>Total Received</th><td>{totals.total_received}</td></tr>
                <tr><th>Inbound</th><td>{totals.inbound}</td></tr>
                <tr><th>Outbound</th><td>{totals.outbound}</td></tr>
                <tr><th>Abandoned</th><td>{totals.abandoned}</td></tr>
                <tr><th>Abandon Rate</th><td>{totals.abandoned_rate:.1%}</td></tr>
            </table>
        """

    def _statistics_table(self):
        rows = ""
        for stats in self.accounts.statistics():
            rows += f"""
                <tr>
                    <td>{html.escape(stats.account_name)}</td>
                    <td>{stats.total_inbound}</td>
                    <td>{stats.total_outbound}</td>
                    <td>{stats.total_abandoned}</td>
                    <td>{format_duration(stats.inbound_average)}</td>
                    <td>{format_duration(stats.abandoned_average)}</td>
                </tr>"""

        return f"""
            <table class="stats">
                <tr>
                    <th>Account</th><th>Inbound</th><th>Outbound</th><th>Abandoned</th>
                    <th>Avg Ring Time</th><th>Avg Time to Abandon</th>
                </tr>{rows}
            </table>
        """

    def render(self):
        images = "".join(
            f'<div class="chart"><img src="{html.escape(src)}" alt="{html.escape(alt)}"></div>'
            for alt, src in self.images
        )

        return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{html.escape(self.title)}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; color: #222; }}
        h1 {{ color: #305496; }}
        table {{ border-collapse: collapse; margin-bottom: 20px; }}
        th, td {{ border: 1px solid #999; padding: 6px 10px; text-align: left; }}
        th {{ background-color: #4472C4; color: #fff; }}
        table.stats tr:nth-child(even) td {{ background-color: #F2F2F2; }}
        .chart img {{ max-width: 100%; }}
        .footer {{ color: #888; font-size: 12px; }}
    </style>
</head>
<body>
    <h1>{html.escape(self.title)}</h1>
    <h2>Totals</h2>
    {self._totals_block()}
    <h2>Accounts</h2>
    {self._statistics_table()}
    {images}
    <div class="footer">
        <p>Generated {datetime.now().strftime('%Y-%m-%d %H:%M')}</p>
    </div>
</body>
</html>
"""

    def save_to_file(self, path):
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render())
        logging.info(f"HTML report saved to {path}")
        return path
