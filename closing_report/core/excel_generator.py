#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Excel export of the closing report
- Statistics: one row per account
- Totals: directory level counts and abandon rate
- Time_Series: one column per tracker, one row per time bucket
"""

import logging

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from closing_report.core.statistics import format_duration

STATISTICS_COLUMNS = ["Account", "Inbound", "Outbound", "Abandoned",
                      "Avg Ring Time", "Avg Time to Abandon"]


class ExcelGenerator:
    def __init__(self, progress_callback=None):
        self.progress_callback = progress_callback

    def update_progress(self, percent, message=""):
        if self.progress_callback:
            self.progress_callback(percent, message)

    # -------------------------
    # Autofit and Styling
    # -------------------------
    def autofit_and_style(self, workbook, sheet_name, important_headers, sheet_index=0):
        ws = workbook[sheet_name]
        max_row = ws.max_row
        max_col = ws.max_column

        tab_colors = ["92D050", "4472C4", "ED7D31"]
        ws.sheet_properties.tabColor = tab_colors[sheet_index % len(tab_colors)]

        ws.freeze_panes = "B2"

        header_font = Font(bold=True, color="FFFFFF")
        header_alignment = Alignment(horizontal="center", vertical="center")
        imp_fill = PatternFill(start_color="FF305496", end_color="FF305496", fill_type="solid")   # dark blue
        normal_fill = PatternFill(start_color="FF4472C4", end_color="FF4472C4", fill_type="solid")  # lighter blue
        alt_fill = PatternFill(start_color="FFF2F2F2", end_color="FFF2F2F2", fill_type="solid")
        thin = Side(border_style="thin", color="FF999999")
        border = Border(left=thin, right=thin, top=thin, bottom=thin)

        for col_idx in range(1, max_col + 1):
            cell = ws.cell(row=1, column=col_idx)
            cell.font = header_font
            cell.alignment = header_alignment
            cell.border = border
            cell.fill = imp_fill if cell.value in important_headers else normal_fill

        for r in range(2, max_row + 1):
            for c in range(1, max_col + 1):
                cell = ws.cell(row=r, column=c)
                cell.border = border
                if r % 2 == 0:
                    cell.fill = alt_fill

        for col in ws.columns:
            col_letter = get_column_letter(col[0].column)
            max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in col)
            ws.column_dimensions[col_letter].width = min(50, max(10, max_length + 3))

    # -------------------------
    # Sheet creators
    # -------------------------
    def create_statistics(self, accounts):
        rows = [{
            "Account": s.account_name,
            "Inbound": s.total_inbound,
            "Outbound": s.total_outbound,
            "Abandoned": s.total_abandoned,
            "Avg Ring Time": format_duration(s.inbound_average),
            "Avg Time to Abandon": format_duration(s.abandoned_average),
        } for s in accounts.statistics()]
        return pd.DataFrame(rows, columns=STATISTICS_COLUMNS)

    def create_totals(self, accounts):
        totals = accounts.totals()
        return pd.DataFrame([
            {"Metric": "Total Received", "Value": totals.total_received},
            {"Metric": "Inbound", "Value": totals.inbound},
            {"Metric": "Outbound", "Value": totals.outbound},
            {"Metric": "Abandoned", "Value": totals.abandoned},
            {"Metric": "Abandon Rate", "Value": round(totals.abandoned_rate, 4)},
        ], columns=["Metric", "Value"])

    def create_time_series(self, accounts):
        columns = {"Time": None}
        for tracker in accounts.trackers:
            if columns["Time"] is None:
                columns["Time"] = [bucket.strftime("%H:%M") for bucket, _ in tracker]
            columns[tracker.name] = [count for _, count in tracker]
        if columns["Time"] is None:
            return pd.DataFrame(columns=["Time"])
        return pd.DataFrame(columns)

    # -------------------------
    # Main generate function
    # -------------------------
    def generate_excel(self, accounts, output_path):
        try:
            self.update_progress(40, "Generating Excel...")

            sheet_defs = [
                ("Statistics", self.create_statistics, ["Account", "Inbound", "Abandoned"]),
                ("Totals", self.create_totals, ["Metric"]),
                ("Time_Series", self.create_time_series, ["Time"]),
            ]

            with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
                for sheet_name, creator, _ in sheet_defs:
                    self.update_progress(50, f"Generating {sheet_name}")
                    creator(accounts).to_excel(writer, sheet_name=sheet_name, index=False)

            # styling pass
            wb = load_workbook(output_path)
            for idx, (sheet_name, _, imp_cols) in enumerate(sheet_defs):
                self.autofit_and_style(wb, sheet_name, imp_cols, sheet_index=idx)
            wb.save(output_path)

            self.update_progress(100, f"Excel generated: {output_path}")
            return output_path

        except Exception as e:
            logging.error(f"Error generating Excel: {e}")
            raise
