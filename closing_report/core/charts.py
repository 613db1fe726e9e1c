#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Chart datasets and PNG rendering
- bar chart: inbound/outbound/abandoned totals per account
- line chart: tracker counts per time bucket
"""

import logging

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from closing_report.core.tracker import ABANDONED, INBOUND, OUTBOUND

SERIES_STYLES = {
    INBOUND: {"color": "skyblue", "marker": "o"},
    OUTBOUND: {"color": "lawngreen", "marker": "s"},
    ABANDONED: {"color": "orangered", "marker": "x"},
}


def bar_chart_data(accounts):
    """Account labels and one series of totals per category"""
    labels = [account.name for account in accounts]
    series = {
        INBOUND: [account.total_inbound for account in accounts],
        OUTBOUND: [account.total_outbound for account in accounts],
        ABANDONED: [account.total_abandoned for account in accounts],
    }
    return labels, series


def line_chart_data(trackers):
    """Per tracker: bucket labels (HH:MM) and counts, in time order"""
    data = {}
    for tracker in trackers:
        labels = [bucket.strftime("%H:%M") for bucket, _ in tracker]
        counts = [count for _, count in tracker]
        data[tracker.name] = (labels, counts)
    return data


def render_bar_chart(accounts, output_path, title="Closing Report"):
    labels, series = bar_chart_data(accounts)
    x = np.arange(len(labels))
    width = 0.8 / max(len(series), 1)

    fig, ax = plt.subplots(figsize=(max(8, len(labels) * 1.2), 5))
    try:
        for i, (name, values) in enumerate(series.items()):
            ax.bar(x + (i - (len(series) - 1) / 2) * width, values, width,
                   label=name, color=SERIES_STYLES[name]["color"],
                   edgecolor="black", linewidth=1)
        ax.set_xticks(x)
        ax.set_xticklabels(labels, rotation=30, ha="right", fontsize=9)
        ax.set_ylabel("Calls")
        ax.set_title(title)
        ax.legend()
        ax.grid(axis="y", linestyle=":", alpha=0.4)
        fig.tight_layout()
        fig.savefig(output_path, dpi=150)
    finally:
        plt.close(fig)

    logging.info(f"Bar chart saved to {output_path}")
    return output_path


def render_line_chart(trackers, output_path, title="Closing Report"):
    data = line_chart_data(trackers)

    fig, ax = plt.subplots(figsize=(11, 4.5))
    try:
        labels = []
        for name, (labels, counts) in data.items():
            style = SERIES_STYLES.get(name, {"color": None, "marker": "o"})
            ax.plot(range(len(counts)), counts, label=name, color=style["color"],
                    marker=style["marker"], markersize=6)
        ax.set_xticks(range(len(labels)))
        ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=8)
        ax.set_ylabel("Calls")
        ax.set_title(title)
        ax.legend()
        ax.grid(axis="y", linestyle=":", alpha=0.4)
        fig.tight_layout()
        fig.savefig(output_path, dpi=150)
    finally:
        plt.close(fig)

    logging.info(f"Line chart saved to {output_path}")
    return output_path
