import pandas as pd
from openpyxl import load_workbook

from closing_report.core.charts import (
    bar_chart_data, line_chart_data, render_bar_chart, render_line_chart,
)
from closing_report.core.excel_generator import ExcelGenerator
from closing_report.core.html_view import HtmlView
from closing_report.core.tracker import ABANDONED, INBOUND, OUTBOUND

from tests.helpers import make_comm


def populate(accounts):
    accounts.add_communication(make_comm(8, 5, code=1, pending=10))
    accounts.add_communication(make_comm(8, 20, code=1, pending=20))
    accounts.add_communication(make_comm(9, 0, code=2, kind="outbound"))
    accounts.add_communication(make_comm(16, 59, code=77, kind="abandoned", handling=40))
    return accounts


def test_bar_chart_data(accounts):
    labels, series = bar_chart_data(populate(accounts))
    assert labels == ["Acme", "Globex", "Others"]
    assert series[INBOUND] == [2, 0, 0]
    assert series[OUTBOUND] == [0, 1, 0]
    assert series[ABANDONED] == [0, 0, 1]


def test_line_chart_data(accounts):
    data = line_chart_data(populate(accounts).trackers)
    labels, counts = data[INBOUND]
    assert labels[0] == "08:00"
    assert labels[-1] == "17:00"
    assert counts[0] == 2
    assert sum(data[ABANDONED][1]) == 1
    assert data[ABANDONED][1][labels.index("16:30")] == 1


def test_render_charts(tmp_path, accounts):
    populate(accounts)
    bar = render_bar_chart(accounts, str(tmp_path / "barChart.png"))
    line = render_line_chart(accounts.trackers, str(tmp_path / "lineChart.png"))
    for path in (bar, line):
        with open(path, "rb") as f:
            assert f.read(8) == b"\x89PNG\r\n\x1a\n"


def test_html_view(tmp_path, accounts):
    populate(accounts)
    view = HtmlView(accounts, title="Closing <Report>", images=[("Bars", "cid:barChart")])
    page = view.render()

    assert "Closing &lt;Report&gt;" in page
    assert "<td>Acme</td>" in page
    assert "<tr><th>Total Received</th><td>3</td></tr>" in page
    assert "33.3%" in page
    assert 'src="cid:barChart"' in page
    assert "0:00:15" in page

    path = view.save_to_file(str(tmp_path / "view.html"))
    with open(path, encoding="utf-8") as f:
        assert "<td>Acme</td>" in f.read()


def test_html_view_without_calls(accounts):
    page = HtmlView(accounts).render()
    assert "0.0%" in page


def test_generate_excel(tmp_path, accounts):
    populate(accounts)
    progress = []
    output = str(tmp_path / "closing_report.xlsx")
    ExcelGenerator(progress_callback=lambda p, m: progress.append(p)).generate_excel(accounts, output)

    stats = pd.read_excel(output, sheet_name="Statistics")
    assert list(stats["Account"]) == ["Acme", "Globex", "Others"]
    assert list(stats["Inbound"]) == [2, 0, 0]

    totals = pd.read_excel(output, sheet_name="Totals")
    assert dict(zip(totals["Metric"], totals["Value"]))["Total Received"] == 3

    series = pd.read_excel(output, sheet_name="Time_Series")
    assert list(series.columns) == ["Time", INBOUND, OUTBOUND, ABANDONED]
    assert series[INBOUND].sum() == 2

    wb = load_workbook(output)
    assert wb["Statistics"].freeze_panes == "B2"
    assert progress[-1] == 100
