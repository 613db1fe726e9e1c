import os

import pytest

import main as closing_report_main

SETTINGS = """
[report]
sentinel = 99
time_increment = 30
opening_time = 08:00
closing_time = 17:00
parse_error_policy = {policy}

[paths]
resource_path = {data}
output_path = {output}

[accounts]
Acme = 1
Globex = 2
Others = {others}

[resource:inbounds]
path = inbounds.csv
category = inbound

[resource:abandons]
path = abandons.csv
category = abandoned

[logging]
level = DEBUG
log_dir = {logs}
"""

INBOUNDS = (
    '"First Ring Time","Telephone Number","Call Duration","Agent ID","Account Code","Ring Duration"\n'
    '"2024-03-04 08:05:00","555","0:04:31","101","1","0:00:12"\n'
    '"2024-03-04 09:15:00","555","0:01:00","101","2","0:00:10"\n'
    '"2024-03-04 10:40:00","555","0:02:00","102","77","0:00:30"\n'
    '"2024-03-04 16:59:00","555","0:03:00","102","1","0:00:20"\n'
)

ABANDONS = (
    '"First Ring Time","Account Code","Call Duration"\n'
    '"2024-03-04 12:00:00","2","0:00:45"\n'
    '"2024-03-04 17:01:00","1","0:00:20"\n'
)


@pytest.fixture
def workspace(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "inbounds.csv").write_text(INBOUNDS, encoding="utf-8")
    (data / "abandons.csv").write_text(ABANDONS, encoding="utf-8")
    return tmp_path


def write_settings(workspace, policy="abort", others="99"):
    path = workspace / "settings.ini"
    path.write_text(SETTINGS.format(policy=policy, data=workspace / "data", output=workspace / "out",
                                    logs=workspace / "logs", others=others), encoding="utf-8")
    return str(path)


def test_full_run_writes_reports(workspace):
    app = closing_report_main.ClosingReportApp(write_settings(workspace), send_email=False)
    assert app.run() == 0

    for name in ("barChart.png", "lineChart.png", "view.html", "closing_report.xlsx"):
        assert os.path.exists(workspace / "out" / name)

    by_name = {a.name: a for a in app.accounts}
    assert by_name["Acme"].total_inbound == 2
    assert by_name["Globex"].total_inbound == 1
    assert by_name["Others"].total_inbound == 1
    assert by_name["Globex"].total_abandoned == 1
    # the 17:01 abandon is outside business hours
    assert len(app.accounts.rejected) == 1
    assert app.accounts.total_count == 5


def test_main_with_output_override(workspace):
    output = workspace / "elsewhere"
    status = closing_report_main.main(["--config", write_settings(workspace), "--no-email",
                                       "--output", str(output)])
    assert status == 0
    assert os.path.exists(output / "view.html")


def test_duplicate_code_aborts_before_ingest(workspace):
    app = closing_report_main.ClosingReportApp(write_settings(workspace, others="99, 1"),
                                               send_email=False)
    assert app.run() == 1
    assert app.accounts is None
    assert not os.path.exists(workspace / "out")


def test_parse_error_aborts_run(workspace):
    (workspace / "data" / "abandons.csv").write_text(ABANDONS + '"whenever","1","0:00:20"\n')
    assert closing_report_main.main(["--config", write_settings(workspace), "--no-email"]) == 1


def test_parse_error_skipped_with_skip_policy(workspace):
    (workspace / "data" / "abandons.csv").write_text(ABANDONS + '"whenever","1","0:00:20"\n')
    assert closing_report_main.main(["--config", write_settings(workspace, policy="skip"),
                                     "--no-email"]) == 0


def test_invalid_config_exits_with_error(workspace):
    path = workspace / "settings.ini"
    path.write_text(SETTINGS.replace("time_increment = 30", "time_increment = 3").format(
        policy="abort", data=workspace, output=workspace, logs=workspace / "logs", others="99"))
    assert closing_report_main.main(["--config", str(path), "--no-email"]) == 1
