import pytest

from closing_report.core.communication_processor import CommunicationProcessor
from closing_report.core.errors import ConfigError, RecordParseError, ResourceError

from tests.helpers import SENTINEL

INBOUND_HEADER = '"First Ring Time","Telephone Number","Call Duration","Agent ID","Account Code","Ring Duration"\n'


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_process_inbound_file(tmp_path, accounts):
    path = write(tmp_path, "inbounds.csv", INBOUND_HEADER +
                 '"2024-03-04 08:05:12","5551234567","0:04:31","101","1","0:00:12"\n'
                 '"2024-03-04 09:47:55","5559876543","0:12:02","102","77","0:00:31"\n')
    processor = CommunicationProcessor(accounts, SENTINEL)
    result = processor.process_file("inbound", path)

    assert (result.read, result.added, result.rejected, result.parse_errors) == (2, 2, 0, 0)
    assert accounts.account_for(1).total_inbound == 1
    assert accounts.account_for(SENTINEL).total_inbound == 1


def test_records_are_trimmed(tmp_path, accounts):
    path = write(tmp_path, "abandons.csv", 'time,code,duration\n 2024-03-04 09:00:00 , 2 ,0:00:10\n')
    records = list(CommunicationProcessor(accounts, SENTINEL).iter_records("abandoned", path))
    assert records == [["2024-03-04 09:00:00", "2", "0:00:10"]]


def test_without_header_first_row_is_data(tmp_path, accounts):
    path = write(tmp_path, "abandons.csv", '2024-03-04 09:00:00,2,0:00:10\n')
    processor = CommunicationProcessor(accounts, SENTINEL, skip_header=False)
    assert processor.process_file("abandoned", path).added == 1
    assert accounts.abandoned_count == 1


def test_parse_error_aborts_by_default(tmp_path, accounts):
    path = write(tmp_path, "abandons.csv", 'time,code,duration\ngarbage,1,0:00:10\n')
    with pytest.raises(RecordParseError):
        CommunicationProcessor(accounts, SENTINEL).process_file("abandoned", path)


def test_parse_error_skip_policy(tmp_path, accounts, caplog):
    path = write(tmp_path, "abandons.csv",
                 'time,code,duration\ngarbage,1,0:00:10\n2024-03-04 09:00:00,1,0:00:10\n')
    processor = CommunicationProcessor(accounts, SENTINEL, parse_error_policy="skip")
    result = processor.process_file("abandoned", path)
    assert result.parse_errors == 1
    assert result.added == 1
    assert "Skipping" in caplog.text


def test_unknown_policy_is_config_error(accounts):
    with pytest.raises(ConfigError):
        CommunicationProcessor(accounts, SENTINEL, parse_error_policy="retry")


def test_missing_file_is_resource_error(tmp_path, accounts):
    with pytest.raises(ResourceError):
        CommunicationProcessor(accounts, SENTINEL).process_file("inbound", str(tmp_path / "nope.csv"))


def test_empty_and_header_only_files(tmp_path, accounts):
    empty = write(tmp_path, "empty.csv", "")
    header_only = write(tmp_path, "header.csv", INBOUND_HEADER)
    processor = CommunicationProcessor(accounts, SENTINEL)
    assert processor.process_file("inbound", empty).read == 0
    assert processor.process_file("inbound", header_only).read == 0


def test_out_of_hours_rows_are_counted_as_rejected(tmp_path, accounts):
    path = write(tmp_path, "abandons.csv", 'time,code,duration\n2024-03-04 18:30:00,1,0:00:10\n')
    result = CommunicationProcessor(accounts, SENTINEL).process_file("abandoned", path)
    assert result.rejected == 1
    assert result.added == 0


def test_process_resources_reports_progress(tmp_path, accounts):
    inbound = write(tmp_path, "inbounds.csv", INBOUND_HEADER +
                    '"2024-03-04 10:00:00","555","0:01:00","1","2","0:00:05"\n')
    abandoned = write(tmp_path, "abandons.csv", 'time,code,duration\n2024-03-04 10:10:00,2,0:00:10\n')
    progress = []
    processor = CommunicationProcessor(accounts, SENTINEL,
                                       progress_callback=lambda p, m: progress.append(p))
    results = processor.process_resources([("inbound", inbound), ("abandoned", abandoned)])

    assert [r.category for r in results] == ["inbound", "abandoned"]
    assert accounts.total_count == 2
    assert progress[-1] == 100


def test_row_with_extra_field_aborts_by_default(tmp_path, accounts):
    path = write(tmp_path, "inbounds.csv", INBOUND_HEADER +
                 '"2024-03-04 08:05:12","555","0:04:31","101","1","0:00:12","extra"\n')
    with pytest.raises(RecordParseError):
        CommunicationProcessor(accounts, SENTINEL).process_file("inbound", path)
    assert accounts.total_count == 0


def test_row_with_extra_field_skipped(tmp_path, accounts):
    path = write(tmp_path, "inbounds.csv", INBOUND_HEADER +
                 '"2024-03-04 08:05:12","555","0:04:31","101","1","0:00:12","extra"\n'
                 '"2024-03-04 09:47:55","555","0:12:02","102","2","0:00:31"\n')
    result = CommunicationProcessor(accounts, SENTINEL, parse_error_policy="skip").process_file("inbound", path)
    assert (result.read, result.added, result.parse_errors) == (2, 1, 1)
    assert accounts.account_for(2).total_inbound == 1


def test_trailing_empty_field_is_tolerated(tmp_path, accounts):
    path = write(tmp_path, "abandons.csv", 'time,code,duration\n2024-03-04 09:00:00,2,0:00:10,\n')
    records = list(CommunicationProcessor(accounts, SENTINEL).iter_records("abandoned", path))
    assert records == [["2024-03-04 09:00:00", "2", "0:00:10"]]


def test_unknown_category_is_config_error(tmp_path, accounts):
    path = write(tmp_path, "calls.csv", 'time,code,duration\n2024-03-04 09:00:00,2,0:00:10\n')
    with pytest.raises(ConfigError):
        list(CommunicationProcessor(accounts, SENTINEL).iter_records("voicemail", path))
