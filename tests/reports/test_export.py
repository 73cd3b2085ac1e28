import io

from openpyxl import load_workbook

from src.timeclock.timeclock.core.constants import REPORT_HEADERS, SUMMARY_HEADERS
from src.timeclock.timeclock.reports import export
from src.timeclock.timeclock.reports.service import summarize
from src.timeclock.timeclock.timesheets.model import DayRecord

RECORDS = [
    DayRecord(
        date="2024-03-04",
        day="Mon",
        person="Ana Lee",
        organization="Acme, Inc.",
        clock_in="09:00:00",
        lunch_out="12:00:00",
        end_lunch="12:30:00",
        clock_out="17:00:00",
        notes='said "hi"\nleft early',
    ),
    DayRecord(date="2024-03-05", day="Tue", person="Ana Lee", organization="Acme, Inc.", clock_in="09:00:00"),
]


def _rows(ws):
    return [list(r) for r in ws.iter_rows(values_only=True)]


def test_log_csv_quotes_only_where_needed():
    out = export.log_csv(RECORDS, "log.csv")
    assert out.mimetype == "text/csv"
    text = out.content.decode("utf-8-sig")
    lines = text.split("\n")
    assert lines[0] == ",".join(REPORT_HEADERS)
    assert lines[1].startswith('2024-03-04,Mon,Ana Lee,"Acme, Inc.",09:00:00,12:00:00,12:30:00,17:00:00,30,7.5,')
    assert '"said ""hi""' in text
    assert "2024-03-05,Tue,Ana Lee,\"Acme, Inc.\",09:00:00,,,,,," in text


def test_filenames():
    assert export.log_filename("Ana Lee", "2024-03-06", "csv") == "timeclock_Ana_Lee_2024-03-06.csv"
    assert export.master_filename("2024-03-04", "2024-03-10", "xlsx") == "master_time_log_2024-03-04_to_2024-03-10.xlsx"


def test_log_workbook_sheets():
    out = export.log_workbook(RECORDS, "log.xlsx")
    wb = load_workbook(io.BytesIO(out.content))
    assert wb.sheetnames == ["Log", "Template"]

    log = _rows(wb["Log"])
    assert log[0] == REPORT_HEADERS
    assert log[1][:4] == ["2024-03-04", "Mon", "Ana Lee", "Acme, Inc."]
    assert wb["Log"].freeze_panes == "A2"

    template = _rows(wb["Template"])
    assert template[0][0].startswith("Time Clock Template")
    assert template[2] == REPORT_HEADERS


def test_master_workbook_has_summary():
    report = summarize(RECORDS, start="2024-03-04", end="2024-03-10")
    out = export.master_workbook(report)
    assert out.filename == "master_time_log_2024-03-04_to_2024-03-10.xlsx"

    wb = load_workbook(io.BytesIO(out.content))
    assert wb.sheetnames == ["Master Log", "Summary"]
    detail = _rows(wb["Master Log"])
    assert [r[0] for r in detail[1:]] == ["2024-03-05", "2024-03-04"]
    assert _rows(wb["Summary"]) == [SUMMARY_HEADERS, ["Ana Lee", "Acme, Inc.", 7.5, 1]]


def test_template_workbook():
    out = export.template_workbook()
    assert out.filename == "master_time_log_template.xlsx"
    rows = _rows(load_workbook(io.BytesIO(out.content))["Master Log"])
    assert rows[0][0] == "MASTER TIME LOG (Template)"
    assert rows[3] == REPORT_HEADERS


def test_as_download_headers():
    body, status, headers = export.master_csv(summarize([], start="2024-03-04", end="2024-03-10")).as_download()
    assert status == 200
    assert headers["Content-Disposition"] == "attachment; filename=master_time_log_2024-03-04_to_2024-03-10.csv"
    assert body.decode("utf-8-sig").strip() == ",".join(REPORT_HEADERS)
