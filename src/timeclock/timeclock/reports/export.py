from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

import pandas as pd

from ..core.constants import REPORT_HEADERS, SUMMARY_HEADERS
from ..core.exceptions import ExportUnavailableError
from ..timesheets.model import DayRecord
from .service import RangeReport, summary_table, to_table

CSV_MIMETYPE = "text/csv"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    mimetype: str
    content: bytes

    def as_download(self) -> tuple[bytes, int, dict]:
        """Flask response tuple that makes the browser save the file."""
        return (
            self.content,
            200,
            {
                "Content-Type": self.mimetype,
                "Content-Disposition": f"attachment; filename={self.filename}",
            },
        )


@dataclass(frozen=True)
class Sheet:
    name: str
    header: Sequence[str]
    rows: Sequence[Sequence] = ()
    title_rows: Sequence[str] = ()
    freeze_header: bool = True


class TabularSink(Protocol):
    def export(self, filename: str, header: Sequence[str], rows: Iterable[Sequence]) -> ExportFile:
        raise NotImplementedError


class CsvExporter(TabularSink):
    """Comma-separated text; only fields with ',', '"' or newlines are quoted."""

    def export(self, filename: str, header: Sequence[str], rows: Iterable[Sequence]) -> ExportFile:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(header)
        writer.writerows(rows)
        return ExportFile(filename, CSV_MIMETYPE, out.getvalue().encode("utf-8-sig"))


class WorkbookExporter(TabularSink):
    """XLSX workbook written by pandas through the openpyxl engine."""

    engine = "openpyxl"

    def export(self, filename: str, header: Sequence[str], rows: Iterable[Sequence]) -> ExportFile:
        return self.export_sheets(filename, [Sheet("Log", header, list(rows))])

    def export_sheets(self, filename: str, sheets: Sequence[Sheet]) -> ExportFile:
        buf = io.BytesIO()
        try:
            writer = pd.ExcelWriter(buf, engine=self.engine)
        except ImportError as e:
            raise ExportUnavailableError() from e

        with writer:
            for sheet in sheets:
                self._write_sheet(writer, sheet)
        return ExportFile(filename, XLSX_MIMETYPE, buf.getvalue())

    @staticmethod
    def _write_sheet(writer: pd.ExcelWriter, sheet: Sheet) -> None:
        # title lines, one blank row, then the table
        start_row = len(sheet.title_rows) + 1 if sheet.title_rows else 0
        df = pd.DataFrame([list(r) for r in sheet.rows], columns=list(sheet.header))
        df.to_excel(
            writer,
            index=False,
            sheet_name=sheet.name,
            startrow=start_row,
            freeze_panes=(start_row + 1, 0) if sheet.freeze_header else None,
        )
        ws = writer.sheets[sheet.name]
        for i, line in enumerate(sheet.title_rows, start=1):
            ws.cell(row=i, column=1, value=line)


def _safe_name(name: str) -> str:
    return "_".join(name.split())


def log_filename(person: str, today: str, extension: str) -> str:
    return f"timeclock_{_safe_name(person)}_{today}.{extension}"


def device_log_filename(today: str, extension: str) -> str:
    return f"timeclock_log_{today}.{extension}"


def master_filename(start: str, end: str, extension: str) -> str:
    return f"master_time_log_{start}_to_{end}.{extension}"


def log_csv(records: Sequence[DayRecord], filename: str) -> ExportFile:
    return CsvExporter().export(filename, REPORT_HEADERS, to_table(records))


def log_workbook(records: Sequence[DayRecord], filename: str) -> ExportFile:
    return WorkbookExporter().export_sheets(
        filename,
        [
            Sheet("Log", REPORT_HEADERS, to_table(records)),
            Sheet(
                "Template",
                REPORT_HEADERS,
                title_rows=["Time Clock Template (fill or paste exports here)"],
                freeze_header=False,
            ),
        ],
    )


def master_csv(report: RangeReport) -> ExportFile:
    return CsvExporter().export(master_filename(report.start, report.end, "csv"), REPORT_HEADERS, report.table)


def master_workbook(report: RangeReport) -> ExportFile:
    """Detail sheet plus a per-person summary sheet."""
    return WorkbookExporter().export_sheets(
        master_filename(report.start, report.end, "xlsx"),
        [
            Sheet("Master Log", REPORT_HEADERS, report.table),
            Sheet("Summary", SUMMARY_HEADERS, summary_table(report.summary)),
        ],
    )


def template_workbook() -> ExportFile:
    return WorkbookExporter().export_sheets(
        "master_time_log_template.xlsx",
        [
            Sheet(
                "Master Log",
                REPORT_HEADERS,
                title_rows=["MASTER TIME LOG (Template)", "Use this to combine exports from employees."],
            )
        ],
    )
