"""Hours-comparison report exports."""
from __future__ import annotations

import csv
import io

import pandas as pd

from ..timeclock.model import HoursComparison

HOURS_COMPARISON_HEADERS = [
    "Employee Name",
    "Email",
    "Scheduled Hours",
    "Actual Hours",
    "Difference Hours",
    "Completion Rate (%)",
    "Late Clock-ins",
]


def hours_comparison_rows(report: HoursComparison) -> list[list[str]]:
    return [
        [
            row.employee_name,
            row.email,
            f"{row.scheduled_hours:.2f}",
            f"{row.actual_hours:.2f}",
            f"{row.difference_hours:.2f}",
            str(row.completion_rate_pct),
            str(row.late_clock_ins),
        ]
        for row in report.employees
    ]


def hours_comparison_csv(report: HoursComparison) -> str:
    """Every cell quoted, embedded quotes doubled."""
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(HOURS_COMPARISON_HEADERS)
    writer.writerows(hours_comparison_rows(report))
    return out.getvalue()


def hours_comparison_xlsx(report: HoursComparison) -> bytes:
    df = pd.DataFrame(hours_comparison_rows(report), columns=HOURS_COMPARISON_HEADERS)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="HoursComparison")
    return out.getvalue()


def export_filename(report: HoursComparison, extension: str) -> str:
    return f"hours-comparison-{report.week_start.strftime('%Y-%m-%d')}.{extension}"
