import io
from datetime import datetime

import pandas as pd
import pytz

from src.workforce_scheduler.workforce_scheduler.hours.export import (
    HOURS_COMPARISON_HEADERS,
    export_filename,
    hours_comparison_csv,
    hours_comparison_xlsx,
)
from src.workforce_scheduler.workforce_scheduler.timeclock.model import EmployeeHoursRow, HoursComparison


def _report():
    return HoursComparison(
        week_id="week-1",
        week_start=datetime(2026, 3, 1, tzinfo=pytz.UTC),
        week_end=datetime(2026, 3, 8, tzinfo=pytz.UTC),
        employees=[
            EmployeeHoursRow(
                employee_id="emp-2",
                employee_name='Bob "The Builder"',
                email="bob@example.com",
                scheduled_hours=8.0,
                actual_hours=9.5,
                difference_hours=1.5,
                completion_rate_pct=119,
                late_clock_ins=1,
            ),
        ],
        total_scheduled_hours=8.0,
        total_actual_hours=9.5,
    )


def test_csv_quotes_every_cell_and_doubles_quotes():
    lines = hours_comparison_csv(_report()).splitlines()

    assert lines[0] == (
        '"Employee Name","Email","Scheduled Hours","Actual Hours",'
        '"Difference Hours","Completion Rate (%)","Late Clock-ins"'
    )
    assert lines[1] == '"Bob ""The Builder""","bob@example.com","8.00","9.50","1.50","119","1"'
    assert len(lines) == 2


def test_export_filename_uses_week_start():
    assert export_filename(_report(), "csv") == "hours-comparison-2026-03-01.csv"


def test_xlsx_has_same_table():
    df = pd.read_excel(io.BytesIO(hours_comparison_xlsx(_report())), sheet_name="HoursComparison", dtype=str)

    assert list(df.columns) == HOURS_COMPARISON_HEADERS
    assert df.iloc[0]["Employee Name"] == 'Bob "The Builder"'
    assert df.iloc[0]["Actual Hours"] == "9.50"
