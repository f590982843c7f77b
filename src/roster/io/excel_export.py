"""Excel export functionality for rosters."""
import io
from pathlib import Path
from typing import Dict, List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from roster.models.problem import RosterProblem
from roster.models.schedule import Schedule
from roster.solver.stats import calculate_person_stats, stats_to_dict_list
from roster.solver.validation import ValidationReport
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.io.excel_export")

# Cycled over workstations in declaration order
WORKSTATION_COLORS = ["DDEEFF", "FFE4CC", "E6CCFF", "DDF2DD", "FFF4C2", "DDDDDD"]
SHORTFALL_COLOR = "FFC7CE"
IDLE_COLOR = "EEEEEE"

# Border styles
THIN = Side(border_style="thin", color="CCCCCC")
BORDER_THIN = Border(top=THIN, bottom=THIN, left=THIN, right=THIN)


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _write_header(ws, headers: List[str], row: int = 1):
    for j, title in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=j, value=title)
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = BORDER_THIN


def _write_planning(ws, schedule: Schedule):
    """Dates down, workstations across, people in each cell."""
    colors: Dict[str, str] = {
        name: WORKSTATION_COLORS[i % len(WORKSTATION_COLORS)]
        for i, name in enumerate(schedule.workstations)
    }
    short = {(s.date, s.workstation) for s in schedule.shortfalls}

    _write_header(ws, ["Date", "Day"] + list(schedule.workstations) + ["Idle"])
    for r, (day, rows) in enumerate(schedule.by_date(), start=2):
        ws.cell(row=r, column=1, value=day.isoformat()).border = BORDER_THIN
        ws.cell(row=r, column=2, value=day.strftime("%a")).border = BORDER_THIN
        for c, (name, people) in enumerate(rows, start=3):
            cell = ws.cell(row=r, column=c, value=", ".join(people))
            cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
            cell.border = BORDER_THIN
            if (day, name) in short:
                cell.fill = _fill(SHORTFALL_COLOR)
            elif name in colors and people:
                cell.fill = _fill(colors[name])
        idle = ws.cell(row=r, column=3 + len(rows), value=", ".join(schedule.idle.get(day, [])))
        idle.fill = _fill(IDLE_COLOR)
        idle.border = BORDER_THIN

    ws.column_dimensions["A"].width = 12
    ws.column_dimensions["B"].width = 6
    for i in range(3, len(schedule.workstations) + 4):
        ws.column_dimensions[get_column_letter(i)].width = 22
    ws.freeze_panes = "C2"


def _write_totals(ws, schedule: Schedule, problem: Optional[RosterProblem]):
    if problem is not None:
        rows = stats_to_dict_list(calculate_person_stats(schedule, problem))
    else:
        rows = [{"Name": n, "Total": t} for n, t in sorted(schedule.person_totals().items())]
    if not rows:
        _write_header(ws, ["Name", "Total"])
        return
    headers = list(rows[0].keys())
    _write_header(ws, headers)
    for i, row in enumerate(rows, start=2):
        for j, key in enumerate(headers, start=1):
            ws.cell(row=i, column=j, value=row.get(key)).border = BORDER_THIN
    for i in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(i)].width = 14
    ws.freeze_panes = "A2"


def _write_issues(ws, schedule: Schedule, report: ValidationReport):
    summary = [
        ["Indicator", "Value"],
        ["Strategy", schedule.strategy],
        ["Status", schedule.status],
        ["Score", round(schedule.score, 2)],
        ["Time (s)", round(schedule.solve_time_seconds, 2)],
        ["Hard constraints OK", "yes" if report.all_hard_constraints_satisfied else "no"],
        ["Never assigned", ", ".join(report.never_assigned)],
    ]
    for i, row_data in enumerate(summary, start=1):
        for j, val in enumerate(row_data, start=1):
            cell = ws.cell(row=i, column=j, value=val)
            if i == 1:
                cell.font = Font(bold=True)

    start = len(summary) + 2
    ws.cell(row=start, column=1, value="Shortfalls").font = Font(bold=True)
    _write_header(ws, ["Date", "Workstation", "Needed", "Placed", "Cause"], row=start + 1)
    r = start + 2
    for s in report.shortfalls:
        for j, val in enumerate([s.date.isoformat(), s.workstation, s.needed, s.available, s.cause], start=1):
            ws.cell(row=r, column=j, value=val).fill = _fill(SHORTFALL_COLOR)
        r += 1

    r += 1
    ws.cell(row=r, column=1, value="Violations").font = Font(bold=True)
    _write_header(ws, ["Date", "Rule", "Person", "Workstation", "Detail"], row=r + 1)
    r += 2
    for v in report.violations:
        values = [v.date.isoformat() if v.date else "", v.rule, v.person, v.workstation, v.detail]
        for j, val in enumerate(values, start=1):
            ws.cell(row=r, column=j, value=val)
        r += 1

    for i in range(1, 6):
        ws.column_dimensions[get_column_letter(i)].width = 24


def export_to_excel(
    schedule: Schedule,
    report: ValidationReport,
    output: Union[str, Path, io.BytesIO],
    problem: Optional[RosterProblem] = None,
) -> None:
    """
    Export a roster to an Excel workbook.

    Sheets: ``Planning`` (dates × workstations), ``Totals`` (per person) and
    ``Issues`` (summary, shortfalls, violations).

    Args:
        schedule: Solved schedule
        report: Its validation report
        output: File path or BytesIO buffer
        problem: Enables per-workstation columns in the totals sheet
    """
    wb = Workbook()

    ws_plan = wb.active
    ws_plan.title = "Planning"
    _write_planning(ws_plan, schedule)

    _write_totals(wb.create_sheet("Totals"), schedule, problem)
    _write_issues(wb.create_sheet("Issues"), schedule, report)

    # Save
    if isinstance(output, io.BytesIO):
        wb.save(output)
    else:
        wb.save(str(output))
    logger.info(f"Excel workbook written ({len(schedule.assignments)} assignments)")


def export_to_csv(schedule: Schedule, output: Union[str, Path, io.StringIO]) -> None:
    """Export assignments to CSV."""
    df = schedule.to_dataframe()
    if isinstance(output, io.StringIO):
        df.to_csv(output, index=False)
    else:
        df.to_csv(str(output), index=False)
