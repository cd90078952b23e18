"""
excel_exporter.py
─────────────────
Exports a CalculationResult to a 3-sheet Excel workbook:
  Sheet 1 — Instructional Spaces (room program, library, gym, aggregate check)
  Sheet 2 — Support Spaces       (support line items, plumbing fixtures)
  Sheet 3 — Summary              (net / gross totals, caveats, disclaimer)

A batch of scenarios can be exported with a leading comparison sheet.

Usage:
    from excel_exporter import export_to_excel
    export_to_excel(result, "space_program.xlsx", project_name="Lakeside ES")
"""

from __future__ import annotations
from datetime import datetime
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from space_calculator import CalculationResult, DISCLAIMER
from space_standards import campus_standard, code_profile


# ─── Style helpers ────────────────────────────────────────────────────────────

NAVY   = "1F3864"
BLUE   = "2E5FA3"
LBLUE  = "D9E1F2"
YELLOW = "FFF2CC"
GREEN  = "E2EFDA"
RED_BG = "FCE4D6"
WHITE  = "FFFFFF"
LGREY  = "F2F2F2"

SF_FORMAT = "#,##0"

def _font(size=10, bold=False, color="000000", italic=False):
    return Font(name="Arial", size=size, bold=bold, color=color, italic=italic)

def _fill(hex_col):
    return PatternFill("solid", fgColor=hex_col, start_color=hex_col)

def _align(h="left", v="center", wrap=False):
    return Alignment(horizontal=h, vertical=v, wrap_text=wrap)

def _border(color="BFBFBF"):
    s = Side(style="thin", color=color)
    return Border(left=s, right=s, top=s, bottom=s)

def _set_widths(ws, widths):
    for i, w in enumerate(widths, 1):
        ws.column_dimensions[get_column_letter(i)].width = w

def _title_row(ws, row, ncols, text, bg=NAVY, font_size=12):
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=ncols)
    c = ws.cell(row=row, column=1, value=text)
    c.font      = _font(font_size, bold=True, color="FFFFFF")
    c.fill      = _fill(bg)
    c.alignment = _align("center", "center")
    ws.row_dimensions[row].height = 24

def _section_row(ws, row, ncols, text):
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=ncols)
    c = ws.cell(row=row, column=1, value=text)
    c.font      = _font(10, bold=True, color="FFFFFF")
    c.fill      = _fill(BLUE)
    c.alignment = _align("left", "center")
    ws.row_dimensions[row].height = 18

def _header_row(ws, row, headers, bg=BLUE):
    for col, h in enumerate(headers, 1):
        c = ws.cell(row=row, column=col, value=h)
        c.font      = _font(9, bold=True, color="FFFFFF")
        c.fill      = _fill(bg)
        c.alignment = _align("center", "center", wrap=True)
        c.border    = _border()
    ws.row_dimensions[row].height = 28

def _data_cell(ws, row, col, value, bg=WHITE, bold=False,
               align="left", italic=False, color="000000", fmt=None):
    c = ws.cell(row=row, column=col, value=value)
    c.font      = _font(9, bold=bold, color=color, italic=italic)
    c.fill      = _fill(bg)
    c.alignment = _align(align, "center")
    c.border    = _border()
    if fmt:
        c.number_format = fmt
    return c

def _note_row(ws, row, ncols, text, bg=YELLOW, color="8B4513"):
    ws.merge_cells(start_row=row, start_column=1, end_row=row, end_column=ncols)
    c = ws.cell(row=row, column=1, value=text)
    c.font      = _font(9, italic=True, color=color)
    c.fill      = _fill(bg)
    c.border    = _border(color)
    c.alignment = _align("left", "center", wrap=True)
    ws.row_dimensions[row].height = 30

def _subtitle(result: CalculationResult, date_str: str) -> str:
    return (
        f"{campus_standard(result.campus_type).label}   |   "
        f"{result.students:,} students   |   {result.flexibility_level.value}   |   "
        f"{code_profile(result.code_edition).label}   |   Date: {date_str}"
    )


# ─── Sheet 1: Instructional Spaces ────────────────────────────────────────────

def _write_instructional(ws, result: CalculationResult, project_name: str, date_str: str):
    _set_widths(ws, [36, 8, 12, 12, 14, 40, 20])
    NC = 7

    _title_row(ws, 1, NC, f"Instructional Spaces — {project_name}")
    _title_row(ws, 2, NC, _subtitle(result, date_str), bg=BLUE, font_size=9)
    _header_row(ws, 3, ["Space Type", "Qty", "SF / Room", "SF / Student",
                        "Total SF", "Notes", "Code"])

    row = 4
    for i, r in enumerate(result.rooms):
        bg = WHITE if i % 2 == 0 else LGREY
        _data_cell(ws, row, 1, r.space_type,          bg)
        _data_cell(ws, row, 2, r.count,               bg, align="right")
        _data_cell(ws, row, 3, r.sf_per_room,         bg, align="right", fmt=SF_FORMAT)
        _data_cell(ws, row, 4, r.sf_per_student_used, bg, align="right")
        _data_cell(ws, row, 5, r.total_sf,            bg, align="right", fmt=SF_FORMAT)
        _data_cell(ws, row, 6, r.note,                bg, italic=True, color="595959")
        _data_cell(ws, row, 7, r.code,                bg, color="8B6D3F")
        row += 1

    if result.cafeteria_instructional_credit:
        _data_cell(ws, row, 1, "Cafeteria instructional credit (×0.5)", GREEN)
        for col in (2, 3, 4):
            _data_cell(ws, row, col, "", GREEN)
        _data_cell(ws, row, 5, result.cafeteria_instructional_credit, GREEN,
                   align="right", fmt=SF_FORMAT)
        _data_cell(ws, row, 6, f"50% of {result.cafeteria_sf:,} SF cafeteria", GREEN, italic=True)
        _data_cell(ws, row, 7, "§61.1040(i)(2)", GREEN, color="8B6D3F")
        row += 1

    for label, value in [("INSTRUCTIONAL TOTAL", result.total_instructional_sf),
                         ("Aggregate standard",  result.aggregate_sf)]:
        _data_cell(ws, row, 1, label, LBLUE, bold=True)
        for col in (2, 3, 4, 6, 7):
            _data_cell(ws, row, col, "", LBLUE)
        _data_cell(ws, row, 5, value, LBLUE, bold=True, align="right", fmt=SF_FORMAT)
        row += 1

    ok = result.meets_aggregate
    _data_cell(ws, row, 1, "Aggregate check", GREEN if ok else RED_BG, bold=True)
    _data_cell(ws, row, 5, result.aggregate_surplus_sf, GREEN if ok else RED_BG,
               bold=True, align="right", fmt="+#,##0;-#,##0;0")
    _data_cell(ws, row, 6, "✅ Meets aggregate standard" if ok else "⚠️ Below aggregate standard",
               GREEN if ok else RED_BG, color="006400" if ok else "CC0000")
    row += 2

    _section_row(ws, row, NC, "Library & Physical Education")
    row += 1
    _data_cell(ws, row, 1, "Library / Media Center", WHITE)
    _data_cell(ws, row, 5, result.library_sf, WHITE, align="right", fmt=SF_FORMAT)
    _data_cell(ws, row, 6, "1,400 SF base; +4/+3/+2 SF per student by tier", WHITE, italic=True)
    row += 1
    _data_cell(ws, row, 1, "Gymnasium", LGREY)
    _data_cell(ws, row, 5, result.gym_sf, LGREY, align="right", fmt=SF_FORMAT)
    _data_cell(ws, row, 6, "Excluded from instructional area under both methods", LGREY, italic=True)


# ─── Sheet 2: Support Spaces ──────────────────────────────────────────────────

def _write_support(ws, result: CalculationResult, project_name: str, date_str: str):
    _set_widths(ws, [36, 14, 52, 24])
    NC = 4

    _title_row(ws, 1, NC, f"Support & Service Spaces — {project_name}")
    _title_row(ws, 2, NC, _subtitle(result, date_str), bg=BLUE, font_size=9)
    _header_row(ws, 3, ["Space Type", "Total SF", "Notes", "Code"])

    row = 4
    for i, s in enumerate(result.support):
        bg = WHITE if i % 2 == 0 else LGREY
        _data_cell(ws, row, 1, s.space_type, bg)
        _data_cell(ws, row, 2, s.sf,         bg, align="right", fmt=SF_FORMAT)
        _data_cell(ws, row, 3, s.note,       bg, italic=True, color="595959")
        _data_cell(ws, row, 4, s.code,       bg, color="8B6D3F")
        row += 1

    _data_cell(ws, row, 1, "SUPPORT TOTAL", LBLUE, bold=True)
    _data_cell(ws, row, 2, result.total_support_sf, LBLUE, bold=True, align="right", fmt=SF_FORMAT)
    _data_cell(ws, row, 3, "", LBLUE)
    _data_cell(ws, row, 4, "", LBLUE)
    row += 2

    p = result.plumbing
    if p is None:
        return

    _section_row(ws, row, NC, "Plumbing Fixtures")
    row += 1
    _header_row(ws, row, ["Fixture", "Students", "Staff", ""])
    row += 1
    fixtures = [
        ("Water closets — male",   p.student.wc_male,    p.staff.wc_male),
        ("Water closets — female", p.student.wc_female,  p.staff.wc_female),
        ("Lavatories — male",      p.student.lav_male,   p.staff.lav_male),
        ("Lavatories — female",    p.student.lav_female, p.staff.lav_female),
        ("Restroom clusters",      p.student.clusters,   p.staff.clusters),
        ("Restroom SF",            p.student.sf,         p.staff.sf),
    ]
    for i, (label, stu, stf) in enumerate(fixtures):
        bg = WHITE if i % 2 == 0 else LGREY
        _data_cell(ws, row, 1, label, bg)
        _data_cell(ws, row, 2, stu,   bg, align="right", fmt=SF_FORMAT)
        _data_cell(ws, row, 3, stf,   bg, align="right", fmt=SF_FORMAT)
        _data_cell(ws, row, 4, "",    bg)
        row += 1

    _data_cell(ws, row, 1, "Drinking fountains", LBLUE, bold=True)
    _data_cell(ws, row, 2, p.drinking_fountains, LBLUE, bold=True, align="right")
    _data_cell(ws, row, 3, "", LBLUE)
    _data_cell(ws, row, 4, "Gender-neutral provisions" if p.gender_neutral else "", LBLUE, italic=True)


# ─── Sheet 3: Summary ─────────────────────────────────────────────────────────

def _write_summary(ws, result: CalculationResult, project_name: str, date_str: str):
    _set_widths(ws, [40, 18, 40])
    NC = 3

    _title_row(ws, 1, NC, f"Gross Building Area — {project_name}")
    _title_row(ws, 2, NC, _subtitle(result, date_str), bg=BLUE, font_size=9)
    _header_row(ws, 3, ["Component", "SF", "Notes"])

    lines = [
        ("Instructional spaces", result.total_instructional_sf, "Incl. cafeteria credit" if result.cafeteria_instructional_credit else ""),
        ("Library / media center", result.library_sf, ""),
        ("Gymnasium",            result.gym_sf, ""),
        ("Support & service",    result.total_support_sf, "Incl. student and staff restrooms"),
    ]
    row = 4
    for i, (label, sf, note) in enumerate(lines):
        bg = WHITE if i % 2 == 0 else LGREY
        _data_cell(ws, row, 1, label, bg)
        _data_cell(ws, row, 2, sf,    bg, align="right", fmt=SF_FORMAT)
        _data_cell(ws, row, 3, note,  bg, italic=True)
        row += 1

    _data_cell(ws, row, 1, "NET ASSIGNABLE AREA", LBLUE, bold=True)
    _data_cell(ws, row, 2, result.net_sf, LBLUE, bold=True, align="right", fmt=SF_FORMAT)
    _data_cell(ws, row, 3, "", LBLUE)
    row += 1
    _data_cell(ws, row, 1, "Net-to-gross factor", WHITE)
    _data_cell(ws, row, 2, result.gross_factor, WHITE, align="right", fmt="0.00")
    _data_cell(ws, row, 3, "Walls, corridors, circulation, stairs, structure", WHITE, italic=True)
    row += 1

    for col in range(1, NC + 1):
        ws.cell(row=row, column=col).fill = _fill(NAVY)
    c = ws.cell(row=row, column=1, value="ESTIMATED GROSS BUILDING SF")
    c.font = _font(10, bold=True, color="FFFFFF")
    c = ws.cell(row=row, column=2, value=result.gross_sf)
    c.font = _font(10, bold=True, color="FFFFFF")
    c.alignment = _align("right", "center")
    c.number_format = SF_FORMAT
    row += 2

    _section_row(ws, row, NC, "Assumptions, Caveats & Code References")
    row += 1
    for cav in result.caveats:
        if cav == DISCLAIMER:
            continue
        _note_row(ws, row, NC, cav, bg=WHITE, color="595959")
        ws.row_dimensions[row].height = 44
        row += 1
    row += 1
    _note_row(ws, row, NC, f"⚠️  Disclaimer: {DISCLAIMER}")
    ws.row_dimensions[row].height = 56


# ─── Sheet 0: Scenario comparison ─────────────────────────────────────────────

def _write_comparison(ws, named: list[tuple[str, CalculationResult]], project_name: str, date_str: str):
    headers = ["Scenario", "Campus", "Students", "Flex", "IBC",
               "Instructional SF", "Aggregate SF", "Meets", "Net SF", "Factor", "Gross SF"]
    _set_widths(ws, [28, 20, 10, 8, 10, 16, 14, 10, 14, 10, 14])
    NC = len(headers)

    _title_row(ws, 1, NC, f"Scenario Comparison — {project_name}")
    _title_row(ws, 2, NC, f"{len(named)} scenario(s)   |   Date: {date_str}", bg=BLUE, font_size=9)
    _header_row(ws, 3, headers)

    row = 4
    for i, (name, r) in enumerate(named):
        bg = WHITE if i % 2 == 0 else LGREY
        values = [
            name, campus_standard(r.campus_type).label, r.students,
            r.flexibility_level.value, code_profile(r.code_edition).label,
            r.total_instructional_sf, r.aggregate_sf,
            "YES" if r.meets_aggregate else "NO",
            r.net_sf, r.gross_factor, r.gross_sf,
        ]
        for col, v in enumerate(values, 1):
            fmt = "0.00" if col == 10 else (SF_FORMAT if isinstance(v, int) else None)
            color = "000000"
            if col == 8:
                color = "006400" if r.meets_aggregate else "CC0000"
            _data_cell(ws, row, col, v, bg, align="right" if fmt else "left", color=color, fmt=fmt)
        row += 1


# ─── Public API ───────────────────────────────────────────────────────────────

def _write_result_sheets(wb, result: CalculationResult, project_name: str,
                         date_str: str, prefix: str = ""):
    sheets = []
    for title, writer in [("Instructional Spaces", _write_instructional),
                          ("Support Spaces",       _write_support),
                          ("Summary",              _write_summary)]:
        # Excel caps sheet titles at 31 characters
        ws = wb.create_sheet(f"{prefix}{title}"[:31])
        writer(ws, result, project_name, date_str)
        sheets.append(ws)
    return sheets


def export_to_excel(
    result:       CalculationResult,
    output_path:  str,
    project_name: str = "School Space Program",
) -> str:
    """
    Export a CalculationResult to a 3-sheet Excel workbook.

    Args:
        result:       CalculationResult from compute() / SpaceProgramCalculator.
        output_path:  Output .xlsx file path.
        project_name: Project name shown in headers.

    Returns:
        Path to the saved file.
    """
    wb = Workbook()
    wb.remove(wb.active)
    date_str = datetime.today().strftime("%d %b %Y")

    for ws in _write_result_sheets(wb, result, project_name, date_str):
        ws.freeze_panes = "A4"
        ws.sheet_view.showGridLines = False

    wb.save(output_path)
    return str(output_path)


def export_batch_to_excel(
    named_results: list[tuple[str, CalculationResult]],
    output_path:   str,
    project_name:  str = "School Space Program",
) -> str:
    """Comparison sheet first, then the three detail sheets per scenario."""
    wb = Workbook()
    date_str = datetime.today().strftime("%d %b %Y")

    ws0 = wb.active
    ws0.title = "Scenario Comparison"
    _write_comparison(ws0, named_results, project_name, date_str)
    sheets = [ws0]

    for i, (name, result) in enumerate(named_results, 1):
        sheets += _write_result_sheets(wb, result, f"{project_name} — {name}",
                                       date_str, prefix=f"{i}. ")

    for ws in sheets:
        ws.freeze_panes = "A4"
        ws.sheet_view.showGridLines = False

    wb.save(output_path)
    return str(output_path)
