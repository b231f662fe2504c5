"""
Excel export functionality for BillSplit
"""
from __future__ import annotations
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Event
from computations import compute_event_bill, item_breakdown
from utils import format_datetime

logger = logging.getLogger(__name__)

MONEY = "0.00"


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_columns(ws, cols, first_row=2):
    for r in range(first_row, ws.max_row + 1):
        for c in cols:
            ws.cell(r, c).number_format = MONEY


def export_bill_excel(event: Event, filepath: str, tax_rate: float, tip_rate: float) -> None:
    """
    Export an event's bill to an Excel file with sheets:
    - Summary
    - Individual Totals (each person followed by their item shares)
    - Items
    - Unassigned (only when some item is shared by nobody)
    """
    bill = compute_event_bill(event, tax_rate, tip_rate)
    s = bill.summary

    wb = Workbook()
    ws = wb.active
    ws.title = "Summary"
    ws.append([event.name, format_datetime(event.date), ""])
    ws.cell(1, 1).font = Font(bold=True, size=13)
    ws.append(["", "Rate (%)", "Amount"])
    _style_header(ws, 2)
    ws.append(["Subtotal", None, s.subtotal])
    ws.append(["Sales Tax", tax_rate, s.tax_amount])
    ws.append(["Tip", tip_rate, s.tip_amount])
    ws.append(["Total with Tax & Tip", None, s.total])
    ws.cell(ws.max_row, 1).font = Font(bold=True)
    ws.cell(ws.max_row, 3).font = Font(bold=True)
    _money_columns(ws, [3], first_row=3)
    for r in range(3, ws.max_row + 1):
        ws.cell(r, 2).number_format = "0.000"
    _autosize_columns(ws)

    # Individual totals, item shares indented under each person
    ws = wb.create_sheet("Individual Totals")
    ws.append(["Person", "Subtotal", "Tax", "Tip", "Total"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for b in bill.people:
        ws.append([b.person.name, b.subtotal, b.tax, b.tip, b.total])
        row = ws.max_row
        ws.cell(row, 1).font = Font(bold=True)
        ws.cell(row, 5).font = Font(bold=True)
        if b.person.color:
            ws.cell(row, 1).fill = PatternFill("solid", fgColor=b.person.color.lstrip("#").upper())
        for share in b.items:
            label = f"  • {share.item.name}"
            if share.item.quantity > 1:
                label += f" ×{share.item.quantity}"
            ws.append([label, share.amount, None, None, None])
    _money_columns(ws, range(2, 6))
    _autosize_columns(ws)

    ws = wb.create_sheet("Items")
    ws.append(["Item", "Quantity", "Unit Price", "Price", "Per Person", "Split Between"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for item, per_person, sharers in item_breakdown(event):
        ws.append([item.name, item.quantity, item.unit_price, item.price, per_person, ", ".join(sharers)])
    _money_columns(ws, [3, 4, 5])
    _autosize_columns(ws)

    if bill.unassigned_items:
        ws = wb.create_sheet("Unassigned")
        ws.append(["Item", "Price"])
        _style_header(ws, 1)
        for item in bill.unassigned_items:
            ws.append([item.name, item.price])
        ws.append(["Missing from individual totals", bill.unassigned_total])
        ws.cell(ws.max_row, 1).font = Font(bold=True, color="C00000")
        _money_columns(ws, [2])
        _autosize_columns(ws)

    wb.save(filepath)
    logger.info("exported bill for event %s to %s", event.id, filepath)
