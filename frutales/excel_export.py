"""Excel export of leaderboards and stage boards."""

import logging
from pathlib import Path
from typing import Sequence

import openpyxl
from openpyxl.styles import Font

from .display import TABLE_HEADERS, leaderboard_rows
from .models import EventResult, RosterEntry, StageRow

logger = logging.getLogger('frutales.excel_export')

# Columns holding numbers when the cell is not a display code (1-based)
NUMERIC_COLUMNS = {1, 4, 5, 6, 7, 8, 9, 10}


def _cell_value(text: str, column: int):
    """Store numbers as numbers so the sheet can be sorted and summed."""
    if column not in NUMERIC_COLUMNS:
        return text
    try:
        number = float(text)
    except ValueError:
        return text
    return int(number) if number.is_integer() else number


def export_leaderboard(
    path: Path | str,
    roster: list[RosterEntry],
    title: str = 'Leaderboard',
    public: bool = False,
) -> Path:
    """
    Write a leaderboard to a new workbook.

    Display codes (DS, NM, DA) are written as they appear on screen.

    Args:
        path: Output .xlsx path
        roster: Merged roster rows, already ordered
        title: Sheet title (truncated to Excel's 31 characters)
        public: Use the public page's status codes

    Returns:
        Path of the written workbook
    """
    path = Path(path)
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title[:31]

    ws.append(list(TABLE_HEADERS))
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in leaderboard_rows(roster, public=public):
        ws.append([_cell_value(text, column) for column, text in enumerate(row, 1)])

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info(f'Leaderboard saved to {path} ({len(roster)} players)')
    return path


def export_stage_board(
    path: Path | str,
    rows: list[StageRow],
    events: Sequence[EventResult],
    title: str = 'Etapa',
) -> Path:
    """
    Write stage standings: one column per event plus the total.

    Double points events are marked with "x2" in their header.
    """
    path = Path(path)
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = title[:31]

    headers = ['Pos', 'Jugador', 'HCP I.']
    for event in events:
        header = event.name
        if event.start_date:
            header = f'{header} ({event.start_date.isoformat()})'
        if event.double_points:
            header = f'{header} x2'
        headers.append(header)
    headers.append('Total')

    ws.append(headers)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in rows:
        ws.append(
            [row.position, row.player_name, row.handicap_index]
            + [row.points_by_event.get(event.tournament_id, 0) for event in events]
            + [row.total_points]
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info(f'Stage board saved to {path} ({len(rows)} players, {len(events)} events)')
    return path
