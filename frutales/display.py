"""Display codes and table rows for the Frutales leaderboard."""

from typing import Iterable, Optional

from .constants import LABEL_DISQUALIFIED, LABEL_EMPTY, LABEL_NOT_SUBMITTED, LABEL_TIEBREAK
from .models import RosterEntry
from .ties import find_tied_player_ids

TABLE_HEADERS = (
    'Pos', 'Jugador', 'Matricula', 'HCP I.', 'HCP C.', 'Gross', 'Neto',
    'Birdie', 'Aguila', 'Ace', 'Puntos',
)


def status_label(entry: RosterEntry, public: bool = False) -> Optional[str]:
    """
    Code shown in place of the score cells, or None when scores are shown.

    The admin view leaves players without a scorecard blank so they can be
    enabled; the public view marks every undelivered player NM.
    """
    if entry.is_disqualified:
        return LABEL_DISQUALIFIED
    if not public and not entry.has_scorecard:
        return None
    if not entry.is_delivered:
        return LABEL_NOT_SUBMITTED
    return None


def position_label(entry: RosterEntry) -> str:
    if entry.is_disqualified:
        return LABEL_DISQUALIFIED
    if entry.position:
        return str(entry.position)
    return LABEL_EMPTY


def _number(value: Optional[float], fmt: str = '{:g}') -> str:
    return LABEL_EMPTY if value is None else fmt.format(value)


def points_label(entry: RosterEntry, tied_ids: set[int]) -> str:
    suffix = f' ({LABEL_TIEBREAK})' if entry.player_id in tied_ids else ''
    return f'{entry.total_points}{suffix}'


def format_row(entry: RosterEntry, tied_ids: set[int], public: bool = False) -> list[str]:
    """Render one roster row as the leaderboard table cells."""
    label = status_label(entry, public=public)
    gross = label or (str(entry.score_gross) if entry.score_gross else LABEL_EMPTY)
    neto = label or _number(entry.score_neto)

    return [
        position_label(entry),
        entry.player_name,
        entry.matricula or LABEL_EMPTY,
        _number(entry.handicap_index, '{:.1f}'),
        _number(entry.handicap_course, '{:.1f}'),
        gross,
        neto,
        str(entry.birdie_count or LABEL_EMPTY),
        str(entry.eagle_count or LABEL_EMPTY),
        str(entry.ace_count or LABEL_EMPTY),
        points_label(entry, tied_ids),
    ]


def leaderboard_rows(roster: list[RosterEntry], public: bool = False) -> list[list[str]]:
    """Table rows for the whole roster, with tie markers computed from it."""
    tied_ids = find_tied_player_ids(roster)
    return [format_row(entry, tied_ids, public=public) for entry in roster]


def filter_roster(roster: Iterable[RosterEntry], query: str) -> list[RosterEntry]:
    """Case-insensitive search on player name and matricula."""
    if not query:
        return list(roster)
    needle = query.casefold()
    return [
        entry for entry in roster
        if needle in f'{entry.player_name} {entry.matricula or ""}'.casefold()
    ]


def render_table(rows: list[list[str]], headers: Iterable[str] = TABLE_HEADERS) -> str:
    """Plain-text table with padded columns."""
    headers = list(headers)
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    lines = ['  '.join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append('  '.join('-' * w for w in widths))
    for row in rows:
        lines.append('  '.join(cell.ljust(w) for cell, w in zip(row, widths)))
    return '\n'.join(lines)
