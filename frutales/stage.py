"""Stage (multi-event series) aggregation of Frutales points."""

import logging
from typing import Sequence

from .constants import MISSING_HANDICAP_INDEX, MISSING_NET_SCORE
from .exceptions import InvalidInputError
from .models import EventResult, StageRow

logger = logging.getLogger('frutales.stage')


def _stage_sort_key(row: StageRow):
    return (
        -row.total_points,
        row.handicap_index is None,
        row.handicap_index if row.handicap_index is not None else MISSING_HANDICAP_INDEX,
        row.last_event_neto is None,
        row.last_event_neto if row.last_event_neto is not None else MISSING_NET_SCORE,
        row.player_name,
    )


def aggregate_stage(events: Sequence[EventResult]) -> list[StageRow]:
    """
    Sum per-event Frutales totals into a stage standings table.

    Each event's total already includes its double points. Players are the
    union of all event rosters; a player missing from an event scores 0 there.

    Ranking:
        - Total points, highest first
        - Handicap index, lowest first (missing last)
        - Net score in the last event, lowest first (missing last)
        - Player name

    Args:
        events: Events of the stage in date order

    Returns:
        List of StageRow with positions 1..n

    Raises:
        InvalidInputError: If events is not a list or is empty
    """
    if not isinstance(events, (list, tuple)):
        raise InvalidInputError(f'events must be a list, got {type(events).__name__}')
    if not events:
        raise InvalidInputError('Stage has no events to aggregate')

    rows: dict[int, StageRow] = {}
    for event in events:
        for entry in event.roster:
            if entry.player_id not in rows:
                rows[entry.player_id] = StageRow(
                    player_id=entry.player_id,
                    player_name=entry.player_name,
                    handicap_index=entry.handicap_index,
                )

    last_event = events[-1]
    last_neto = {
        entry.player_id: entry.score_neto
        for entry in last_event.roster
        if entry.score_neto is not None
    }

    for row in rows.values():
        for event in events:
            row.points_by_event[event.tournament_id] = 0
        row.last_event_neto = last_neto.get(row.player_id)

    for event in events:
        seen = set()
        for entry in event.roster:
            # first row per player wins, matching the merge
            if entry.player_id in seen:
                continue
            seen.add(entry.player_id)
            rows[entry.player_id].points_by_event[event.tournament_id] = entry.total_points

    for row in rows.values():
        row.total_points = sum(row.points_by_event.values())

    ranked = sorted(rows.values(), key=_stage_sort_key)
    for position, row in enumerate(ranked, 1):
        row.position = position

    logger.info(f'Stage aggregated: {len(events)} events, {len(ranked)} players')
    return ranked
