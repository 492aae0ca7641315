"""Merge of inscriptions with calculated and partial scoring records.

The roster is rebuilt from scratch on every load: the inscription list is
authoritative for who plays, the calculated Frutales scores carry the
server-side ranking order, and the plain leaderboard entries fill gaps for
players the scoring run has not reached yet.
"""

import logging
from typing import Optional

from .constants import STATUS_DELIVERED, STATUS_IN_PROGRESS
from .models import RosterEntry
from .schemas import (
    FrutalesScoreRecord,
    InscriptionRecord,
    LeaderboardEntryRecord,
    coerce_records,
)

logger = logging.getLogger('frutales.merge')


def _first(*values):
    """Return the first truthy value, else None."""
    for value in values:
        if value:
            return value
    return None


def _first_present(*values):
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _index_by_player(records) -> dict:
    """Key records by player id, keeping the first occurrence."""
    by_player = {}
    for record in records:
        by_player.setdefault(record.player_id, record)
    return by_player


def _sort_by_name(entries: list[RosterEntry]) -> list[RosterEntry]:
    return sorted(entries, key=lambda entry: entry.player_name.casefold())


def _ranked_position(score: FrutalesScoreRecord) -> Optional[int]:
    """Only delivered cards hold a finishing position."""
    return score.position if score.status == STATUS_DELIVERED else None


def _copy_points(row: RosterEntry, score: FrutalesScoreRecord) -> None:
    """
    Copy achievement counts and points from a calculated score.

    Position and participation points are only earned by a delivered card;
    rows the backend scored otherwise (CANCELLED after finalization) lose
    them from the total and keep their achievement points.
    """
    row.birdie_count = score.birdie_count
    row.eagle_count = score.eagle_count
    row.ace_count = score.ace_count
    row.position_points = score.position_points
    row.birdie_points = score.birdie_points
    row.eagle_points = score.eagle_points
    row.ace_points = score.ace_points
    row.participation_points = score.participation_points
    row.total_points = score.total_points
    if score.status != STATUS_DELIVERED:
        row.total_points = max(0, row.total_points - row.position_points - row.participation_points)
        row.position_points = 0
        row.participation_points = 0


def entry_from_score(score: FrutalesScoreRecord) -> RosterEntry:
    """Build a roster row from a calculated score alone, without inscription data."""
    row = RosterEntry(
        player_id=score.player_id,
        player_name=score.player_name,
        matricula=score.matricula,
        scorecard_id=score.scorecard_id,
        position=_ranked_position(score),
        handicap_index=score.handicap_index,
        handicap_course=score.handicap_course,
        score_gross=score.score_gross,
        score_neto=score.score_neto,
        status=score.status,
    )
    _copy_points(row, score)
    return row


def merge_inscription(
    inscription: InscriptionRecord,
    calculated: Optional[FrutalesScoreRecord],
    entry: Optional[LeaderboardEntryRecord],
) -> RosterEntry:
    """
    Build the canonical row for one inscribed player.

    Fields come from the calculated score first, then the leaderboard entry,
    then the inscription itself.

    Args:
        inscription: The player's inscription
        calculated: Calculated Frutales score for the player, if any
        entry: Plain leaderboard entry for the player, if any

    Returns:
        RosterEntry for the player
    """
    player = inscription.player
    has_scorecard = bool(
        (calculated and calculated.scorecard_id) or (entry and entry.scorecard_id)
    )

    row = RosterEntry(
        player_id=player.id,
        player_name=_first(calculated and calculated.player_name, player.display_name) or '',
        matricula=_first(calculated and calculated.matricula, player.matricula),
        scorecard_id=_first(
            calculated and calculated.scorecard_id, entry and entry.scorecard_id
        ),
        position=_ranked_position(calculated) if calculated else None,
        handicap_index=_first_present(
            calculated.handicap_index if calculated else None, player.handicap_index
        ),
        handicap_course=_first_present(
            calculated.handicap_course if calculated else None,
            entry.handicap_course if entry else None,
            inscription.handicap_course,
        ),
        score_gross=_first_present(
            calculated.score_gross if calculated else None,
            entry.score_gross if entry else None,
        ),
        score_neto=_first_present(
            calculated.score_neto if calculated else None,
            entry.score_neto if entry else None,
        ),
        status=_first(calculated and calculated.status, entry and entry.status)
        or STATUS_IN_PROGRESS,
    )

    if calculated:
        _copy_points(row, calculated)

    # No scorecard means nothing has been recorded: never carry stale scores
    if not has_scorecard:
        row.score_gross = None
        row.score_neto = None
        if calculated is None:
            row.status = STATUS_IN_PROGRESS

    return row


def merge_scores_with_inscriptions(scores, entries, inscriptions) -> list[RosterEntry]:
    """
    Produce one roster row per player from the three server collections.

    Ordering:
        - No calculated scores yet: every row sorted by player name.
        - Otherwise: rows in the calculated scores' order, then inscribed
          players missing from the calculation sorted by name, then
          calculated scores whose player has no inscription.

    Args:
        scores: Calculated Frutales scores (FrutalesScoreRecord or dicts), ranked
        entries: Plain leaderboard entries (LeaderboardEntryRecord or dicts)
        inscriptions: Tournament inscriptions (InscriptionRecord or dicts)

    Returns:
        List of RosterEntry, one per distinct player id

    Raises:
        InvalidInputError: If a collection is not a list or holds invalid records
    """
    scores = coerce_records(scores, FrutalesScoreRecord, 'scores')
    entries = coerce_records(entries, LeaderboardEntryRecord, 'entries')
    inscriptions = coerce_records(inscriptions, InscriptionRecord, 'inscriptions')

    score_by_player = _index_by_player(scores)
    entry_by_player = _index_by_player(entries)

    unique_inscriptions = {}
    for inscription in inscriptions:
        unique_inscriptions.setdefault(inscription.player.id, inscription)

    if len(unique_inscriptions) < len(inscriptions):
        logger.debug(
            f'Collapsed {len(inscriptions) - len(unique_inscriptions)} duplicate inscriptions'
        )

    merged_by_player = {
        player_id: merge_inscription(
            inscription, score_by_player.get(player_id), entry_by_player.get(player_id)
        )
        for player_id, inscription in unique_inscriptions.items()
    }

    if not scores:
        return _sort_by_name(list(merged_by_player.values()))

    if not merged_by_player:
        logger.warning(
            f'No inscriptions found for {len(score_by_player)} calculated scores; '
            'showing calculated rows only'
        )

    ordered_calculated = []
    calculated_without_inscription = []
    for player_id, score in score_by_player.items():
        if player_id in merged_by_player:
            ordered_calculated.append(merged_by_player[player_id])
        else:
            calculated_without_inscription.append(entry_from_score(score))

    if calculated_without_inscription and merged_by_player:
        logger.warning(
            f'{len(calculated_without_inscription)} calculated scores have no inscription: '
            + ', '.join(str(e.player_id) for e in calculated_without_inscription)
        )

    missing_calculated = _sort_by_name(
        [entry for player_id, entry in merged_by_player.items() if player_id not in score_by_player]
    )

    return ordered_calculated + missing_calculated + calculated_without_inscription
