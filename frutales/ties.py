"""Detection of players tied on delivered net score ("DA" marker)."""

from collections import defaultdict
from typing import Iterable

from .models import RosterEntry


def tie_groups(roster: Iterable[RosterEntry]) -> list[list[int]]:
    """
    Group delivered players sharing an identical net score.

    Only rows with status DELIVERED and a net score are considered. Groups
    are returned in roster order of their first member; singletons are dropped.

    Args:
        roster: Merged leaderboard rows

    Returns:
        List of player id groups, each with at least two members
    """
    by_neto: dict[float, list[int]] = defaultdict(list)
    for entry in roster:
        if not entry.is_delivered or entry.score_neto is None:
            continue
        by_neto[entry.score_neto].append(entry.player_id)

    return [ids for ids in by_neto.values() if len(ids) > 1]


def find_tied_player_ids(roster: Iterable[RosterEntry]) -> set[int]:
    """Return the ids of every delivered player tied with at least one other on net score."""
    return {player_id for group in tie_groups(roster) for player_id in group}
