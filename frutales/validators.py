"""Validation functions for merged rosters and point breakdowns."""

from .constants import VALID_STATUSES
from .models import RosterEntry


def validate_roster(roster: list[RosterEntry]) -> list[str]:
    """
    Check that a merged roster respects the leaderboard invariants.

    Checks:
    - One row per player id
    - Status is a known value
    - Positions only on delivered rows
    - No gross/net score without a scorecard
    - No points on disqualified rows

    Args:
        roster: Merged leaderboard rows

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    seen = set()
    duplicates = set()
    for entry in roster:
        if entry.player_id in seen:
            duplicates.add(entry.player_id)
        seen.add(entry.player_id)

    if duplicates:
        errors.append(
            f'Roster has duplicate players: {", ".join(str(d) for d in sorted(duplicates))}'
        )

    for entry in roster:
        name = entry.player_name or f'Player {entry.player_id}'

        if entry.status not in VALID_STATUSES:
            errors.append(f'{name} has invalid status {entry.status!r}')

        if entry.position is not None and not entry.is_delivered:
            errors.append(f'{name} has position {entry.position} but status {entry.status}')

        if not entry.has_scorecard and (entry.score_gross is not None or entry.score_neto is not None):
            errors.append(f'{name} has scores but no scorecard')

        if entry.is_disqualified and entry.total_points:
            errors.append(f'{name} is disqualified but has {entry.total_points} pts')

    return errors


def validate_points(entry: RosterEntry) -> list[str]:
    """
    Check that a row's points are internally consistent.

    Sanity checks:
    - No negative point components
    - Components add up to the total for delivered rows

    Args:
        entry: Roster row to validate

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []
    name = entry.player_name or f'Player {entry.player_id}'

    for component, value in entry.points_breakdown.items():
        if value < 0:
            warnings.append(f'{name} has negative {component} points ({value})')

    if entry.is_delivered:
        breakdown_sum = sum(entry.points_breakdown.values())
        if breakdown_sum != entry.total_points:
            warnings.append(
                f'{name} breakdown sum ({breakdown_sum}) != total ({entry.total_points}) '
                f'- difference: {abs(breakdown_sum - entry.total_points)}'
            )

    return warnings


def validate_leaderboard(roster: list[RosterEntry]) -> tuple[list[str], list[str]]:
    """
    Validate a whole leaderboard.

    Returns:
        Tuple of (errors, warnings)
        - errors: Broken invariants in the merged roster
        - warnings: Point totals to review
    """
    errors = validate_roster(roster)
    warnings: list[str] = []
    for entry in roster:
        warnings.extend(validate_points(entry))
    return errors, warnings
