"""Frutales point allocation: achievements, ranking and per-event points."""

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, Iterable, Optional, Tuple

from .constants import (
    ACE_POINTS,
    BIRDIE_POINTS,
    DEFAULT_LAST_HOLE,
    DOUBLE_POINTS_MULTIPLIER,
    EAGLE_POINTS,
    MISSING_HANDICAP_INDEX,
    MISSING_HOLE_STROKES,
    MISSING_NET_SCORE,
    PARTICIPATION_POINTS,
    POSITION_POINTS,
    STATUS_DELIVERED,
    STATUS_DISQUALIFIED,
    STATUS_TRANSITIONS,
    TIE_POLICY_COUNTBACK,
    TIE_POLICY_SHARED,
)
from .models import RosterEntry
from .schemas import HoleScoreRecord, ScorecardRecord, ScoringConfig, coerce_records

logger = logging.getLogger('frutales.scoring')


def count_achievements(holes: Iterable[HoleScoreRecord]) -> Tuple[int, int, int]:
    """
    Count birdies, eagles and aces on the holes with recorded strokes.

    A hole in one counts as an ace only, even on a par 3.

    Returns:
        Tuple of (birdies, eagles, aces)
    """
    birdies = eagles = aces = 0
    for hole in holes:
        strokes = hole.golpes_propio
        if strokes is None:
            continue
        if strokes == 1:
            aces += 1
        elif strokes == hole.par - 2:
            eagles += 1
        elif strokes == hole.par - 1:
            birdies += 1
    return birdies, eagles, aces


def gross_score(holes: Iterable[HoleScoreRecord]) -> int:
    """Sum of recorded strokes; holes without strokes count nothing."""
    return sum(hole.golpes_propio for hole in holes if hole.golpes_propio is not None)


def net_score(gross: Optional[int], handicap_course: Optional[float]) -> Optional[float]:
    """Gross minus course handicap (missing handicap counts as 0)."""
    if gross is None:
        return None
    return round(gross - (handicap_course or 0), 2)


def position_points_for(rank: Optional[int], table: Optional[Dict[int, int]] = None) -> int:
    """Points for a finishing rank; ranks outside the table score 0."""
    if rank is None:
        return 0
    table = POSITION_POINTS if table is None else table
    return table.get(rank, 0)


def score_frutales_entry(
    rank: Optional[int],
    birdies: int = 0,
    eagles: int = 0,
    aces: int = 0,
    delivered: bool = True,
    multiplier: int = 1,
    config: Optional[ScoringConfig] = None,
) -> Tuple[int, Dict[str, int]]:
    """
    Score one player's event under the Frutales format.

    Scoring:
        - Position: 1st 12 | 2nd 10 | 3rd 8 | 4th 6 | 5th 4 | 6th 2 | 7th+ 0
        - Participation: 1 point per delivered card
        - Birdies: 1 point each
        - Eagles: 5 points each
        - Aces: 10 points each
        - Double points events multiply every component by 2

    Cards that were not delivered score nothing.

    Args:
        rank: Position among delivered cards (None when unranked)
        birdies: Birdie count for the round
        eagles: Eagle count for the round
        aces: Hole-in-one count for the round
        delivered: Whether the card was delivered
        multiplier: 1, or the double points multiplier
        config: Optional scoring config overriding the default table

    Returns:
        Tuple of (total_points, breakdown) where breakdown keys are
        position, participation, birdies, eagles, aces
    """
    breakdown = {'position': 0, 'participation': 0, 'birdies': 0, 'eagles': 0, 'aces': 0}
    if not delivered:
        return 0, breakdown

    if config is not None:
        table = config.position_points
        birdie_value, eagle_value, ace_value = config.birdie_points, config.eagle_points, config.ace_points
        participation_value = config.participation_points
    else:
        table = POSITION_POINTS
        birdie_value, eagle_value, ace_value = BIRDIE_POINTS, EAGLE_POINTS, ACE_POINTS
        participation_value = PARTICIPATION_POINTS

    breakdown['position'] = position_points_for(rank, table) * multiplier
    breakdown['participation'] = participation_value * multiplier
    breakdown['birdies'] = birdies * birdie_value * multiplier
    breakdown['eagles'] = eagles * eagle_value * multiplier
    breakdown['aces'] = aces * ace_value * multiplier

    return sum(breakdown.values()), breakdown


@dataclass
class ScorecardSummary:
    """Derived figures of a scorecard used for ranking."""
    card: ScorecardRecord
    gross: Optional[int] = None
    neto: Optional[float] = None
    birdies: int = 0
    eagles: int = 0
    aces: int = 0
    scores_by_hole: Dict[int, int] = field(default_factory=dict)
    max_hole: int = DEFAULT_LAST_HOLE


def summarize_scorecard(card: ScorecardRecord) -> ScorecardSummary:
    """Compute gross, net, achievements and hole map for a scorecard."""
    holes = card.hole_scores
    gross = gross_score(holes) if card.status == STATUS_DELIVERED else None
    birdies, eagles, aces = count_achievements(holes)

    return ScorecardSummary(
        card=card,
        gross=gross,
        neto=net_score(gross, card.handicap_course),
        birdies=birdies,
        eagles=eagles,
        aces=aces,
        scores_by_hole={
            hole.numero_hoyo: hole.golpes_propio
            for hole in holes
            if hole.golpes_propio is not None
        },
        max_hole=max((hole.numero_hoyo for hole in holes), default=DEFAULT_LAST_HOLE),
    )


def compare_hole_by_hole(a: ScorecardSummary, b: ScorecardSummary) -> int:
    """Countback from the last hole down to hole 1; fewer strokes wins."""
    for hole in range(max(a.max_hole, b.max_hole), 0, -1):
        strokes_a = a.scores_by_hole.get(hole, MISSING_HOLE_STROKES)
        strokes_b = b.scores_by_hole.get(hole, MISSING_HOLE_STROKES)
        if strokes_a != strokes_b:
            return -1 if strokes_a < strokes_b else 1
    return 0


def compare_summaries(a: ScorecardSummary, b: ScorecardSummary) -> int:
    """Order by net score, then handicap index, then hole-by-hole countback."""
    neto_a = a.neto if a.neto is not None else MISSING_NET_SCORE
    neto_b = b.neto if b.neto is not None else MISSING_NET_SCORE
    if neto_a != neto_b:
        return -1 if neto_a < neto_b else 1

    hcp_a = a.card.handicap_index if a.card.handicap_index is not None else MISSING_HANDICAP_INDEX
    hcp_b = b.card.handicap_index if b.card.handicap_index is not None else MISSING_HANDICAP_INDEX
    if hcp_a != hcp_b:
        return -1 if hcp_a < hcp_b else 1

    return compare_hole_by_hole(a, b)


def rank_summaries(summaries: Iterable[ScorecardSummary]) -> list[ScorecardSummary]:
    """Sort delivered cards best first."""
    return sorted(summaries, key=cmp_to_key(compare_summaries))


def assign_positions(ranked: list[ScorecardSummary], tie_policy: str = TIE_POLICY_COUNTBACK) -> list[int]:
    """
    Positions for an already ranked list.

    countback: 1..n in ranked order (ties were resolved by the comparator).
    shared: equal net scores share the best position of their group (1, 2, 2, 4).
    """
    if tie_policy not in (TIE_POLICY_COUNTBACK, TIE_POLICY_SHARED):
        raise ValueError(f'Unknown tie policy: {tie_policy}')

    positions = []
    for index, summary in enumerate(ranked):
        if (
            tie_policy == TIE_POLICY_SHARED
            and index > 0
            and summary.neto is not None
            and summary.neto == ranked[index - 1].neto
        ):
            positions.append(positions[-1])
        else:
            positions.append(index + 1)
    return positions


def _entry_from_summary(summary: ScorecardSummary) -> RosterEntry:
    card = summary.card
    return RosterEntry(
        player_id=card.player_id,
        player_name=card.player_name,
        matricula=card.matricula,
        scorecard_id=card.id,
        handicap_index=card.handicap_index,
        handicap_course=card.handicap_course,
        status=card.status,
    )


def calculate_frutales_scores(
    scorecards,
    double_points: bool = False,
    config: Optional[ScoringConfig] = None,
    tie_policy: Optional[str] = None,
) -> list[RosterEntry]:
    """
    Compute the Frutales points table for one event.

    Delivered cards are ranked by net score and receive position,
    participation and achievement points. Disqualified cards are listed
    after them with no position and no points. Cards still in progress are
    left out; the roster merge shows them as unscored players.

    Args:
        scorecards: ScorecardRecord instances or dicts
        double_points: Whether the event awards double points
        config: Optional scoring config (defaults to the module constants)
        tie_policy: 'countback' or 'shared'; overrides config when given

    Returns:
        List of RosterEntry: delivered by position, then disqualified by name

    Raises:
        InvalidInputError: If scorecards is not a list of valid records
    """
    cards = coerce_records(scorecards, ScorecardRecord, 'scorecards')

    if tie_policy is None:
        tie_policy = config.tie_policy if config is not None else TIE_POLICY_COUNTBACK
    if double_points:
        multiplier = config.double_points_multiplier if config is not None else DOUBLE_POINTS_MULTIPLIER
    else:
        multiplier = 1

    delivered = [summarize_scorecard(c) for c in cards if c.status == STATUS_DELIVERED]
    disqualified = [c for c in cards if c.status == STATUS_DISQUALIFIED]

    ranked = rank_summaries(delivered)
    positions = assign_positions(ranked, tie_policy)

    results = []
    for summary, position in zip(ranked, positions):
        total, breakdown = score_frutales_entry(
            position,
            summary.birdies,
            summary.eagles,
            summary.aces,
            delivered=True,
            multiplier=multiplier,
            config=config,
        )
        entry = _entry_from_summary(summary)
        entry.position = position
        entry.score_gross = summary.gross
        entry.score_neto = summary.neto
        entry.birdie_count = summary.birdies
        entry.eagle_count = summary.eagles
        entry.ace_count = summary.aces
        entry.position_points = breakdown['position']
        entry.participation_points = breakdown['participation']
        entry.birdie_points = breakdown['birdies']
        entry.eagle_points = breakdown['eagles']
        entry.ace_points = breakdown['aces']
        entry.total_points = total
        results.append(entry)

    disqualified_entries = sorted(
        (_entry_from_summary(ScorecardSummary(card=c)) for c in disqualified),
        key=lambda entry: entry.player_name.casefold(),
    )
    results.extend(disqualified_entries)

    logger.info(
        f'Frutales scores calculated: {len(ranked)} delivered, '
        f'{len(disqualified_entries)} disqualified, '
        f'{len(cards) - len(ranked) - len(disqualified_entries)} in progress, '
        f'multiplier={multiplier}, tie_policy={tie_policy}'
    )
    return results


def can_transition(current: str, target: str, previous: Optional[str] = None) -> bool:
    """
    Check a scorecard status change.

    IN_PROGRESS may move to DELIVERED or DISQUALIFIED. A disqualification can
    only be undone back to the status it replaced (``previous``).
    """
    if current == STATUS_DISQUALIFIED and previous is not None:
        return target == previous and previous != STATUS_DISQUALIFIED
    return target in STATUS_TRANSITIONS.get(current, set())


