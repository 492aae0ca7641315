"""Data models for the Frutales leaderboard."""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from .constants import STATUS_DELIVERED, STATUS_DISQUALIFIED, STATUS_IN_PROGRESS


def _to_camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


@dataclass
class RosterEntry:
    """Canonical per-player leaderboard row.

    Score fields stay None until a scorecard has recorded values; they are
    never defaulted to zero. Achievement counts and point fields default to 0.
    """
    player_id: int
    player_name: str = ''
    matricula: Optional[str] = None
    scorecard_id: Optional[int] = None
    position: Optional[int] = None
    handicap_index: Optional[float] = None
    handicap_course: Optional[float] = None
    score_gross: Optional[int] = None
    score_neto: Optional[float] = None
    status: str = STATUS_IN_PROGRESS
    birdie_count: int = 0
    eagle_count: int = 0
    ace_count: int = 0
    position_points: int = 0
    birdie_points: int = 0
    eagle_points: int = 0
    ace_points: int = 0
    participation_points: int = 0
    total_points: int = 0

    @property
    def has_scorecard(self) -> bool:
        return self.scorecard_id is not None

    @property
    def is_delivered(self) -> bool:
        return self.status == STATUS_DELIVERED

    @property
    def is_disqualified(self) -> bool:
        return self.status == STATUS_DISQUALIFIED

    @property
    def points_breakdown(self) -> Dict[str, int]:
        return {
            'position': self.position_points,
            'participation': self.participation_points,
            'birdies': self.birdie_points,
            'eagles': self.eagle_points,
            'aces': self.ace_points,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the backend's camelCase keys."""
        return {_to_camel(key): value for key, value in asdict(self).items()}


@dataclass
class EventResult:
    """One tournament date of a stage, with its computed roster."""
    tournament_id: int
    name: str
    roster: List[RosterEntry] = field(default_factory=list)
    start_date: Optional[date] = None
    double_points: bool = False


@dataclass
class StageRow:
    """A player's accumulated points across the events of a stage."""
    player_id: int
    player_name: str
    handicap_index: Optional[float] = None
    total_points: int = 0
    position: Optional[int] = None
    points_by_event: Dict[int, int] = field(default_factory=dict)  # tournament_id -> points
    last_event_neto: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {_to_camel(key): value for key, value in asdict(self).items()}
        data['pointsByEvent'] = {str(k): v for k, v in self.points_by_event.items()}
        return data
