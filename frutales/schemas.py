"""Pydantic schemas for backend records and configuration."""

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .exceptions import InvalidInputError

STATUS_PATTERN = r'^(IN_PROGRESS|DELIVERED|DISQUALIFIED|CANCELLED)$'


class PlayerInfo(BaseModel):
    """Player as embedded in an inscription."""

    id: int
    nombre: str = ''
    apellido: str = ''
    matricula: str | None = None
    handicap_index: float | None = None
    club_origen: str | None = None

    @property
    def display_name(self) -> str:
        return f'{self.apellido} {self.nombre}'.strip()

    class Config:
        extra = 'ignore'
        alias_generator = to_camel
        populate_by_name = True


class InscriptionRecord(BaseModel):
    """A player's registration for a tournament."""

    player: PlayerInfo
    handicap_course: float | None = None

    class Config:
        extra = 'ignore'
        alias_generator = to_camel
        populate_by_name = True


class FrutalesScoreRecord(BaseModel):
    """Fully computed score and points row from the scoring run."""

    scorecard_id: int | None = None
    player_id: int
    player_name: str = ''
    matricula: str | None = None
    position: int | None = Field(None, ge=1)
    handicap_index: float | None = None
    handicap_course: float | None = None
    score_gross: int | None = None
    score_neto: float | None = None
    status: str = Field(..., pattern=STATUS_PATTERN)
    birdie_count: int = Field(default=0, ge=0)
    eagle_count: int = Field(default=0, ge=0)
    ace_count: int = Field(default=0, ge=0)
    position_points: int = Field(default=0, ge=0)
    birdie_points: int = Field(default=0, ge=0)
    eagle_points: int = Field(default=0, ge=0)
    ace_points: int = Field(default=0, ge=0)
    participation_points: int = Field(default=0, ge=0)
    total_points: int = Field(default=0, ge=0)

    @field_validator(
        'birdie_count', 'eagle_count', 'ace_count',
        'position_points', 'birdie_points', 'eagle_points', 'ace_points',
        'participation_points', 'total_points',
        mode='before',
    )
    @classmethod
    def null_as_zero(cls, v):
        """Backend may send null for counters that were never computed."""
        return 0 if v is None else v

    class Config:
        extra = 'ignore'
        alias_generator = to_camel
        populate_by_name = True


class LeaderboardEntryRecord(BaseModel):
    """Lighter score row from the plain leaderboard endpoint."""

    player_id: int
    scorecard_id: int | None = None
    player_name: str | None = None
    score_gross: int | None = None
    score_neto: float | None = None
    status: str | None = Field(None, pattern=STATUS_PATTERN)
    handicap_course: float | None = None

    class Config:
        extra = 'ignore'
        alias_generator = to_camel
        populate_by_name = True


class HoleScoreRecord(BaseModel):
    """Strokes recorded on one hole."""

    numero_hoyo: int = Field(..., ge=1, le=36)
    par: int = Field(..., ge=3, le=6)
    golpes_propio: int | None = Field(None, ge=1)

    class Config:
        extra = 'ignore'
        alias_generator = to_camel
        populate_by_name = True


class ScorecardRecord(BaseModel):
    """A player's scorecard with hole-by-hole strokes."""

    id: int
    player_id: int
    player_name: str = ''
    matricula: str | None = None
    handicap_index: float | None = None
    handicap_course: float | None = None
    status: str = Field(..., pattern=STATUS_PATTERN)
    hole_scores: list[HoleScoreRecord] = Field(default_factory=list)

    class Config:
        extra = 'ignore'
        alias_generator = to_camel
        populate_by_name = True


class ScoringConfig(BaseModel):
    """Frutales scoring and polling settings."""

    position_points: dict[int, int]
    birdie_points: int = Field(default=1, ge=0)
    eagle_points: int = Field(default=5, ge=0)
    ace_points: int = Field(default=10, ge=0)
    participation_points: int = Field(default=1, ge=0)
    double_points_multiplier: int = Field(default=2, ge=1)
    tie_policy: str = Field(default='countback', pattern=r'^(countback|shared)$')
    poll_interval_seconds: float = Field(default=100, gt=0)
    api_base_url: str = 'http://localhost:8080/api'
    request_timeout_seconds: float = Field(default=10, gt=0)

    @field_validator('position_points')
    @classmethod
    def validate_position_points(cls, v):
        """Ensure ranks start at 1 and points are non-negative."""
        for rank, points in v.items():
            if rank < 1:
                raise ValueError(f'Invalid rank: {rank}')
            if points < 0:
                raise ValueError(f'Invalid points for rank {rank}: {points}')
        return v

    class Config:
        extra = 'forbid'


def coerce_records(items, schema: type[BaseModel], name: str) -> list:
    """
    Validate a collection of records, accepting schema instances or plain dicts.

    Args:
        items: List or tuple of records
        schema: Pydantic model the elements must satisfy
        name: Argument name, used in error messages

    Returns:
        List of schema instances

    Raises:
        InvalidInputError: If items is not a list/tuple or an element is invalid
    """
    if not isinstance(items, (list, tuple)):
        raise InvalidInputError(f'{name} must be a list, got {type(items).__name__}')

    records = []
    for index, item in enumerate(items):
        if isinstance(item, schema):
            records.append(item)
            continue
        try:
            records.append(schema.model_validate(item))
        except ValidationError as e:
            raise InvalidInputError(f'{name}[{index}] is not a valid {schema.__name__}: {e}') from e
    return records
