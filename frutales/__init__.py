from .models import RosterEntry, EventResult, StageRow
from .exceptions import InvalidInputError
from .schemas import (
    FrutalesScoreRecord,
    InscriptionRecord,
    LeaderboardEntryRecord,
    ScorecardRecord,
    ScoringConfig,
)
from .merge import merge_scores_with_inscriptions
from .ties import find_tied_player_ids, tie_groups
from .scoring import (
    calculate_frutales_scores,
    can_transition,
    count_achievements,
    score_frutales_entry,
)
from .stage import aggregate_stage
from .display import filter_roster, leaderboard_rows, render_table
from .validators import validate_leaderboard, validate_points, validate_roster
from .data_fetcher import LeaderboardFetcher
from .poller import LeaderboardPoller
from .excel_export import export_leaderboard, export_stage_board

__all__ = [
    # Models
    'RosterEntry',
    'EventResult',
    'StageRow',
    'InvalidInputError',
    # Backend records
    'FrutalesScoreRecord',
    'InscriptionRecord',
    'LeaderboardEntryRecord',
    'ScorecardRecord',
    'ScoringConfig',
    # Leaderboard core
    'merge_scores_with_inscriptions',
    'find_tied_player_ids',
    'tie_groups',
    # Point allocation
    'calculate_frutales_scores',
    'can_transition',
    'count_achievements',
    'score_frutales_entry',
    'aggregate_stage',
    # Display
    'filter_roster',
    'leaderboard_rows',
    'render_table',
    # Validation
    'validate_leaderboard',
    'validate_points',
    'validate_roster',
    # Backend access
    'LeaderboardFetcher',
    'LeaderboardPoller',
    # Export
    'export_leaderboard',
    'export_stage_board',
]
