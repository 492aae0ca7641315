"""Constants and mappings for Frutales leaderboard scoring."""

# Scorecard statuses
STATUS_IN_PROGRESS = 'IN_PROGRESS'
STATUS_DELIVERED = 'DELIVERED'
STATUS_DISQUALIFIED = 'DISQUALIFIED'
# Set by the backend on cards still open when a tournament is finalized
STATUS_CANCELLED = 'CANCELLED'

VALID_STATUSES = (STATUS_IN_PROGRESS, STATUS_DELIVERED, STATUS_DISQUALIFIED, STATUS_CANCELLED)

# Allowed status transitions. DISQUALIFIED -> previous status is an undo
# and is checked separately against the status it replaced.
STATUS_TRANSITIONS = {
    STATUS_IN_PROGRESS: {STATUS_DELIVERED, STATUS_DISQUALIFIED},
    STATUS_DELIVERED: set(),
    STATUS_DISQUALIFIED: set(),
    STATUS_CANCELLED: set(),
}

# Display codes
LABEL_TIEBREAK = 'DA'  # desempate automatico
LABEL_NOT_SUBMITTED = 'NM'  # no marco
LABEL_DISQUALIFIED = 'DS'  # descalificado
LABEL_EMPTY = '-'

# Position points by finishing rank (7th and below score nothing)
POSITION_POINTS = {
    1: 12,
    2: 10,
    3: 8,
    4: 6,
    5: 4,
    6: 2,
}

# Achievement bonuses per hole
BIRDIE_POINTS = 1
EAGLE_POINTS = 5
ACE_POINTS = 10

PARTICIPATION_POINTS = 1

DOUBLE_POINTS_MULTIPLIER = 2

# Tie policies for position points
TIE_POLICY_COUNTBACK = 'countback'
TIE_POLICY_SHARED = 'shared'

# Sort sentinels for missing values when ranking
MISSING_NET_SCORE = 9999
MISSING_HANDICAP_INDEX = 999
MISSING_HOLE_STROKES = 99
DEFAULT_LAST_HOLE = 9

DEFAULT_POLL_INTERVAL_SECONDS = 100
