"""Unit tests for merging inscriptions with scoring records."""

import logging
import random

import pytest

from frutales.display import position_label, status_label
from frutales.exceptions import InvalidInputError
from frutales.merge import merge_scores_with_inscriptions
from frutales.schemas import InscriptionRecord
from frutales.ties import find_tied_player_ids
from frutales.validators import validate_roster


def make_inscription(player_id, apellido, nombre='Juan', handicap_course=10.0, handicap_index=8.4):
    return {
        'player': {
            'id': player_id,
            'nombre': nombre,
            'apellido': apellido,
            'matricula': f'M{player_id:03d}',
            'handicapIndex': handicap_index,
            'clubOrigen': 'Los Frutales',
        },
        'handicapCourse': handicap_course,
    }


def make_score(player_id, name, position=None, status='DELIVERED', scorecard_id=None, **extra):
    score = {
        'scorecardId': scorecard_id if scorecard_id is not None else 100 + player_id,
        'playerId': player_id,
        'playerName': name,
        'matricula': f'M{player_id:03d}',
        'position': position,
        'status': status,
        'birdieCount': 0,
        'eagleCount': 0,
        'aceCount': 0,
        'positionPoints': 0,
        'birdiePoints': 0,
        'eaglePoints': 0,
        'acePoints': 0,
        'participationPoints': 0,
        'totalPoints': 0,
    }
    score.update(extra)
    return score


@pytest.fixture
def four_inscriptions():
    return [
        make_inscription(1, 'Perez'),
        make_inscription(2, 'Gomez'),
        make_inscription(3, 'Alvarez'),
        make_inscription(4, 'Diaz'),
    ]


class TestEmptyScoring:
    """Merges before any scoring run."""

    def test_no_scores_sorted_by_name(self):
        """Two inscribed players, nothing scored: both in progress, sorted by name."""
        inscriptions = [make_inscription(1, 'Zapata'), make_inscription(2, 'Acosta')]
        roster = merge_scores_with_inscriptions([], [], inscriptions)

        assert [e.player_id for e in roster] == [2, 1]
        assert [e.player_name for e in roster] == ['Acosta Juan', 'Zapata Juan']
        for entry in roster:
            assert entry.status == 'IN_PROGRESS'
            assert entry.score_gross is None
            assert entry.score_neto is None
            assert entry.scorecard_id is None
            assert entry.position is None

    def test_name_sort_is_case_insensitive(self):
        """Lowercase surnames sort with the rest, not after them."""
        inscriptions = [make_inscription(1, 'Zapata'), make_inscription(2, 'acosta')]
        roster = merge_scores_with_inscriptions([], [], inscriptions)
        assert [e.player_id for e in roster] == [2, 1]

    def test_identity_from_inscription(self):
        """Without scores, identity and handicaps come from the inscription."""
        roster = merge_scores_with_inscriptions(
            [], [], [make_inscription(7, 'Ruiz', 'Ana', handicap_course=14.0, handicap_index=12.1)]
        )
        entry = roster[0]
        assert entry.player_name == 'Ruiz Ana'
        assert entry.matricula == 'M007'
        assert entry.handicap_index == 12.1
        assert entry.handicap_course == 14.0
        assert entry.total_points == 0
        assert entry.birdie_count == 0

    def test_empty_everything(self):
        """No inscriptions and no scores gives an empty roster."""
        assert merge_scores_with_inscriptions([], [], []) == []


class TestOrdering:
    """Output order rules when a scoring run exists."""

    def test_ranking_preserved(self, four_inscriptions):
        """Calculated order [P3, P1, P2] is kept; unscored P4 follows."""
        scores = [
            make_score(3, 'Alvarez Juan', position=1),
            make_score(1, 'Perez Juan', position=2),
            make_score(2, 'Gomez Juan', position=3),
        ]
        roster = merge_scores_with_inscriptions(scores, [], four_inscriptions)
        assert [e.player_id for e in roster] == [3, 1, 2, 4]

    def test_missing_calculated_sorted_by_name(self, four_inscriptions):
        """Inscribed players absent from the calculation are sorted alphabetically."""
        scores = [make_score(1, 'Perez Juan', position=1)]
        roster = merge_scores_with_inscriptions(scores, [], four_inscriptions)
        # Alvarez (3), Diaz (4), Gomez (2)
        assert [e.player_id for e in roster] == [1, 3, 4, 2]

    def test_calculated_without_inscription_goes_last(self, four_inscriptions):
        """A calculated score with no inscription is appended after everyone else."""
        scores = [
            make_score(99, 'Fantasma Test', position=1),
            make_score(2, 'Gomez Juan', position=2),
        ]
        roster = merge_scores_with_inscriptions(scores, [], four_inscriptions)

        assert [e.player_id for e in roster] == [2, 3, 4, 1, 99]
        orphan = roster[-1]
        assert orphan.player_name == 'Fantasma Test'
        assert orphan.position == 1

    def test_repeated_calculated_id_emitted_once(self, four_inscriptions):
        """Duplicate calculated rows do not duplicate the player."""
        scores = [
            make_score(1, 'Perez Juan', position=1, totalPoints=13),
            make_score(1, 'Perez Juan', position=2, totalPoints=11),
        ]
        roster = merge_scores_with_inscriptions(scores, [], four_inscriptions)

        assert [e.player_id for e in roster].count(1) == 1
        assert roster[0].total_points == 13

    def test_inscription_order_does_not_matter(self, four_inscriptions):
        """Shuffling inscriptions and entries yields the same roster."""
        scores = [make_score(2, 'Gomez Juan', position=1)]
        entries = [
            {'playerId': 1, 'scorecardId': 201, 'scoreGross': 88, 'scoreNeto': 78, 'status': 'IN_PROGRESS'},
            {'playerId': 4, 'scorecardId': 204, 'scoreGross': 90, 'scoreNeto': 80, 'status': 'IN_PROGRESS'},
        ]
        expected = merge_scores_with_inscriptions(scores, entries, four_inscriptions)

        shuffled_inscriptions = list(four_inscriptions)
        shuffled_entries = list(entries)
        random.Random(7).shuffle(shuffled_inscriptions)
        shuffled_entries.reverse()

        assert merge_scores_with_inscriptions(scores, shuffled_entries, shuffled_inscriptions) == expected

    def test_deterministic(self, four_inscriptions):
        """Same inputs, same output including order."""
        scores = [make_score(4, 'Diaz Juan', position=1), make_score(3, 'Alvarez Juan', position=2)]
        first = merge_scores_with_inscriptions(scores, [], four_inscriptions)
        second = merge_scores_with_inscriptions(scores, [], four_inscriptions)
        assert first == second


class TestFieldPrecedence:
    """Calculated scores first, then leaderboard entries, then inscriptions."""

    def test_calculated_over_entry(self):
        """Calculated values win over the leaderboard entry."""
        scores = [make_score(1, 'Perez Juan', position=1, scoreGross=82, scoreNeto=70, handicapCourse=12)]
        entries = [{'playerId': 1, 'scorecardId': 101, 'scoreGross': 85, 'scoreNeto': 75, 'handicapCourse': 10}]
        entry = merge_scores_with_inscriptions(scores, entries, [make_inscription(1, 'Perez')])[0]

        assert entry.score_gross == 82
        assert entry.score_neto == 70
        assert entry.handicap_course == 12

    def test_entry_fills_gaps(self):
        """A player not yet in the calculation takes scores from the leaderboard entry."""
        entries = [{
            'playerId': 1,
            'scorecardId': 301,
            'scoreGross': 85,
            'scoreNeto': 73.6,
            'status': 'DELIVERED',
            'handicapCourse': 11.4,
        }]
        entry = merge_scores_with_inscriptions([], entries, [make_inscription(1, 'Perez')])[0]

        assert entry.scorecard_id == 301
        assert entry.score_gross == 85
        assert entry.score_neto == 73.6
        assert entry.handicap_course == 11.4
        assert entry.status == 'DELIVERED'
        assert entry.total_points == 0

    def test_handicap_course_falls_back_to_inscription(self):
        """No handicap course in either score source: the inscription's is used."""
        entries = [{'playerId': 1, 'scorecardId': 301}]
        entry = merge_scores_with_inscriptions(
            [], entries, [make_inscription(1, 'Perez', handicap_course=9.0)]
        )[0]
        assert entry.handicap_course == 9.0
        assert entry.status == 'IN_PROGRESS'

    def test_calculated_points_copied(self):
        """Point fields and achievement counts come from the calculated row."""
        scores = [make_score(
            1, 'Perez Juan', position=1,
            birdieCount=2, birdiePoints=2, positionPoints=12, participationPoints=1, totalPoints=15,
        )]
        entry = merge_scores_with_inscriptions(scores, [], [make_inscription(1, 'Perez')])[0]

        assert entry.birdie_count == 2
        assert entry.position_points == 12
        assert entry.total_points == 15
        assert entry.position == 1

    def test_duplicate_inscriptions_keep_first(self):
        """Repeated inscriptions collapse to the first occurrence."""
        inscriptions = [
            make_inscription(1, 'Perez', handicap_course=10.0),
            make_inscription(1, 'Perez', handicap_course=18.0),
            make_inscription(2, 'Gomez'),
        ]
        roster = merge_scores_with_inscriptions([], [], inscriptions)

        assert len(roster) == 2
        perez = next(e for e in roster if e.player_id == 1)
        assert perez.handicap_course == 10.0


class TestNoStaleScores:
    """Players without a scorecard never show scores."""

    def test_entry_without_scorecard_is_cleared(self):
        """Zero scores and a stale status on an entry without scorecard are discarded."""
        entries = [{'playerId': 1, 'scoreGross': 0, 'scoreNeto': 0, 'status': 'DELIVERED'}]
        entry = merge_scores_with_inscriptions([], entries, [make_inscription(1, 'Perez')])[0]

        assert entry.score_gross is None
        assert entry.score_neto is None
        assert entry.status == 'IN_PROGRESS'

    def test_every_unscored_player_has_no_scores(self, four_inscriptions):
        """Property: no scorecard id in either source means no gross/net."""
        entries = [{'playerId': 2, 'scorecardId': 202, 'scoreGross': 80, 'scoreNeto': 70}]
        roster = merge_scores_with_inscriptions([], entries, four_inscriptions)

        for entry in roster:
            if entry.player_id != 2:
                assert entry.score_gross is None
                assert entry.score_neto is None


class TestCompleteness:
    """Every inscribed player appears exactly once."""

    def test_each_inscribed_player_once(self, four_inscriptions):
        scores = [make_score(3, 'Alvarez Juan', position=1), make_score(42, 'Otro Jugador', position=2)]
        entries = [{'playerId': 1, 'scorecardId': 201}]
        roster = merge_scores_with_inscriptions(scores, entries, four_inscriptions + four_inscriptions[:2])
        ids = [e.player_id for e in roster]

        for inscription in four_inscriptions:
            assert ids.count(inscription['player']['id']) == 1
        assert len(roster) >= 4

    def test_accepts_schema_instances(self):
        """Pydantic records work the same as raw dicts."""
        inscription = InscriptionRecord.model_validate(make_inscription(1, 'Perez'))
        roster = merge_scores_with_inscriptions([], [], [inscription])
        assert roster[0].player_id == 1


class TestCalculatedOnly:
    """Scores present but nobody inscribed."""

    def test_returns_calculated_rows(self, caplog):
        """Output is exactly the calculated rows, with a data-integrity warning."""
        scores = [make_score(5, 'Lopez Ana', position=1), make_score(6, 'Sosa Eva', position=2)]
        with caplog.at_level(logging.WARNING, logger='frutales'):
            roster = merge_scores_with_inscriptions(scores, [], [])

        assert [e.player_id for e in roster] == [5, 6]
        assert [e.player_name for e in roster] == ['Lopez Ana', 'Sosa Eva']
        assert 'No inscriptions' in caplog.text


class TestCancelledCards:
    """Cards the backend closed as CANCELLED when the tournament was finalized."""

    def test_cancelled_row_is_not_delivered(self, four_inscriptions):
        """Shown as NM, unranked, never tied, no position or participation points."""
        scores = [
            make_score(
                1, 'Perez Juan', position=1, scoreGross=82, scoreNeto=70,
                positionPoints=12, participationPoints=1, totalPoints=13,
            ),
            make_score(
                2, 'Gomez Juan', position=2, status='CANCELLED', scoreGross=80, scoreNeto=70,
                birdieCount=1, birdiePoints=1, positionPoints=10, participationPoints=1, totalPoints=12,
            ),
        ]
        roster = merge_scores_with_inscriptions(scores, [], four_inscriptions)
        cancelled = roster[1]

        assert cancelled.player_id == 2
        assert cancelled.status == 'CANCELLED'
        assert cancelled.position is None
        assert cancelled.position_points == 0
        assert cancelled.participation_points == 0
        assert cancelled.birdie_points == 1
        assert cancelled.total_points == 1
        assert status_label(cancelled) == 'NM'
        assert status_label(cancelled, public=True) == 'NM'
        assert position_label(cancelled) == '-'
        assert find_tied_player_ids(roster) == set()
        assert validate_roster(roster) == []

    def test_cancelled_without_inscription(self):
        """Calculated-only rows accept the status too."""
        scores = [make_score(5, 'Lopez Ana', position=3, status='CANCELLED', participationPoints=1, totalPoints=1)]
        roster = merge_scores_with_inscriptions(scores, [], [])

        assert roster[0].status == 'CANCELLED'
        assert roster[0].position is None
        assert roster[0].total_points == 0

    def test_cancelled_leaderboard_entry(self):
        entries = [{'playerId': 1, 'scorecardId': 301, 'scoreGross': 44, 'status': 'CANCELLED'}]
        entry = merge_scores_with_inscriptions([], entries, [make_inscription(1, 'Perez')])[0]

        assert entry.status == 'CANCELLED'
        assert entry.score_gross == 44
        assert status_label(entry) == 'NM'


class TestInvalidInput:
    """Malformed collections fail fast."""

    def test_scores_not_a_list(self):
        with pytest.raises(InvalidInputError, match='scores must be a list'):
            merge_scores_with_inscriptions(None, [], [])

    def test_inscriptions_not_a_list(self):
        with pytest.raises(InvalidInputError, match='inscriptions must be a list'):
            merge_scores_with_inscriptions([], [], {'player': {'id': 1}})

    def test_invalid_element(self):
        """An inscription without player data names the offending index."""
        with pytest.raises(InvalidInputError, match=r'inscriptions\[1\]'):
            merge_scores_with_inscriptions([], [], [make_inscription(1, 'Perez'), {'handicapCourse': 3}])

    def test_invalid_status(self):
        """Unknown statuses are rejected."""
        with pytest.raises(InvalidInputError):
            merge_scores_with_inscriptions([make_score(1, 'Perez Juan', status='LOST')], [], [])

    def test_is_a_type_error(self):
        """InvalidInputError can be caught as TypeError."""
        with pytest.raises(TypeError):
            merge_scores_with_inscriptions('not a list', [], [])
