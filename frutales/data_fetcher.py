"""Backend data fetching using requests."""

import logging
from typing import Any, Optional

import requests

from .merge import entry_from_score, merge_scores_with_inscriptions
from .models import RosterEntry
from .schemas import (
    FrutalesScoreRecord,
    InscriptionRecord,
    LeaderboardEntryRecord,
    coerce_records,
)

logger = logging.getLogger('frutales.data_fetcher')


class LeaderboardFetcher:
    """Fetches the inscription and scoring collections from the tournament backend."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
        token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        if token:
            self.session.headers.update({'Authorization': f'Bearer {token}'})

    def _request(self, method: str, path: str) -> Any:
        url = f'{self.base_url}{path}'
        logger.debug(f'{method} {url}')
        try:
            response = self.session.request(method, url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f'{method} {url} failed: {e}')
            raise
        return response.json()

    def get_inscriptions(self, tournament_id: int) -> list[InscriptionRecord]:
        data = self._request('GET', f'/inscriptions/tournaments/{tournament_id}')
        return coerce_records(data, InscriptionRecord, 'inscriptions')

    def get_leaderboard(self, tournament_id: int) -> list[LeaderboardEntryRecord]:
        data = self._request('GET', f'/leaderboard/tournaments/{tournament_id}')
        return coerce_records(data, LeaderboardEntryRecord, 'entries')

    def get_frutales_scores(self, tournament_id: int) -> list[FrutalesScoreRecord]:
        data = self._request('GET', f'/leaderboard/tournaments/{tournament_id}/frutales')
        return coerce_records(data, FrutalesScoreRecord, 'scores')

    def calculate_frutales_scores(self, tournament_id: int) -> list[FrutalesScoreRecord]:
        """Ask the backend to rerun the Frutales calculation and return the result."""
        data = self._request('POST', f'/leaderboard/tournaments/{tournament_id}/frutales/calculate')
        return coerce_records(data, FrutalesScoreRecord, 'scores')

    def get_public_frutales_scores(self, codigo: str) -> list[RosterEntry]:
        """Public results by tournament code; already ordered by the backend."""
        data = self._request('GET', f'/leaderboard/public/{codigo}/frutales')
        scores = coerce_records(data, FrutalesScoreRecord, 'scores')
        return [entry_from_score(score) for score in scores]

    def fetch_roster(self, tournament_id: int, recalculate: bool = False) -> list[RosterEntry]:
        """
        Fetch the three collections and merge them into the leaderboard roster.

        Args:
            tournament_id: Tournament to load
            recalculate: Trigger a scoring run instead of reading stored scores

        Returns:
            Merged roster rows
        """
        entries = self.get_leaderboard(tournament_id)
        if recalculate:
            scores = self.calculate_frutales_scores(tournament_id)
        else:
            scores = self.get_frutales_scores(tournament_id)
        inscriptions = self.get_inscriptions(tournament_id)

        logger.info(
            f'Tournament {tournament_id}: {len(inscriptions)} inscriptions, '
            f'{len(scores)} calculated scores, {len(entries)} leaderboard entries'
        )
        return merge_scores_with_inscriptions(scores, entries, inscriptions)
