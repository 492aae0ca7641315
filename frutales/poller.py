"""Periodic leaderboard refresh with an explicit start/stop handle."""

import logging
import threading
from typing import Callable, Optional

import requests

from .constants import DEFAULT_POLL_INTERVAL_SECONDS
from .models import RosterEntry

logger = logging.getLogger('frutales.poller')


class LeaderboardPoller:
    """
    Re-runs a fetch + merge cycle every ``interval`` seconds on a background thread.

    Each cycle replaces the whole roster. A failed fetch keeps the previous
    roster and polling continues.

    Example:
        fetcher = LeaderboardFetcher('http://localhost:8080/api')
        with LeaderboardPoller(lambda: fetcher.fetch_roster(12), print_table, interval=100):
            wait_for_exit()
    """

    def __init__(
        self,
        refresh: Callable[[], list[RosterEntry]],
        on_update: Optional[Callable[[list[RosterEntry]], None]] = None,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        if interval <= 0:
            raise ValueError(f'Poll interval must be positive, got {interval}')
        self.refresh = refresh
        self.on_update = on_update
        self.on_error = on_error
        self.interval = interval
        self.roster: list[RosterEntry] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def refresh_now(self) -> list[RosterEntry]:
        """Run one cycle synchronously and return the current roster."""
        try:
            roster = self.refresh()
        except requests.RequestException as e:
            logger.warning(f'Leaderboard refresh failed, keeping previous data: {e}')
            if self.on_error:
                self.on_error(e)
            with self._lock:
                return self.roster

        with self._lock:
            self.roster = roster
        if self.on_update:
            self.on_update(roster)
        return roster

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.refresh_now()
            except Exception as e:
                # any failure in a background tick is logged and the next tick still runs
                logger.exception(f'Leaderboard refresh crashed, retrying in {self.interval:g}s')
                if self.on_error:
                    self.on_error(e)
            self._stop.wait(self.interval)

    def start(self) -> 'LeaderboardPoller':
        if self.running:
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name='frutales-poller', daemon=True)
        self._thread.start()
        logger.info(f'Leaderboard polling started (every {self.interval:g}s)')
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.info('Leaderboard polling stopped')

    def __enter__(self) -> 'LeaderboardPoller':
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
