"""Scoring configuration management."""

from functools import lru_cache
from pathlib import Path

from .schemas import ScoringConfig
from .utils import load_json

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'scoring_config.json'


@lru_cache(maxsize=1)
def get_config() -> ScoringConfig:
    """
    Load scoring configuration from data/scoring_config.json.

    Configuration is cached after first load.

    Returns:
        ScoringConfig object with validated settings

    Raises:
        FileNotFoundError: If scoring_config.json doesn't exist
        ValueError: If config file has invalid structure

    Example:
        from frutales.config import get_config
        config = get_config()
        print(f"Tie policy: {config.tie_policy}")
    """
    return load_json(DEFAULT_CONFIG_PATH, schema=ScoringConfig)


def load_config(path: Path | str) -> ScoringConfig:
    """Load a scoring configuration from an explicit path (not cached)."""
    return load_json(path, schema=ScoringConfig)


def get_tie_policy() -> str:
    """Get the position-points tie policy from config."""
    return get_config().tie_policy


def get_poll_interval() -> float:
    """Get the leaderboard refresh interval in seconds."""
    return get_config().poll_interval_seconds


def get_api_base_url() -> str:
    """Get the backend REST base URL."""
    return get_config().api_base_url


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
