"""Reading backend exports and writing leaderboards as JSON files."""

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('frutales.utils')


def _read_json(path: Path) -> Any:
    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    with open(path, encoding='utf-8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f'Invalid JSON in {path}: {e.msg} (line {e.lineno})')
            raise


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Load a JSON file, validating it against ``schema`` when one is given.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the JSON is malformed
        ValueError: If schema validation fails

    Example:
        config = load_json('data/scoring_config.json', schema=ScoringConfig)
    """
    path = Path(path)
    data = _read_json(path)
    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'Schema validation failed for {path}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def load_records(path: Path | str, schema: type[T]) -> list[T]:
    """
    Load an exported backend collection (a JSON array) and validate each record.

    Args:
        path: Path to a JSON file holding a list
        schema: Pydantic model for the elements

    Returns:
        List of validated records

    Raises:
        ValueError: If the file is not a list or an element is invalid
    """
    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, list):
        logger.error(f'Expected a JSON array in {path}, got {type(data).__name__}')
        raise ValueError(f'Expected a JSON array in {path}, got {type(data).__name__}')

    records = []
    for index, item in enumerate(data):
        try:
            records.append(schema.model_validate(item))
        except ValidationError as e:
            logger.error(f'Record {index} in {path} is invalid: {e}')
            raise ValueError(f'Record {index} in {path} is invalid:\n{e}') from e

    logger.debug(f'Loaded {len(records)} {schema.__name__} records from {path}')
    return records


def to_jsonable(data: Any) -> Any:
    """Roster rows and stage rows become their camelCase dicts."""
    if hasattr(data, 'to_dict'):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    return data


def save_json(path: Path | str, data: Any) -> None:
    """
    Write a leaderboard (or any JSON data) to ``path``, creating parent directories.

    Example:
        save_json('out/leaderboard.json', roster)
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(to_jsonable(data), f, indent=2, ensure_ascii=False)
    logger.debug(f'Saved JSON to {path}')
