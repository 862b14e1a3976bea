"""
JSON cache of previously computed cover colors, keyed by file path.

File format: a JSON array of records
    {"color": {"r": .., "g": .., "b": ..}, "file": "...",
     "tags": {"album": .., "artist": .., "date": .., "genres": ..}}
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Union

from models import ColoredItem

logger = logging.getLogger(__name__)


class CacheError(ValueError):
    """Raised when a cache file exists but cannot be parsed."""


def load_cache(path: Union[str, Path]) -> dict[str, ColoredItem]:
    """
    Read a cache file into a dict of file path -> ColoredItem.

    A missing file is an empty cache.

    Raises:
        CacheError: If the file is not a valid cache
    """
    path = Path(path)
    if not path.exists():
        logger.info("No color cache at %s", path)
        return {}

    try:
        records = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise CacheError(f"Cache {path} is not valid JSON: {e}") from e

    if not isinstance(records, list):
        raise CacheError(f"Cache {path} must hold a JSON array")

    cached = {}
    for i, record in enumerate(records):
        try:
            item = ColoredItem.from_record(record)
        except (KeyError, TypeError, ValueError) as e:
            raise CacheError(f"Cache {path} record {i} is malformed: {e}") from e
        # First record for a path wins, same as merge_cache
        cached.setdefault(item.file, item)

    logger.info("Loaded %d cached colors from %s", len(cached), path)
    return cached


def merge_cache(existing: Iterable[ColoredItem], new: Iterable[ColoredItem]) -> list[ColoredItem]:
    """
    Append new items whose file is not already cached.

    Existing records keep their position and are never replaced.
    """
    merged = list(existing)
    seen = {item.file for item in merged}
    for item in new:
        if item.file not in seen:
            merged.append(item)
            seen.add(item.file)
    return merged


def save_cache(path: Union[str, Path], items: Iterable[ColoredItem]) -> None:
    """Write items to path, replacing it atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records = [item.to_record() for item in items]

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
            f.write('\n')
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Saved %d cached colors to %s", len(records), path)
