"""
Locate album covers in a music folder and read their album tags.

A cover is any file named cover.<image extension> (case-insensitive). Its tags
come from the first track in the same directory.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Optional, Union

import mutagen
from mutagen import MutagenError

from models import ColoredItem, CoverTags

logger = logging.getLogger(__name__)


COVER_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.bmp', '.gif'}
AUDIO_EXTENSIONS = {'.mp3', '.flac', '.ogg', '.opus', '.m4a', '.mp4', '.wav', '.aiff', '.wma'}

YEAR_PATTERN = re.compile(r'^\s*(\d{4})')


def find_covers(folder: Union[str, Path]) -> list[Path]:
    """Find all cover images under folder, sorted by path."""
    folder = Path(folder)
    covers = [
        p for p in folder.rglob('*')
        if p.is_file()
        and p.stem.lower() == 'cover'
        and p.suffix.lower() in COVER_EXTENSIONS
    ]
    return sorted(covers)


def find_first_track(directory: Union[str, Path]) -> Optional[Path]:
    """Return the album's first track: a name containing '01', else any track."""
    tracks = sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix.lower() in AUDIO_EXTENSIONS
    )
    for track in tracks:
        if '01' in track.stem:
            return track
    return tracks[0] if tracks else None


def normalize_date(date: Optional[str]) -> Optional[str]:
    """Reduce '1999-05-12' style dates to their year."""
    if date is None:
        return None
    match = YEAR_PATTERN.match(date)
    return match.group(1) if match else date.strip() or None


def _first(tags, key: str) -> Optional[str]:
    values = tags.get(key) if tags is not None else None
    if not values:
        return None
    return str(values[0])


def read_track_tags(track_path: Union[str, Path]) -> CoverTags:
    """
    Read album tags from one audio file.

    Raises:
        MutagenError: If the file cannot be parsed
        ValueError: If the file type is not recognized
    """
    audio = mutagen.File(track_path, easy=True)
    if audio is None:
        raise ValueError(f"Unrecognized audio file: {track_path}")

    genres = audio.tags.get('genre') if audio.tags is not None else None
    return CoverTags(
        album=_first(audio.tags, 'album'),
        artist=_first(audio.tags, 'artist'),
        date=normalize_date(_first(audio.tags, 'date')),
        genres=';'.join(str(g) for g in genres) if genres else None,
    )


def read_album_tags(directory: Union[str, Path]) -> CoverTags:
    """Tags of the album in directory; empty tags if none can be read."""
    track = find_first_track(directory)
    if track is None:
        logger.info("No audio files next to cover in %s", directory)
        return CoverTags()

    try:
        return read_track_tags(track)
    except (MutagenError, ValueError, OSError) as e:
        logger.warning("Could not read tags from %s: %s", track, e)
        return CoverTags()


def filter_items(items: Iterable[ColoredItem],
                 genres: Optional[str] = None,
                 artist: Optional[str] = None,
                 year: Optional[int] = None) -> list[ColoredItem]:
    """
    Keep covers matching every given filter.

    Args:
        genres: Semicolon-separated genres; matches if any genre is shared
        artist: Artist name, case-insensitive
        year: Release year
    """
    wanted_genres = {g.strip().lower() for g in genres.split(';') if g.strip()} if genres else set()
    wanted_artist = artist.strip().lower() if artist else None

    kept = []
    for item in items:
        tags = item.tags
        if wanted_genres and not wanted_genres & {g.lower() for g in tags.genre_list()}:
            continue
        if wanted_artist and (tags.artist or '').strip().lower() != wanted_artist:
            continue
        if year is not None and normalize_date(tags.date) != str(year):
            continue
        kept.append(item)
    return kept
