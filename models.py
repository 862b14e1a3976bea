"""
Value types shared by the collage pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Color:
    """An 8-bit RGB color."""
    r: int
    g: int
    b: int

    def __post_init__(self):
        for name in ('r', 'g', 'b'):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"Channel {name}={value} outside 0-255")

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_dict(self) -> dict:
        return {'r': self.r, 'g': self.g, 'b': self.b}

    @classmethod
    def from_dict(cls, data: dict) -> 'Color':
        return cls(int(data['r']), int(data['g']), int(data['b']))


@dataclass
class CoverTags:
    """Album metadata read from the first track next to a cover."""
    album: Optional[str] = None
    artist: Optional[str] = None
    date: Optional[str] = None
    genres: Optional[str] = None  # semicolon-delimited

    def genre_list(self) -> list[str]:
        if not self.genres:
            return []
        return [g.strip() for g in self.genres.split(';') if g.strip()]

    def to_dict(self) -> dict:
        return {
            'album': self.album,
            'artist': self.artist,
            'date': self.date,
            'genres': self.genres,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'CoverTags':
        data = data or {}
        return cls(
            album=data.get('album'),
            artist=data.get('artist'),
            date=data.get('date'),
            genres=data.get('genres'),
        )


@dataclass(frozen=True)
class ColoredItem:
    """A cover file with its dominant color and album tags."""
    file: str
    color: Color
    tags: CoverTags = field(default_factory=CoverTags, compare=False)

    def to_record(self) -> dict:
        """Serialize as a cache record."""
        return {
            'color': self.color.to_dict(),
            'file': self.file,
            'tags': self.tags.to_dict(),
        }

    @classmethod
    def from_record(cls, record: dict) -> 'ColoredItem':
        return cls(
            file=str(record['file']),
            color=Color.from_dict(record['color']),
            tags=CoverTags.from_dict(record.get('tags')),
        )
