#!/usr/bin/env python3
"""Build a color-sorted collage of the album covers in a music folder."""

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import Iterable, Optional

from cover_cache import CacheError, load_cache, merge_cache, save_cache
from dominant_color import DEFAULT_RESIZE, extract_cover_color
from grid_layout import DEFAULT_CANVAS_HEIGHT, plan_layout
from library import filter_items, find_covers, read_album_tags
from models import ColoredItem
from montage import DEFAULT_BACKGROUND, RENDERERS, CompositingError
from sort_covers import select_sort, sort_covers

logger = logging.getLogger(__name__)


def default_folder() -> Path:
    return Path(os.environ.get('ALBUMGALLERY_FOLDER', Path.home() / 'music'))


def default_cache() -> Path:
    fallback = Path.home() / '.local' / 'share' / 'albumgallery' / 'covers.json'
    return Path(os.environ.get('ALBUMGALLERY_CACHE', fallback))


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def collect_colored_items(covers: Iterable[Path],
                          cached: Optional[dict] = None,
                          size: int = DEFAULT_RESIZE) -> tuple[list, list]:
    """
    Find the dominant color of every cover, reusing cached results.

    A cover that cannot be decoded is reported and skipped; it never stops
    the rest of the collection.

    Returns:
        (items, failures) where failures is a list of (path, error message)
    """
    cached = cached or {}
    covers = list(covers)
    total = len(covers)
    items = []
    failures = []

    for i, cover in enumerate(covers, 1):
        key = str(cover)
        if key in cached:
            items.append(cached[key])
            logger.debug("Cache hit for %s", key)
            continue

        try:
            start = time.perf_counter()
            color = extract_cover_color(cover, size=size)
            elapsed = time.perf_counter() - start
        except (OSError, ValueError) as e:
            error_msg = f"{type(e).__name__}: {e}"
            print(f"[{i}/{total}] {cover} → ERROR: {error_msg}", file=sys.stderr)
            failures.append((key, error_msg))
            continue

        tags = read_album_tags(cover.parent)
        items.append(ColoredItem(file=key, color=color, tags=tags))
        print(f"[{i}/{total}] {cover} → {color.hex} ({elapsed:.2f}s)")

    return items, failures


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Build a color-sorted collage of album covers.'
    )
    parser.add_argument(
        '--input', '-i',
        type=Path,
        default=None,
        help='Music folder to search for cover.* files (default: $ALBUMGALLERY_FOLDER or ~/music)'
    )
    parser.add_argument(
        '--output', '-o',
        type=Path,
        default=Path('collage.png'),
        help='Collage image to write (default: collage.png)'
    )
    parser.add_argument('--genres', '-g', help='Only covers with one of these genres, separated by ;')
    parser.add_argument('--artist', '-a', help='Only covers by this artist')
    parser.add_argument('--year', '-y', type=int, help='Only covers released in this year')
    parser.add_argument(
        '--asc', '-s',
        metavar='rgb|step|lum|year',
        help='Sort ascending by this criterion (default: step)'
    )
    parser.add_argument(
        '--desc', '-S',
        metavar='rgb|step|lum|year',
        help='Sort descending by this criterion; overrides --asc'
    )
    parser.add_argument(
        '--height',
        type=int,
        default=DEFAULT_CANVAS_HEIGHT,
        help=f'Canvas height in pixels (default: {DEFAULT_CANVAS_HEIGHT})'
    )
    parser.add_argument(
        '--size',
        type=int,
        default=DEFAULT_RESIZE,
        help=f'Resize covers to this square size before counting colors (default: {DEFAULT_RESIZE})'
    )
    parser.add_argument(
        '--cache',
        type=Path,
        default=None,
        help='Color cache file (default: $ALBUMGALLERY_CACHE or ~/.local/share/albumgallery/covers.json)'
    )
    parser.add_argument('--no-cache', action='store_true', help='Neither read nor write the color cache')
    parser.add_argument(
        '--renderer',
        choices=sorted(RENDERERS),
        default='montage',
        help='Collage renderer (default: montage)'
    )
    parser.add_argument('--background', default=DEFAULT_BACKGROUND, help='Canvas background color')
    parser.add_argument('--list', action='store_true', help='Print the sorted cover list instead of rendering')
    parser.add_argument('--log-level', default='WARNING', help='Logging level (default: WARNING)')

    args = parser.parse_args(argv)
    if args.height < 1:
        parser.error('--height must be positive')
    if args.size < 1:
        parser.error('--size must be positive')
    return args


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    # Cache keys are absolute so relative -i paths never collide
    folder = (args.input or default_folder()).expanduser().resolve()
    cache_path = args.cache or default_cache()

    if not folder.is_dir():
        print(f"Error: Music folder not found: {folder}", file=sys.stderr)
        return 2

    try:
        criterion, direction = select_sort(asc=args.asc, desc=args.desc)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    covers = find_covers(folder)
    if not covers:
        print(f"No covers found in {folder}", file=sys.stderr)
        return 2

    cached = {}
    write_cache = not args.no_cache
    if write_cache:
        try:
            cached = load_cache(cache_path)
        except CacheError as e:
            print(f"Warning: ignoring color cache, leaving it untouched: {e}", file=sys.stderr)
            write_cache = False

    batch_start = time.perf_counter()
    items, failures = collect_colored_items(covers, cached, size=args.size)
    batch_elapsed = time.perf_counter() - batch_start

    if write_cache:
        try:
            save_cache(cache_path, merge_cache(cached.values(), items))
        except OSError as e:
            print(f"Warning: could not write color cache {cache_path}: {e}", file=sys.stderr)

    items = filter_items(items, genres=args.genres, artist=args.artist, year=args.year)
    result = sort_covers(items, criterion, direction)

    print()
    print(f"Colored: {len(items)}/{len(covers)} covers in {batch_elapsed:.2f}s")
    print(f"Sorted by {result.criterion.value} ({result.direction.value})")
    if result.rejected:
        print(f"Excluded from sort ({len(result.rejected)}): no release year")

    ordered_files = [item.file for item in result.items]

    if args.list:
        for item in result.items:
            print(f"{item.color.hex}  {item.file}")
    elif not ordered_files:
        print("Nothing to render")
    else:
        try:
            layout = plan_layout(len(ordered_files), args.height)
            render = RENDERERS[args.renderer]
            output = render(ordered_files, layout, args.output, background=args.background)
        except (ValueError, CompositingError) as e:
            print(f"Error rendering collage: {e}", file=sys.stderr)
            return 1
        print(f"Grid: {layout.tile} tiles of {layout.edge}px")
        print(f"Wrote: {output}")

    if failures:
        print(f"Failed ({len(failures)}):")
        for name, error in failures:
            print(f"  - {name}: {error}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
