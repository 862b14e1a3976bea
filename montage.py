"""
Render a collage from an ordered list of covers and a layout.

Two renderers: ImageMagick's `montage` program, or Pillow.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Sequence, Union

from PIL import Image, ImageColor

from grid_layout import Layout

logger = logging.getLogger(__name__)


MONTAGE_PROGRAM = 'montage'
DEFAULT_BACKGROUND = 'black'


class CompositingError(RuntimeError):
    """Raised when the collage cannot be rendered."""


def build_montage_command(files: Sequence[Union[str, Path]], layout: Layout,
                          output: Union[str, Path],
                          background: str = DEFAULT_BACKGROUND,
                          program: str = MONTAGE_PROGRAM) -> list[str]:
    """Argument list for ImageMagick montage."""
    if not files:
        raise CompositingError("No covers to render")
    edge = layout.edge
    return [
        program,
        '-background', background,
        '-tile', f"{layout.tile.width}x{layout.tile.height}",
        '-geometry', f"{edge}x{edge}+0+0",
        *[str(f) for f in files],
        str(output),
    ]


def run_montage(files: Sequence[Union[str, Path]], layout: Layout,
                output: Union[str, Path],
                background: str = DEFAULT_BACKGROUND,
                program: str = MONTAGE_PROGRAM) -> Path:
    """
    Render with ImageMagick.

    Raises:
        CompositingError: If montage is not installed or exits with an error
    """
    executable = shutil.which(program)
    if executable is None:
        raise CompositingError(f"'{program}' not found on PATH (install ImageMagick or use the pillow renderer)")

    cmd = build_montage_command(files, layout, output, background=background, program=executable)
    logger.debug("Running %s with %d covers", executable, len(files))
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        raise CompositingError(f"montage failed ({e.returncode}): {e.stderr.strip()}") from e

    return Path(output)


def render_with_pillow(files: Sequence[Union[str, Path]], layout: Layout,
                       output: Union[str, Path],
                       background: str = DEFAULT_BACKGROUND) -> Path:
    """
    Render with Pillow. A cover that cannot be opened leaves its tile empty.

    Raises:
        CompositingError: If there is nothing to render or the background is
            not a color
    """
    if not files:
        raise CompositingError("No covers to render")
    if len(files) > len(layout.placements):
        raise CompositingError(f"Layout holds {len(layout.placements)} covers, got {len(files)}")

    try:
        fill = ImageColor.getrgb(background)
    except ValueError as e:
        raise CompositingError(f"Invalid background color: {background}") from e

    canvas = Image.new('RGB', (layout.canvas_width, layout.tile.height * layout.edge), fill)

    for path, place in zip(files, layout.placements):
        try:
            with Image.open(path) as img:
                tile = img.convert('RGB').resize((place.size, place.size), Image.Resampling.LANCZOS)
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            logger.warning("Leaving tile %d empty, cannot open %s: %s", place.index, path, e)
            continue
        canvas.paste(tile, (place.x, place.y))

    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(output)
    return output


RENDERERS = {
    'montage': run_montage,
    'pillow': render_with_pillow,
}
