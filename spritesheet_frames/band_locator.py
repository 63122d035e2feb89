"""
Functions for locating the horizontal band of pixels each animation row occupies.
"""

import logging

import numpy as np

from spritesheet_frames.datatypes import Rect
from spritesheet_frames.errors import InvalidInputError

logger = logging.getLogger(__name__)


def fixed_bands(width: int, height: int, num_rows: int) -> list[Rect]:
    """
    Split the image height evenly into num_rows bands.

    Band i covers rows [i * height // num_rows, (i + 1) * height // num_rows).

    Raises:
        InvalidInputError: If the image has fewer pixel rows than animation rows
    """
    if num_rows < 1:
        raise InvalidInputError("At least one animation row is required")
    if height < num_rows:
        raise InvalidInputError(f"Image height {height} is smaller than the number of animation rows ({num_rows})")

    bands = []
    for i in range(num_rows):
        y1 = i * height // num_rows
        y2 = (i + 1) * height // num_rows
        bands.append(Rect(0, y1, width, y2 - y1))
    return bands


def content_runs(row_has_content: np.ndarray) -> list[tuple[int, int]]:
    """Merge consecutive True entries into half-open (start, end) runs."""
    padded = np.concatenate(([False], row_has_content.astype(bool), [False]))
    edges = np.flatnonzero(np.diff(padded.astype(np.int8)))
    return [(int(edges[i]), int(edges[i + 1])) for i in range(0, len(edges), 2)]


def detect_content_bands(mask: np.ndarray, num_rows: int) -> list[Rect] | None:
    """
    Find the bands of consecutive content-bearing pixel rows and group them
    into num_rows animation bands.

    Runs of content are grouped by cutting at the num_rows - 1 widest blank
    spacings between them, so the first animation always gets the topmost
    content and the last one the bottommost.

    Args:
        mask: Content mask of the whole spritesheet
        num_rows: Number of animation rows

    Returns:
        One band per animation row, or None if there are fewer content runs than rows
    """
    height, width = mask.shape
    runs = content_runs(mask.any(axis=1))
    if len(runs) < num_rows:
        logger.info("Found %d content band(s) for %d rows", len(runs), num_rows)
        return None

    # Blank spacing between run i and run i+1, widest first
    spacings = sorted(range(len(runs) - 1), key=lambda i: (-(runs[i + 1][0] - runs[i][1]), i))
    cuts = sorted(spacings[:num_rows - 1])

    bands = []
    first = 0
    for cut in cuts + [len(runs) - 1]:
        y1, y2 = runs[first][0], runs[cut][1]
        bands.append(Rect(0, y1, width, y2 - y1))
        first = cut + 1

    logger.debug("Content bands: %s", [(b.y, b.bottom) for b in bands])
    return bands


def locate_bands(mask: np.ndarray, num_rows: int, detect_content: bool) -> list[Rect]:
    """
    Locate one band per animation row.

    Content detection falls back to fixed division when the image does not
    contain enough separate content bands.

    Raises:
        InvalidInputError: If a band would have zero height
    """
    height, width = mask.shape
    bands = None
    if detect_content:
        bands = detect_content_bands(mask, num_rows)
        if bands is None:
            logger.warning("Content band detection failed, dividing the image into %d equal rows", num_rows)
    if bands is None:
        bands = fixed_bands(width, height, num_rows)

    for i, band in enumerate(bands):
        if band.height <= 0:
            raise InvalidInputError(f"Band for row {i} has zero height")
    return bands
