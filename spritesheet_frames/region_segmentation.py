"""
Functions for segmenting one animation row into per-frame regions.

Segmentation works on the column density profile of a row band: the number
of content pixels in each column. Columns that are much emptier than their
surroundings split the row into regions. Regions that are too wide to hold a
single character are then split again at the lowest points of the profile.
"""

import logging
import math
from typing import NamedTuple

import numpy as np
from scipy.ndimage import correlate1d, minimum_filter1d   # type: ignore

from spritesheet_frames.config import ExtractionConfig
from spritesheet_frames.datatypes import Region

logger = logging.getLogger(__name__)


class GapCandidate(NamedTuple):
    x: int
    score: float
    density: int


def density_profile(band_mask: np.ndarray) -> np.ndarray:
    """Number of content pixels in each column of a band's content mask."""
    return band_mask.sum(axis=0, dtype=np.int64)


def content_extent(profile: np.ndarray) -> tuple[int, int] | None:
    """Half-open range of columns between the first and last non-empty column."""
    occupied = np.flatnonzero(profile)
    if len(occupied) == 0:
        return None
    return int(occupied[0]), int(occupied[-1]) + 1


def find_gap_candidates(profile: np.ndarray, start: int, end: int, config: ExtractionConfig) -> list[GapCandidate]:
    """
    Find columns that are markedly emptier than the windows on either side of them.

    For each column x at least gap_window pixels inside [start, end), the mean
    density of the gap_window columns left and right of x (x itself excluded)
    is compared with the density at x.

    Args:
        profile: Column density profile of the band
        start: First non-empty column
        end: One past the last non-empty column
        config: Extraction parameters

    Returns:
        Gap candidates in column order, scored by side average minus center density
    """
    w = config.gap_window
    weights = np.ones(2 * w + 1, dtype=np.float64)
    weights[w] = 0.0
    side_avg = correlate1d(profile.astype(np.float64), weights, mode="constant", cval=0.0) / (2 * w)

    candidates = []
    for x in range(start + w, end - w):
        center = int(profile[x])
        avg = float(side_avg[x])
        if center < avg * config.gap_depth_ratio and avg > config.gap_min_activity:
            candidates.append(GapCandidate(x, avg - center, center))
    return candidates


def select_gaps(candidates: list[GapCandidate], min_separation: int) -> list[int]:
    """
    Greedily accept the strongest gap candidates that keep at least
    min_separation pixels from every gap accepted before them.

    Ties in score go to the leftmost candidate.

    Returns:
        Accepted gap columns, sorted
    """
    gaps: list[int] = []
    for cand in sorted(candidates, key=lambda c: (-c.score, c.x)):
        if all(abs(cand.x - g) >= min_separation for g in gaps):
            gaps.append(cand.x)
    return sorted(gaps)


def regions_between_gaps(profile: np.ndarray, start: int, end: int, gaps: list[int]) -> list[Region]:
    """
    Build regions between consecutive gaps, trimmed to their non-empty columns.

    Regions without any content are dropped.
    """
    bounds = [start] + gaps + [end]
    regions = []
    for x1, x2 in zip(bounds[:-1], bounds[1:]):
        if x2 <= x1:
            continue
        extent = content_extent(profile[x1:x2])
        if extent is None:
            continue
        regions.append(Region(x1 + extent[0], x1 + extent[1]))
    return regions


def split_oversized_region(region: Region, profile: np.ndarray, row_height: int,
                           config: ExtractionConfig) -> list[Region]:
    """
    Split a region that is too wide to hold a single character.

    The number of merged frames is estimated from the expected character width.
    Split points are local minima of the density profile inside the region,
    lowest first, kept at least width / (count + 1) apart and away from the
    region edges. If not enough such minima exist, the region is cut into
    equal-width slices.

    Args:
        region: The oversized region
        profile: Column density profile of the band
        row_height: Height of the band in pixels
        config: Extraction parameters

    Returns:
        Sub-regions in left-to-right order, covering the original region
    """
    width = region.width
    count = math.ceil(width / (row_height * config.split_width_ratio))
    count = min(max(count, 2), config.max_split_count)
    logger.debug("Region %d-%d too wide (%dpx), splitting into %d parts",
                 region.start_x, region.end_x, width, count)

    window = 2 * config.minima_window + 1
    local_min = minimum_filter1d(profile, size=window, mode="nearest")

    lo = region.start_x + config.split_edge_margin
    hi = region.end_x - config.split_edge_margin
    minima = [
        (int(profile[x]), x) for x in range(lo, hi)
        if profile[x] == local_min[x] and profile[x] < row_height * config.minima_max_fill
    ]
    minima.sort()

    min_distance = width // (count + 1)
    split_points: list[int] = []
    for _value, x in minima:
        if len(split_points) >= count - 1:
            break
        if x - region.start_x < min_distance // 2 or region.end_x - x < min_distance // 2:
            continue
        if any(abs(x - sp) < min_distance for sp in split_points):
            continue
        split_points.append(x)

    if len(split_points) < count - 1:
        step = width // count
        split_points = [region.start_x + i * step for i in range(1, count)]
    split_points.sort()

    bounds = [region.start_x] + split_points + [region.end_x]
    return [Region(x1, x2, from_split=True) for x1, x2 in zip(bounds[:-1], bounds[1:]) if x2 > x1]


def segment_row(band_mask: np.ndarray, config: ExtractionConfig) -> list[Region]:
    """
    Segment a row band into regions that each hold one frame.

    Args:
        band_mask: Content mask of the band (coarse threshold), shape (row_height, width)
        config: Extraction parameters

    Returns:
        Non-overlapping regions ordered by start_x; empty if the band has no content
    """
    row_height = band_mask.shape[0]
    profile = density_profile(band_mask)
    extent = content_extent(profile)
    if extent is None:
        return []
    start, end = extent

    gaps = select_gaps(find_gap_candidates(profile, start, end, config), config.min_gap_separation)
    logger.debug("Found %d gaps at positions: %s", len(gaps), gaps)

    max_width = int(row_height * config.oversize_ratio)
    regions: list[Region] = []
    for region in regions_between_gaps(profile, start, end, gaps):
        if region.width > max_width:
            regions.extend(split_oversized_region(region, profile, row_height, config))
        else:
            regions.append(region)

    logger.debug("Returning %d character regions", len(regions))
    return regions


def manual_regions(width: int, frame_count: int) -> list[Region]:
    """Divide a band of the given width into frame_count equal columns."""
    frame_count = max(1, min(frame_count, width))
    return [Region(i * width // frame_count, (i + 1) * width // frame_count) for i in range(frame_count)]
