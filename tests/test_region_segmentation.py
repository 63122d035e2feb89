"""
Tests for splitting a row band into per-frame regions.
"""

import numpy as np
import pytest

from spritesheet_frames.config import ExtractionConfig
from spritesheet_frames.datatypes import Region
from spritesheet_frames.region_segmentation import (
    GapCandidate,
    content_extent,
    density_profile,
    find_gap_candidates,
    manual_regions,
    segment_row,
    select_gaps,
    split_oversized_region,
)


def _band(width: int, height: int, blocks: list[tuple[int, int, int, int]]) -> np.ndarray:
    """Content mask with (x, y, w, h) blocks set."""
    mask = np.zeros((height, width), dtype=bool)
    for x, y, w, h in blocks:
        mask[y:y + h, x:x + w] = True
    return mask


@pytest.mark.parametrize("count", [1, 2, 3, 4, 6])
def test_evenly_spaced_blocks_give_one_region_each(count):
    """N separated blocks are segmented into exactly N regions matching the blocks."""
    spacing = 800 // count
    blocks = [(i * spacing + (spacing - 50) // 2, 10, 50, 80) for i in range(count)]
    mask = _band(800, 100, blocks)

    regions = segment_row(mask, ExtractionConfig())

    assert len(regions) == count
    for region, (x, _y, w, _h) in zip(regions, blocks):
        assert abs(region.start_x - x) <= 2
        assert abs(region.end_x - (x + w)) <= 2


def test_unevenly_spaced_blocks():
    """Spacing does not need to be regular, and regions come out ordered and disjoint."""
    blocks = [(5, 0, 40, 90), (60, 0, 45, 70), (300, 0, 50, 90), (380, 0, 30, 60)]
    mask = _band(500, 100, blocks)

    regions = segment_row(mask, ExtractionConfig())

    assert [(r.start_x, r.end_x) for r in regions] == [(5, 45), (60, 105), (300, 350), (380, 410)]
    for left, right in zip(regions, regions[1:]):
        assert left.end_x <= right.start_x


def test_empty_band_has_no_regions():
    """A band without content yields no regions."""
    assert segment_row(np.zeros((50, 200), dtype=bool), ExtractionConfig()) == []


def test_touching_blocks_are_split():
    """Two frames drawn touching, wider than 1.2x the row height, end up in separate regions."""
    mask = _band(200, 100, [(10, 20, 70, 80), (80, 20, 70, 80)])

    regions = segment_row(mask, ExtractionConfig())

    # No interior minimum below 80% of the row height: equal slices
    assert regions == [Region(10, 56, True), Region(56, 102, True), Region(102, 150, True)]


def test_oversized_region_splits_at_density_minima():
    """Split points land on the thinnest columns of a merged region."""
    # Three 60px tall bodies joined by 40px tall bridges: too shallow for gap detection
    mask = _band(200, 100, [(10, 40, 50, 60), (60, 60, 10, 40), (70, 40, 50, 60),
                            (120, 60, 10, 40), (130, 40, 50, 60)])

    regions = segment_row(mask, ExtractionConfig())

    assert regions == [Region(10, 60, True), Region(60, 120, True), Region(120, 180, True)]


def test_split_oversized_region_clamps_piece_count():
    """Very wide regions are split into at most max_split_count pieces."""
    profile = np.full(1000, 50)
    config = ExtractionConfig()

    pieces = split_oversized_region(Region(0, 1000), profile, 100, config)

    assert len(pieces) == config.max_split_count
    assert pieces[0].start_x == 0
    assert pieces[-1].end_x == 1000
    assert all(p.from_split for p in pieces)


def test_find_gap_candidates_scores_dips():
    """A column much emptier than its surroundings is a candidate scored by its depth."""
    profile = np.array([0] * 5 + [40] * 20 + [0] * 3 + [40] * 20 + [0] * 5)
    start, end = content_extent(profile)

    candidates = find_gap_candidates(profile, start, end, ExtractionConfig())

    xs = [c.x for c in candidates]
    assert 25 in xs and 26 in xs and 27 in xs
    best = max(candidates, key=lambda c: c.score)
    assert best.density == 0
    assert all(5 + 8 <= c.x < 48 - 8 for c in candidates)


def test_select_gaps_prefers_strongest():
    """Strong gaps suppress weaker ones nearby; distant weak gaps survive."""
    candidates = [GapCandidate(100, 10.0, 5), GapCandidate(110, 30.0, 0),
                  GapCandidate(200, 5.0, 3), GapCandidate(145, 20.0, 1)]

    assert select_gaps(candidates, 40) == [110, 200]


def test_select_gaps_ties_go_left():
    """Equal scores are resolved in favour of the leftmost candidate."""
    candidates = [GapCandidate(130, 10.0, 0), GapCandidate(100, 10.0, 0)]
    assert select_gaps(candidates, 40) == [100]


def test_density_profile_and_extent():
    """The profile counts content pixels per column."""
    mask = _band(10, 4, [(2, 0, 3, 2), (4, 0, 1, 4)])
    profile = density_profile(mask)

    assert profile.tolist() == [0, 0, 2, 2, 4, 0, 0, 0, 0, 0]
    assert content_extent(profile) == (2, 5)
    assert content_extent(np.zeros(4, dtype=int)) is None


def test_manual_regions():
    """Manual mode divides the band into equal columns."""
    regions = manual_regions(600, 6)

    assert len(regions) == 6
    assert regions[0] == Region(0, 100)
    assert regions[-1] == Region(500, 600)
