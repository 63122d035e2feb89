"""
Tests for cropping regions and drawing them on the shared canvas.
"""

import numpy as np

from spritesheet_frames.config import ANIMATION_POLICIES, AnchorMode, AnimationKind
from spritesheet_frames.datatypes import EMPTY_RECT, Rect, Region
from spritesheet_frames.frame_extraction import (
    accept_rect,
    canvas_size,
    foot_anchor,
    render_frame,
    tight_content_rect,
)

from conftest import RED, blank_sheet, draw_block


def test_tight_content_rect_in_image_coordinates():
    """The content rectangle is tight and expressed in image coordinates."""
    band = Rect(0, 100, 200, 100)
    band_mask = np.zeros((100, 200), dtype=bool)
    band_mask[20:80, 30:70] = True

    rect = tight_content_rect(band_mask, band, Region(0, 200))

    assert rect == Rect(30, 120, 40, 60)


def test_tight_content_rect_stays_inside_region():
    """Content outside the region's columns is ignored."""
    band = Rect(0, 0, 200, 100)
    band_mask = np.zeros((100, 200), dtype=bool)
    band_mask[10:90, 30:70] = True

    assert tight_content_rect(band_mask, band, Region(50, 60)) == Rect(50, 10, 10, 80)
    assert tight_content_rect(band_mask, band, Region(100, 200)) == EMPTY_RECT


def test_accept_rect_policies():
    """Wide debris and short fragments are rejected; run frames may be wider than idle ones."""
    idle = ANIMATION_POLICIES[AnimationKind.IDLE]
    run = ANIMATION_POLICIES[AnimationKind.RUN]

    assert accept_rect(Rect(0, 0, 50, 80), 100, idle)
    assert not accept_rect(Rect(0, 0, 160, 80), 100, idle)     # aspect 2.0
    assert accept_rect(Rect(0, 0, 160, 80), 100, run)
    assert not accept_rect(Rect(0, 0, 10, 20), 100, run)       # too short
    assert not accept_rect(Rect(0, 0, 10, 80), 100, run)       # aspect 0.125
    assert not accept_rect(EMPTY_RECT, 100, run)


def test_canvas_size_uses_largest_crop_and_row_height():
    """The canvas fits the widest and tallest crops plus padding, at least one row tall."""
    rects = [Rect(0, 0, 40, 60), Rect(0, 0, 50, 30)]

    assert canvas_size(rects, 100, 4) == (58, 100)
    assert canvas_size(rects, 50, 4) == (58, 68)


def test_render_frame_is_transparent_bottom_aligned_and_centered():
    """Crops sit on the baseline, centered, on a transparent canvas."""
    img = blank_sheet(100, 100)
    draw_block(img, 10, 20, 20, 30, RED)
    rect = Rect(10, 20, 20, 30)

    frame = render_frame(img, rect, (40, 60), padding=4)

    assert frame.shape == (60, 40, 4)
    # Crop occupies rows 26..55 and columns 10..29
    assert (frame[26:56, 10:30] == RED).all()
    assert (frame[:26, :, 3] == 0).all()
    assert (frame[56:, :, 3] == 0).all()
    assert (frame[:, :10, 3] == 0).all()
    assert (frame[:, 30:, 3] == 0).all()


def test_render_frame_does_not_touch_source():
    """The source image is only read."""
    img = blank_sheet(50, 50)
    draw_block(img, 5, 5, 10, 10)
    before = img.copy()

    render_frame(img, Rect(5, 5, 10, 10), (20, 20), padding=2)

    assert np.array_equal(img, before)


def test_foot_anchor_centers_on_feet():
    """With feet anchoring the feet, not the crop, are centered."""
    img = blank_sheet(100, 100)
    draw_block(img, 0, 0, 40, 40)      # Body
    draw_block(img, 30, 40, 10, 20)    # Legs at the right edge
    rect = Rect(0, 0, 40, 60)
    mask = (img[:, :, 0] == 0)

    assert foot_anchor(mask, rect) == 34

    frame = render_frame(img, rect, (100, 70), padding=0, anchor=AnchorMode.FEET, mask=mask)

    # Feet columns 30..39 of the crop are moved around the canvas center (50)
    feet_cols = np.flatnonzero(frame[60:70, :, 3].any(axis=0))
    assert feet_cols[0] == 46
    assert feet_cols[-1] == 55


def test_foot_anchor_clamped_to_canvas():
    """Feet anchoring never pushes the crop off the canvas."""
    img = blank_sheet(100, 100)
    draw_block(img, 0, 0, 40, 40)
    draw_block(img, 30, 40, 10, 20)
    rect = Rect(0, 0, 40, 60)
    mask = (img[:, :, 0] == 0)

    frame = render_frame(img, rect, (44, 64), padding=2, anchor=AnchorMode.FEET, mask=mask)

    body_cols = np.flatnonzero(frame[:, :, 3].any(axis=0))
    assert body_cols[0] == 0
    assert body_cols[-1] == 39
