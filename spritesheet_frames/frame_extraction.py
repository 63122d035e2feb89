"""
Functions for turning regions into normalized frames.

Every frame of a spritesheet is drawn on a canvas of the same size. Crops are
bottom-aligned so that feet share a baseline across frames, and centered
horizontally (or on the feet, see AnchorMode.FEET).
"""

import logging

import numpy as np

from spritesheet_frames.config import AnchorMode, AnimationPolicy
from spritesheet_frames.datatypes import EMPTY_RECT, Rect, Region

logger = logging.getLogger(__name__)


def tight_content_rect(band_mask: np.ndarray, band: Rect, region: Region) -> Rect:
    """
    Minimal rectangle enclosing the content pixels of a region.

    Args:
        band_mask: Content mask of the band, shape (band.height, image width)
        band: The band, in image coordinates
        region: Columns to look at

    Returns:
        Content rectangle in image coordinates, or EMPTY_RECT if the region has no content
    """
    sub = band_mask[:, region.start_x:region.end_x]
    cols = np.flatnonzero(sub.any(axis=0))
    if len(cols) == 0:
        return EMPTY_RECT
    rows = np.flatnonzero(sub.any(axis=1))
    x1 = region.start_x + int(cols[0])
    x2 = region.start_x + int(cols[-1]) + 1
    y1 = band.y + int(rows[0])
    y2 = band.y + int(rows[-1]) + 1
    return Rect(x1, y1, x2 - x1, y2 - y1)


def accept_rect(rect: Rect, row_height: int, policy: AnimationPolicy) -> bool:
    """
    Check a content rectangle against the aspect-ratio envelope and minimum
    height of an animation policy. Rejects debris and partial artefacts.
    """
    if rect.is_empty():
        return False
    aspect = rect.aspect
    if aspect < policy.min_aspect or aspect > policy.max_aspect:
        logger.debug("Rect %s rejected, bad aspect ratio %.2f", rect, aspect)
        return False
    if rect.height < row_height * policy.min_height_fraction:
        logger.debug("Rect %s rejected, too short (%d < %.1f)", rect, rect.height,
                     row_height * policy.min_height_fraction)
        return False
    return True


def canvas_size(rects: list[Rect], row_height: int, padding: int) -> tuple[int, int]:
    """
    Size of the shared frame canvas: the largest crop plus padding on each
    side, at least row_height tall.

    Returns:
        (width, height)
    """
    max_w = max((r.width for r in rects), default=0)
    max_h = max((r.height for r in rects), default=0)
    return max_w + 2 * padding, max(max_h + 2 * padding, row_height)


def foot_anchor(mask: np.ndarray, rect: Rect) -> int:
    """
    Horizontal offset, from the left of rect, of the middle of the content in
    the bottom fifth of the crop (at least 4 pixels tall).
    """
    foot_h = min(rect.height, max(4, rect.height // 5))
    ys, xs = rect.slices()
    feet = mask[ys, xs][-foot_h:]
    cols = np.flatnonzero(feet.any(axis=0))
    if len(cols) >= 2 and cols[-1] > cols[0]:
        return int(cols[0] + cols[-1]) // 2
    return rect.width // 2


def render_frame(image: np.ndarray, rect: Rect, size: tuple[int, int], padding: int,
                 anchor: AnchorMode = AnchorMode.CENTER, mask: np.ndarray | None = None) -> np.ndarray:
    """
    Copy a content rectangle onto a fresh, fully transparent canvas.

    Args:
        image: Source BGRA image
        rect: Content rectangle in image coordinates
        size: Canvas (width, height)
        padding: Gap between the crop bottom and the canvas bottom
        anchor: Horizontal anchoring; CENTER centers the crop, FEET centers the feet
        mask: Content mask of the whole image, required for FEET anchoring

    Returns:
        New BGRA canvas of shape (height, width, 4)
    """
    canvas_w, canvas_h = size
    canvas = np.zeros((canvas_h, canvas_w, 4), dtype=np.uint8)

    crop = image[rect.slices()]
    # A crop can only exceed the canvas when the canvas was sized for other rows
    crop = crop[-canvas_h:, :canvas_w]
    crop_h, crop_w = crop.shape[:2]

    if anchor == AnchorMode.FEET and mask is not None:
        dest_x = canvas_w // 2 - foot_anchor(mask, rect)
    else:
        dest_x = (canvas_w - crop_w) // 2
    dest_x = min(max(dest_x, 0), canvas_w - crop_w)
    dest_y = max(canvas_h - crop_h - padding, 0)

    canvas[dest_y:dest_y + crop_h, dest_x:dest_x + crop_w] = crop
    return canvas
