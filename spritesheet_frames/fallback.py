"""
Fallback frame synthesis for rows where nothing could be extracted.
"""

import numpy as np

from spritesheet_frames.datatypes import Rect


def fallback_frame(image: np.ndarray, band: Rect, size: tuple[int, int], background: np.ndarray) -> np.ndarray:
    """
    Build a frame from the raw row band when segmentation found nothing usable.

    The canvas is filled with the opaque background color, unlike regular
    frames, and the top-left part of the band that fits is copied onto it.

    Args:
        image: Source BGRA image
        band: Row band in image coordinates
        size: Canvas (width, height)
        background: Spritesheet background color (BGRA)

    Returns:
        New BGRA canvas of shape (height, width, 4)
    """
    canvas_w, canvas_h = size
    canvas = np.empty((canvas_h, canvas_w, 4), dtype=np.uint8)
    canvas[:, :, :3] = background[:3]
    canvas[:, :, 3] = 255

    img_h, img_w = image.shape[:2]
    x1 = min(max(band.x, 0), img_w - 1)
    y1 = min(max(band.y, 0), img_h - 1)
    w = min(band.width, img_w - x1, canvas_w)
    h = min(band.height, img_h - y1, canvas_h)
    if w > 0 and h > 0:
        canvas[:h, :w] = image[y1:y1 + h, x1:x1 + w]
    return canvas
