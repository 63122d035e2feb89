"""
Functions for telling drawn content apart from the spritesheet background.

Color distance is the sum of absolute B, G and R differences, normalized by
255 so it ranges from 0 to 3. Alpha is not part of the distance.
"""

from typing import Sequence

import numpy as np


def color_distance(a: Sequence[int] | np.ndarray, b: Sequence[int] | np.ndarray) -> float:
    """Normalized sum of absolute differences of the first three channels."""
    return float(np.abs(np.asarray(a[:3], dtype=np.int32) - np.asarray(b[:3], dtype=np.int32)).sum()) / 255.0


def is_content(pixel: Sequence[int] | np.ndarray, background: Sequence[int] | np.ndarray,
               alpha_threshold: float = 0.05, color_threshold: float = 0.36) -> bool:
    """
    Classify a single BGRA pixel.

    Args:
        pixel: BGRA pixel (uint8 channel values)
        background: Reference background color
        alpha_threshold: Pixels with alpha below this fraction of 255 are background
        color_threshold: Minimum normalized color distance from the background for content

    Returns:
        True if the pixel is content
    """
    if len(pixel) > 3 and pixel[3] / 255.0 < alpha_threshold:
        return False
    return color_distance(pixel, background) > color_threshold


def distance_map(img: np.ndarray, reference: Sequence[int] | np.ndarray) -> np.ndarray:
    """
    Per-pixel normalized color distance, as float32.

    The reference is either a single color or an image of the same shape.
    """
    reference = np.asarray(reference)
    diff = np.abs(img[..., :3].astype(np.int16) - reference[..., :3].astype(np.int16))
    return diff.sum(axis=-1, dtype=np.int32).astype(np.float32) / 255.0


def content_mask(img: np.ndarray, background: Sequence[int] | np.ndarray,
                 alpha_threshold: float, color_threshold: float) -> np.ndarray:
    """
    Vectorized is_content over a whole image.

    Args:
        img: BGRA image, shape (height, width, 4)
        background: Reference background color
        alpha_threshold: Pixels with alpha below this fraction of 255 are background
        color_threshold: Minimum normalized color distance from the background for content

    Returns:
        Boolean mask of shape (height, width), True for content pixels
    """
    mask = distance_map(img, background) > color_threshold
    if img.shape[-1] == 4:
        mask &= img[..., 3].astype(np.float32) / 255.0 >= alpha_threshold
    return mask
