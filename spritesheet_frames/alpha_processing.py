"""
Functions for keying the spritesheet background out of rendered frames.
"""

from typing import Sequence

import cv2
import numpy as np

from spritesheet_frames.pixel_classifier import content_mask


def clean_mask(mask: np.ndarray, kernel_size: int = 3) -> np.ndarray:
    """
    Clean up a binary content mask with morphological operations.

    Args:
        mask: Boolean mask
        kernel_size: Size of the kernel for morphological operations

    Returns:
        Cleaned mask as uint8 (0 or 255)
    """
    binary = mask.astype(np.uint8) * 255
    kernel = np.ones((kernel_size, kernel_size), np.uint8)

    # Remove small noise with opening operation (erosion followed by dilation)
    cleaned = cv2.morphologyEx(binary, cv2.MORPH_OPEN, kernel)

    # Fill small holes with closing operation (dilation followed by erosion)
    cleaned = cv2.morphologyEx(cleaned, cv2.MORPH_CLOSE, kernel)

    return cleaned


def key_out_background(frame: np.ndarray, background: Sequence[int] | np.ndarray,
                       alpha_threshold: float, color_threshold: float) -> np.ndarray:
    """
    Make background-colored pixels of a frame transparent.

    Only pixels that are already visible can stay visible; the padding of a
    frame canvas remains transparent.

    Args:
        frame: BGRA frame
        background: Spritesheet background color
        alpha_threshold: Alpha below which a pixel is never content
        color_threshold: Color distance from the background above which a pixel is content

    Returns:
        New BGRA frame
    """
    keyed = frame.copy()
    mask = clean_mask(content_mask(frame, background, alpha_threshold, color_threshold))
    keyed[:, :, 3] = np.minimum(keyed[:, :, 3], mask)
    return keyed
