"""
Functions for detecting near-identical frames.
"""

import logging
from typing import Sequence

import numpy as np

from spritesheet_frames.config import ExtractionConfig
from spritesheet_frames.pixel_classifier import content_mask, distance_map

logger = logging.getLogger(__name__)


def frame_similarity(img1: np.ndarray, img2: np.ndarray, background: Sequence[int] | np.ndarray,
                     config: ExtractionConfig) -> float:
    """
    Sampled similarity of two frame images, from 0.0 to 1.0.

    Pixels are sampled on a grid with stride max(1, min(width, height) // 32).
    A sample matches if both pixels are background, or if both are content and
    their colors are closer than the fine threshold.

    Args:
        img1: First BGRA frame
        img2: Second BGRA frame
        background: Spritesheet background color
        config: Extraction parameters

    Returns:
        Fraction of matching samples; 0.0 if the frames differ in size by more
        than comparable_size_tolerance pixels in either axis
    """
    h1, w1 = img1.shape[:2]
    h2, w2 = img2.shape[:2]
    tolerance = config.comparable_size_tolerance
    if abs(w1 - w2) > tolerance or abs(h1 - h2) > tolerance:
        return 0.0

    w = min(w1, w2)
    h = min(h1, h2)
    step = max(1, min(w, h) // config.dedup_sample_cells)

    a = img1[0:h:step, 0:w:step]
    b = img2[0:h:step, 0:w:step]
    if a.size == 0:
        return 0.0

    fg_a = content_mask(a, background, config.alpha_threshold, config.fine_threshold)
    fg_b = content_mask(b, background, config.alpha_threshold, config.fine_threshold)
    close = distance_map(a, b) < config.fine_threshold

    matches = (~fg_a & ~fg_b) | (fg_a & fg_b & close)
    return float(matches.mean())


def is_duplicate(img: np.ndarray, kept: Sequence[np.ndarray], background: Sequence[int] | np.ndarray,
                 config: ExtractionConfig) -> bool:
    """True if img is more similar than the cutoff to any already kept frame."""
    return any(frame_similarity(img, other, background, config) > config.duplicate_similarity for other in kept)


def deduplicate(frames: Sequence[np.ndarray], background: Sequence[int] | np.ndarray,
                config: ExtractionConfig) -> list[int]:
    """
    Drop frames that duplicate an earlier kept frame.

    Returns:
        Indices of the kept frames, in order
    """
    kept: list[int] = []
    for i, img in enumerate(frames):
        if is_duplicate(img, [frames[k] for k in kept], background, config):
            logger.debug("Frame %d is a duplicate, skipping", i)
            continue
        kept.append(i)
    return kept
