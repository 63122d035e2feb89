#!/usr/bin/env python3
"""
Public API for the spritesheet frame extraction library.

This module provides the main interface for turning a generated character
spritesheet, one animation per row, into named lists of equally sized frames.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

import cv2
import numpy as np

from spritesheet_frames.alpha_processing import key_out_background
from spritesheet_frames.band_locator import locate_bands
from spritesheet_frames.config import (
    ANIMATION_POLICIES,
    DEFAULT_ROWS,
    DERIVED_ANIMATIONS,
    AnimationKind,
    AnimationPolicy,
    BandStrategy,
    DedupMode,
    EmptyPolicy,
    ExtractionConfig,
    FrameSelection,
)
from spritesheet_frames.datatypes import AnimationSet, Frame, ProcessedImage, Rect, Region
from spritesheet_frames.deduplication import is_duplicate
from spritesheet_frames.errors import InvalidInputError, NoFramesError
from spritesheet_frames.fallback import fallback_frame
from spritesheet_frames.frame_extraction import accept_rect, canvas_size, render_frame, tight_content_rect
from spritesheet_frames.pixel_classifier import content_mask
from spritesheet_frames.region_segmentation import density_profile, manual_regions, segment_row
from spritesheet_frames.visualization import plot_density_profile, visualize_regions

logger = logging.getLogger(__name__)


@dataclass
class _RowCandidates:
    """Regions of one row whose content rectangles passed the policy checks."""
    kind: AnimationKind
    band: Rect
    accepted: list[tuple[Region, Rect]] = field(default_factory=list)


def extract_animations(
    image: np.ndarray | None,
    rows: Sequence[str | AnimationKind] = DEFAULT_ROWS,
    *,
    config: ExtractionConfig | None = None,
    policies: Mapping[AnimationKind, AnimationPolicy] | None = None,
    debug: bool = False
) -> AnimationSet:
    """
    Segment a spritesheet into normalized animation frames.

    Each entry of rows names the animation drawn in the corresponding row of
    the sheet, top to bottom. The background color is sampled from the
    top-left pixel. Every row is segmented into regions, each region is
    cropped to its content and drawn bottom-aligned on a canvas shared by
    all frames. Rows that yield nothing are filled by fallback or borrowing
    according to their policy, and derived animations (e.g. "jump") are
    picked from the extracted frames.

    Args:
        image: Input image as numpy array in BGR or BGRA format (uint8).
               Must be 3D array with shape (height, width, 3) or (height, width, 4).
               The array is not modified.
        rows: Animation names, one per row of the sheet, top to bottom.
        config: Extraction parameters. Defaults to ExtractionConfig().
        policies: Per-animation extraction policies overriding entries of ANIMATION_POLICIES.
        debug: If True, attach intermediate images to the result.

    Returns:
        AnimationSet mapping animation names to frames in playback order.
        Every animation has at least one frame and all frames have the same size.

    Raises:
        InvalidInputError: If the image or the row list is invalid.
        NoFramesError: If no row yielded a single frame.

    Example:
        >>> import cv2
        >>> from spritesheet_frames import extract_animations
        >>>
        >>> img = cv2.imread("player.png", cv2.IMREAD_UNCHANGED)
        >>> animations = extract_animations(img, ["idle", "run"])
        >>> for name, frames in animations.items():
        >>>     print(f"{name}: {len(frames)} frames of {animations.frame_size}")
    """
    config = config or ExtractionConfig()
    policies = {**ANIMATION_POLICIES, **(policies or {})}
    kinds = _resolve_rows(rows)
    img = _to_bgra(image)
    background = img[0, 0].copy()
    logger.info("Spritesheet: %dx%d, background colour: %s", img.shape[1], img.shape[0], tuple(background))

    mask = content_mask(img, background, config.alpha_threshold, config.coarse_threshold)
    bands = locate_bands(mask, len(kinds), config.band_strategy == BandStrategy.CONTENT)
    row_height = max(band.height for band in bands)

    notes: list[str] = []
    debug_images: list[ProcessedImage] = []

    # Pass 1: find and validate content rectangles in every row
    candidates = []
    for kind, band in zip(kinds, bands):
        row = _find_row_candidates(kind, policies[kind], band, img, mask, config, notes,
                                   debug_images if debug else None)
        candidates.append(row)

    all_rects = [rect for row in candidates for _region, rect in row.accepted]
    if not all_rects:
        raise NoFramesError([kind.value for kind in kinds])
    size = canvas_size(all_rects, row_height, config.canvas_padding)
    logger.info("Frame canvas: %dx%d", size[0], size[1])

    # Pass 2: render frames on the shared canvas size
    animations: dict[str, list[Frame]] = {}
    for row in candidates:
        animations[row.kind.value] = _render_row(row, img, mask, background, size, config)

    _fill_empty_rows(candidates, policies, animations, img, background, size, notes)

    result = {name: tuple(frames) for name, frames in animations.items()}
    for kind, derived in DERIVED_ANIMATIONS.items():
        if kind.value in result:
            continue
        result[kind.value] = (_pick_derived_frame(result, derived.source, derived.index,
                                                  derived.fallback_source, derived.fallback_index),)

    for name, frames in result.items():
        logger.info("%s: %d frame(s)", name, len(frames))

    playback = {}
    for name in result:
        policy = policies[AnimationKind(name)]
        playback[name] = (policy.fps, policy.loop)
    return AnimationSet(animations=result, frame_size=size, playback_settings=playback,
                        notes=notes, debug_images=debug_images)


def _resolve_rows(rows: Sequence[str | AnimationKind]) -> list[AnimationKind]:
    if not rows:
        raise InvalidInputError("At least one animation row is required")
    kinds = []
    for name in rows:
        try:
            kind = AnimationKind(name)
        except ValueError:
            valid = ", ".join(k.value for k in AnimationKind)
            raise InvalidInputError(f"Unknown animation '{name}', expected one of: {valid}") from None
        if kind in kinds:
            raise InvalidInputError(f"Animation '{kind.value}' is listed more than once")
        kinds.append(kind)
    return kinds


def _to_bgra(image: np.ndarray | None) -> np.ndarray:
    """Validate the input image and return a BGRA copy of it."""
    if image is None:
        raise InvalidInputError("image cannot be None")

    if not isinstance(image, np.ndarray):
        raise InvalidInputError(f"image must be a numpy array, got {type(image)}")

    if image.ndim != 3:
        raise InvalidInputError(f"image must be 3D array (height, width, channels), got shape {image.shape}")

    if image.shape[2] not in (3, 4):
        raise InvalidInputError(f"image must have 3 (BGR) or 4 (BGRA) channels, got {image.shape[2]}")

    if image.dtype != np.uint8:
        raise InvalidInputError(f"image must be uint8, got {image.dtype}")

    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidInputError(f"image must not be empty, got shape {image.shape}")

    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    return image.copy()


def _find_row_candidates(kind: AnimationKind, policy: AnimationPolicy, band: Rect, img: np.ndarray,
                         mask: np.ndarray, config: ExtractionConfig, notes: list[str],
                         debug_images: list[ProcessedImage] | None) -> _RowCandidates:
    band_mask = mask[band.y:band.bottom]

    if config.auto_detect:
        regions = segment_row(band_mask, config)
    else:
        regions = manual_regions(band.width, config.frame_count_for(kind))
    if not regions:
        notes.append(f"No content detected in the '{kind.value}' row")
        logger.info("Row '%s' at y=%d: no content found", kind.value, band.y)

    row = _RowCandidates(kind, band)
    for region in regions:
        rect = tight_content_rect(band_mask, band, region)
        if accept_rect(rect, band.height, policy):
            row.accepted.append((region, rect))
    rejected = len(regions) - len(row.accepted)
    if rejected:
        logger.debug("Row '%s': %d region(s) rejected", kind.value, rejected)

    if policy.selection == FrameSelection.LARGEST and row.accepted:
        row.accepted = [max(row.accepted, key=lambda item: item[1].area)]

    if debug_images is not None:
        profile = density_profile(band_mask)
        debug_images.append(ProcessedImage(
            image=visualize_regions(img[band.y:band.bottom], band, regions, [r for _, r in row.accepted]),
            name=f"debug_{kind.value}_regions",
            metadata={"num_regions": len(regions), "num_accepted": len(row.accepted)}
        ))
        debug_images.append(ProcessedImage(
            image=plot_density_profile(profile, [r.start_x for r in regions], band.height,
                                       f"'{kind.value}' column density"),
            name=f"debug_{kind.value}_density",
            metadata={"band_y": band.y, "band_height": band.height}
        ))
    return row


def _render_row(row: _RowCandidates, img: np.ndarray, mask: np.ndarray, background: np.ndarray,
                size: tuple[int, int], config: ExtractionConfig) -> list[Frame]:
    frames: list[Frame] = []
    kept_images: list[np.ndarray] = []
    for region, rect in row.accepted:
        frame_img = render_frame(img, rect, size, config.canvas_padding, config.anchor, mask)
        if config.key_background:
            frame_img = key_out_background(frame_img, background, config.alpha_threshold, config.fine_threshold)

        check = config.dedup_mode == DedupMode.ALL or (config.dedup_mode == DedupMode.SPLIT_ONLY and region.from_split)
        if check and is_duplicate(frame_img, kept_images, background, config):
            logger.debug("Row '%s': region %d-%d is a duplicate, skipping", row.kind.value, region.start_x, region.end_x)
            continue

        kept_images.append(frame_img)
        frames.append(Frame(image=frame_img, source_rect=rect))
    return frames


def _fill_empty_rows(candidates: list[_RowCandidates], policies: Mapping[AnimationKind, AnimationPolicy],
                     animations: dict[str, list[Frame]], img: np.ndarray,
                     background: np.ndarray, size: tuple[int, int], notes: list[str]) -> None:
    """Give every empty row a frame, by fallback synthesis or by borrowing."""
    donor = next(frames for frames in animations.values() if frames)

    for row in candidates:
        frames = animations[row.kind.value]
        if frames:
            continue
        if policies[row.kind].on_empty == EmptyPolicy.FALLBACK:
            frames.append(Frame(image=fallback_frame(img, row.band, size, background), is_fallback=True))
            notes.append(f"Using a fallback frame for '{row.kind.value}'")
            logger.warning("%s: using fallback frame", row.kind.value)
        else:
            frames.append(donor[0])
            notes.append(f"'{row.kind.value}' borrows its frame from another animation")
            logger.warning("%s: no frames, borrowing a frame from another animation", row.kind.value)


def _pick_derived_frame(animations: dict[str, tuple[Frame, ...]], source: AnimationKind, index: int,
                        fallback_source: AnimationKind, fallback_index: int) -> Frame:
    frames = animations.get(source.value, ())
    if len(frames) > index:
        return frames[index]
    frames = animations.get(fallback_source.value, ())
    if len(frames) > fallback_index:
        return frames[fallback_index]
    return next(iter(animations.values()))[0]
