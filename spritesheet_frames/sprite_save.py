#!/usr/bin/env python3
"""
Functions for saving extracted animations as individual images or as a spritesheet.
"""

import os
from pathlib import Path
import cv2
import numpy as np

from spritesheet_frames.datatypes import AnimationSet, ProcessedImage


def save_individual_frames(
    animations: AnimationSet,
    output_path: str,
) -> list[Path]:
    """
    Save each frame as an individual file named <stem>_<animation>_<index>.png.

    Args:
        animations: Extracted animations
        output_path: Base path for the output files

    Returns:
        Paths of the written files
    """
    output_dir = Path(output_path).parent
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, frames in animations.items():
        for i, frame in enumerate(frames):
            frame_filename = f"{Path(output_path).stem}_{name}_{i}.png"
            frame_path = os.path.join(output_dir, frame_filename)
            cv2.imwrite(frame_path, frame.image)
            written.append(Path(frame_path))
    return written


def create_spritesheet(
    animations: AnimationSet,
    output_path: str,
    border_size: int = 2,
) -> Path:
    """
    Create a single spritesheet with one row per animation and transparent borders.

    Args:
        animations: Extracted animations
        output_path: Path for the output spritesheet
        border_size: Size of the transparent border between frames (default: 2)

    Returns:
        Path of the written spritesheet
    """
    frame_w, frame_h = animations.frame_size
    num_cols = max(len(frames) for frames in animations.values())
    num_rows = len(animations)

    # Calculate spritesheet dimensions including borders
    sheet_width = num_cols * (frame_w + border_size) + border_size
    sheet_height = num_rows * (frame_h + border_size) + border_size

    # Create empty spritesheet with alpha channel (BGRA)
    spritesheet = np.zeros((sheet_height, sheet_width, 4), dtype=np.uint8)

    for row, frames in enumerate(animations.values()):
        for col, frame in enumerate(frames):
            y_pos = row * (frame_h + border_size) + border_size
            x_pos = col * (frame_w + border_size) + border_size
            spritesheet[y_pos:y_pos + frame_h, x_pos:x_pos + frame_w] = frame.image

    output_dir = Path(output_path).parent
    output_dir.mkdir(parents=True, exist_ok=True)
    spritesheet_path = os.path.join(output_dir, f"{Path(output_path).stem}_spritesheet.png")
    cv2.imwrite(spritesheet_path, spritesheet)
    return Path(spritesheet_path)


def save_debug_images(images: list[ProcessedImage], debug_dir: Path) -> int:
    """Write debug images to debug_dir. Returns the number of files written."""
    debug_dir.mkdir(parents=True, exist_ok=True)
    for image in images:
        cv2.imwrite(str(debug_dir / f"{image.name}.png"), image.image)
    return len(images)


def save_animations(
    animations: AnimationSet,
    output_path: str,
    create_sheet: bool = False,
    border_size: int = 2,
) -> list[Path]:
    """
    Save animations either as individual files or as a spritesheet.

    Args:
        animations: Extracted animations
        output_path: Base path for output
        create_sheet: If True, create a spritesheet instead of individual files
        border_size: Size of transparent border in spritesheet (default: 2)
    """
    if create_sheet:
        return [create_spritesheet(animations, output_path, border_size)]
    return save_individual_frames(animations, output_path)
