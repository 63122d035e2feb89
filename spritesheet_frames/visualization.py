"""
Functions for visualizing row segmentation in debug mode.
"""

import cv2
import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from spritesheet_frames.datatypes import Rect, Region


def visualize_regions(band_img: np.ndarray, band: Rect, regions: list[Region], rects: list[Rect]) -> np.ndarray:
    """
    Draw region boundaries and content rectangles over a row band.

    Args:
        band_img: The band's pixels (BGRA)
        band: The band in image coordinates
        regions: Regions found in the band
        rects: Accepted content rectangles, in image coordinates

    Returns:
        BGR image with the overlay
    """
    vis_img = band_img.copy()

    # Composite over white so transparent areas stay readable
    if vis_img.shape[2] == 4:
        bg = np.ones((vis_img.shape[0], vis_img.shape[1], 3), dtype=np.uint8) * 255
        alpha = vis_img[:, :, 3:4].astype(float) / 255
        vis_img = (vis_img[:, :, :3] * alpha + bg * (1 - alpha)).astype(np.uint8)

    height = vis_img.shape[0]
    for region in regions:
        cv2.line(vis_img, (region.start_x, 0), (region.start_x, height - 1), (255, 0, 255), 1)   # Magenta
        cv2.line(vis_img, (region.end_x - 1, 0), (region.end_x - 1, height - 1), (255, 0, 255), 1)

    for rect in rects:
        top_left = (rect.x, rect.y - band.y)
        bottom_right = (rect.right - 1, rect.bottom - band.y - 1)
        cv2.rectangle(vis_img, top_left, bottom_right, (0, 255, 0), 1)   # Green

    cv2.putText(vis_img, f"{len(regions)} regions", (10, 20), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 0, 255), 1)
    return vis_img


def plot_density_profile(profile: np.ndarray, gaps: list[int], row_height: int, title: str) -> np.ndarray:
    """
    Plot a column density profile with the detected region boundaries.

    Returns:
        BGRA image of the plot
    """
    fig = Figure(figsize=(10, 4))
    canvas = FigureCanvasAgg(fig)
    ax = fig.add_subplot(1, 1, 1)

    ax.fill_between(np.arange(len(profile)), profile, step="mid", alpha=0.7)
    for x in gaps:
        ax.axvline(x=x, color="m", linestyle="--", linewidth=1)
    ax.axhline(y=row_height, color="g", linestyle=":", label="Row height")

    ax.set_title(title)
    ax.set_xlabel("Column (pixels)")
    ax.set_ylabel("Content pixels")
    ax.set_xlim(0, len(profile))
    ax.legend()
    ax.grid(alpha=0.3)

    canvas.draw()
    rgba = np.asarray(canvas.buffer_rgba())
    return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
