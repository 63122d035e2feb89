"""
Synthetic spritesheets shared by the tests.
"""

import numpy as np
import pytest

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (0, 0, 255, 255)      # BGRA
BLUE = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)


def blank_sheet(width: int, height: int, color: tuple[int, int, int, int] = WHITE) -> np.ndarray:
    """Uniform BGRA image."""
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[:, :] = color
    return img


def draw_block(img: np.ndarray, x: int, y: int, w: int, h: int, color: tuple[int, int, int, int] = BLACK) -> None:
    img[y:y + h, x:x + w] = color


def scenario_sheet(idle_y: int = 70, run_y: int = 275) -> np.ndarray:
    """
    800x400 white sheet with two rows: four 60x60 black squares centered at
    x = 50, 250, 450, 650 on top, six 50x50 black squares evenly spaced below.
    """
    img = blank_sheet(800, 400)
    for cx in (50, 250, 450, 650):
        draw_block(img, cx - 30, idle_y, 60, 60)
    for i in range(6):
        cx = 800 * (2 * i + 1) // 12
        draw_block(img, cx - 25, run_y, 50, 50)
    return img


@pytest.fixture
def sheet() -> np.ndarray:
    return scenario_sheet()
