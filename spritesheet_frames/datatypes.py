"""
Data types shared by the pipeline stages.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class Rect:
    """Axis-aligned integer box. Zero area means 'no content'."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height else 0.0

    def slices(self) -> tuple[slice, slice]:
        """Numpy (row, column) slices selecting this rectangle."""
        return slice(self.y, self.bottom), slice(self.x, self.right)


EMPTY_RECT = Rect(0, 0, 0, 0)


@dataclass(frozen=True)
class Region:
    """
    Half-open horizontal interval [start_x, end_x) within one row band,
    hypothesized to contain a single frame.

    Attributes:
        start_x: First column of the region
        end_x: One past the last column of the region
        from_split: True if the region was cut out of an oversized region
    """
    start_x: int
    end_x: int
    from_split: bool = False

    def __post_init__(self) -> None:
        if self.start_x >= self.end_x:
            raise ValueError(f"Region must satisfy start_x < end_x, got [{self.start_x}, {self.end_x})")

    @property
    def width(self) -> int:
        return self.end_x - self.start_x


@dataclass(frozen=True, eq=False)
class Frame:
    """
    One normalized animation frame.

    Frames compare equal when their pixels, source rectangles and fallback
    flags are equal.

    Attributes:
        image: BGRA uint8 canvas, read-only
        source_rect: Content rectangle in the source spritesheet, or None if synthesized
        is_fallback: True if synthesized by the fallback path
    """
    image: np.ndarray
    source_rect: Rect | None = None
    is_fallback: bool = False

    def __post_init__(self) -> None:
        self.image.setflags(write=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Frame):
            return NotImplemented
        return (self.source_rect == other.source_rect and self.is_fallback == other.is_fallback
                and np.array_equal(self.image, other.image))

    __hash__ = None  # type: ignore[assignment]

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


@dataclass(eq=False)
class ProcessedImage:
    """
    An intermediate image produced in debug mode.

    Attributes:
        image: The image data (BGRA or BGR, uint8)
        name: Descriptive name, e.g. "debug_idle_regions"
        metadata: Additional information about the image
    """
    image: np.ndarray
    name: str
    metadata: dict[str, float | int | str] | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProcessedImage):
            return NotImplemented
        return (self.name == other.name and self.metadata == other.metadata
                and np.array_equal(self.image, other.image))


@dataclass
class AnimationSet(Mapping[str, tuple[Frame, ...]]):
    """
    Ordered frames per animation name. All frames share one size.

    Attributes:
        animations: Animation name to frames in playback order
        frame_size: (width, height) shared by every frame
        playback_settings: Animation name to default (fps, loop)
        notes: Informational messages about recovered conditions
        debug_images: Intermediate images, filled only in debug mode
    """
    animations: dict[str, tuple[Frame, ...]]
    frame_size: tuple[int, int]
    playback_settings: dict[str, tuple[float, bool]] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)
    debug_images: list[ProcessedImage] = field(default_factory=list)

    def __getitem__(self, name: str) -> tuple[Frame, ...]:
        return self.animations[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.animations)

    def __len__(self) -> int:
        return len(self.animations)

    def playback(self, name: str) -> tuple[float, bool]:
        """Default (fps, loop) for an animation."""
        return self.playback_settings.get(name, (8.0, True))

    def render_scale(self, target_height: float) -> float:
        """Uniform scale that makes a frame target_height pixels tall on screen."""
        return target_height / self.frame_size[1]
