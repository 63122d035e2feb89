"""
Configuration for the frame extraction pipeline.

All tunables live in an immutable ExtractionConfig passed to the pipeline at
call time. Color thresholds are in normalized units: the sum of absolute
R, G and B differences divided by 255 (range 0..3). The alpha threshold is
a fraction of full opacity.

Per-animation behavior (aspect-ratio envelope, dedup, what to do when a row
comes out empty) is looked up from ANIMATION_POLICIES by AnimationKind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from spritesheet_frames.errors import ConfigError


class AnimationKind(str, Enum):
    """Closed set of animations a spritesheet can describe."""
    IDLE = "idle"
    RUN = "run"
    JUMP = "jump"


class BandStrategy(str, Enum):
    """How the vertical pixel range of each animation row is found."""
    FIXED = "fixed"         # Split the image height evenly
    CONTENT = "content"     # Detect content-bearing horizontal bands


class DedupMode(str, Enum):
    """Which extracted frames are checked for near-duplicates."""
    OFF = "off"
    SPLIT_ONLY = "split"    # Only frames cut out of an oversized region
    ALL = "all"


class AnchorMode(str, Enum):
    """Horizontal placement of a crop on the output canvas. Always bottom-aligned."""
    CENTER = "center"
    FEET = "feet"


class FrameSelection(str, Enum):
    ALL = "all"
    LARGEST = "largest"


class EmptyPolicy(str, Enum):
    """What an animation row gets when nothing usable was extracted from it."""
    FALLBACK = "fallback"   # Synthesize a frame from the raw band
    BORROW = "borrow"       # Reuse the first frame of another animation


@dataclass(frozen=True)
class AnimationPolicy:
    """
    Extraction policy for one animation row.

    Attributes:
        min_aspect: Minimum accepted width/height ratio of a content rectangle
        max_aspect: Maximum accepted width/height ratio of a content rectangle
        min_height_fraction: Minimum content height as a fraction of the row height
        frame_count: Number of frames the generator was asked to draw. Used only in manual mode.
        selection: Keep all accepted frames, or only the largest one
        on_empty: Recovery when the row yields no frame
        fps: Default playback speed for the consumer
        loop: Whether the consumer should loop the animation
    """
    min_aspect: float
    max_aspect: float
    min_height_fraction: float
    frame_count: int
    selection: FrameSelection = FrameSelection.ALL
    on_empty: EmptyPolicy = EmptyPolicy.FALLBACK
    fps: float = 8.0
    loop: bool = True


@dataclass(frozen=True)
class DerivedAnimation:
    """An animation assembled from a frame of another animation, without extraction."""
    source: AnimationKind
    index: int
    fallback_source: AnimationKind
    fallback_index: int = 0


ANIMATION_POLICIES: dict[AnimationKind, AnimationPolicy] = {
    AnimationKind.IDLE: AnimationPolicy(
        min_aspect=0.2, max_aspect=1.5, min_height_fraction=0.3, frame_count=4,
        on_empty=EmptyPolicy.FALLBACK, fps=1.0, loop=True),
    AnimationKind.RUN: AnimationPolicy(
        min_aspect=0.15, max_aspect=3.0, min_height_fraction=0.25, frame_count=6,
        on_empty=EmptyPolicy.BORROW, fps=12.0, loop=True),
    AnimationKind.JUMP: AnimationPolicy(
        min_aspect=0.2, max_aspect=1.5, min_height_fraction=0.3, frame_count=1,
        on_empty=EmptyPolicy.FALLBACK, fps=8.0, loop=False),
}

# Jump is the third run frame (mid-stride, both feet off the ground) or the first idle pose
DERIVED_ANIMATIONS: dict[AnimationKind, DerivedAnimation] = {
    AnimationKind.JUMP: DerivedAnimation(source=AnimationKind.RUN, index=2,
                                         fallback_source=AnimationKind.IDLE, fallback_index=0),
}

DEFAULT_ROWS: tuple[AnimationKind, ...] = (AnimationKind.IDLE, AnimationKind.RUN)


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Tunable parameters of the extraction pipeline.

    Attributes:
        alpha_threshold: Pixels with alpha below this fraction are never content
        coarse_threshold: Color distance for occupancy scans and content rectangles
        fine_threshold: Color distance for duplicate comparison and background keying
        gap_window: Width in pixels of the window on each side of a gap candidate
        gap_depth_ratio: A column is a gap candidate if its density is below this fraction of the side average
        gap_min_activity: Minimum side-average density for a gap candidate
        min_gap_separation: Minimum distance in pixels between two accepted gaps
        oversize_ratio: Regions wider than this multiple of the row height get split
        split_width_ratio: Expected width of one character as a fraction of the row height
        max_split_count: Upper bound on the number of pieces an oversized region is split into
        split_edge_margin: Split points are not searched this close to a region edge
        minima_window: Half-width of the neighbourhood a split point must be the minimum of
        minima_max_fill: Split points must have density below this fraction of the row height
        duplicate_similarity: Frames more similar than this are duplicates
        comparable_size_tolerance: Frames differing by more pixels than this in either axis are always distinct
        dedup_sample_cells: Sampling stride is min(width, height) divided by this
        canvas_padding: Transparent padding in pixels around the largest crop
        auto_detect: Detect frames from content; if False, divide rows into frame_count equal columns
        frame_counts: Manual frame count per animation name, overriding the policy table
        band_strategy: How row bands are located
        dedup_mode: Which frames are checked for duplicates
        anchor: Horizontal anchoring of crops on the canvas
        key_background: Make background-colored pixels inside crops transparent
    """
    alpha_threshold: float = 0.05
    coarse_threshold: float = 0.36
    fine_threshold: float = 0.15
    gap_window: int = 8
    gap_depth_ratio: float = 0.5
    gap_min_activity: float = 5.0
    min_gap_separation: int = 40
    oversize_ratio: float = 1.2
    split_width_ratio: float = 0.6
    max_split_count: int = 8
    split_edge_margin: int = 20
    minima_window: int = 5
    minima_max_fill: float = 0.8
    duplicate_similarity: float = 0.92
    comparable_size_tolerance: int = 5
    dedup_sample_cells: int = 32
    canvas_padding: int = 4
    auto_detect: bool = True
    frame_counts: Mapping[str, int] = field(default_factory=dict, hash=False)
    band_strategy: BandStrategy = BandStrategy.FIXED
    dedup_mode: DedupMode = DedupMode.SPLIT_ONLY
    anchor: AnchorMode = AnchorMode.CENTER
    key_background: bool = False

    def __post_init__(self) -> None:
        # Read-only copy of the caller's mapping
        object.__setattr__(self, "frame_counts", MappingProxyType(dict(self.frame_counts)))

        if not 0.0 <= self.alpha_threshold <= 1.0:
            raise ConfigError(f"alpha_threshold must be within [0, 1], got {self.alpha_threshold}")
        for name in ("coarse_threshold", "fine_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 3.0:
                raise ConfigError(f"{name} must be within [0, 3], got {value}")
        if not 0.0 <= self.duplicate_similarity <= 1.0:
            raise ConfigError(f"duplicate_similarity must be within [0, 1], got {self.duplicate_similarity}")
        for name in ("gap_window", "minima_window", "dedup_sample_cells"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be at least 1, got {getattr(self, name)}")
        for name in ("min_gap_separation", "split_edge_margin", "canvas_padding", "comparable_size_tolerance"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.oversize_ratio <= 0 or self.split_width_ratio <= 0:
            raise ConfigError("oversize_ratio and split_width_ratio must be positive")
        if self.max_split_count < 2:
            raise ConfigError(f"max_split_count must be at least 2, got {self.max_split_count}")
        for name, count in self.frame_counts.items():
            if count < 1:
                raise ConfigError(f"frame count for '{name}' must be at least 1, got {count}")

    def frame_count_for(self, kind: AnimationKind) -> int:
        """Manual frame count for an animation: explicit override, else the policy table."""
        return self.frame_counts.get(kind.value, ANIMATION_POLICIES[kind].frame_count)
