"""
Spritesheet Frame Extraction

Segments a generated character spritesheet, one animation per row, into
equally sized, baseline-aligned animation frames.

Public API:
    - extract_animations: Main function to process a spritesheet
    - AnimationSet: Result mapping animation names to frames
    - ExtractionConfig: Tunable extraction parameters
"""

from spritesheet_frames.api import extract_animations
from spritesheet_frames.config import AnimationKind, ExtractionConfig
from spritesheet_frames.datatypes import AnimationSet, Frame, ProcessedImage, Rect, Region
from spritesheet_frames.errors import ConfigError, InvalidInputError, NoFramesError, SpritesheetError

__version__ = "0.1.0"
__all__ = [
    "extract_animations", "AnimationSet", "AnimationKind", "ExtractionConfig", "Frame", "ProcessedImage",
    "Rect", "Region", "SpritesheetError", "InvalidInputError", "NoFramesError", "ConfigError", "__version__",
]
