"""
Exceptions raised by the spritesheet frame extraction pipeline.

Recoverable conditions (a row without content, a rejected region) are not
exceptions: they are handled by fallback policy and reported as notes on the
resulting AnimationSet. Only invalid input and total failure are raised.
"""


class SpritesheetError(ValueError):
    """Base class for all errors raised by this library."""


class InvalidInputError(SpritesheetError):
    """Raised when the image or the animation layout cannot be processed."""


class NoFramesError(InvalidInputError):
    """Raised when not a single animation yielded an extracted frame."""

    def __init__(self, animations: list[str]):
        super().__init__(f"No frames could be extracted for any animation ({', '.join(animations)})")
        self.animations = animations


class ConfigError(SpritesheetError):
    """Raised when an ExtractionConfig value is out of range."""
