"""
Tests for extraction parameters and animation policies.
"""

import pytest

from spritesheet_frames.config import ANIMATION_POLICIES, AnimationKind, EmptyPolicy, ExtractionConfig
from spritesheet_frames.errors import ConfigError, SpritesheetError


@pytest.mark.parametrize("kwargs", [
    {"alpha_threshold": 1.5},
    {"coarse_threshold": -0.1},
    {"fine_threshold": 3.5},
    {"duplicate_similarity": 2.0},
    {"gap_window": 0},
    {"min_gap_separation": -1},
    {"canvas_padding": -4},
    {"max_split_count": 1},
    {"oversize_ratio": 0.0},
    {"frame_counts": {"run": 0}},
])
def test_out_of_range_values_raise(kwargs):
    with pytest.raises(ConfigError):
        ExtractionConfig(**kwargs)


def test_config_error_is_a_spritesheet_error():
    assert issubclass(ConfigError, SpritesheetError)
    assert issubclass(ConfigError, ValueError)


def test_frame_count_for_prefers_override():
    config = ExtractionConfig(frame_counts={"run": 8})

    assert config.frame_count_for(AnimationKind.RUN) == 8
    assert config.frame_count_for(AnimationKind.IDLE) == 4


def test_default_policies():
    """Run frames may be wider than idle poses and borrow when missing; idle falls back."""
    idle = ANIMATION_POLICIES[AnimationKind.IDLE]
    run = ANIMATION_POLICIES[AnimationKind.RUN]

    assert run.max_aspect > idle.max_aspect
    assert run.min_height_fraction < idle.min_height_fraction
    assert idle.on_empty == EmptyPolicy.FALLBACK
    assert run.on_empty == EmptyPolicy.BORROW
    assert not ANIMATION_POLICIES[AnimationKind.JUMP].loop


def test_config_is_hashable_and_frame_counts_are_frozen():
    """Changing the caller's dict after construction does not affect the config."""
    counts = {"run": 8}
    config = ExtractionConfig(frame_counts=counts)
    counts["run"] = 0

    assert config.frame_count_for(AnimationKind.RUN) == 8
    with pytest.raises(TypeError):
        config.frame_counts["run"] = 2

    assert hash(config) == hash(ExtractionConfig(frame_counts={"run": 8}))
    assert config == ExtractionConfig(frame_counts={"run": 8})
    assert config != ExtractionConfig(frame_counts={"run": 6})
    assert hash(ExtractionConfig()) == hash(ExtractionConfig())
