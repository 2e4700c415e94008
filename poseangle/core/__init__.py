"""
Core module - Configuration, constants, exceptions and logging for the pose angle pipeline
"""

from .config import (
    PipelineConfig,
    StabilizerConfig,
    AngleConfig,
    OverlayConfig,
    TrackingConfig,
)
from .constants import (
    BodyRegion,
    COCO_KEYPOINT_NAMES,
    SKELETON_CONNECTIONS,
    NO_PREVIOUS_ANGLE,
)
from .exceptions import (
    PoseAngleException,
    ConfigError,
    DataLoadError,
    ValidationError,
    KeypointError,
    handle_exception,
)
from .logger import get_logger, set_verbose

__all__ = [
    "PipelineConfig",
    "StabilizerConfig",
    "AngleConfig",
    "OverlayConfig",
    "TrackingConfig",
    "BodyRegion",
    "COCO_KEYPOINT_NAMES",
    "SKELETON_CONNECTIONS",
    "NO_PREVIOUS_ANGLE",
    "PoseAngleException",
    "ConfigError",
    "DataLoadError",
    "ValidationError",
    "KeypointError",
    "handle_exception",
    "get_logger",
    "set_verbose",
]
