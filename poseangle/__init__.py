"""
poseangle - Stabilized joint angle capture from 2D pose keypoints

A Python package for:
- Joint angle measurement from pose estimation keypoints
- Debounced live angle display and held-pose angle capture
- Per-track stabilizer state
- Renderer-agnostic skeleton and angle overlays
"""

__version__ = "0.1.0"
__author__ = "Pose Angle Capture Team"

# Core imports (no external dependencies beyond pyyaml)
from .core.config import (
    PipelineConfig,
    StabilizerConfig,
    AngleConfig,
    OverlayConfig,
    TrackingConfig,
)
from .core.constants import BodyRegion, COCO_KEYPOINT_NAMES, SKELETON_CONNECTIONS
from .core.exceptions import (
    PoseAngleException,
    ConfigError,
    DataLoadError,
    ValidationError,
    KeypointError,
)
from .angle import AngleStabilizer, AngleReading, StabilizerState, StabilizerBank


# Lazy imports for modules with numpy-backed dependencies
def __getattr__(name):
    """Lazy loading for modules with external dependencies"""
    if name in ("AngleCapturePipeline", "FrameResult"):
        from . import pipeline
        return getattr(pipeline, name)
    elif name in ("CSVReader", "CSVWriter", "PoseRow", "AngleRow"):
        from .io import csv_handler
        return getattr(csv_handler, name)
    elif name in ("compute_joint_angle", "extract_joint_angle", "is_vertically_aligned"):
        from .pose import keypoint_utils
        return getattr(keypoint_utils, name)
    elif name in ("Overlay", "build_overlay"):
        from .visualization import overlay
        return getattr(overlay, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Config
    "PipelineConfig",
    "StabilizerConfig",
    "AngleConfig",
    "OverlayConfig",
    "TrackingConfig",
    # Constants
    "BodyRegion",
    "COCO_KEYPOINT_NAMES",
    "SKELETON_CONNECTIONS",
    # Exceptions
    "PoseAngleException",
    "ConfigError",
    "DataLoadError",
    "ValidationError",
    "KeypointError",
    # Stabilization
    "AngleStabilizer",
    "AngleReading",
    "StabilizerState",
    "StabilizerBank",
    # Pipeline
    "AngleCapturePipeline",
    "FrameResult",
    # IO
    "CSVReader",
    "CSVWriter",
    "PoseRow",
    "AngleRow",
    # Geometry
    "compute_joint_angle",
    "extract_joint_angle",
    "is_vertically_aligned",
    # Overlay
    "Overlay",
    "build_overlay",
]
