"""
Pose module - Keypoint geometry for joint angle measurement

Provides:
- Joint angle computation from three keypoints
- Keypoint selection per body region
- Vertical alignment check
- Confidence filtering
"""

from .keypoint_utils import (
    compute_joint_angle,
    joint_triplet,
    extract_joint_angle,
    is_vertically_aligned,
    filter_keypoints,
)

__all__ = [
    "compute_joint_angle",
    "joint_triplet",
    "extract_joint_angle",
    "is_vertically_aligned",
    "filter_keypoints",
]
