"""
Keypoint utilities for joint angle measurement

Provides:
- Joint angle from three keypoints (folded to [0, 180] degrees)
- Keypoint selection per body region
- Limb/torso vertical alignment check
- Confidence filtering

Keypoints are dicts mapping COCO keypoint name to (x, y, conf).
"""

import math

import numpy as np
from typing import Dict, Tuple

from ..core.constants import BodyRegion
from ..core.exceptions import KeypointError

Point = Tuple[float, float]
Keypoints = Dict[str, Tuple[float, float, float]]


def compute_joint_angle(a: Point, vertex: Point, c: Point) -> float:
    """
    Compute the folded angle at vertex between vertex->a and vertex->c

    The raw atan2 difference is converted to degrees and folded with
    abs(abs(x) - 180), so a straight limb reads 0 and a fully bent one 180.

    Args:
        a: Proximal point (e.g. shoulder)
        vertex: Joint point (e.g. elbow)
        c: Distal point (e.g. wrist)

    Returns:
        Angle in degrees within [0, 180]

    Example:
        >>> compute_joint_angle((0, 0), (10, 0), (20, 0))  # straight arm
        0.0
        >>> compute_joint_angle((0, 0), (10, 0), (10, 10))  # right angle
        90.0
    """
    raw = (
        np.arctan2(c[1] - vertex[1], c[0] - vertex[0])
        - np.arctan2(a[1] - vertex[1], a[0] - vertex[0])
    )
    return float(abs(abs(np.degrees(raw)) - 180.0))


def joint_triplet(region: BodyRegion, side: str = "left") -> Tuple[str, str, str]:
    """
    Keypoint names (proximal, vertex, distal) measured for a body region

    Args:
        region: Selected body region
        side: 'left' or 'right'

    Returns:
        Tuple of three keypoint names
    """
    if region in (BodyRegion.FULL_BODY, BodyRegion.LEFT_ARM):
        parts = ("shoulder", "elbow", "wrist")
    elif region is BodyRegion.LEFT_LEG:
        parts = ("hip", "knee", "ankle")
    else:
        raise ValueError(f"Unhandled body region: {region}")
    return tuple(f"{side}_{part}" for part in parts)


def _point(keypoints: Keypoints, name: str, snap_to_pixel: bool) -> Point:
    if name not in keypoints:
        raise KeypointError(f"Missing keypoint: {name}")
    x, y, _ = keypoints[name]
    if snap_to_pixel:
        return float(int(x)), float(int(y))
    return float(x), float(y)


def extract_joint_angle(
    keypoints: Keypoints,
    region: BodyRegion,
    side: str = "left",
    snap_to_pixel: bool = True
) -> Tuple[float, Point]:
    """
    Measure the joint angle a body region tracks

    Args:
        keypoints: Keypoint dict (already confidence filtered)
        region: Selected body region
        side: 'left' or 'right'
        snap_to_pixel: Truncate coordinates to integer pixels first

    Returns:
        (angle_degrees, vertex_xy)

    Raises:
        KeypointError: If a required keypoint is missing

    Example:
        >>> kpts = {'left_shoulder': (100, 50, 0.9), 'left_elbow': (100, 150, 0.9),
        ...         'left_wrist': (200, 150, 0.9)}
        >>> extract_joint_angle(kpts, BodyRegion.LEFT_ARM)
        (90.0, (100.0, 150.0))
    """
    names = joint_triplet(region, side)
    a, vertex, c = (_point(keypoints, name, snap_to_pixel) for name in names)
    return compute_joint_angle(a, vertex, c), vertex


def is_vertically_aligned(
    shoulder: Point,
    hip: Point,
    elbow: Point,
    tolerance_deg: float = 10.0
) -> bool:
    """
    Check whether the upper arm runs (anti)parallel to the torso side

    Compares shoulder->hip with shoulder->elbow: the lines are aligned when
    |cos(angle)| between them exceeds cos(tolerance_deg).

    Args:
        shoulder: Shoulder point
        hip: Hip point
        elbow: Elbow point
        tolerance_deg: Maximum angle between the lines

    Returns:
        True if aligned; zero-length segments are never aligned
    """
    v1 = np.array([hip[0] - shoulder[0], hip[1] - shoulder[1]], dtype=np.float64)
    v2 = np.array([elbow[0] - shoulder[0], elbow[1] - shoulder[1]], dtype=np.float64)

    norm = np.linalg.norm(v1) * np.linalg.norm(v2)
    if norm == 0:
        return False

    cos_angle = abs(float(np.dot(v1, v2)) / norm)
    return cos_angle > math.cos(math.radians(tolerance_deg))


def filter_keypoints(keypoints: Keypoints, min_conf: float = 0.0) -> Keypoints:
    """
    Drop keypoints the detector is not confident about

    Everything downstream treats a dropped keypoint as undetected: no angle
    is measured through it and it is not drawn.

    Args:
        keypoints: Keypoint dict
        min_conf: Minimum confidence to keep (0 keeps every keypoint)

    Returns:
        New keypoint dict

    Example:
        >>> kpts = {'left_elbow': (100, 200, 0.9), 'left_wrist': (180, 210, 0.2)}
        >>> sorted(filter_keypoints(kpts, min_conf=0.5))
        ['left_elbow']
    """
    return {
        name: (x, y, conf)
        for name, (x, y, conf) in keypoints.items()
        if conf >= min_conf
    }
