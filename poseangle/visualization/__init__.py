"""
Visualization module - Overlay primitives for skeleton and angle annotations

Provides:
- Skeleton selection per body region
- Angle and track ID labels
- Renderer-agnostic primitives
"""

from .overlay import (
    Line,
    Circle,
    TextLabel,
    Rect,
    Overlay,
    format_angle,
    arm_alignment,
    build_skeleton,
    add_angle_labels,
    add_track_label,
    build_overlay,
)

__all__ = [
    # Primitives
    "Line",
    "Circle",
    "TextLabel",
    "Rect",
    "Overlay",
    # Building
    "format_angle",
    "arm_alignment",
    "build_skeleton",
    "add_angle_labels",
    "add_track_label",
    "build_overlay",
]
