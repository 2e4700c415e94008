"""
Overlay construction for pose and joint angle annotations

Provides:
- Renderer-agnostic drawing primitives (lines, circles, text, rects)
- Skeleton selection per body region
- Live / captured angle labels placed next to the measured joint
- Track ID labels

Primitives carry coordinates and style only; painting them onto a frame is
left to the caller's renderer.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.config import OverlayConfig, AngleConfig
from ..core.constants import (
    BodyRegion,
    COCO_KEYPOINT_NAMES,
    SKELETON_CONNECTIONS,
    COLOR_LINE,
    COLOR_REFERENCE_LINE,
    COLOR_LIVE_TEXT,
    COLOR_CAPTURED_TEXT,
    COLOR_WHITE,
    COLOR_TRACK_ID,
    CIRCLE_RADIUS,
    LINE_WIDTH,
    LINE_WIDTH_THIN,
    TEXT_SIZE,
)
from ..pose.keypoint_utils import Keypoints, Point, is_vertically_aligned
from ..angle.stabilizer import AngleReading


@dataclass(frozen=True)
class Line:
    start: Point
    end: Point
    color: str = COLOR_LINE
    width: float = LINE_WIDTH


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float = CIRCLE_RADIUS
    color: str = COLOR_WHITE


@dataclass(frozen=True)
class TextLabel:
    text: str
    position: Point
    color: str = COLOR_LIVE_TEXT
    size: float = TEXT_SIZE
    kind: str = "live"  # live, captured, track_id


@dataclass(frozen=True)
class Rect:
    top_left: Point
    bottom_right: Point
    color: str = COLOR_LINE
    width: float = LINE_WIDTH


@dataclass
class Overlay:
    """All primitives for one person in one frame"""
    lines: List[Line] = field(default_factory=list)
    circles: List[Circle] = field(default_factory=list)
    texts: List[TextLabel] = field(default_factory=list)
    rects: List[Rect] = field(default_factory=list)

    def text(self, kind: str) -> Optional[TextLabel]:
        """First text label of a kind, or None"""
        for label in self.texts:
            if label.kind == kind:
                return label
        return None

    def is_empty(self) -> bool:
        return not (self.lines or self.circles or self.texts or self.rects)


def _xy(keypoints: Keypoints, name: str) -> Optional[Point]:
    if name not in keypoints:
        return None
    x, y, _ = keypoints[name]
    return float(x), float(y)


def _add_line(overlay: Overlay, keypoints: Keypoints, a: str, b: str, **style) -> None:
    pa, pb = _xy(keypoints, a), _xy(keypoints, b)
    if pa is not None and pb is not None:
        overlay.lines.append(Line(pa, pb, **style))


def _add_circle(overlay: Overlay, keypoints: Keypoints, name: str, **style) -> None:
    p = _xy(keypoints, name)
    if p is not None:
        overlay.circles.append(Circle(p, **style))


def format_angle(value: float, decimals: int = 0) -> str:
    """Format an angle for display ('%.0f' by default)"""
    return f"{value:.{decimals}f}"


def arm_alignment(
    keypoints: Keypoints,
    side: str = "left",
    tolerance_deg: float = 10.0
) -> Optional[bool]:
    """
    Vertical alignment of the upper arm with the torso side

    Returns:
        True/False, or None if shoulder, hip or elbow is missing
    """
    shoulder = _xy(keypoints, f"{side}_shoulder")
    hip = _xy(keypoints, f"{side}_hip")
    elbow = _xy(keypoints, f"{side}_elbow")
    if shoulder is None or hip is None or elbow is None:
        return None
    return is_vertically_aligned(shoulder, hip, elbow, tolerance_deg)


def build_skeleton(
    keypoints: Keypoints,
    region: BodyRegion,
    side: str = "left",
    vertically_aligned: Optional[bool] = None
) -> Overlay:
    """
    Build skeleton lines and keypoint circles for a body region

    Args:
        keypoints: Keypoint dict
        region: Body region to draw
        side: Side used by the limb regions
        vertically_aligned: Arm alignment; when False the arm region also
            draws the shoulder-hip reference line and the hip point

    Returns:
        Overlay with lines and circles
    """
    overlay = Overlay()

    if region is BodyRegion.FULL_BODY:
        for a, b in SKELETON_CONNECTIONS:
            _add_line(overlay, keypoints, a, b)
        for name in COCO_KEYPOINT_NAMES:
            _add_circle(overlay, keypoints, name)

    elif region is BodyRegion.LEFT_ARM:
        shoulder, elbow, wrist, hip = (
            f"{side}_shoulder", f"{side}_elbow", f"{side}_wrist", f"{side}_hip"
        )
        _add_line(overlay, keypoints, shoulder, elbow, color=COLOR_WHITE, width=LINE_WIDTH_THIN)
        _add_line(overlay, keypoints, elbow, wrist, color=COLOR_WHITE, width=LINE_WIDTH_THIN)
        for name in (shoulder, elbow, wrist):
            _add_circle(overlay, keypoints, name)

        if vertically_aligned is False:
            _add_line(overlay, keypoints, shoulder, hip, color=COLOR_REFERENCE_LINE)
            _add_line(overlay, keypoints, shoulder, elbow)
            _add_circle(overlay, keypoints, hip)

    elif region is BodyRegion.LEFT_LEG:
        hip, knee, ankle = f"{side}_hip", f"{side}_knee", f"{side}_ankle"
        _add_line(overlay, keypoints, hip, knee, color=COLOR_WHITE, width=LINE_WIDTH_THIN)
        _add_line(overlay, keypoints, knee, ankle, color=COLOR_WHITE, width=LINE_WIDTH_THIN)
        for name in (hip, knee, ankle):
            _add_circle(overlay, keypoints, name)

    else:
        raise ValueError(f"Unhandled body region: {region}")

    return overlay


def add_angle_labels(
    overlay: Overlay,
    reading: AngleReading,
    vertex: Point,
    config: OverlayConfig
) -> Overlay:
    """
    Add live and captured angle text next to the measured joint

    Args:
        overlay: Overlay to extend
        reading: Stabilizer output for this frame
        vertex: Joint position the labels are anchored to
        config: Text offsets and precision

    Returns:
        The same overlay
    """
    x = vertex[0] + config.text_offset_x
    overlay.texts.append(TextLabel(
        text=format_angle(reading.live, config.decimals),
        position=(x, vertex[1] + config.live_text_offset_y),
        color=COLOR_LIVE_TEXT,
        kind="live",
    ))

    if reading.captured is not None:
        overlay.texts.append(TextLabel(
            text=format_angle(reading.captured, config.decimals),
            position=(x, vertex[1] + config.captured_text_offset_y),
            color=COLOR_CAPTURED_TEXT,
            kind="captured",
        ))

    return overlay


def add_track_label(
    overlay: Overlay,
    track_id: int,
    bbox: Tuple[float, float, float, float],
    margin: float = 6.0
) -> Overlay:
    """
    Add track ID text above the bbox and the bbox outline

    Args:
        overlay: Overlay to extend
        track_id: Track ID to display
        bbox: (x1, y1, x2, y2) in pixel coordinates
        margin: Distance between text baseline and bbox top

    Returns:
        The same overlay
    """
    x1, y1, x2, y2 = bbox
    text_x = max(0.0, float(x1))
    text_y = max(0.0, float(y1))

    overlay.texts.append(TextLabel(
        text=str(track_id),
        position=(text_x, text_y - margin),
        color=COLOR_TRACK_ID,
        kind="track_id",
    ))
    overlay.rects.append(Rect((float(x1), float(y1)), (float(x2), float(y2))))
    return overlay


def build_overlay(
    keypoints: Keypoints,
    overlay_config: OverlayConfig,
    angle_config: Optional[AngleConfig] = None,
    reading: Optional[AngleReading] = None,
    vertex: Optional[Point] = None,
    track_id: Optional[int] = None,
    bbox: Optional[Tuple[float, float, float, float]] = None,
    vertically_aligned: Optional[bool] = None
) -> Overlay:
    """
    Build the complete overlay for one person

    Args:
        keypoints: Keypoint dict
        overlay_config: Region, offsets and label switches
        angle_config: Side selection (default: AngleConfig())
        reading: Stabilizer output, or None to skip angle labels
        vertex: Joint anchor for angle labels
        track_id: Track ID for the ID label
        bbox: Person bbox for the ID label
        vertically_aligned: Arm alignment for the arm region

    Returns:
        Overlay

    Example:
        >>> overlay = build_overlay(keypoints, OverlayConfig(region=BodyRegion.LEFT_ARM),
        ...                         reading=AngleReading(live=92.0), vertex=(120, 240))
        >>> overlay.text("live").text
        '92'
    """
    if angle_config is None:
        angle_config = AngleConfig()

    overlay = build_skeleton(
        keypoints, overlay_config.region, angle_config.side, vertically_aligned
    )

    if reading is not None and vertex is not None:
        add_angle_labels(overlay, reading, vertex, overlay_config)

    if overlay_config.show_track_id and track_id is not None and bbox is not None:
        add_track_label(overlay, track_id, bbox, overlay_config.person_id_margin)

    return overlay

