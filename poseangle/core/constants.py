"""
Global constants for the pose angle pipeline

Includes:
- COCO / MoveNet keypoint definitions
- Skeleton connections used by the overlay
- Body regions selectable for visualization
- Overlay styling (colors, sizes)
- CSV column layouts
"""

from enum import Enum


# ===== COCO Keypoints (17 points, MoveNet order) =====
COCO_KEYPOINT_NAMES = [
    'nose',             # 0
    'left_eye',         # 1
    'right_eye',        # 2
    'left_ear',         # 3
    'right_ear',        # 4
    'left_shoulder',    # 5
    'right_shoulder',   # 6
    'left_elbow',       # 7
    'right_elbow',      # 8
    'left_wrist',       # 9
    'right_wrist',      # 10
    'left_hip',         # 11
    'right_hip',        # 12
    'left_knee',        # 13
    'right_knee',       # 14
    'left_ankle',       # 15
    'right_ankle',      # 16
]

# Skeleton drawn in full body mode (includes nose-shoulder links)
SKELETON_CONNECTIONS = [
    # Face
    ('nose', 'left_eye'), ('nose', 'right_eye'),
    ('left_eye', 'left_ear'), ('right_eye', 'right_ear'),
    ('nose', 'left_shoulder'), ('nose', 'right_shoulder'),
    # Arms
    ('left_shoulder', 'left_elbow'), ('left_elbow', 'left_wrist'),
    ('right_shoulder', 'right_elbow'), ('right_elbow', 'right_wrist'),
    # Torso
    ('left_shoulder', 'right_shoulder'),
    ('left_shoulder', 'left_hip'), ('right_shoulder', 'right_hip'),
    ('left_hip', 'right_hip'),
    # Legs
    ('left_hip', 'left_knee'), ('left_knee', 'left_ankle'),
    ('right_hip', 'right_knee'), ('right_knee', 'right_ankle'),
]

VALID_SIDES = ('left', 'right')


class BodyRegion(Enum):
    """Body region selected for visualization and angle measurement"""
    FULL_BODY = "full_body"
    LEFT_ARM = "left_arm"
    LEFT_LEG = "left_leg"

    @classmethod
    def parse(cls, value) -> "BodyRegion":
        """
        Convert a region name to BodyRegion

        Accepts enum members, values ("left_arm") and labels ("Left Arm").

        Raises:
            ValueError: If the name does not match any region
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace(' ', '_').replace('-', '_')
        for region in cls:
            if region.value == key:
                return region
        valid = [r.value for r in cls]
        raise ValueError(f"Unknown body region {value!r}, expected one of {valid}")


# ===== Stabilizer Defaults =====
DEFAULT_CHANGE_THRESHOLD = 2.0      # degrees
DEFAULT_STABILITY_COUNT = 5         # frames
NO_PREVIOUS_ANGLE = -999.0          # sentinel for "no prior sample"

# ===== Overlay Styling =====
# Colors are RGB hex strings, renderers convert as needed
COLOR_LINE = "#E69289"
COLOR_REFERENCE_LINE = "#74AABE"
COLOR_LIVE_TEXT = "#4E78BC"
COLOR_CAPTURED_TEXT = "#4ECD3F"
COLOR_WHITE = "#FFFFFF"
COLOR_TRACK_ID = "#0000FF"

CIRCLE_RADIUS = 6.0
LINE_WIDTH = 4.0
LINE_WIDTH_THIN = 2.0
TEXT_SIZE = 30.0

# ===== CSV column names =====
CSV_POSE_COLUMNS = [
    'image_name', 'frame', 'track_id',
    'bbox_x1', 'bbox_y1', 'bbox_x2', 'bbox_y2', 'bbox_conf'
] + [f'{kpt}_{coord}' for kpt in COCO_KEYPOINT_NAMES for coord in ['x', 'y', 'conf']]

CSV_ANGLE_COLUMNS = [
    'frame', 'track_id', 'image_name',
    'raw_angle', 'live_angle', 'captured_angle', 'vertically_aligned'
]
