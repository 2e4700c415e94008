"""
CSV handling utilities for the pose angle pipeline

Provides:
- PoseRow: per-person keypoints for one frame (pose estimation output)
- AngleRow: per-person stabilized angle output
- CSVReader / CSVWriter for both formats
"""

import csv
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Optional, Tuple
from collections import defaultdict

from ..core.exceptions import DataLoadError
from ..core.constants import CSV_ANGLE_COLUMNS, CSV_POSE_COLUMNS, COCO_KEYPOINT_NAMES


def _optional_float(value) -> Optional[float]:
    if value is None or value == '':
        return None
    return float(value)


def _optional_bool(value) -> Optional[bool]:
    if value is None or value == '':
        return None
    return str(value).strip().lower() in ('1', 'true', 'yes')


def _cell(value) -> str:
    return '' if value is None else str(value)


@dataclass
class PoseRow:
    """Dataclass for pose estimation result rows"""
    image_name: str
    frame: int
    track_id: int
    bbox_x1: float = 0.0
    bbox_y1: float = 0.0
    bbox_x2: float = 0.0
    bbox_y2: float = 0.0
    bbox_conf: float = 0.0
    keypoints: Dict[str, Dict[str, float]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: Dict) -> "PoseRow":
        """Create instance from dictionary (keypoint columns are <name>_x/_y/_conf)"""
        row = cls(
            image_name=d.get('image_name', ''),
            frame=int(d['frame']),
            track_id=int(d['track_id']),
            bbox_x1=float(d.get('bbox_x1') or 0),
            bbox_y1=float(d.get('bbox_y1') or 0),
            bbox_x2=float(d.get('bbox_x2') or 0),
            bbox_y2=float(d.get('bbox_y2') or 0),
            bbox_conf=float(d.get('bbox_conf') or 0),
        )

        # undetected keypoints are empty cells, or an all-zero triple in
        # files written by older pose estimation exports
        for kpt_name in COCO_KEYPOINT_NAMES:
            x, y = d.get(f'{kpt_name}_x'), d.get(f'{kpt_name}_y')
            if x in (None, '') or y in (None, ''):
                continue
            kpt = {
                'x': float(x),
                'y': float(y),
                'conf': float(d.get(f'{kpt_name}_conf') or 0),
            }
            if kpt['x'] == 0 and kpt['y'] == 0 and kpt['conf'] == 0:
                continue
            row.keypoints[kpt_name] = kpt

        return row

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        return (self.bbox_x1, self.bbox_y1, self.bbox_x2, self.bbox_y2)

    def keypoint_dict(self) -> Dict[str, Tuple[float, float, float]]:
        """Keypoints as name -> (x, y, conf)"""
        return {
            name: (kpt['x'], kpt['y'], kpt['conf'])
            for name, kpt in self.keypoints.items()
        }

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        d = {
            'image_name': self.image_name,
            'frame': self.frame,
            'track_id': self.track_id,
            'bbox_x1': self.bbox_x1,
            'bbox_y1': self.bbox_y1,
            'bbox_x2': self.bbox_x2,
            'bbox_y2': self.bbox_y2,
            'bbox_conf': self.bbox_conf,
        }

        for kpt_name in COCO_KEYPOINT_NAMES:
            kpt = self.keypoints.get(kpt_name, {})
            d[f'{kpt_name}_x'] = kpt.get('x', '')
            d[f'{kpt_name}_y'] = kpt.get('y', '')
            d[f'{kpt_name}_conf'] = kpt.get('conf', '')

        return d


@dataclass
class AngleRow:
    """Dataclass for stabilized angle rows (None = nothing displayed)"""
    frame: int
    track_id: int
    image_name: str = ''
    raw_angle: Optional[float] = None
    live_angle: Optional[float] = None
    captured_angle: Optional[float] = None
    vertically_aligned: Optional[bool] = None

    @classmethod
    def from_dict(cls, d: Dict) -> "AngleRow":
        """Create instance from dictionary"""
        return cls(
            frame=int(d['frame']),
            track_id=int(d['track_id']),
            image_name=d.get('image_name', ''),
            raw_angle=_optional_float(d.get('raw_angle')),
            live_angle=_optional_float(d.get('live_angle')),
            captured_angle=_optional_float(d.get('captured_angle')),
            vertically_aligned=_optional_bool(d.get('vertically_aligned')),
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary"""
        return asdict(self)

    def to_cells(self) -> List[str]:
        """Convert to CSV cells, empty for absent values"""
        return [_cell(v) for v in (
            self.frame, self.track_id, self.image_name,
            self.raw_angle, self.live_angle, self.captured_angle,
            self.vertically_aligned,
        )]


class CSVWriter:
    """CSV writing for pose and angle results"""

    @staticmethod
    def write_pose(output_path: str, poses: List[PoseRow]) -> None:
        """
        Write pose estimation results to CSV

        Args:
            output_path: Path to output CSV file
            poses: List of PoseRow instances
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if not poses:
            return

        with open(output_path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_POSE_COLUMNS)
            writer.writeheader()

            for pose in poses:
                writer.writerow(pose.to_dict())

    @staticmethod
    def write_angles(output_path: str, angles: List[AngleRow]) -> None:
        """
        Write stabilized angles to CSV

        Args:
            output_path: Path to output CSV file
            angles: List of AngleRow instances

        Example:
            >>> from poseangle.io import CSVWriter, AngleRow
            >>> rows = [
            ...     AngleRow(1, 1, 'img1.jpg', 92.3, 92.3, None, False),
            ...     AngleRow(2, 1, 'img2.jpg', 91.8, 92.3, None, False),
            ... ]
            >>> CSVWriter.write_angles('angles.csv', rows)
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(CSV_ANGLE_COLUMNS)

            for row in angles:
                writer.writerow(row.to_cells())


class CSVReader:
    """CSV reading for pose and angle results"""

    @staticmethod
    def read_pose(csv_path: str) -> Dict[int, List[PoseRow]]:
        """
        Read pose estimation results from CSV, grouped by frame number

        Args:
            csv_path: Path to pose estimation CSV file

        Returns:
            Dictionary mapping frame_num to list of PoseRow, in frame order

        Raises:
            DataLoadError: If CSV cannot be read
        """
        csv_path = Path(csv_path)

        if not csv_path.exists():
            raise DataLoadError(f"CSV file not found: {csv_path}")

        poses_by_frame = defaultdict(list)

        try:
            with open(csv_path, 'r') as f:
                reader = csv.DictReader(f)

                for row in reader:
                    pose = PoseRow.from_dict(row)
                    poses_by_frame[pose.frame].append(pose)

        except (KeyError, ValueError, TypeError, csv.Error) as e:
            raise DataLoadError(f"Failed to read pose CSV: {e}")

        return dict(sorted(poses_by_frame.items()))

    @staticmethod
    def read_angles(csv_path: str) -> List[AngleRow]:
        """
        Read stabilized angles from CSV

        Args:
            csv_path: Path to angle CSV file

        Returns:
            List of AngleRow in file order

        Raises:
            DataLoadError: If CSV cannot be read
        """
        csv_path = Path(csv_path)

        if not csv_path.exists():
            raise DataLoadError(f"CSV file not found: {csv_path}")

        try:
            with open(csv_path, 'r') as f:
                return [AngleRow.from_dict(row) for row in csv.DictReader(f)]
        except (KeyError, ValueError, TypeError, csv.Error) as e:
            raise DataLoadError(f"Failed to read angle CSV: {e}")
