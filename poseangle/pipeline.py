"""
Joint angle capture pipeline

Per person and frame: measure the joint angle from keypoints, feed it to the
person's stabilizer and build the overlay to display.

Example:
    >>> from poseangle import AngleCapturePipeline, PipelineConfig
    >>> from poseangle.io import CSVReader, CSVWriter
    >>> pipeline = AngleCapturePipeline(PipelineConfig())
    >>> results = pipeline.process_poses(CSVReader.read_pose('poses.csv'))
    >>> CSVWriter.write_angles('angles.csv', pipeline.to_rows(results))
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .core.config import PipelineConfig
from .core.constants import BodyRegion
from .core.exceptions import KeypointError
from .core.logger import get_logger
from .angle.bank import StabilizerBank
from .angle.stabilizer import AngleReading
from .pose.keypoint_utils import Keypoints, Point, extract_joint_angle, filter_keypoints
from .visualization.overlay import Overlay, arm_alignment, build_overlay
from .io.csv_handler import AngleRow, PoseRow

logger = get_logger(__name__)


@dataclass
class FrameResult:
    """Angle measurement and overlay for one person in one frame"""
    frame: int
    track_id: int
    image_name: str = ''
    raw_angle: Optional[float] = None
    reading: Optional[AngleReading] = None
    vertex: Optional[Point] = None
    vertically_aligned: Optional[bool] = None
    overlay: Optional[Overlay] = None

    @property
    def live_angle(self) -> Optional[float]:
        return self.reading.live if self.reading is not None else None

    @property
    def captured_angle(self) -> Optional[float]:
        return self.reading.captured if self.reading is not None else None

    def to_row(self) -> AngleRow:
        return AngleRow(
            frame=self.frame,
            track_id=self.track_id,
            image_name=self.image_name,
            raw_angle=self.raw_angle,
            live_angle=self.live_angle,
            captured_angle=self.captured_angle,
            vertically_aligned=self.vertically_aligned,
        )


class AngleCapturePipeline:
    """
    Keypoints -> joint angle -> stabilizer -> overlay

    Frames must be fed in order. Each track's stabilizer is driven from this
    pipeline only; do not share an instance between threads.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config if config is not None else PipelineConfig()
        self.bank = StabilizerBank(self.config.stabilizer, self.config.tracking.per_track)

    @property
    def region(self) -> BodyRegion:
        return self.config.overlay.region

    def reset(self) -> None:
        """Reset every stabilizer"""
        self.bank.reset()

    def process_person(
        self,
        frame: int,
        track_id: int,
        keypoints: Keypoints,
        bbox: Optional[Tuple[float, float, float, float]] = None,
        image_name: str = ''
    ) -> FrameResult:
        """
        Process one person in one frame

        Keypoints below min_keypoint_confidence are dropped first. Unusable
        keypoints (missing or dropped) produce a result without an angle and
        leave the stabilizer untouched; dropped keypoints are not drawn.

        Args:
            frame: Frame number
            track_id: Track ID of the person
            keypoints: Keypoint dict
            bbox: Person bbox (x1, y1, x2, y2) for the track label
            image_name: Source image name, carried into the output

        Returns:
            FrameResult
        """
        angle_cfg = self.config.angle
        result = FrameResult(frame=frame, track_id=track_id, image_name=image_name)
        keypoints = filter_keypoints(keypoints, angle_cfg.min_keypoint_confidence)

        if self.region is BodyRegion.LEFT_ARM:
            result.vertically_aligned = arm_alignment(
                keypoints, angle_cfg.side, angle_cfg.vertical_tolerance_deg
            )

        try:
            angle, vertex = extract_joint_angle(
                keypoints,
                self.region,
                side=angle_cfg.side,
                snap_to_pixel=angle_cfg.snap_to_pixel,
            )
        except KeypointError as e:
            logger.debug("frame %s track %s: no angle (%s)", frame, track_id, e)
        else:
            result.raw_angle = angle
            result.vertex = vertex
            result.reading = self.bank.update(track_id, angle)

        result.overlay = build_overlay(
            keypoints,
            self.config.overlay,
            angle_config=angle_cfg,
            reading=result.reading,
            vertex=result.vertex,
            track_id=track_id,
            bbox=bbox,
            vertically_aligned=result.vertically_aligned,
        )
        return result

    def process_frame(self, frame: int, persons: Iterable[PoseRow]) -> List[FrameResult]:
        """
        Process every person detected in a frame, in ascending track ID order

        Args:
            frame: Frame number
            persons: Pose rows of this frame

        Returns:
            One FrameResult per person
        """
        results = []
        for pose in sorted(persons, key=lambda p: p.track_id):
            results.append(self.process_person(
                frame,
                pose.track_id,
                pose.keypoint_dict(),
                bbox=pose.bbox,
                image_name=pose.image_name,
            ))
        return results

    def process_poses(
        self,
        poses_by_frame: Dict[int, List[PoseRow]],
        progress=None
    ) -> List[FrameResult]:
        """
        Process a whole pose sequence in frame order

        Args:
            poses_by_frame: Mapping frame number -> pose rows (CSVReader.read_pose)
            progress: Optional wrapper for the frame iterator (e.g. tqdm)

        Returns:
            All FrameResults in frame / track order
        """
        frame_numbers = sorted(poses_by_frame)
        if progress is not None:
            frame_numbers = progress(frame_numbers)

        results = []
        for frame_num in frame_numbers:
            results.extend(self.process_frame(frame_num, poses_by_frame[frame_num]))
        return results

    @staticmethod
    def to_rows(results: Iterable[FrameResult]) -> List[AngleRow]:
        """Convert results to CSV rows"""
        return [r.to_row() for r in results]
