"""
Integration tests for CSV I/O, the capture pipeline and the CLI
"""

import pytest

from poseangle.angle import AngleStabilizer
from poseangle.cli import capture_main
from poseangle.core.config import PipelineConfig, AngleConfig, TrackingConfig
from poseangle.core.constants import BodyRegion
from poseangle.core.exceptions import DataLoadError
from poseangle.io import CSVReader, CSVWriter, PoseRow, AngleRow
from poseangle.pipeline import AngleCapturePipeline
from poseangle.pose import compute_joint_angle


def _arm_keypoints(wrist_dy: float, wrist_x: float = 200.0):
    """Left arm with the upper arm along the torso and a slowly rising wrist"""
    return {
        'left_shoulder': (100.0, 100.0, 0.9),
        'left_elbow': (100.0, 200.0, 0.9),
        'left_wrist': (wrist_x, 200.0 + wrist_dy, 0.9),
        'left_hip': (100.0, 300.0, 0.9),
    }


def _pose_row(frame: int, track_id: int, keypoints) -> PoseRow:
    row = PoseRow(
        image_name=f"frame_{frame:05d}.jpg",
        frame=frame,
        track_id=track_id,
        bbox_x1=50.0, bbox_y1=80.0, bbox_x2=250.0, bbox_y2=400.0, bbox_conf=0.95,
    )
    for name, (x, y, conf) in keypoints.items():
        row.keypoints[name] = {'x': x, 'y': y, 'conf': conf}
    return row


def _expected_angle(wrist_dy: float) -> float:
    return compute_joint_angle((100, 100), (100, 200), (200, 200 + wrist_dy))


def test_pipeline_matches_stabilizer():
    pipeline = AngleCapturePipeline(PipelineConfig())
    reference = AngleStabilizer()

    for frame in range(10):
        result = pipeline.process_person(frame, 1, _arm_keypoints(frame))
        expected = reference.update(_expected_angle(frame))

        assert result.raw_angle == pytest.approx(_expected_angle(frame))
        assert result.reading == expected
        assert result.vertically_aligned is True
        assert result.overlay.text("live") is not None


def test_slow_motion_is_captured_on_seventh_frame():
    pipeline = AngleCapturePipeline(PipelineConfig())
    results = [pipeline.process_person(f, 1, _arm_keypoints(f)) for f in range(7)]

    for result in results[:6]:
        assert result.captured_angle is None
        assert result.overlay.text("captured") is None
    assert results[6].captured_angle == pytest.approx(_expected_angle(5))
    assert results[6].overlay.text("captured") is not None


def test_still_pose_never_captures():
    """Identical samples have zero delta and keep resetting the streaks"""
    pipeline = AngleCapturePipeline(PipelineConfig())
    results = [pipeline.process_person(f, 1, _arm_keypoints(0.0)) for f in range(10)]

    for result in results:
        assert result.live_angle == pytest.approx(90.0)
        assert result.captured_angle is None


def test_unusable_keypoints_leave_state_untouched():
    config = PipelineConfig(angle=AngleConfig(min_keypoint_confidence=0.5))
    pipeline = AngleCapturePipeline(config)
    pipeline.process_person(0, 1, _arm_keypoints(0.0))

    missing = _arm_keypoints(1.0)
    del missing['left_wrist']
    result = pipeline.process_person(1, 1, missing)
    assert result.raw_angle is None
    assert result.reading is None
    assert result.overlay is not None
    assert not result.overlay.is_empty()

    low_conf = {k: (x, y, 0.1) for k, (x, y, _) in _arm_keypoints(1.0).items()}
    assert pipeline.process_person(2, 1, low_conf).raw_angle is None

    state = pipeline.bank.get(1).state
    assert state.previous_angle == pytest.approx(90.0)
    assert state.small_change_streak == 0


def test_low_confidence_keypoints_are_dropped_before_drawing():
    config = PipelineConfig(angle=AngleConfig(min_keypoint_confidence=0.5))
    pipeline = AngleCapturePipeline(config)

    keypoints = _arm_keypoints(0.0)
    keypoints['left_wrist'] = (200.0, 200.0, 0.2)
    result = pipeline.process_person(0, 1, keypoints)

    assert result.raw_angle is None
    assert result.vertically_aligned is True
    # shoulder-elbow only, no wrist circle
    assert len(result.overlay.lines) == 1
    assert len(result.overlay.circles) == 2
    assert 1 not in pipeline.bank


def test_per_track_state_versus_shared():
    def run(per_track: bool):
        config = PipelineConfig(tracking=TrackingConfig(per_track=per_track))
        pipeline = AngleCapturePipeline(config)
        results = []
        for frame in range(7):
            persons = [
                _pose_row(frame, 1, _arm_keypoints(frame)),
                # second person alternates between two far apart poses
                _pose_row(frame, 2, _arm_keypoints(0.0) if frame % 2 else _arm_keypoints(100.0, wrist_x=100.0)),
            ]
            results.extend(pipeline.process_frame(frame, persons))
        return results

    per_track = run(True)
    track1 = [r for r in per_track if r.track_id == 1]
    assert track1[-1].captured_angle == pytest.approx(_expected_angle(5))

    shared = run(False)
    assert all(r.captured_angle is None for r in shared)


def test_left_leg_region_measures_knee():
    config = PipelineConfig()
    config.overlay.region = BodyRegion.LEFT_LEG
    pipeline = AngleCapturePipeline(config)

    kpts = {
        'left_hip': (100.0, 300.0, 0.9),
        'left_knee': (100.0, 400.0, 0.9),
        'left_ankle': (200.0, 500.0, 0.9),
    }
    result = pipeline.process_person(0, 1, kpts)
    assert result.raw_angle == pytest.approx(45.0)
    assert result.vertex == (100.0, 400.0)
    assert result.vertically_aligned is None


def test_csv_round_trip(tmp_path):
    poses = [_pose_row(f, 1, _arm_keypoints(f)) for f in (2, 0, 1)]
    pose_path = tmp_path / "poses.csv"
    CSVWriter.write_pose(str(pose_path), poses)

    by_frame = CSVReader.read_pose(str(pose_path))
    assert list(by_frame) == [0, 1, 2]
    row = by_frame[1][0]
    assert row.track_id == 1
    assert row.bbox == (50.0, 80.0, 250.0, 400.0)
    assert row.keypoint_dict()['left_wrist'] == (200.0, 201.0, 0.9)

    angles = [
        AngleRow(0, 1, 'a.jpg', 90.0, 90.0, None, True),
        AngleRow(1, 1, 'b.jpg', None, None, None, None),
    ]
    angle_path = tmp_path / "out" / "angles.csv"
    CSVWriter.write_angles(str(angle_path), angles)
    assert CSVReader.read_angles(str(angle_path)) == angles


def test_csv_undetected_keypoint_gives_no_angle(tmp_path):
    keypoints = _arm_keypoints(0.0)
    del keypoints['left_wrist']
    pose_path = tmp_path / "poses.csv"
    CSVWriter.write_pose(str(pose_path), [_pose_row(0, 1, keypoints)])

    row = CSVReader.read_pose(str(pose_path))[0][0]
    assert 'left_wrist' not in row.keypoint_dict()
    assert 'nose' not in row.keypoint_dict()

    pipeline = AngleCapturePipeline(PipelineConfig())
    result = pipeline.process_person(0, 1, row.keypoint_dict(), bbox=row.bbox)
    assert result.raw_angle is None
    assert result.overlay.text("live") is None
    assert not pipeline.bank.get(1).state.has_previous


def test_csv_zero_keypoint_reads_as_undetected(tmp_path):
    pose_path = tmp_path / "poses.csv"
    pose_path.write_text(
        "image_name,frame,track_id,left_wrist_x,left_wrist_y,left_wrist_conf,"
        "left_elbow_x,left_elbow_y,left_elbow_conf\n"
        "img.jpg,0,1,0,0,0,100,200,0.9\n"
    )
    row = CSVReader.read_pose(str(pose_path))[0][0]
    assert row.keypoint_dict() == {'left_elbow': (100.0, 200.0, 0.9)}


def test_csv_errors(tmp_path):
    with pytest.raises(DataLoadError):
        CSVReader.read_pose(str(tmp_path / "missing.csv"))

    bad = tmp_path / "bad.csv"
    bad.write_text("image_name,frame,track_id\nimg.jpg,notanumber,1\n")
    with pytest.raises(DataLoadError):
        CSVReader.read_pose(str(bad))


def test_process_poses_in_frame_order():
    poses_by_frame = {
        f: [_pose_row(f, 1, _arm_keypoints(f))] for f in (3, 1, 0, 2)
    }
    pipeline = AngleCapturePipeline()
    seen = []
    results = pipeline.process_poses(poses_by_frame, progress=lambda frames: seen.extend(frames) or frames)

    assert [r.frame for r in results] == [0, 1, 2, 3]
    assert seen == [0, 1, 2, 3]
    rows = pipeline.to_rows(results)
    assert rows[0].raw_angle == pytest.approx(90.0)
    assert rows[0].image_name == "frame_00000.jpg"


def test_cli_capture(tmp_path, monkeypatch):
    for var in ("POSEANGLE_CHANGE_THRESHOLD", "POSEANGLE_STABILITY_COUNT",
                "POSEANGLE_REGION", "POSEANGLE_SIDE", "POSEANGLE_PER_TRACK",
                "POSEANGLE_MIN_KEYPOINT_CONFIDENCE"):
        monkeypatch.delenv(var, raising=False)

    pose_path = tmp_path / "poses.csv"
    CSVWriter.write_pose(str(pose_path), [_pose_row(f, 1, _arm_keypoints(f)) for f in range(8)])
    out_path = tmp_path / "angles.csv"

    code = capture_main([
        "--poses", str(pose_path),
        "--output", str(out_path),
        "--region", "left_arm",
        "--stability-count", "5",
    ])
    assert code == 0

    rows = CSVReader.read_angles(str(out_path))
    assert len(rows) == 8
    assert rows[0].live_angle == pytest.approx(90.0)
    assert rows[5].captured_angle is None
    assert rows[6].captured_angle == pytest.approx(_expected_angle(5))


def test_cli_reports_errors(tmp_path):
    code = capture_main([
        "--poses", str(tmp_path / "missing.csv"),
        "--output", str(tmp_path / "angles.csv"),
    ])
    assert code == 1

    listed_config = tmp_path / "listed.yaml"
    listed_config.write_text("- stabilizer\n")
    code = capture_main([
        "--poses", str(tmp_path / "missing.csv"),
        "--output", str(tmp_path / "angles.csv"),
        "--config", str(listed_config),
    ])
    assert code == 1

    bad_config = tmp_path / "bad.yaml"
    bad_config.write_text("stabilizer:\n  change_threshold: -1\n")
    code = capture_main([
        "--poses", str(tmp_path / "missing.csv"),
        "--output", str(tmp_path / "angles.csv"),
        "--config", str(bad_config),
    ])
    assert code == 1
