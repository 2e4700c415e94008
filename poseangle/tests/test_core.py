"""
Tests for core configuration, constants and exceptions
"""

import pytest

from poseangle.core.config import (
    PipelineConfig,
    StabilizerConfig,
    AngleConfig,
    OverlayConfig,
)
from poseangle.core.constants import (
    BodyRegion,
    COCO_KEYPOINT_NAMES,
    SKELETON_CONNECTIONS,
    CSV_POSE_COLUMNS,
)
from poseangle.core.exceptions import (
    PoseAngleException,
    ConfigError,
    KeypointError,
    handle_exception,
)


def test_default_config():
    config = PipelineConfig()
    assert config.stabilizer.change_threshold == 2.0
    assert config.stabilizer.stability_count == 5
    assert config.stabilizer.zero_delta_is_small is False
    assert config.overlay.region is BodyRegion.LEFT_ARM
    assert config.angle.side == "left"
    assert config.tracking.per_track is True
    print("✓ PipelineConfig defaults")


def test_constants():
    assert len(COCO_KEYPOINT_NAMES) == 17
    assert len(SKELETON_CONNECTIONS) == 18
    assert len(CSV_POSE_COLUMNS) == 8 + 17 * 3
    for a, b in SKELETON_CONNECTIONS:
        assert a in COCO_KEYPOINT_NAMES
        assert b in COCO_KEYPOINT_NAMES


@pytest.mark.parametrize("name, expected", [
    ("left_arm", BodyRegion.LEFT_ARM),
    ("Left Arm", BodyRegion.LEFT_ARM),
    ("FULL-BODY", BodyRegion.FULL_BODY),
    (BodyRegion.LEFT_LEG, BodyRegion.LEFT_LEG),
])
def test_region_parse(name, expected):
    assert BodyRegion.parse(name) is expected


def test_region_parse_unknown():
    with pytest.raises(ValueError):
        BodyRegion.parse("right_hand")


def test_overlay_config_region_conversion():
    assert OverlayConfig(region="left_leg").region is BodyRegion.LEFT_LEG
    with pytest.raises(ConfigError):
        OverlayConfig(region="tail")


def test_angle_config_validation():
    with pytest.raises(ConfigError):
        AngleConfig(side="middle")
    with pytest.raises(ValueError):
        AngleConfig(min_keypoint_confidence=1.5)
    with pytest.raises(ValueError):
        AngleConfig(vertical_tolerance_deg=90)


def test_yaml_round_trip(tmp_path):
    config = PipelineConfig(
        stabilizer=StabilizerConfig(change_threshold=3.0, stability_count=8),
        overlay=OverlayConfig(region=BodyRegion.FULL_BODY, show_track_id=True),
    )
    path = tmp_path / "configs" / "pipeline.yaml"
    config.to_yaml(str(path))

    loaded = PipelineConfig.from_yaml(str(path))
    assert loaded.stabilizer.change_threshold == 3.0
    assert loaded.stabilizer.stability_count == 8
    assert loaded.overlay.region is BodyRegion.FULL_BODY
    assert loaded.overlay.show_track_id is True
    assert "full_body" in str(loaded)


def test_yaml_partial_sections(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("overlay:\n  region: Left Leg\nangle:\n  side: right\n")

    config = PipelineConfig.from_yaml(str(path))
    assert config.overlay.region is BodyRegion.LEFT_LEG
    assert config.angle.side == "right"
    assert config.stabilizer.change_threshold == 2.0


def test_yaml_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        PipelineConfig.from_yaml(str(tmp_path / "missing.yaml"))

    bad = tmp_path / "bad.yaml"
    bad.write_text("stabilizer: [unclosed\n")
    with pytest.raises(ValueError):
        PipelineConfig.from_yaml(str(bad))

    unknown = tmp_path / "unknown.yaml"
    unknown.write_text("stabilizer:\n  window: 4\n")
    with pytest.raises(ConfigError):
        PipelineConfig.from_yaml(str(unknown))

    region = tmp_path / "region.yaml"
    region.write_text("overlay:\n  region: Right Hand\n")
    with pytest.raises(ConfigError):
        PipelineConfig.from_yaml(str(region))


def test_yaml_top_level_must_be_mapping(tmp_path):
    listed = tmp_path / "listed.yaml"
    listed.write_text("- stabilizer\n- angle\n")
    with pytest.raises(ConfigError):
        PipelineConfig.from_yaml(str(listed))

    empty_section = tmp_path / "empty_section.yaml"
    empty_section.write_text("stabilizer:\nangle:\n  side: right\n")
    config = PipelineConfig.from_yaml(str(empty_section))
    assert config.stabilizer.stability_count == 5
    assert config.angle.side == "right"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("POSEANGLE_CHANGE_THRESHOLD", "1.5")
    monkeypatch.setenv("POSEANGLE_STABILITY_COUNT", "3")
    monkeypatch.setenv("POSEANGLE_REGION", "full_body")
    monkeypatch.setenv("POSEANGLE_SIDE", "right")
    monkeypatch.setenv("POSEANGLE_PER_TRACK", "false")

    config = PipelineConfig.from_env()
    assert config.stabilizer.change_threshold == 1.5
    assert config.stabilizer.stability_count == 3
    assert config.overlay.region is BodyRegion.FULL_BODY
    assert config.angle.side == "right"
    assert config.tracking.per_track is False


def test_env_invalid_override(monkeypatch):
    monkeypatch.setenv("POSEANGLE_STABILITY_COUNT", "many")
    with pytest.raises(ConfigError):
        PipelineConfig.from_env()


def test_exceptions():
    assert issubclass(ConfigError, PoseAngleException)
    assert issubclass(KeypointError, PoseAngleException)

    msg = handle_exception(KeypointError("Missing keypoint: left_wrist"), verbose=False)
    assert msg == "[KeypointError] Missing keypoint: left_wrist"


def test_shipped_default_config():
    from pathlib import Path

    path = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"
    config = PipelineConfig.from_yaml(str(path))
    assert config.to_dict() == PipelineConfig().to_dict()


@pytest.mark.parametrize("value, expected", [
    ("true", True), ("1", True), (" ON ", True),
    ("false", False), ("0", False), ("no", False),
])
def test_env_per_track_values(monkeypatch, value, expected):
    monkeypatch.setenv("POSEANGLE_PER_TRACK", value)
    assert PipelineConfig.from_env().tracking.per_track is expected


def test_env_per_track_rejects_garbage(monkeypatch):
    monkeypatch.setenv("POSEANGLE_PER_TRACK", "sometimes")
    with pytest.raises(ConfigError):
        PipelineConfig.from_env()
