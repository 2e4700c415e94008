"""
Configuration management for the pose angle pipeline

Central configuration system supporting:
- Dataclass-based configs
- YAML file loading
- Environment variable overrides
- Runtime modification
"""

import os
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any

from .constants import (
    BodyRegion,
    VALID_SIDES,
    DEFAULT_CHANGE_THRESHOLD,
    DEFAULT_STABILITY_COUNT,
)
from .exceptions import ConfigError


def _parse_bool(value: str) -> bool:
    value = value.strip().lower()
    if value in ('1', 'true', 'yes', 'on'):
        return True
    if value in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


@dataclass
class StabilizerConfig:
    """Configuration for the angle stabilizer"""
    change_threshold: float = DEFAULT_CHANGE_THRESHOLD
    stability_count: int = DEFAULT_STABILITY_COUNT
    zero_delta_is_small: bool = False
    reject_non_finite: bool = False

    def __post_init__(self):
        """Validate configuration"""
        if self.change_threshold <= 0:
            raise ValueError("change_threshold must be > 0")
        if self.stability_count < 0:
            raise ValueError("stability_count must be >= 0")


@dataclass
class AngleConfig:
    """Configuration for joint angle extraction from keypoints"""
    side: str = "left"
    min_keypoint_confidence: float = 0.0
    snap_to_pixel: bool = True
    vertical_tolerance_deg: float = 10.0

    def __post_init__(self):
        """Validate configuration"""
        if self.side not in VALID_SIDES:
            raise ConfigError(f"side must be one of {list(VALID_SIDES)}, got {self.side!r}")
        if self.min_keypoint_confidence < 0 or self.min_keypoint_confidence > 1:
            raise ValueError("min_keypoint_confidence must be between 0 and 1")
        if self.vertical_tolerance_deg <= 0 or self.vertical_tolerance_deg >= 90:
            raise ValueError("vertical_tolerance_deg must be between 0 and 90")


@dataclass
class OverlayConfig:
    """Configuration for overlay construction"""
    region: BodyRegion = BodyRegion.LEFT_ARM
    show_track_id: bool = False
    text_offset_x: float = -10.0
    live_text_offset_y: float = 50.0
    captured_text_offset_y: float = 100.0
    person_id_margin: float = 6.0
    decimals: int = 0

    def __post_init__(self):
        """Validate configuration"""
        try:
            self.region = BodyRegion.parse(self.region)
        except ValueError as e:
            raise ConfigError(str(e))
        if self.decimals < 0:
            raise ValueError("decimals must be >= 0")


@dataclass
class TrackingConfig:
    """Configuration for per-subject stabilizer state"""
    per_track: bool = True


@dataclass
class PipelineConfig:
    """Master configuration class combining all subconfigs"""
    stabilizer: StabilizerConfig = field(default_factory=StabilizerConfig)
    angle: AngleConfig = field(default_factory=AngleConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "PipelineConfig":
        """
        Load configuration from YAML file

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            PipelineConfig instance

        Raises:
            FileNotFoundError: If YAML file not found
            ValueError: If YAML format is invalid
            ConfigError: If the file is not a mapping of sections, or a section
                holds unknown keys or names
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        try:
            with open(yaml_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML format in {yaml_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(
                f"Invalid configuration in {yaml_path}: expected a mapping of sections, "
                f"got {type(data).__name__}"
            )

        try:
            return cls(
                stabilizer=StabilizerConfig(**(data.get('stabilizer') or {})),
                angle=AngleConfig(**(data.get('angle') or {})),
                overlay=OverlayConfig(**(data.get('overlay') or {})),
                tracking=TrackingConfig(**(data.get('tracking') or {})),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration in {yaml_path}: {e}")

    @classmethod
    def from_env(cls, base_config: Optional["PipelineConfig"] = None) -> "PipelineConfig":
        """
        Create config from environment variables

        Supports environment variables:
        - POSEANGLE_CHANGE_THRESHOLD
        - POSEANGLE_STABILITY_COUNT
        - POSEANGLE_REGION
        - POSEANGLE_SIDE
        - POSEANGLE_PER_TRACK
        - POSEANGLE_MIN_KEYPOINT_CONFIDENCE

        Args:
            base_config: Base configuration to override (default: new config)

        Returns:
            PipelineConfig instance with environment overrides

        Raises:
            ConfigError: If an override cannot be parsed
        """
        if base_config is None:
            config = cls()
        else:
            config = base_config

        try:
            # Override stabilizer config
            if 'POSEANGLE_CHANGE_THRESHOLD' in os.environ:
                config.stabilizer.change_threshold = float(
                    os.environ['POSEANGLE_CHANGE_THRESHOLD']
                )
            if 'POSEANGLE_STABILITY_COUNT' in os.environ:
                config.stabilizer.stability_count = int(
                    os.environ['POSEANGLE_STABILITY_COUNT']
                )

            # Override angle config
            if 'POSEANGLE_SIDE' in os.environ:
                config.angle.side = os.environ['POSEANGLE_SIDE']
            if 'POSEANGLE_MIN_KEYPOINT_CONFIDENCE' in os.environ:
                config.angle.min_keypoint_confidence = float(
                    os.environ['POSEANGLE_MIN_KEYPOINT_CONFIDENCE']
                )

            # Override overlay config
            if 'POSEANGLE_REGION' in os.environ:
                config.overlay.region = BodyRegion.parse(os.environ['POSEANGLE_REGION'])

            # Override tracking config
            if 'POSEANGLE_PER_TRACK' in os.environ:
                config.tracking.per_track = _parse_bool(os.environ['POSEANGLE_PER_TRACK'])

            # Re-run validation on the modified sections
            config.stabilizer.__post_init__()
            config.angle.__post_init__()
        except ValueError as e:
            raise ConfigError(f"Invalid environment override: {e}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        d = asdict(self)
        d['overlay']['region'] = self.overlay.region.value
        return d

    def to_yaml(self, yaml_path: str) -> None:
        """
        Save configuration to YAML file

        Args:
            yaml_path: Path to save YAML configuration
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def __str__(self) -> str:
        """String representation of config"""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
