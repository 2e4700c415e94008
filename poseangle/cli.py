"""
Command line entry point

Usage:
    poseangle-capture \
        --poses pose_results.csv \
        --output angle_results.csv \
        --region left_arm

Input CSV format (pose estimation output):
    image_name, frame, track_id, bbox_x1..bbox_conf, <keypoint>_x/_y/_conf
"""

import argparse
import sys
from typing import List, Optional

from tqdm import tqdm

from .core.config import PipelineConfig
from .core.constants import BodyRegion, VALID_SIDES
from .core.exceptions import PoseAngleException, ConfigError, handle_exception
from .core.logger import set_verbose
from .io.csv_handler import CSVReader, CSVWriter
from .pipeline import AngleCapturePipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Stabilized joint angle capture from pose estimation CSV"
    )

    # Input / output
    parser.add_argument("--poses", type=str, required=True,
                        help="Pose estimation CSV path")
    parser.add_argument("--output", type=str, required=True,
                        help="Output angle CSV path")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML configuration file")

    # Overrides
    parser.add_argument("--region", type=str, default=None,
                        choices=[r.value for r in BodyRegion],
                        help="Body region to measure (default: left_arm)")
    parser.add_argument("--side", type=str, default=None,
                        choices=list(VALID_SIDES),
                        help="Body side to measure (default: left)")
    parser.add_argument("--change-threshold", type=float, default=None,
                        help="Small change threshold in degrees (default: 2)")
    parser.add_argument("--stability-count", type=int, default=None,
                        help="Small changes required before capture (default: 5)")
    parser.add_argument("--shared-state", action="store_true",
                        help="Use one stabilizer for all tracks")
    parser.add_argument("--verbose", action="store_true",
                        help="Log per-frame stabilizer decisions")
    return parser


def load_config(args: argparse.Namespace) -> PipelineConfig:
    """Config from YAML, then environment, then command line flags"""
    try:
        config = PipelineConfig.from_yaml(args.config) if args.config else PipelineConfig()
    except (FileNotFoundError, ValueError) as e:
        raise ConfigError(str(e))

    config = PipelineConfig.from_env(config)

    try:
        if args.region is not None:
            config.overlay.region = BodyRegion.parse(args.region)
        if args.side is not None:
            config.angle.side = args.side
        if args.change_threshold is not None:
            config.stabilizer.change_threshold = args.change_threshold
        if args.stability_count is not None:
            config.stabilizer.stability_count = args.stability_count
        config.stabilizer.__post_init__()
    except ValueError as e:
        raise ConfigError(str(e))

    if args.shared_state:
        config.tracking.per_track = False

    return config


def run_capture(args: argparse.Namespace) -> int:
    config = load_config(args)
    set_verbose(args.verbose)

    print("=" * 70)
    print("JOINT ANGLE CAPTURE")
    print("=" * 70)
    print(f"Input poses: {args.poses}")
    print(f"Output angles: {args.output}")
    print(f"Region: {config.overlay.region.value} ({config.angle.side})")
    print(f"Threshold: {config.stabilizer.change_threshold} deg, "
          f"stability: {config.stabilizer.stability_count} frames")
    print("=" * 70)

    poses_by_frame = CSVReader.read_pose(args.poses)
    pipeline = AngleCapturePipeline(config)
    results = pipeline.process_poses(
        poses_by_frame,
        progress=lambda frames: tqdm(frames, desc="Stabilizing")
    )

    rows = pipeline.to_rows(results)
    CSVWriter.write_angles(args.output, rows)

    measured = sum(1 for r in rows if r.raw_angle is not None)
    captured = sum(1 for r in rows if r.captured_angle is not None)
    print(f"✓ {len(poses_by_frame)} frames, {len(rows)} person entries")
    print(f"  Measured: {measured}, captured: {captured}")
    print(f"✓ Angles written: {args.output}")
    return 0


def capture_main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run_capture(args)
    except PoseAngleException as e:
        handle_exception(e)
        return 1


if __name__ == "__main__":
    sys.exit(capture_main())
