"""
Custom exceptions for the pose angle pipeline

Provides specific exception types for:
- Configuration errors
- Data loading errors
- Sample validation errors
- Missing or unusable keypoints
"""


class PoseAngleException(Exception):
    """
    Base exception class for all pose angle pipeline exceptions

    All custom exceptions should inherit from this class so callers can
    catch pipeline failures at the application level.
    """
    pass


class ConfigError(PoseAngleException):
    """
    Raised when configuration is invalid or missing

    Reasons:
    - Unknown body region or side name
    - Configuration value is out of valid range
    - Invalid environment override

    Example:
        >>> from poseangle.core.exceptions import ConfigError
        >>> from poseangle.core.config import PipelineConfig
        >>> try:
        ...     config = PipelineConfig.from_yaml("bad_region.yaml")
        ... except ConfigError as e:
        ...     print(f"Configuration error: {e}")
    """
    pass


class DataLoadError(PoseAngleException):
    """
    Raised when pose or angle CSV files fail to load

    Example:
        >>> from poseangle.core.exceptions import DataLoadError
        >>> from poseangle.io import CSVReader
        >>> try:
        ...     poses = CSVReader.read_pose("missing.csv")
        ... except DataLoadError as e:
        ...     print(f"Failed to load data: {e}")
    """
    pass


class ValidationError(PoseAngleException):
    """
    Raised when an angle sample is rejected

    Only raised by a stabilizer configured with reject_non_finite=True.
    """
    pass


class KeypointError(PoseAngleException):
    """
    Raised when the keypoints needed for a joint angle are unusable

    Reasons:
    - Keypoint missing from the pose
    - Keypoint confidence below the configured minimum
    """
    pass


def handle_exception(e: PoseAngleException, verbose: bool = True) -> str:
    """
    Handle pipeline exceptions with formatted error message

    Args:
        e: The PoseAngleException instance
        verbose: If True, print error message to console

    Returns:
        Formatted error message string
    """
    error_type = type(e).__name__
    error_msg = str(e)
    formatted_msg = f"[{error_type}] {error_msg}"

    if verbose:
        print(formatted_msg)

    return formatted_msg
