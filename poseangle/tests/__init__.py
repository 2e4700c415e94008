"""
Tests module - Unit and integration tests for the poseangle package

Provides:
- Core module tests (config, constants, exceptions)
- Stabilizer and stabilizer bank tests
- Keypoint geometry and overlay tests
- CSV I/O, pipeline and CLI tests
"""

__all__ = []
