#!/usr/bin/env python
"""
Setup configuration for the pose angle capture package

Installation:
    pip install -e .

Installation with development dependencies:
    pip install -e ".[dev]"
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="pose-angle-capture",
    version="0.1.0",
    description="Stabilized joint angle capture and overlays from 2D pose keypoints",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Pose Angle Capture Team",
    author_email="",
    license="MIT",
    python_requires=">=3.8",

    packages=find_packages(include=["poseangle*"]),

    # Core dependencies
    install_requires=[
        # Keypoint geometry
        "numpy>=1.21.0",

        # Configuration files
        "pyyaml>=5.4.0",

        # Progress bars
        "tqdm>=4.60.0",
    ],

    # Optional dependencies for development
    extras_require={
        "dev": [
            "pytest>=6.2.0",
            "pytest-cov>=2.12.0",
            "black>=21.0",
            "isort>=5.9.0",
            "flake8>=3.9.0",
            "mypy>=0.910",
        ],
    },

    # Entry points for CLI tools
    entry_points={
        "console_scripts": [
            "poseangle-capture=poseangle.cli:capture_main",
        ],
    },

    # Metadata
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Image Recognition",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],

    keywords="pose-estimation joint-angle keypoints stabilization",
)
