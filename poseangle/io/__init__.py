"""
IO module - CSV reading and writing for poses and stabilized angles
"""

from .csv_handler import (
    CSVWriter,
    CSVReader,
    PoseRow,
    AngleRow,
)

__all__ = [
    "CSVWriter",
    "CSVReader",
    "PoseRow",
    "AngleRow",
]
