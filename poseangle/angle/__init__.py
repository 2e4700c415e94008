"""
Angle module - Temporal stabilization of joint angle samples

Provides:
- AngleStabilizer: debounce + capture filter for one subject
- StabilizerBank: one stabilizer per tracked subject
"""

from .stabilizer import AngleStabilizer, AngleReading, StabilizerState
from .bank import StabilizerBank

__all__ = [
    "AngleStabilizer",
    "AngleReading",
    "StabilizerState",
    "StabilizerBank",
]
