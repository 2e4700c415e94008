"""
Per-subject stabilizer management

Keeps one AngleStabilizer per track ID so that several people in the same
frame do not disturb each other's streaks. With per_track=False every
track shares one stabilizer.
"""

from typing import Dict, Hashable, Iterable, List, Optional

from ..core.config import StabilizerConfig
from ..core.logger import get_logger
from .stabilizer import AngleReading, AngleStabilizer

logger = get_logger(__name__)

SHARED_KEY = "__shared__"


class StabilizerBank:
    """
    Collection of stabilizers keyed by track ID

    Example:
        >>> bank = StabilizerBank(StabilizerConfig(), per_track=True)
        >>> bank.update(1, 90.0)
        >>> bank.update(2, 45.0)
        >>> len(bank)  # 2
    """

    def __init__(self, config: Optional[StabilizerConfig] = None, per_track: bool = True):
        self.config = config if config is not None else StabilizerConfig()
        self.per_track = per_track
        self._stabilizers: Dict[Hashable, AngleStabilizer] = {}

    def _key(self, track_id: Hashable) -> Hashable:
        return track_id if self.per_track else SHARED_KEY

    def get(self, track_id: Hashable) -> AngleStabilizer:
        """Return the stabilizer for a track, creating it on first use"""
        key = self._key(track_id)
        stabilizer = self._stabilizers.get(key)
        if stabilizer is None:
            stabilizer = AngleStabilizer(self.config)
            self._stabilizers[key] = stabilizer
            logger.debug("new stabilizer for track %s", key)
        return stabilizer

    def update(self, track_id: Hashable, sample: float) -> AngleReading:
        """Feed one sample to the track's stabilizer"""
        return self.get(track_id).update(sample)

    def reset(self, track_id: Optional[Hashable] = None) -> None:
        """
        Reset state

        Args:
            track_id: Track to reset (default: all tracks)
        """
        if track_id is None:
            for stabilizer in self._stabilizers.values():
                stabilizer.reset()
            return

        stabilizer = self._stabilizers.get(self._key(track_id))
        if stabilizer is not None:
            stabilizer.reset()

    def drop_missing(self, active_ids: Iterable[Hashable]) -> List[Hashable]:
        """
        Forget stabilizers for tracks that are no longer present

        Has no effect in shared mode.

        Args:
            active_ids: Track IDs still in the scene

        Returns:
            List of dropped track IDs
        """
        if not self.per_track:
            return []

        active = set(active_ids)
        dropped = [key for key in self._stabilizers if key not in active]
        for key in dropped:
            del self._stabilizers[key]
        if dropped:
            logger.debug("dropped stabilizers for tracks %s", dropped)
        return dropped

    @property
    def track_ids(self) -> List[Hashable]:
        return list(self._stabilizers.keys())

    def __len__(self) -> int:
        return len(self._stabilizers)

    def __contains__(self, track_id: Hashable) -> bool:
        return self._key(track_id) in self._stabilizers
