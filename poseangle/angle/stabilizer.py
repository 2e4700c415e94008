"""
Angle stabilizer for per-frame joint angle measurements

Provides:
- Debounced "live" angle that holds during small frame-to-frame changes
- "Captured" angle that only updates after a sustained run of small changes
- Explicit, resettable state (no module-level globals)

Keypoint localization noise makes raw joint angles flicker even when a limb
is held still. Small deltas freeze the live value at the previous sample and a
second, slower streak gates the captured value.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional

from ..core.config import StabilizerConfig
from ..core.constants import NO_PREVIOUS_ANGLE
from ..core.exceptions import ValidationError
from ..core.logger import get_logger

logger = get_logger(__name__)


@dataclass
class StabilizerState:
    """Mutable state of one stabilizer"""
    previous_angle: float = NO_PREVIOUS_ANGLE
    small_change_streak: int = 0
    freeze_eligible_streak: int = 0
    frozen_display_value: float = 0.0

    @property
    def has_previous(self) -> bool:
        """True once at least one sample has been consumed"""
        return self.previous_angle != NO_PREVIOUS_ANGLE


class AngleReading(NamedTuple):
    """Display values for one frame (captured is None when nothing to render)"""
    live: float
    captured: Optional[float] = None


class AngleStabilizer:
    """
    Hysteresis + debounce filter over a stream of angle samples

    A delta strictly between 0 and change_threshold is "small". Small deltas
    show the previous angle instead of the new one. Once more than
    stability_count consecutive small deltas have been seen the captured value
    is shown, and it is re-committed every time the freeze-eligible streak
    exceeds stability_count again.

    A delta of exactly 0 is not small unless zero_delta_is_small is set: a
    perfectly still pose resets both streaks.

    Not thread-safe: feed each instance from a single frame-ordered lane.

    Example:
        >>> stabilizer = AngleStabilizer()
        >>> for sample in [5.0, 5.5, 6.0, 6.4, 6.8, 7.1, 7.5]:
        ...     live, captured = stabilizer.update(sample)
        >>> print(live, captured)  # 7.1 7.1
    """

    def __init__(self, config: Optional[StabilizerConfig] = None):
        """
        Initialize stabilizer

        Args:
            config: Stabilizer thresholds (default: StabilizerConfig())
        """
        self.config = config if config is not None else StabilizerConfig()
        self.state = StabilizerState()

    def reset(self) -> None:
        """Forget all history, as if no sample had been seen"""
        self.state = StabilizerState()

    def is_small_change(self, delta: float) -> bool:
        """Classify a frame-to-frame delta"""
        if self.config.zero_delta_is_small:
            return 0 <= delta < self.config.change_threshold
        return 0 < delta < self.config.change_threshold

    def update(self, sample: float) -> AngleReading:
        """
        Consume one angle sample and return the values to display

        Args:
            sample: Joint angle in degrees for the current frame

        Returns:
            AngleReading(live, captured)

        Raises:
            ValidationError: If sample is NaN/inf and reject_non_finite is set
        """
        if self.config.reject_non_finite and not math.isfinite(sample):
            raise ValidationError(f"Non-finite angle sample: {sample}")

        state = self.state
        previous = state.previous_angle
        delta = abs(previous - sample)

        if not self.is_small_change(delta):
            state.small_change_streak = 0
            state.freeze_eligible_streak = 0
            state.previous_angle = sample
            logger.debug("delta=%.3f large, live=%.3f", delta, sample)
            return AngleReading(live=sample)

        state.small_change_streak += 1
        state.freeze_eligible_streak += 1

        captured = None
        if state.small_change_streak > self.config.stability_count:
            if state.freeze_eligible_streak > self.config.stability_count:
                state.frozen_display_value = previous
                state.freeze_eligible_streak = 0
                logger.debug("captured angle committed: %.3f", previous)
            captured = state.frozen_display_value

        state.previous_angle = sample
        logger.debug(
            "delta=%.3f small, streak=%d, eligible=%d",
            delta, state.small_change_streak, state.freeze_eligible_streak
        )
        return AngleReading(live=previous, captured=captured)
