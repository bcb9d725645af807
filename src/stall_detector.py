"""Stall detection: how long the player's liveness signal has stayed the same."""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StallReport:
    changed: bool
    stalled_for: float = 0.0


class StallDetector:
    """Tracks how long the liveness signal has stayed the same.

    Samples are compared with plain equality, so a pixel color string and a
    URL string both work.
    """

    def __init__(self):
        self.last_sample = None
        self.last_change_at = 0.0

    @property
    def has_baseline(self):
        return self.last_sample is not None

    def update(self, sample, now):
        if self.last_sample is None:
            self.last_sample = sample
            self.last_change_at = now
            logger.info(f"Signal baseline set: {sample}")
            return StallReport(changed=False, stalled_for=0.0)

        if sample != self.last_sample:
            logger.info(f"Signal changed from {self.last_sample} → {sample}")
            self.last_sample = sample
            self.last_change_at = now
            return StallReport(changed=True, stalled_for=0.0)

        return StallReport(changed=False, stalled_for=now - self.last_change_at)

    def reset(self, sample, now):
        """Re-baseline after a navigation; None means wait for the next sample"""
        self.last_sample = sample
        self.last_change_at = now

    def restart_clock(self, now):
        self.last_change_at = now


def is_stalled(report, threshold):
    return not report.changed and report.stalled_for > threshold
