"""
Watch loop - keeps the player moving through the playlist.

Each tick samples the player's liveness signal. When the signal has not
changed for longer than the grace period, the loop works out where the
player actually is, asks the playlist cursor for the next target and
navigates there. Every error inside a tick is logged and the loop carries
on; it only stops when its stop event is set.
"""

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Any, Optional

from src.errors import NavigationError, SignalError
from src.player import parse_location
from src.playlist import PlaybackTarget, advance
from src.stall_detector import StallDetector, is_stalled

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"
STOPPED = "stopped"


@dataclass
class WatchState:
    current_target: PlaybackTarget
    last_sample: Optional[Any] = None
    last_change_at: float = 0.0


class Watcher:

    def __init__(self, session, index, grace=60.0, interval=30.0,
                 rng=None, clock=time.monotonic, stop_event=None):
        self.session = session
        self.index = index
        self.grace = grace
        self.interval = interval
        self.rng = rng or random.Random()
        self.clock = clock
        self.stop_event = stop_event or threading.Event()
        self.detector = StallDetector()
        self.state = None
        self.status = IDLE

    # ==================== SESSION SETUP ====================

    def prepare_player(self):
        """Idempotent setup after every navigation; failures are ignored"""
        self.session.set_fullscreen()
        self.session.dismiss_play_prompt()

    def _read_baseline(self, now):
        try:
            sample = self.session.sample_signal()
        except SignalError as e:
            logger.warning(f"Baseline read skipped: {e}")
            sample = None
        self.detector.reset(sample, now)
        self._sync_state()
        if sample is not None:
            logger.info(f"Signal baseline reset: {sample}")

    def _sync_state(self):
        self.state.last_sample = self.detector.last_sample
        self.state.last_change_at = self.detector.last_change_at

    def start(self, target=None, now=None):
        target = target or self.index.first_target()
        self.state = WatchState(current_target=target)
        self.session.navigate(target)
        logger.info(f"Started at {self._describe(target)}")
        self.prepare_player()
        self._read_baseline(self.clock() if now is None else now)
        self.status = RUNNING
        return self.state

    # ==================== TICK ====================

    def tick(self, now=None):
        """Run one poll; returns the navigation target when a stall was handled"""
        now = self.clock() if now is None else now
        try:
            sample = self.session.sample_signal()
        except SignalError as e:
            logger.warning(f"Signal capture failed: {e}")
            return None

        report = self.detector.update(sample, now)
        if report.changed or self.state.last_sample is None:
            self._sync_state()
            return None

        if not is_stalled(report, self.grace):
            return None

        logger.info(f"Signal unchanged for {report.stalled_for:.0f}s (stuck) → next target")
        return self.recover(now)

    def observed_target(self):
        """Where the player really is; it may have been redirected externally"""
        try:
            return parse_location(self.session.current_location())
        except SignalError as e:
            logger.warning(f"Could not read player location, using last known target: {e}")
            return self.state.current_target

    def recover(self, now):
        current = self.observed_target()
        next_target = advance(current, self.index, self.rng)
        # Restart the grace clock first so a failed navigation waits a full period
        self.detector.restart_clock(now)
        self._sync_state()

        logger.info(f"Navigating to: {self._describe(next_target)}")
        try:
            self.session.navigate(next_target)
        except NavigationError as e:
            logger.error(f"Navigation failed: {e}")
            return None

        self.state.current_target = next_target
        self.prepare_player()
        self._read_baseline(now)
        return next_target

    # ==================== LOOP ====================

    def run(self):
        """Poll until stop() is called; ticks never overlap"""
        if self.state is None:
            self.start()
        self.status = RUNNING
        try:
            while not self.stop_event.wait(self.interval):
                try:
                    self.tick()
                except Exception as e:
                    logger.exception(f"Watcher error: {e}")
        finally:
            self.status = STOPPED
            logger.info("Watcher stopped")

    def stop(self):
        self.stop_event.set()

    def _describe(self, target):
        show = self.index.find(target.show_ref)
        name = show.name if show else target.show_ref
        return f"{name} {target.label()}"
