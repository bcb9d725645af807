"""Tests for the liveness stall detector."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.stall_detector import StallDetector, StallReport, is_stalled


class TestUpdate:
    def test_first_sample_sets_baseline(self):
        detector = StallDetector()
        report = detector.update("#000000", now=10)
        assert report == StallReport(changed=False, stalled_for=0.0)
        assert detector.last_sample == "#000000"
        assert detector.last_change_at == 10

    def test_change_resets_clock(self):
        detector = StallDetector()
        detector.update("#000000", now=0)
        report = detector.update("#FFFFFF", now=45)
        assert report.changed is True
        assert report.stalled_for == 0
        assert detector.last_change_at == 45

    def test_same_sample_accumulates(self):
        detector = StallDetector()
        detector.update("a", now=0)
        assert detector.update("a", now=30).stalled_for == 30
        assert detector.update("a", now=90).stalled_for == 90

    def test_works_with_urls(self):
        detector = StallDetector()
        detector.update("https://x/tvshow/1?season=1&episode=1", now=0)
        report = detector.update("https://x/tvshow/1?season=1&episode=2", now=5)
        assert report.changed


class TestThreshold:
    def test_crossed_strictly_after_grace(self):
        detector = StallDetector()
        detector.update("A", now=0)
        flags = [is_stalled(detector.update("A", now=t), 60) for t in (30, 60, 61)]
        assert flags == [False, False, True]

    def test_differing_sample_clears_stall(self):
        detector = StallDetector()
        detector.update("A", now=0)
        assert is_stalled(detector.update("A", now=100), 60)
        report = detector.update("B", now=110)
        assert not is_stalled(report, 60)
        assert detector.update("B", now=110).stalled_for == 0

    def test_changed_report_is_never_stalled(self):
        assert not is_stalled(StallReport(changed=True, stalled_for=999), 60)


class TestReset:
    def test_reset_to_none_awaits_first_sample(self):
        detector = StallDetector()
        detector.update("A", now=0)
        detector.reset(None, now=50)
        assert not detector.has_baseline
        report = detector.update("A", now=70)
        assert report.changed is False
        assert report.stalled_for == 0
        assert detector.last_change_at == 70

    def test_restart_clock_keeps_baseline(self):
        detector = StallDetector()
        detector.update("A", now=0)
        detector.restart_clock(100)
        assert detector.last_sample == "A"
        assert detector.update("A", now=130).stalled_for == 30
