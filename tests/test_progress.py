"""
Unit tests for conversion progress reporting.
"""

import pytest

from imagestack.progress import ProgressReporter, percent_complete


class TestPercentComplete:
    """Rounded percentages."""

    @pytest.mark.parametrize(
        "completed,total,expected",
        [(0, 4, 0), (1, 4, 25), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 8, 38), (8, 8, 100)],
    )
    def test_percent_complete_when_steps_then_rounds_half_up(self, completed, total, expected):
        assert percent_complete(completed, total) == expected

    def test_percent_complete_when_no_steps_then_zero(self):
        assert percent_complete(0, 0) == 0


class TestProgressReporter:
    """Listener notifications and reset behaviour."""

    def test_advance_when_four_steps_then_reports_quarters_ending_at_100(self):
        # Arrange
        seen = []
        reporter = ProgressReporter()
        reporter.subscribe(seen.append)

        # Act
        reporter.start(4)
        for _ in range(4):
            reporter.advance()
        reporter.complete()

        # Assert
        assert seen == [0, 25, 50, 75, 100]
        assert reporter.value == 100

    @pytest.mark.parametrize("total", [1, 3, 7, 13, 100, 101])
    def test_advance_when_any_total_then_non_decreasing_and_bounded(self, total):
        # Arrange
        seen = []
        reporter = ProgressReporter()
        reporter.subscribe(seen.append)
        reporter.start(total)

        # Act
        for _ in range(total):
            reporter.advance()

        # Assert
        assert seen == sorted(seen)
        assert all(0 <= pct <= 100 for pct in seen)
        assert seen[-1] == 100

    def test_advance_when_past_total_then_stays_at_100(self):
        reporter = ProgressReporter()
        reporter.start(1)
        reporter.advance()
        assert reporter.advance() == 100

    def test_reset_when_called_then_back_to_zero(self):
        # Arrange
        reporter = ProgressReporter()
        reporter.start(2)
        reporter.advance()

        # Act
        reporter.reset()

        # Assert
        assert reporter.value == 0

    def test_unsubscribe_when_removed_then_not_notified(self):
        # Arrange
        seen = []
        reporter = ProgressReporter()
        reporter.subscribe(seen.append)
        reporter.unsubscribe(seen.append)

        # Act
        reporter.start(1)
        reporter.advance()

        # Assert
        assert seen == []

    def test_listener_when_raises_then_other_listeners_still_notified(self):
        # Arrange
        seen = []
        reporter = ProgressReporter()

        def broken(pct):
            raise RuntimeError("display gone")

        reporter.subscribe(broken)
        reporter.subscribe(seen.append)

        # Act
        reporter.start(1)
        reporter.advance()

        # Assert
        assert seen == [0, 100]
        assert reporter.value == 100

    def test_start_when_negative_total_then_raises(self):
        with pytest.raises(ValueError):
            ProgressReporter().start(-1)
