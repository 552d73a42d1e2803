"""
Unit tests for the clock and top CPU collection.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import psutil
import pytest

from quickpulse.system import Clock, FixedClock, TopCpuCollector, TopCpuSnapshot, ensure_utc, to_ticks


def _process(name, cpu_percent):
    proc = Mock()
    proc.name.return_value = name
    proc.cpu_percent.return_value = cpu_percent
    return proc


def _failing_process(error):
    proc = Mock()
    proc.name.side_effect = error
    return proc


@pytest.mark.unit
class TestClock:
    """Test cases for the clock and tick conversion."""

    def test_unix_epoch_in_ticks(self):
        assert to_ticks(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 621355968000000000

    def test_tick_resolution(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert to_ticks(start + timedelta(microseconds=1)) - to_ticks(start) == 10

    def test_naive_datetime_is_utc(self):
        assert to_ticks(datetime(1970, 1, 1)) == 621355968000000000

    def test_ensure_utc_converts_offsets(self):
        local = datetime(2024, 1, 1, 5, tzinfo=timezone(timedelta(hours=5)))

        assert ensure_utc(local) == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert ensure_utc(local).tzinfo is timezone.utc

    def test_wall_clock_is_utc(self):
        assert Clock().utc_now().tzinfo is timezone.utc

    def test_fixed_clock(self):
        instant = datetime(2024, 6, 1, 12, tzinfo=timezone.utc)

        assert FixedClock(instant).utc_now() == instant


@pytest.mark.unit
class TestTopCpuCollector:
    """Test cases for TopCpuCollector.collect()."""

    @patch("quickpulse.system.processes.psutil.cpu_count", return_value=2)
    @patch("quickpulse.system.processes.psutil.process_iter")
    def test_sorted_and_limited(self, mock_iter, mock_cpu_count):
        mock_iter.return_value = [
            _process("idle", 0.0),
            _process("python", 80.0),
            _process("nginx", 20.0),
            _process("postgres", 40.0),
        ]

        snapshot = TopCpuCollector(max_processes=2).collect()

        assert snapshot == TopCpuSnapshot(processes=[("python", 40.0), ("postgres", 20.0)], access_denied=False)

    @patch("quickpulse.system.processes.psutil.cpu_count", return_value=1)
    @patch("quickpulse.system.processes.psutil.process_iter")
    def test_access_denied_is_flagged(self, mock_iter, mock_cpu_count):
        mock_iter.return_value = [
            _process("python", 10.0),
            _failing_process(psutil.AccessDenied(pid=1)),
        ]

        snapshot = TopCpuCollector().collect()

        assert snapshot.processes == [("python", 10.0)]
        assert snapshot.access_denied is True

    @patch("quickpulse.system.processes.psutil.cpu_count", return_value=1)
    @patch("quickpulse.system.processes.psutil.process_iter")
    def test_vanished_processes_are_skipped(self, mock_iter, mock_cpu_count):
        mock_iter.return_value = [
            _failing_process(psutil.NoSuchProcess(pid=2)),
            _process("python", 10.0),
        ]

        snapshot = TopCpuCollector().collect()

        assert snapshot.processes == [("python", 10.0)]
        assert snapshot.access_denied is False

    @patch("quickpulse.system.processes.psutil.cpu_count", return_value=None)
    @patch("quickpulse.system.processes.psutil.process_iter")
    def test_unknown_cpu_count(self, mock_iter, mock_cpu_count):
        mock_iter.return_value = [_process("python", 30.0)]

        assert TopCpuCollector().collect().processes == [("python", 30.0)]

    @patch("quickpulse.system.processes.psutil.cpu_count", return_value=4)
    @patch("quickpulse.system.processes.psutil.process_iter")
    def test_process_table_failure_is_empty(self, mock_iter, mock_cpu_count, caplog):
        mock_iter.side_effect = OSError("/proc not mounted")

        snapshot = TopCpuCollector().collect()

        assert snapshot == TopCpuSnapshot()
        assert "top CPU" in caplog.text

    def test_real_process_table(self):
        snapshot = TopCpuCollector(max_processes=3).collect()

        assert len(snapshot.processes) <= 3
        assert all(isinstance(name, str) for name, _ in snapshot.processes)
