"""
Top CPU consumer snapshots using the 'psutil' library.

This module provides `TopCpuCollector`, which reports the processes using the
most CPU since the previous call. The result fills the `top_cpu_data` and
`top_cpu_data_access_denied` fields of a `QuickPulseDataSample`.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

import psutil

from ..constants import TOP_CPU_MAX_PROCESSES
from ..validation import ErrorSeverity, handle_error

logger = logging.getLogger(__name__)


@dataclass
class TopCpuSnapshot:
    """
    Top-N CPU consumers at one point in time.

    Attributes:
        processes: (process name, percent of total machine CPU), highest first.
        access_denied: True when at least one process could not be inspected.
    """

    processes: List[Tuple[str, float]] = field(default_factory=list)
    access_denied: bool = False


class TopCpuCollector:
    """
    Reports the top CPU-consuming processes between successive calls.

    psutil measures per-process CPU usage relative to the previous call on
    the same process object, and `psutil.process_iter` keeps those objects
    cached, so the first call after construction reports zero for every
    process.
    """

    def __init__(self, max_processes: int = TOP_CPU_MAX_PROCESSES):
        self.max_processes = max_processes
        self._cpu_count = psutil.cpu_count() or 1

    def collect(self) -> TopCpuSnapshot:
        """
        Take a snapshot of the top CPU consumers.

        Returns:
            A TopCpuSnapshot; empty if the process table could not be read.
            Never raises.
        """
        usage: List[Tuple[str, float]] = []
        access_denied = False

        try:
            for proc in psutil.process_iter():
                try:
                    name = proc.name()
                    percent = proc.cpu_percent(interval=None) / self._cpu_count
                except psutil.AccessDenied:
                    access_denied = True
                    continue
                except (psutil.NoSuchProcess, psutil.ZombieProcess):
                    continue
                usage.append((name, percent))
        except Exception as e:
            handle_error(
                error=e,
                context="collecting top CPU processes",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
            return TopCpuSnapshot()

        usage.sort(key=lambda item: item[1], reverse=True)
        top = usage[:self.max_processes]
        logger.debug(f"Top CPU snapshot: {len(top)} of {len(usage)} processes, access_denied={access_denied}")
        return TopCpuSnapshot(processes=top, access_denied=access_denied)
