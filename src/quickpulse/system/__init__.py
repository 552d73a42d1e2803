"""
System interaction utilities.

- Clock and .NET tick conversion for transmission timestamps
- Top CPU consumer snapshots backed by psutil
"""

from .clock import Clock, FixedClock, ensure_utc, to_ticks
from .processes import TopCpuCollector, TopCpuSnapshot

__all__ = [
    "Clock",
    "FixedClock",
    "ensure_utc",
    "to_ticks",
    "TopCpuCollector",
    "TopCpuSnapshot",
]
