"""Stable public API for building tooling on top of samplemem.

Scripts that drive a scan themselves, or want the bad block indices as
events rather than printed lines, should import from here. The names below
keep their meaning across releases; `samplemem.core` layout may change.
"""

from __future__ import annotations

from samplemem.core.config import ProgressSettings, Settings, load_settings
from samplemem.core.errors import (
    AllocationError,
    ConfigError,
    DeviceError,
    DeviceOpenError,
    InvalidParameterError,
    SamplememError,
    ShortReadError,
)
from samplemem.core.model import (
    Device,
    ProgressStatus,
    Sample,
    SamplePlan,
    ScanConfig,
    ScanResult,
)
from samplemem.core.progress import ProgressEstimator, format_elapsed
from samplemem.core.sampler import NullReporter, Sampler, ScanReporter, scan
from samplemem.core.verify import matches
from samplemem.readers.base import BlockReader
from samplemem.readers.file import DeviceReader

__all__ = [
    "SamplememError",
    "InvalidParameterError",
    "ConfigError",
    "DeviceError",
    "DeviceOpenError",
    "AllocationError",
    "ShortReadError",
    "Device",
    "ProgressStatus",
    "Sample",
    "SamplePlan",
    "ScanConfig",
    "ScanResult",
    "ProgressSettings",
    "Settings",
    "load_settings",
    "ProgressEstimator",
    "format_elapsed",
    "NullReporter",
    "Sampler",
    "ScanReporter",
    "scan",
    "matches",
    "BlockReader",
    "DeviceReader",
    "plan_samples",
]


def plan_samples(block_count: int, sample_count: int) -> SamplePlan:
    """Return the sampling plan a scan of `block_count` blocks would follow."""
    return SamplePlan.for_blocks(block_count, sample_count)
