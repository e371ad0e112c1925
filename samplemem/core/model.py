"""Core data models used across reader, sampler, and CLI."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from samplemem.core.errors import InvalidParameterError

MAX_TARGET_VALUE = 0xFF


@dataclass(frozen=True)
class ScanConfig:
    block_size: int
    target_value: int
    sample_count: int

    def __post_init__(self) -> None:
        if self.block_size <= 0:
            raise InvalidParameterError(f"block_size must be positive, got {self.block_size}")
        if not 0 <= self.target_value <= MAX_TARGET_VALUE:
            raise InvalidParameterError(
                f"value_to_check must be between 0 and {MAX_TARGET_VALUE}, got {self.target_value}"
            )
        if self.sample_count <= 0:
            raise InvalidParameterError(f"n_samples must be positive, got {self.sample_count}")


@dataclass(frozen=True)
class Device:
    path: str
    total_size: int
    block_size: int

    @property
    def block_count(self) -> int:
        return self.total_size // self.block_size


@dataclass(frozen=True)
class SamplePlan:
    """Evenly spaced block positions for one scan.

    `stride` is `block_count // sample_count`, raised to 1 when more samples
    are requested than there are blocks (`clamped` is then True). Positions
    stop at whichever comes first: `sample_count` positions or the end of the
    device.
    """

    block_count: int
    sample_count: int
    stride: int
    clamped: bool = False

    @classmethod
    def for_blocks(cls, block_count: int, sample_count: int) -> SamplePlan:
        if sample_count <= 0:
            raise InvalidParameterError(f"n_samples must be positive, got {sample_count}")
        stride = block_count // sample_count
        if stride == 0:
            return cls(block_count=block_count, sample_count=sample_count, stride=1, clamped=True)
        return cls(block_count=block_count, sample_count=sample_count, stride=stride)

    def positions(self) -> Iterator[int]:
        for ordinal in range(self.sample_count):
            index = ordinal * self.stride
            if index >= self.block_count:
                return
            yield index


@dataclass(frozen=True)
class Sample:
    index: int
    # View into the reader's reusable buffer; valid until the next read.
    data: memoryview
    matches: bool


@dataclass(frozen=True)
class ScanResult:
    device: Device
    plan: SamplePlan
    samples_checked: int
    samples_skipped: int
    bad_block_count: int


@dataclass(frozen=True)
class ProgressStatus:
    percent: float
    elapsed_s: float
    elapsed_text: str
    bad_block_count: int

    def line(self) -> str:
        return f"{self.percent:.2f}% done, {self.elapsed_text} elapsed. ({self.bad_block_count} errors)"
