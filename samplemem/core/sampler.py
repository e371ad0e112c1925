"""Sampling scan orchestration used by the CLI and the public API."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from typing import Protocol

from samplemem.core.errors import ShortReadError
from samplemem.core.model import ProgressStatus, Sample, SamplePlan, ScanConfig, ScanResult
from samplemem.core.progress import DEFAULT_INITIAL_COUNTDOWN, DEFAULT_INTERVAL_S, ProgressEstimator
from samplemem.core.verify import matches
from samplemem.readers.base import BlockReader
from samplemem.readers.file import DeviceReader

LOGGER = logging.getLogger(__name__)

ReaderFactory = Callable[[str, int], BlockReader]


class ScanReporter(Protocol):
    def bad_block(self, index: int) -> None:
        """Called once per mismatching block, in increasing index order."""

    def skipped(self, error: ShortReadError) -> None:
        """Called when a block could not be read in full."""

    def progress(self, status: ProgressStatus) -> None:
        """Called when the progress estimator decides a status is due."""

    def warning(self, message: str) -> None:
        """Called for non-fatal conditions worth telling the operator."""


class NullReporter:
    def bad_block(self, index: int) -> None:
        pass

    def skipped(self, error: ShortReadError) -> None:
        pass

    def progress(self, status: ProgressStatus) -> None:
        pass

    def warning(self, message: str) -> None:
        pass


class Sampler:
    def __init__(
        self,
        *,
        reader_factory: ReaderFactory | None = None,
        reporter: ScanReporter | None = None,
        initial_countdown: int = DEFAULT_INITIAL_COUNTDOWN,
        interval_s: float = DEFAULT_INTERVAL_S,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.reader_factory = reader_factory or DeviceReader
        self.reporter = reporter or NullReporter()
        self.initial_countdown = initial_countdown
        self.interval_s = interval_s
        self.clock = clock or time.monotonic

    def scan(self, device_path: str | os.PathLike[str], config: ScanConfig) -> ScanResult:
        bad_block_count = 0
        samples_checked = 0
        samples_skipped = 0

        with self.reader_factory(os.fspath(device_path), config.block_size) as reader:
            device = reader.device
            plan = SamplePlan.for_blocks(device.block_count, config.sample_count)
            LOGGER.debug(
                "Sampling %s: %d blocks, %d samples, stride %d",
                device.path,
                plan.block_count,
                plan.sample_count,
                plan.stride,
            )
            if plan.clamped:
                message = (
                    f"Requested {plan.sample_count} samples but {device.path} has only "
                    f"{plan.block_count} blocks; checking every block."
                )
                LOGGER.info(message)
                self.reporter.warning(message)

            estimator = ProgressEstimator(
                plan.sample_count,
                initial_countdown=self.initial_countdown,
                interval_s=self.interval_s,
                clock=self.clock,
            )
            for ordinal, index in enumerate(plan.positions()):
                try:
                    data = reader.read_block(index)
                except ShortReadError as exc:
                    samples_skipped += 1
                    self.reporter.skipped(exc)
                    continue

                sample = Sample(index=index, data=data, matches=matches(data, len(data), config.target_value))
                samples_checked += 1
                if not sample.matches:
                    bad_block_count += 1
                    self.reporter.bad_block(sample.index)

                status = estimator.tick(ordinal + 1, bad_block_count)
                if status is not None:
                    self.reporter.progress(status)

        return ScanResult(
            device=device,
            plan=plan,
            samples_checked=samples_checked,
            samples_skipped=samples_skipped,
            bad_block_count=bad_block_count,
        )


def scan(
    device_path: str | os.PathLike[str],
    block_size: int,
    target_value: int,
    sample_count: int,
    *,
    reporter: ScanReporter | None = None,
) -> int:
    """Sample `device_path` and return the number of bad blocks found."""
    config = ScanConfig(block_size=block_size, target_value=target_value, sample_count=sample_count)
    return Sampler(reporter=reporter).scan(device_path, config).bad_block_count
