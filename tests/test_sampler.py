from __future__ import annotations

from pathlib import Path

import pytest

from samplemem.core.errors import DeviceOpenError, InvalidParameterError, ShortReadError
from samplemem.core.model import Device, ProgressStatus, ScanConfig
from samplemem.core.sampler import Sampler, scan


class RecordingReporter:
    def __init__(self) -> None:
        self.bad: list[int] = []
        self.skipped_blocks: list[int] = []
        self.statuses: list[ProgressStatus] = []
        self.warnings: list[str] = []

    def bad_block(self, index: int) -> None:
        self.bad.append(index)

    def skipped(self, error: ShortReadError) -> None:
        self.skipped_blocks.append(error.index)

    def progress(self, status: ProgressStatus) -> None:
        self.statuses.append(status)

    def warning(self, message: str) -> None:
        self.warnings.append(message)


class FakeReader:
    """In-memory reader whose listed blocks come back short."""

    def __init__(self, path: str, block_size: int, *, blocks: int, fill: int, short: tuple[int, ...] = ()) -> None:
        self.device = Device(path=path, total_size=blocks * block_size, block_size=block_size)
        self.block = bytes((fill,)) * block_size
        self.short = short
        self.reads: list[int] = []
        self.closed = False

    def __enter__(self) -> FakeReader:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    def read_block(self, index: int) -> memoryview:
        self.reads.append(index)
        if index in self.short:
            raise ShortReadError(index, self.device.block_size, self.device.block_size // 2)
        return memoryview(self.block)


class StepClock:
    def __init__(self, step: float) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.mark.parametrize("sample_count", [1, 7, 10, 100, 1000])
def test_uniform_device_has_no_bad_blocks(make_image, sample_count: int) -> None:
    image = make_image(block_size=64, block_count=100, fill=0)
    assert scan(image, 64, 0, sample_count) == 0


def test_bad_block_on_sampled_position_is_reported(make_image) -> None:
    image = make_image(block_size=16, block_count=100, fill=0, bad=(30, 70))
    reporter = RecordingReporter()

    result = Sampler(reporter=reporter).scan(image, ScanConfig(block_size=16, target_value=0, sample_count=10))

    assert result.bad_block_count == 2
    assert reporter.bad == [30, 70]
    assert result.plan.stride == 10
    assert result.samples_checked == 10


def test_bad_block_between_samples_is_not_seen(make_image) -> None:
    image = make_image(block_size=16, block_count=100, fill=0xFF, bad=(35,))
    assert scan(image, 16, 0xFF, 10) == 0


def test_bad_blocks_reported_in_increasing_order(make_image) -> None:
    image = make_image(block_size=8, block_count=50, fill=0, bad=(40, 3, 17))
    reporter = RecordingReporter()

    result = Sampler(reporter=reporter).scan(image, ScanConfig(block_size=8, target_value=0, sample_count=50))

    assert reporter.bad == [3, 17, 40]
    assert result.bad_block_count == 3


def test_oversubscribed_samples_visit_each_block_once(make_image) -> None:
    image = make_image(block_size=16, block_count=5, fill=0, bad=(4,))
    reporter = RecordingReporter()

    result = Sampler(reporter=reporter).scan(image, ScanConfig(block_size=16, target_value=0, sample_count=50))

    assert result.plan.stride == 1
    assert result.samples_checked == 5
    assert reporter.bad == [4]
    assert reporter.warnings and "only 5 blocks" in reporter.warnings[0]


def test_short_read_is_skipped_not_counted() -> None:
    readers: list[FakeReader] = []

    def factory(path: str, block_size: int) -> FakeReader:
        reader = FakeReader(path, block_size, blocks=10, fill=0, short=(9,))
        readers.append(reader)
        return reader

    reporter = RecordingReporter()
    sampler = Sampler(reader_factory=factory, reporter=reporter)
    result = sampler.scan("fake", ScanConfig(block_size=32, target_value=0, sample_count=10))

    assert result.bad_block_count == 0
    assert result.samples_skipped == 1
    assert result.samples_checked == 9
    assert reporter.skipped_blocks == [9]
    assert readers[0].reads == list(range(10))
    assert readers[0].closed


def test_reader_closed_when_scan_raises() -> None:
    readers: list[FakeReader] = []

    class BrokenReader(FakeReader):
        def read_block(self, index: int) -> memoryview:
            raise RuntimeError("boom")

    def factory(path: str, block_size: int) -> FakeReader:
        reader = BrokenReader(path, block_size, blocks=4, fill=0)
        readers.append(reader)
        return reader

    with pytest.raises(RuntimeError):
        Sampler(reader_factory=factory).scan("fake", ScanConfig(block_size=8, target_value=0, sample_count=2))
    assert readers[0].closed


def test_zero_samples_rejected_before_any_io(tmp_path: Path) -> None:
    with pytest.raises(InvalidParameterError):
        scan(tmp_path / "missing.img", 512, 0, 0)


def test_missing_device_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(DeviceOpenError):
        scan(tmp_path / "missing.img", 512, 0, 10)


def test_device_smaller_than_one_block(make_image) -> None:
    image = make_image(block_size=512, block_count=0, fill=0, tail=100)
    reporter = RecordingReporter()
    result = Sampler(reporter=reporter).scan(image, ScanConfig(block_size=512, target_value=0, sample_count=4))
    assert result.bad_block_count == 0
    assert result.samples_checked == 0


def test_progress_statuses_are_reported(make_image) -> None:
    image = make_image(block_size=16, block_count=20, fill=0, bad=(0,))
    reporter = RecordingReporter()
    sampler = Sampler(reporter=reporter, initial_countdown=0, clock=StepClock(1.0))

    sampler.scan(image, ScanConfig(block_size=16, target_value=0, sample_count=20))

    assert reporter.statuses
    first = reporter.statuses[0]
    assert first.percent == pytest.approx(5.0)
    assert first.bad_block_count == 1
    assert all(a.percent < b.percent for a, b in zip(reporter.statuses, reporter.statuses[1:]))
