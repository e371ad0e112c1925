"""Positioned block reads from a device node or image file."""

from __future__ import annotations

import io
import logging
import os
from types import TracebackType

from samplemem.core.errors import AllocationError, DeviceOpenError, ShortReadError
from samplemem.core.model import Device

LOGGER = logging.getLogger(__name__)


class DeviceReader:
    """Read-only access to fixed-size blocks of a device.

    The handle and the reusable block buffer live between `open()` and
    `close()`; use the reader as a context manager so both are released on
    every exit path.
    """

    def __init__(self, path: str | os.PathLike[str], block_size: int) -> None:
        self.path = os.fspath(path)
        self.block_size = block_size
        self._handle: io.RawIOBase | None = None
        self._buffer: bytearray | None = None
        self._device: Device | None = None

    @property
    def device(self) -> Device:
        if self._device is None:
            raise DeviceOpenError(f"Device {self.path} is not open")
        return self._device

    def open(self) -> DeviceReader:
        try:
            handle = open(self.path, "rb", buffering=0)
        except OSError as exc:
            raise DeviceOpenError(f"Error opening block device {self.path}: {exc}") from exc

        try:
            try:
                total_size = handle.seek(0, os.SEEK_END)
                handle.seek(0, os.SEEK_SET)
            except OSError as exc:
                raise DeviceOpenError(f"Could not determine size of {self.path}: {exc}") from exc

            try:
                buffer = bytearray(self.block_size)
            except (MemoryError, OverflowError) as exc:
                raise AllocationError(
                    f"Error allocating memory for {self.block_size}-byte blocks"
                ) from exc
        except BaseException:
            handle.close()
            raise

        self._handle = handle
        self._buffer = buffer
        self._device = Device(path=self.path, total_size=total_size, block_size=self.block_size)
        LOGGER.debug(
            "Opened %s: %d bytes, %d blocks of %d bytes",
            self.path,
            total_size,
            self._device.block_count,
            self.block_size,
        )
        return self

    def close(self) -> None:
        handle, self._handle = self._handle, None
        self._buffer = None
        if handle is not None:
            handle.close()

    def __enter__(self) -> DeviceReader:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def read_block(self, index: int) -> memoryview:
        if self._handle is None or self._buffer is None:
            raise DeviceOpenError(f"Device {self.path} is not open")

        view = memoryview(self._buffer)
        filled = 0
        try:
            self._handle.seek(index * self.block_size, os.SEEK_SET)
            while filled < self.block_size:
                count = self._handle.readinto(view[filled:])
                if not count:
                    break
                filled += count
        except OSError as exc:
            LOGGER.debug("Read error at block %d of %s: %s", index, self.path, exc)

        if filled != self.block_size:
            raise ShortReadError(index, self.block_size, filled)
        return view
