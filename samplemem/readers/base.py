"""Block reader interfaces."""

from __future__ import annotations

from types import TracebackType
from typing import Protocol

from samplemem.core.model import Device


class BlockReader(Protocol):
    device: Device

    def __enter__(self) -> BlockReader:
        """Acquire the handle and read buffer."""

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Release the handle and read buffer."""

    def read_block(self, index: int) -> memoryview:
        """Return the bytes of block `index`, or raise ShortReadError."""
