from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

ImageFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))


@pytest.fixture
def make_image(tmp_path: Path) -> ImageFactory:
    """Build a device image of `block_count` blocks filled with `fill`.

    Blocks listed in `bad` get one byte changed; `tail` appends a partial block.
    """

    def _make(
        *,
        block_size: int,
        block_count: int,
        fill: int,
        bad: tuple[int, ...] = (),
        tail: int = 0,
        name: str = "disk.img",
    ) -> Path:
        data = bytearray(bytes((fill,)) * (block_size * block_count + tail))
        for index in bad:
            data[index * block_size + block_size // 2] = (fill + 1) % 256
        path = tmp_path / name
        path.write_bytes(bytes(data))
        return path

    return _make
