"""Block-level fill verification."""

from __future__ import annotations

from functools import lru_cache


@lru_cache(maxsize=8)
def _fill_pattern(target_value: int, length: int) -> bytes:
    return bytes((target_value,)) * length


def matches(buffer: bytes | bytearray | memoryview, length: int, target_value: int) -> bool:
    """Return True when every byte of `buffer[0:length]` equals `target_value`.

    The comparison is a single memcmp against a cached fill pattern, so it
    stops at the first differing byte.
    """
    if length <= 0:
        return True
    return memoryview(buffer)[:length] == _fill_pattern(target_value, length)
