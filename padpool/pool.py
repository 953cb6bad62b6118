"""In-memory representation of a random byte pool."""

from functools import cached_property

import numpy as np

MISSING_POSITION = -1


def is_frozen_buffer(data: np.ndarray) -> bool:
    """True for a read-only contiguous uint8 array that owns its memory"""
    return (
        data.dtype == np.uint8
        and data.flags.c_contiguous
        and data.flags.owndata
        and not data.flags.writeable
    )


class RandomPool:
    """Immutable fixed-size buffer of random bytes identified by a pool key.

    The inverse index (byte value -> positions where it occurs) is built on
    first use and reused for every encode against this pool.
    """

    def __init__(self, identifier: str, data):
        if isinstance(data, np.ndarray) and is_frozen_buffer(data):
            array = data
        elif isinstance(data, np.ndarray):
            # A view would still see writes made through its base.
            array = np.array(data, dtype=np.uint8, copy=True)
        else:
            array = np.frombuffer(bytes(data), dtype=np.uint8)
        # Pools are never mutated once created.
        array.setflags(write=False)
        self.identifier = identifier
        self._data = array

    @property
    def data(self) -> np.ndarray:
        return self._data

    def __len__(self) -> int:
        return int(self._data.size)

    def to_bytes(self) -> bytes:
        return self._data.tobytes()

    @cached_property
    def first_positions(self) -> np.ndarray:
        """Lowest position of every byte value 0-255, MISSING_POSITION if absent."""
        table = np.full(256, MISSING_POSITION, dtype=np.int64)
        values, first_index = np.unique(self._data, return_index=True)
        table[values] = first_index
        table.setflags(write=False)
        return table

    def positions_of(self, value: int) -> np.ndarray:
        """Return every position holding value, in ascending order."""
        return np.flatnonzero(self._data == value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RandomPool):
            return NotImplemented
        return self.identifier == other.identifier and np.array_equal(self._data, other._data)

    def __repr__(self) -> str:
        return f"RandomPool(identifier={self.identifier!r}, size={len(self)})"
