"""Position-substitution codec.

A file is encoded as the list of pool positions holding each of its bytes and
decoded by reading those positions back. Encoding always picks the lowest
matching position so that two encodes of the same data against the same pool
produce identical keys. Both directions are all-or-nothing.
"""

from typing import List, Sequence

import numpy as np

from padpool.errors import DecodeError, EncodeError
from padpool.pool import MISSING_POSITION, RandomPool


def encode(pool: RandomPool, data: bytes) -> List[int]:
    """Encode data as positions inside the pool

    Args:
        pool (RandomPool): Pool the key is encoded against
        data (bytes): Original file contents

    Raises:
        EncodeError: The pool does not contain one of the byte values

    Returns:
        List[int]: One position per input byte
    """
    values = np.frombuffer(bytes(data), dtype=np.uint8)
    positions = pool.first_positions[values]

    missing = np.flatnonzero(positions == MISSING_POSITION)
    if missing.size:
        index = int(missing[0])
        raise EncodeError(byte=int(values[index]), index=index)
    return positions.tolist()


def decode(pool: RandomPool, positions: Sequence[int]) -> bytes:
    """Rebuild the original bytes from key positions

    Args:
        pool (RandomPool): Pool the key was encoded against
        positions (Sequence[int]): Positions stored in the key

    Raises:
        DecodeError: A position lies outside the pool

    Returns:
        bytes: Reconstructed file contents, same length as positions
    """
    pool_size = len(pool)
    try:
        indices = np.asarray(positions, dtype=np.int64)
    except OverflowError:
        # Values beyond int64 cannot be valid, report the first offender.
        for index, position in enumerate(positions):
            if position < 0 or position >= pool_size:
                raise DecodeError(position=position, index=index)
        raise

    invalid = np.flatnonzero((indices < 0) | (indices >= pool_size))
    if invalid.size:
        index = int(invalid[0])
        raise DecodeError(position=int(positions[index]), index=index)
    return pool.data[indices].tobytes()
