# src/shinglesim/similarity_search/murmur.py
"""
MurmurHash64A (MurmurHash2, 64-bit variant for 64-bit platforms, Austin Appleby).

Bit-exact with the C reference on little-endian machines: the input is read
in 8-byte little-endian blocks, the 0-7 trailing bytes are folded in from the
highest position down, and every product wraps at 2**64.
"""

from typing import Union

MASK64 = 0xFFFFFFFFFFFFFFFF
M = 0xC6A4A7935BD1E995
R = 47


def hash64(data: Union[bytes, bytearray, memoryview, str], seed: int = 0) -> int:
    """
    Hash `data` under `seed` and return an unsigned 64-bit int.

    Strings are hashed as their UTF-8 bytes. Negative or oversized seeds are
    reduced modulo 2**64, the same as passing them through a uint64_t.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    data = bytes(data)
    length = len(data)

    h = (seed & MASK64) ^ ((length * M) & MASK64)

    block_end = length - (length & 7)
    for offset in range(0, block_end, 8):
        k = int.from_bytes(data[offset:offset + 8], "little")
        k = (k * M) & MASK64
        k ^= k >> R
        k = (k * M) & MASK64

        h ^= k
        h = (h * M) & MASK64

    tail = data[block_end:]
    if tail:
        for position in range(len(tail) - 1, -1, -1):
            h ^= tail[position] << (8 * position)
        h = (h * M) & MASK64

    h ^= h >> R
    h = (h * M) & MASK64
    h ^= h >> R
    return h
