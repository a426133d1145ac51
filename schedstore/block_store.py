"""An in-memory block device of 2048 blocks of 64 bytes each.

Which blocks are in use is tracked by a free-block bitmap that lives inside
the device itself, in blocks 1022 to 1025. Those blocks are marked as used
from the start, and a serialized image therefore carries its own allocation
state.
"""

from __future__ import annotations

import os
from typing import Union

from schedstore.bitmap import Bitmap

BLOCK_STORE_NUM_BLOCKS = 2048
BLOCK_SIZE_BYTES = 64
BITMAP_SIZE_BITS = BLOCK_STORE_NUM_BLOCKS
BITMAP_SIZE_BYTES = BITMAP_SIZE_BITS // 8
BLOCK_STORE_NUM_BYTES = BLOCK_STORE_NUM_BLOCKS * BLOCK_SIZE_BYTES
BITMAP_START_BLOCK = 1022
BITMAP_NUM_BLOCKS = BITMAP_SIZE_BYTES // BLOCK_SIZE_BYTES

PathLike = Union[str, "os.PathLike[str]"]


class BlockStoreError(Exception):
    """Base class for block store failures."""


class BlockStoreFullError(BlockStoreError):
    """Raised when no free block is left to allocate."""


class UnallocatedBlockError(BlockStoreError):
    """Raised when reading a block that is not marked as in use."""


class BlockStore:
    """A fixed-size block device whose allocation bitmap is stored in its own blocks."""

    def __init__(self) -> None:
        self._data = bytearray(BLOCK_STORE_NUM_BYTES)
        start = BITMAP_START_BLOCK * BLOCK_SIZE_BYTES
        view = memoryview(self._data)[start:start + BITMAP_SIZE_BYTES]
        self._fbm = Bitmap.overlay(BITMAP_SIZE_BITS, view)
        for block in range(BITMAP_START_BLOCK, BITMAP_START_BLOCK + BITMAP_NUM_BLOCKS):
            self._fbm.set(block)

    @staticmethod
    def _check_block(block_id: int) -> None:
        if not 0 <= block_id < BLOCK_STORE_NUM_BLOCKS:
            raise IndexError(
                f"block {block_id} out of range for a store of {BLOCK_STORE_NUM_BLOCKS} blocks"
            )

    def allocate(self) -> int:
        """Mark the lowest free block as used and return its id."""
        block_id = self._fbm.ffz()
        if block_id is None:
            raise BlockStoreFullError("no free blocks left")
        self._fbm.set(block_id)
        return block_id

    def request(self, block_id: int) -> bool:
        """Mark ``block_id`` as used; return ``False`` if it already was."""
        self._check_block(block_id)
        if self._fbm.test(block_id):
            return False
        self._fbm.set(block_id)
        return True

    def release(self, block_id: int) -> None:
        """Mark ``block_id`` as free."""
        self._check_block(block_id)
        self._fbm.reset(block_id)

    def used_blocks(self) -> int:
        return self._fbm.total_set()

    def free_blocks(self) -> int:
        return self._fbm.bit_count - self._fbm.total_set()

    @staticmethod
    def total_blocks() -> int:
        return BLOCK_STORE_NUM_BLOCKS

    def read(self, block_id: int) -> bytes:
        """Return the contents of an allocated block."""
        self._check_block(block_id)
        if not self._fbm.test(block_id):
            raise UnallocatedBlockError(f"block {block_id} is not in use")
        offset = block_id * BLOCK_SIZE_BYTES
        return bytes(self._data[offset:offset + BLOCK_SIZE_BYTES])

    def write(self, block_id: int, data: Union[bytes, bytearray, memoryview]) -> int:
        """Overwrite a whole block; shorter data is zero-padded. Returns the block size."""
        self._check_block(block_id)
        if data is None:
            raise TypeError("data to write is required")
        raw = bytes(data)
        if len(raw) > BLOCK_SIZE_BYTES:
            raise ValueError(f"a block holds {BLOCK_SIZE_BYTES} bytes, got {len(raw)}")
        offset = block_id * BLOCK_SIZE_BYTES
        self._data[offset:offset + BLOCK_SIZE_BYTES] = raw.ljust(BLOCK_SIZE_BYTES, b"\0")
        return BLOCK_SIZE_BYTES

    def serialize(self, filename: PathLike) -> int:
        """Write the whole device over the start of ``filename``; returns bytes written."""
        if filename is None:
            raise TypeError("a file name is required")
        fd = os.open(filename, os.O_WRONLY | os.O_CREAT, 0o666)
        with os.fdopen(fd, "wb") as handle:
            written = handle.write(self._data)
        return written

    @classmethod
    def deserialize(cls, filename: PathLike) -> "BlockStore":
        """Load a device image from ``filename``, creating the file if it does not exist."""
        if filename is None:
            raise TypeError("a file name is required")
        store = cls()
        fd = os.open(filename, os.O_RDONLY | os.O_CREAT, 0o666)
        with os.fdopen(fd, "rb") as handle:
            image = handle.read(BLOCK_STORE_NUM_BYTES)
        store._data[:len(image)] = image
        return store