"""A fixed-size bitmap stored least-significant-bit first in a byte buffer.

Bit ``n`` lives in byte ``n // 8`` under mask ``1 << (n % 8)``. A bitmap
either owns its storage or overlays a writable buffer supplied by the
caller, in which case every change is visible through that buffer.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional, Union

Buffer = Union[bytearray, memoryview]


class Bitmap:
    """A bitmap of ``n_bits`` bits, all clear when freshly created."""

    def __init__(self, n_bits: int) -> None:
        self._bit_count, self._byte_count = self._sizes(n_bits)
        self._data: Buffer = bytearray(self._byte_count)

    @staticmethod
    def _sizes(n_bits: int) -> tuple[int, int]:
        if n_bits <= 0:
            raise ValueError("a bitmap needs at least one bit")
        return n_bits, (n_bits + 7) >> 3

    @classmethod
    def from_bytes(cls, n_bits: int, data: Union[bytes, bytearray, memoryview]) -> "Bitmap":
        """Create a bitmap holding a copy of the first bytes of ``data``."""
        if data is None:
            raise TypeError("bitmap data is required")
        bitmap = cls(n_bits)
        raw = bytes(data)
        if len(raw) < bitmap._byte_count:
            raise ValueError(
                f"{n_bits} bits need {bitmap._byte_count} bytes, got {len(raw)}"
            )
        bitmap._data[:] = raw[: bitmap._byte_count]
        return bitmap

    @classmethod
    def overlay(cls, n_bits: int, buffer: Buffer) -> "Bitmap":
        """Create a bitmap that reads and writes ``buffer`` in place."""
        if buffer is None:
            raise TypeError("a buffer to overlay is required")
        bit_count, byte_count = cls._sizes(n_bits)
        view = memoryview(buffer).cast("B")
        if view.readonly:
            raise TypeError("cannot overlay a read-only buffer")
        if len(view) < byte_count:
            raise ValueError(f"{n_bits} bits need {byte_count} bytes, buffer holds {len(view)}")
        bitmap = cls.__new__(cls)
        bitmap._bit_count = bit_count
        bitmap._byte_count = byte_count
        bitmap._data = view[:byte_count]
        return bitmap

    @property
    def bit_count(self) -> int:
        return self._bit_count

    @property
    def byte_count(self) -> int:
        return self._byte_count

    def _locate(self, bit: int) -> tuple[int, int]:
        if not 0 <= bit < self._bit_count:
            raise IndexError(f"bit {bit} out of range for a bitmap of {self._bit_count} bits")
        return bit >> 3, 1 << (bit & 7)

    def set(self, bit: int) -> None:
        byte, mask = self._locate(bit)
        self._data[byte] |= mask

    def reset(self, bit: int) -> None:
        byte, mask = self._locate(bit)
        self._data[byte] &= ~mask & 0xFF

    def test(self, bit: int) -> bool:
        byte, mask = self._locate(bit)
        return bool(self._data[byte] & mask)

    def flip(self, bit: int) -> None:
        byte, mask = self._locate(bit)
        self._data[byte] ^= mask

    def invert(self) -> None:
        """Flip every bit, including any padding bits in the last byte."""
        self._data[:] = bytes(b ^ 0xFF for b in self._data)

    def ffs(self) -> Optional[int]:
        """Index of the first set bit, or ``None`` if no bit is set."""
        return next((bit for bit in range(self._bit_count) if self.test(bit)), None)

    def ffz(self) -> Optional[int]:
        """Index of the first clear bit, or ``None`` if every bit is set."""
        return next((bit for bit in range(self._bit_count) if not self.test(bit)), None)

    def total_set(self) -> int:
        """Number of set bits, ignoring padding bits past the end."""
        leftover = self._bit_count & 7
        full = self._byte_count - 1 if leftover else self._byte_count
        total = sum(bin(b).count("1") for b in self._data[:full])
        if leftover:
            total += bin(self._data[self._byte_count - 1] & ((1 << leftover) - 1)).count("1")
        return total

    def for_each(self, func: Callable[[int, Any], Any], arg: Any = None) -> None:
        """Call ``func(bit, arg)`` for every set bit, lowest first."""
        if func is None:
            raise TypeError("a function is required")
        for bit in self:
            func(bit, arg)

    def format(self, pattern: int) -> None:
        """Fill every byte of storage with ``pattern``."""
        if not 0 <= pattern <= 0xFF:
            raise ValueError("pattern must fit in one byte")
        self._data[:] = bytes([pattern]) * self._byte_count

    def export(self) -> bytes:
        """Return a copy of the underlying bytes."""
        return bytes(self._data)

    def __iter__(self) -> Iterator[int]:
        """Yield the indices of the set bits in ascending order."""
        return (bit for bit in range(self._bit_count) if self.test(bit))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bits={self._bit_count}, set={self.total_set()})"