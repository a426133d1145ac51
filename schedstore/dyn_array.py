"""A growable array with an optional per-element destructor.

Elements are stored by reference. Removing an element through the
``pop``/``erase``/``clear`` family runs the destructor on it, if one was
given. The ``extract`` family hands the element back to the caller instead
and leaves the destructor alone.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar, overload

T = TypeVar("T")

MIN_CAPACITY = 16
MAX_CAPACITY = 1 << 56

Comparator = Callable[[Any, Any], int]


class DynArray(Generic[T]):
    """Dynamic array that tracks a power-of-two capacity and applies a destructor on erase."""

    def __init__(self, capacity: int = 0, destructor: Optional[Callable[[T], Any]] = None) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        if capacity > MAX_CAPACITY:
            raise ValueError(f"capacity {capacity} exceeds the maximum of {MAX_CAPACITY}")
        actual = MIN_CAPACITY
        while capacity > actual:
            actual <<= 1
        self._capacity = actual
        self._items: list[T] = []
        self._destructor = destructor

    @classmethod
    def from_iterable(
        cls, data: Iterable[T], destructor: Optional[Callable[[T], Any]] = None
    ) -> "DynArray[T]":
        """Build an array holding a copy of the given elements; ``data`` must not be empty."""
        items = list(data)
        if not items:
            raise ValueError("cannot import an empty sequence")
        array: DynArray[T] = cls(len(items), destructor)
        array._reserve(len(items))
        array._items.extend(items)
        return array

    def export(self) -> list[T]:
        """Return a shallow copy of the contents, front to back."""
        return list(self._items)

    # Front operations

    def front(self) -> T:
        if not self._items:
            raise IndexError("front of an empty array")
        return self._items[0]

    def push_front(self, obj: T) -> None:
        self.insert(0, obj)

    def pop_front(self) -> None:
        if not self._items:
            raise IndexError("pop from an empty array")
        self.erase(0)

    def extract_front(self) -> T:
        if not self._items:
            raise IndexError("extract from an empty array")
        return self.extract(0)

    # Back operations

    def back(self) -> T:
        if not self._items:
            raise IndexError("back of an empty array")
        return self._items[-1]

    def push_back(self, obj: T) -> None:
        self.insert(len(self._items), obj)

    def pop_back(self) -> None:
        if not self._items:
            raise IndexError("pop from an empty array")
        self.erase(len(self._items) - 1)

    def extract_back(self) -> T:
        if not self._items:
            raise IndexError("extract from an empty array")
        return self.extract(len(self._items) - 1)

    # Positional operations

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._items):
            raise IndexError(f"index {index} out of range for array of size {len(self._items)}")

    def at(self, index: int) -> T:
        self._check_index(index)
        return self._items[index]

    def insert(self, index: int, obj: T) -> None:
        """Insert ``obj`` so that it ends up at ``index``; ``index`` may equal the size."""
        if not 0 <= index <= len(self._items):
            raise IndexError(f"insert position {index} out of range for array of size {len(self._items)}")
        self._reserve(1)
        self._items.insert(index, obj)

    def erase(self, index: int) -> None:
        self._check_index(index)
        item = self._items.pop(index)
        if self._destructor is not None:
            self._destructor(item)

    def extract(self, index: int) -> T:
        self._check_index(index)
        return self._items.pop(index)

    def clear(self) -> None:
        """Remove every element, running the destructor on each."""
        items, self._items = self._items, []
        if self._destructor is not None:
            for item in items:
                self._destructor(item)

    # Queries

    def empty(self) -> bool:
        return not self._items

    def capacity(self) -> int:
        return self._capacity

    # Ordering

    def sort(self, compare: Comparator) -> None:
        """Sort in place with a three-way comparator; an empty array is left as is."""
        if compare is None:
            raise TypeError("a comparator is required")
        self._items.sort(key=cmp_to_key(compare))

    def stable_sort(self, compare: Comparator) -> None:
        """Sort in place with a three-way comparator, keeping equal elements in order."""
        if compare is None:
            raise TypeError("a comparator is required")
        self._items.sort(key=cmp_to_key(compare))

    def insert_sorted(self, obj: T, compare: Comparator) -> None:
        """Insert ``obj`` before the first element it does not compare greater than."""
        if compare is None:
            raise TypeError("a comparator is required")
        position = next(
            (i for i, item in enumerate(self._items) if compare(obj, item) <= 0),
            len(self._items),
        )
        self.insert(position, obj)

    def for_each(self, func: Callable[[T, Any], Any], arg: Any = None) -> None:
        """Call ``func(element, arg)`` on every element, front to back."""
        if func is None:
            raise TypeError("a function is required")
        for item in self._items:
            func(item, arg)

    # Python protocols

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._items[index]
        return self._items[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r}, capacity={self._capacity})"

    # Internals

    def _reserve(self, increment: int) -> None:
        needed = len(self._items) + increment
        if self._capacity >= needed:
            return
        if needed > MAX_CAPACITY:
            raise OverflowError(f"array cannot hold {needed} elements")
        new_capacity = self._capacity << 1
        while new_capacity < needed:
            new_capacity <<= 1
        self._capacity = new_capacity