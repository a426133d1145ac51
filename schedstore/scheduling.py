"""Process control blocks and the non-preemptive schedulers: FCFS, SJF and priority.

A ready queue is a :class:`~schedstore.dyn_array.DynArray` of
:class:`ProcessControlBlock`. The schedulers run every block to completion
on a simulated CPU. They consume the queue they are given: finished blocks
are removed from it and their ``remaining_burst_time`` is left at zero.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import Callable, Optional, Union

from schedstore.dyn_array import DynArray

_U32 = struct.Struct("<I")
_PCB_RECORD = struct.Struct("<III")


@dataclass
class ProcessControlBlock:
    """One process as seen by the scheduler."""

    remaining_burst_time: int
    priority: int
    arrival: int
    started: bool = False


@dataclass
class ScheduleResult:
    """Statistics gathered from one scheduling run."""

    average_waiting_time: float = 0.0
    average_turnaround_time: float = 0.0
    total_run_time: int = 0


PcbComparator = Callable[[ProcessControlBlock, ProcessControlBlock], int]


def load_process_control_blocks(input_file: Union[str, os.PathLike]) -> DynArray[ProcessControlBlock]:
    """Read a PCB file: a little-endian u32 count, then that many (burst, priority, arrival) u32 triples.

    Raises ``TypeError`` for a missing path, ``OSError`` when the file cannot be
    opened and ``ValueError`` when it is empty or shorter than its count promises.
    """
    if input_file is None:
        raise TypeError("a file path is required")
    with open(input_file, "rb") as handle:
        data = handle.read()
    if len(data) < _U32.size:
        raise ValueError(f"{input_file!s}: missing the process count")
    (count,) = _U32.unpack_from(data, 0)
    body = data[_U32.size:]
    needed = count * _PCB_RECORD.size
    if len(body) < needed:
        raise ValueError(
            f"{input_file!s}: expected {count} process records, file holds {len(body) // _PCB_RECORD.size}"
        )
    blocks: DynArray[ProcessControlBlock] = DynArray(count)
    for burst, prio, arrival in _PCB_RECORD.iter_unpack(body[:needed]):
        blocks.push_back(ProcessControlBlock(burst, prio, arrival))
    return blocks


def _wrapped_difference(a: int, b: int) -> int:
    """Difference of two u32 values as a signed 32-bit integer."""
    diff = (a - b) & 0xFFFFFFFF
    return diff - (1 << 32) if diff & 0x80000000 else diff


def compare_arrival(a: ProcessControlBlock, b: ProcessControlBlock) -> int:
    return _wrapped_difference(a.arrival, b.arrival)


def compare_burst(a: ProcessControlBlock, b: ProcessControlBlock) -> int:
    return _wrapped_difference(a.remaining_burst_time, b.remaining_burst_time)


def compare_priority(a: ProcessControlBlock, b: ProcessControlBlock) -> int:
    return _wrapped_difference(a.priority, b.priority)


def populate_active_queue(
    ready_queue: DynArray[ProcessControlBlock],
    active_queue: DynArray[ProcessControlBlock],
    current_time: int,
) -> None:
    """Move every block that has arrived by ``current_time`` to the back of ``active_queue``, in order."""
    index = 0
    while index < len(ready_queue):
        if ready_queue.at(index).arrival <= current_time:
            active_queue.push_back(ready_queue.extract(index))
        else:
            index += 1


@dataclass
class _Tally:
    clock: int = 0
    waiting_sum: float = 0.0
    turnaround_sum: float = 0.0

    def run_to_completion(self, pcb: ProcessControlBlock) -> None:
        pcb.started = True
        self.waiting_sum += self.clock - pcb.arrival
        self.clock += pcb.remaining_burst_time
        pcb.remaining_burst_time = 0
        self.turnaround_sum += self.clock - pcb.arrival

    def result(self, total_processes: int) -> ScheduleResult:
        return ScheduleResult(
            average_waiting_time=self.waiting_sum / total_processes,
            average_turnaround_time=self.turnaround_sum / total_processes,
            total_run_time=self.clock,
        )


def _require_queue(ready_queue: Optional[DynArray[ProcessControlBlock]]) -> None:
    if ready_queue is None:
        raise TypeError("a ready queue is required")


def _leading_group_size(queue: DynArray[ProcessControlBlock], compare: PcbComparator) -> int:
    head = queue.front()
    return next(
        (i for i, pcb in enumerate(queue) if compare(pcb, head) != 0),
        len(queue),
    )


def first_come_first_serve(ready_queue: DynArray[ProcessControlBlock]) -> ScheduleResult:
    """Run blocks in arrival order; blocks that arrive together run last-queued first."""
    _require_queue(ready_queue)
    total_processes = len(ready_queue)
    if total_processes == 0:
        return ScheduleResult()
    tally = _Tally()
    ready_queue.stable_sort(compare_arrival)
    while not ready_queue.empty():
        for index in reversed(range(_leading_group_size(ready_queue, compare_arrival))):
            tally.run_to_completion(ready_queue.at(index))
            ready_queue.erase(index)
    return tally.result(total_processes)


def _run_by_key(ready_queue: DynArray[ProcessControlBlock], compare: PcbComparator) -> ScheduleResult:
    _require_queue(ready_queue)
    total_processes = len(ready_queue)
    if total_processes == 0:
        return ScheduleResult()
    tally = _Tally()
    ready_queue.stable_sort(compare_arrival)
    active_queue: DynArray[ProcessControlBlock] = DynArray()
    populate_active_queue(ready_queue, active_queue, tally.clock)
    while active_queue.empty():
        tally.clock += 1
        populate_active_queue(ready_queue, active_queue, tally.clock)
    # Stops once nothing is waiting, even if later arrivals remain in the ready queue.
    while not active_queue.empty():
        active_queue.stable_sort(compare)
        index = _leading_group_size(active_queue, compare) - 1
        tally.run_to_completion(active_queue.at(index))
        active_queue.erase(index)
        populate_active_queue(ready_queue, active_queue, tally.clock)
    return tally.result(total_processes)


def shortest_job_first(ready_queue: DynArray[ProcessControlBlock]) -> ScheduleResult:
    """Always run the arrived block with the shortest burst to completion."""
    return _run_by_key(ready_queue, compare_burst)


def priority(ready_queue: DynArray[ProcessControlBlock]) -> ScheduleResult:
    """Always run the arrived block with the lowest priority number to completion."""
    return _run_by_key(ready_queue, compare_priority)