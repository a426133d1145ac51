"""Preemptive schedulers: round robin and shortest remaining time first.

Both take a ready queue of :class:`~schedstore.scheduling.ProcessControlBlock`
and consume it the same way the non-preemptive schedulers do. Neither
algorithm uses a block's ``priority``, so it is reset to zero on entry and
then records the clock time at which the block was last taken off the CPU.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from schedstore.dyn_array import DynArray
from schedstore.scheduling import (
    ProcessControlBlock,
    ScheduleResult,
    compare_arrival,
    compare_burst,
    populate_active_queue,
)


def populate_active_queue_rr(
    ready_queue: DynArray[ProcessControlBlock],
    active_queue: DynArray[ProcessControlBlock],
    current_time: int,
) -> None:
    """Move every block that has arrived by ``current_time`` to the front of ``active_queue``.

    Blocks are pushed one after another, so the last one moved ends up at the front.
    """
    index = 0
    while index < len(ready_queue):
        if ready_queue.at(index).arrival <= current_time:
            active_queue.push_front(ready_queue.extract(index))
        else:
            index += 1


@dataclass
class _Run:
    ready: DynArray[ProcessControlBlock]
    active: DynArray[ProcessControlBlock] = field(default_factory=DynArray)
    clock: int = 0
    waiting_sum: float = 0.0
    turnaround_sum: float = 0.0

    def start(self) -> None:
        """Reset the bookkeeping field, order by arrival and wait for the first arrival."""
        for pcb in self.ready:
            pcb.priority = 0
        self.ready.stable_sort(compare_arrival)
        populate_active_queue(self.ready, self.active, self.clock)
        while self.active.empty():
            self.clock += 1
            populate_active_queue(self.ready, self.active, self.clock)

    def preempt(self, pcb: ProcessControlBlock, waited: int) -> None:
        pcb.priority = self.clock
        self.waiting_sum += waited

    def finish(self, pcb: ProcessControlBlock, waited: int) -> None:
        self.turnaround_sum += self.clock - pcb.arrival
        self.waiting_sum += waited - pcb.arrival

    def result(self, total_processes: int) -> ScheduleResult:
        return ScheduleResult(
            average_waiting_time=self.waiting_sum / total_processes,
            average_turnaround_time=self.turnaround_sum / total_processes,
            total_run_time=self.clock,
        )


def _run_slice(run: _Run, pcb: ProcessControlBlock, quantum: int) -> None:
    pcb.started = True
    waited = run.clock - pcb.priority
    ticks = 0
    while pcb.remaining_burst_time > 0:
        if ticks == quantum:
            run.preempt(pcb, waited)
            populate_active_queue_rr(run.ready, run.active, run.clock)
            run.active.push_front(pcb)
            return
        pcb.remaining_burst_time -= 1
        run.clock += 1
        ticks += 1
    run.finish(pcb, waited)


def round_robin(ready_queue: DynArray[ProcessControlBlock], quantum: int) -> ScheduleResult:
    """Give each arrived block up to ``quantum`` ticks in turn until all are done."""
    if ready_queue is None:
        raise TypeError("a ready queue is required")
    if quantum < 1:
        raise ValueError("the time quantum must be at least 1")
    total_processes = len(ready_queue)
    if total_processes == 0:
        return ScheduleResult()
    run = _Run(ready_queue)
    run.start()
    # Stops once nothing is waiting, even if later arrivals remain in the ready queue.
    while not run.active.empty():
        _run_slice(run, run.active.extract_back(), quantum)
        populate_active_queue_rr(run.ready, run.active, run.clock)
    return run.result(total_processes)


def _run_until_beaten(run: _Run, pcb: ProcessControlBlock) -> None:
    pcb.started = True
    waited = run.clock - pcb.priority
    while pcb.remaining_burst_time > 0:
        pcb.remaining_burst_time -= 1
        run.clock += 1
        populate_active_queue(run.ready, run.active, run.clock)
        run.active.stable_sort(compare_burst)
        if not run.active.empty() and run.active.front().remaining_burst_time < pcb.remaining_burst_time:
            run.preempt(pcb, waited)
            run.active.push_back(pcb)
            return
    run.finish(pcb, waited)


def shortest_remaining_time_first(ready_queue: DynArray[ProcessControlBlock]) -> ScheduleResult:
    """Always run the arrived block with the least work left, preempting on each tick."""
    if ready_queue is None:
        raise TypeError("a ready queue is required")
    total_processes = len(ready_queue)
    if total_processes == 0:
        return ScheduleResult()
    run = _Run(ready_queue)
    run.start()
    # Stops once nothing is waiting, even if later arrivals remain in the ready queue.
    while not run.active.empty():
        run.active.stable_sort(compare_burst)
        _run_until_beaten(run, run.active.extract_front())
        populate_active_queue(run.ready, run.active, run.clock)
    return run.result(total_processes)