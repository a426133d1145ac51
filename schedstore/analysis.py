"""Command-line front end that runs one scheduling algorithm over a PCB file.

The report is printed to standard output and also appended, in Markdown
form, to ``../readme.md`` relative to the working directory when that file
can be opened.
"""

from __future__ import annotations

import os
import re
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from schedstore.dyn_array import DynArray
from schedstore.preemptive import round_robin, shortest_remaining_time_first
from schedstore.scheduling import (
    ProcessControlBlock,
    ScheduleResult,
    first_come_first_serve,
    load_process_control_blocks,
    priority,
    shortest_job_first,
)

FCFS = "FCFS"
P = "P"
RR = "RR"
SJF = "SJF"
SRTF = "SRTF"

README_PATH = Path("..") / "readme.md"

_Scheduler = Callable[[DynArray[ProcessControlBlock]], ScheduleResult]

# Checked in this order; an algorithm name is matched by its prefix.
_SCHEDULERS: tuple[tuple[str, _Scheduler], ...] = (
    (FCFS, first_come_first_serve),
    (P, priority),
    (SJF, shortest_job_first),
    (SRTF, shortest_remaining_time_first),
)

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def run_algorithm(
    pcbs: DynArray[ProcessControlBlock], algorithm: str, quantum: Optional[int] = None
) -> ScheduleResult:
    """Run the scheduler whose name ``algorithm`` starts with.

    Round robin (``RR``) needs a positive ``quantum``. Raises ``ValueError``
    when no scheduler matches or the quantum is missing.
    """
    if algorithm.startswith(RR):
        if quantum is None:
            raise ValueError("round robin needs a time quantum")
        return round_robin(pcbs, quantum)
    for prefix, scheduler in _SCHEDULERS:
        if algorithm.startswith(prefix):
            return scheduler(pcbs)
    raise ValueError(f"unknown scheduling algorithm: {algorithm!r}")


def _heading(algorithm: str, quantum: Optional[int]) -> str:
    if quantum is None:
        return f"{algorithm} Processing:"
    return f"{algorithm} Processing with quantum of {quantum}:"


def format_report(
    algorithm: str, result: ScheduleResult, elapsed: float, quantum: Optional[int] = None
) -> str:
    """Render the console report for one run."""
    return (
        f"\n{_heading(algorithm, quantum)}\n\n"
        f"Average Turnaround Time: {result.average_turnaround_time:.2f}\n"
        f"Average Wait Time: {result.average_waiting_time:.2f}\n"
        f"Total Run Time: {result.total_run_time}\n"
        f"Time to process (calculated in seconds): {elapsed:.6f}\n"
    )


def _format_markdown(
    algorithm: str, result: ScheduleResult, elapsed: float, quantum: Optional[int]
) -> str:
    gap = "\n\n\n" if quantum is not None else "\n\n"
    return (
        f"\n\n**{_heading(algorithm, quantum)}**{gap}"
        f"Average Turnaround Time: {result.average_turnaround_time:.2f}\n\n"
        f"Average Wait Time: {result.average_waiting_time:.2f}\n\n"
        f"Total Run Time: {result.total_run_time}\n\n"
        f"Time to process (calculated in seconds): {elapsed:.6f}\n\n"
    )


def _parse_quantum(text: str) -> int:
    """Read a leading decimal integer the way the command line does; 0 if there is none."""
    match = _LEADING_INTEGER.match(text)
    return int(match.group(1)) if match else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "schedstore"
    args = list(sys.argv[1:] if argv is None else argv)
    usage = f"{prog} <pcb file> <schedule algorithm> [quantum]"
    if len(args) < 2:
        print(usage)
        return 1
    filename, algorithm = args[0], args[1]

    try:
        pcbs = load_process_control_blocks(filename)
    except (OSError, ValueError):
        print("Could not open the file, or it was formatted incorrectly!")
        return 1

    quantum: Optional[int] = None
    if algorithm.startswith(RR):
        if len(args) < 3:
            print(usage)
            return 1
        quantum = _parse_quantum(args[2])
        if quantum <= 0:
            print("Invalid time quantum!")
            return 1

    started = time.process_time()
    try:
        result = run_algorithm(pcbs, algorithm, quantum)
    except (ValueError, TypeError):
        print("An error occured while processing!")
        return 1
    elapsed = time.process_time() - started

    print(format_report(algorithm, result, elapsed, quantum), end="")
    try:
        with open(README_PATH, "a", encoding="utf-8") as readme:
            readme.write(_format_markdown(algorithm, result, elapsed, quantum))
    except OSError:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())