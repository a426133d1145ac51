# schedstore

The package holds two small operating-systems simulations:

- **Process scheduling.** Five algorithms run over a queue of process
  control blocks. Each run reports three figures: the average turnaround
  time, the average waiting time and the total run time.
- **Block store.** An in-memory store of 2048 blocks, each 64 bytes long.
  A free-block bitmap tracks which blocks are in use, and that bitmap is
  kept inside the store itself.

## Installation

```
pip install .
```

## Command line

```
schedstore-analysis <pcb file> <algorithm> [quantum]
```

The algorithm is matched by how its name starts, and the checks run in
this order:

| Prefix | Algorithm |
|--------|-----------|
| `RR`   | round robin; needs a positive integer quantum |
| `FCFS` | first come, first served |
| `P`    | priority (a lower number runs first) |
| `SJF`  | shortest job first |
| `SRTF` | shortest remaining time first |

The command prints four lines:

- the average turnaround time;
- the average wait time;
- the total run time;
- the CPU time the calculation took, in seconds.

If `../readme.md` (relative to the current directory) can be opened for
appending, the command also writes the same report there in Markdown.

The command exits with status 1 in these cases:

- there are too few arguments;
- the file cannot be read or is malformed;
- the quantum is missing or not positive;
- the algorithm is not recognised.

A PCB file is binary, and every number in it is a little-endian 32-bit
unsigned integer. The file holds:

1. a count of the records;
2. that many records of three numbers each: remaining burst time,
   priority and arrival time.

If the file is empty or holds fewer records than its count says, reading
it raises `ValueError`.

## Library use

A ready queue is a `schedstore.dyn_array.DynArray` of
`schedstore.scheduling.ProcessControlBlock`. Each scheduler returns a
`ScheduleResult` with these fields:

- `average_waiting_time`;
- `average_turnaround_time`;
- `total_run_time`.

The schedulers consume their queue: each finished block is removed from
it.

```python
from schedstore.dyn_array import DynArray
from schedstore.scheduling import ProcessControlBlock, first_come_first_serve
from schedstore.preemptive import round_robin

queue = DynArray()
for burst, prio, arrival in [(3, 1, 0), (3, 3, 0), (24, 2, 0)]:
    queue.push_back(ProcessControlBlock(burst, prio, arrival))

result = first_come_first_serve(queue)
print(result.average_turnaround_time, result.average_waiting_time, result.total_run_time)
```

The schedulers are spread over two modules:

- `schedstore.scheduling` provides `first_come_first_serve`,
  `shortest_job_first`, `priority` and `load_process_control_blocks`.
- `schedstore.preemptive` provides `round_robin(queue, quantum)` and
  `shortest_remaining_time_first`.

Round robin and SRTF both reuse each block's `priority` field to record
when the block last ran.

One limit applies to SJF, priority, round robin and SRTF. If the CPU goes
idle while some blocks have not yet arrived, the run stops there, and
those later blocks are never scheduled.

### Block store

```python
from schedstore.block_store import BlockStore

store = BlockStore()
block = store.allocate()
store.write(block, b"hello")          # shorter data is zero-padded to 64 bytes
data = store.read(block)
store.serialize("store.bin")
restored = BlockStore.deserialize("store.bin")
```

The bitmap sits in blocks 1022–1025, so those four blocks are always in
use. Errors are raised as follows:

- `allocate()` raises `BlockStoreFullError` when no block is free.
- `read()` raises `UnallocatedBlockError` when the block is not in use.
- A block id outside the range 0–2047 raises `IndexError`.

`request(block_id)` returns `False` if the block was already in use.

`schedstore.bitmap.Bitmap` also works by itself as a fixed-size bit set.
It can own its storage, or it can overlay a writable buffer that you
supply.

### What it does not do

The block store keeps everything in memory. Data outlives the process only
through `serialize` and `deserialize`. There are no files, directories or
concurrent access on top of the blocks.

## Tests

```
pip install .[test]
pytest
```