import random
import struct

import pytest

from schedstore.dyn_array import DynArray
from schedstore.scheduling import (
    ProcessControlBlock,
    ScheduleResult,
    compare_arrival,
    compare_burst,
    compare_priority,
    first_come_first_serve,
    load_process_control_blocks,
    populate_active_queue,
    priority,
    shortest_job_first,
)


def make_queue(*records):
    """Build a queue by pushing (burst, priority, arrival) records to the back in the given order."""
    queue = DynArray()
    for burst, prio, arrival in records:
        queue.push_back(ProcessControlBlock(burst, prio, arrival))
    return queue


def assert_result(result, turnaround, waiting, run_time):
    assert result.average_turnaround_time == pytest.approx(turnaround, rel=1e-6)
    assert result.average_waiting_time == pytest.approx(waiting, rel=1e-6)
    assert result.total_run_time == run_time


# Loading


def test_load_null_path():
    with pytest.raises(TypeError):
        load_process_control_blocks(None)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_process_control_blocks(tmp_path / "NotARealFile.Awesome")


def test_load_empty_file(tmp_path):
    path = tmp_path / "EMPTYFILE.DARN"
    path.write_bytes(b"")
    with pytest.raises(ValueError):
        load_process_control_blocks(path)


def test_load_truncated_file(tmp_path):
    path = tmp_path / "CANYOUHANDLETHE.TRUTH"
    records = [(i, i, i) for i in range(1, 6)]
    payload = struct.pack("<I", 10) + b"".join(struct.pack("<III", *r) for r in records)
    path.write_bytes(payload)
    with pytest.raises(ValueError):
        load_process_control_blocks(path)


def test_load_full_file(tmp_path):
    rng = random.Random(1234)
    records = [(rng.randint(1, 35), p, p) for p in range(30)]
    path = tmp_path / "PCBs.bin"
    path.write_bytes(struct.pack("<I", 30) + b"".join(struct.pack("<III", *r) for r in records))
    blocks = load_process_control_blocks(path)
    assert len(blocks) == 30
    for pcb, (burst, prio, arrival) in zip(blocks, records):
        assert pcb.remaining_burst_time == burst
        assert pcb.priority == prio
        assert pcb.arrival == arrival
        assert pcb.started is False


def test_load_zero_count(tmp_path):
    path = tmp_path / "none.bin"
    path.write_bytes(struct.pack("<I", 0))
    assert len(load_process_control_blocks(path)) == 0


# Comparators


def test_comparators_order_by_their_field():
    a = ProcessControlBlock(5, 1, 3)
    b = ProcessControlBlock(2, 4, 3)
    assert compare_burst(a, b) > 0
    assert compare_priority(a, b) < 0
    assert compare_arrival(a, b) == 0


def test_comparator_wraps_like_signed_32_bit():
    a = ProcessControlBlock(0, 0, 0)
    b = ProcessControlBlock(0, 0, 0xFFFFFFFF)
    assert compare_arrival(a, b) == 1


# Active queue population


def test_populate_active_queue_moves_arrived_in_order():
    ready = make_queue((1, 0, 0), (2, 0, 5), (3, 0, 1), (4, 0, 2))
    active = DynArray()
    populate_active_queue(ready, active, 2)
    assert [p.remaining_burst_time for p in active] == [1, 3, 4]
    assert [p.arrival for p in ready] == [5]


def test_populate_active_queue_nothing_arrived():
    ready = make_queue((1, 0, 4))
    active = DynArray()
    populate_active_queue(ready, active, 3)
    assert len(active) == 0
    assert len(ready) == 1


# First come first serve


def test_fcfs_null_queue():
    with pytest.raises(TypeError):
        first_come_first_serve(None)


def test_fcfs_empty_queue():
    assert first_come_first_serve(DynArray()) == ScheduleResult(0.0, 0.0, 0)


def test_fcfs_good_input_a():
    queue = make_queue((3, 1, 0), (3, 3, 0), (24, 2, 0))
    assert_result(first_come_first_serve(queue), 27, 17, 30)


def test_fcfs_good_input_b():
    queue = make_queue((3, 1, 0), (7, 4, 0), (8, 2, 0), (6, 3, 0))
    assert_result(first_come_first_serve(queue), 16.25, 10.25, 24)


def test_fcfs_good_input_c():
    queue = make_queue((3, 1, 1), (3, 3, 0), (24, 2, 2))
    assert_result(first_come_first_serve(queue), 12, 2, 30)


def test_fcfs_good_input_d():
    queue = make_queue((3, 1, 1), (7, 4, 1), (8, 2, 0), (6, 3, 0))
    assert_result(first_come_first_serve(queue), 15.75, 9.75, 24)


def test_fcfs_consumes_queue():
    queue = make_queue((3, 1, 0), (4, 1, 0))
    first_come_first_serve(queue)
    assert queue.empty()


# Shortest job first


def test_sjf_null_queue():
    with pytest.raises(TypeError):
        shortest_job_first(None)


def test_sjf_empty_queue():
    assert shortest_job_first(DynArray()) == ScheduleResult(0.0, 0.0, 0)


def test_sjf_good_input_a():
    queue = make_queue((1, 4, 3), (4, 1, 2), (2, 3, 1), (25, 2, 0))
    assert_result(shortest_job_first(queue), 26.25, 18.25, 32)


def test_sjf_good_input_b():
    queue = make_queue((1, 4, 3), (4, 1, 0), (2, 3, 1), (25, 2, 0))
    assert_result(shortest_job_first(queue), 11, 3, 32)


def test_sjf_good_input_c():
    queue = make_queue((1, 4, 0), (4, 1, 0), (2, 3, 0), (25, 2, 0))
    assert_result(shortest_job_first(queue), 10.75, 2.75, 32)


def test_sjf_idles_until_first_arrival():
    queue = make_queue((2, 0, 3))
    assert_result(shortest_job_first(queue), 2, 0, 5)


def test_sjf_marks_blocks_finished():
    pcb = ProcessControlBlock(4, 0, 0)
    queue = DynArray()
    queue.push_back(pcb)
    shortest_job_first(queue)
    assert pcb.started is True
    assert pcb.remaining_burst_time == 0


# Priority


def test_priority_null_queue():
    with pytest.raises(TypeError):
        priority(None)


def test_priority_empty_queue():
    assert priority(DynArray()) == ScheduleResult(0.0, 0.0, 0)


def test_priority_good_input_a():
    queue = make_queue((3, 2, 0), (3, 1, 0), (24, 3, 0))
    assert_result(priority(queue), 13, 3, 30)


def test_priority_good_input_b():
    queue = make_queue((5, 2, 0), (1, 5, 0), (2, 4, 0), (1, 1, 0), (10, 3, 0))
    assert_result(priority(queue), 12, 8.2, 19)


def test_priority_good_input_c():
    queue = make_queue((3, 2, 0), (3, 1, 10), (24, 3, 0))
    assert_result(priority(queue), 50.0 / 3.0, 20.0 / 3.0, 30)