from __future__ import annotations

import threading
import time

from orbit.core.result import Err, Ok, Result
from orbit.services.release.batch import run_batch


def _square(n: int) -> Result[int, str]:
    # Later items finish first.
    time.sleep(0.001 * (5 - n))
    return Ok(n * n)


def test_empty() -> None:
    assert run_batch([], _square) == Ok([])


def test_values_keep_input_order() -> None:
    result = run_batch([0, 1, 2, 3, 4], _square)
    assert result == Ok([0, 1, 4, 9, 16])


def test_first_error_in_input_order_wins() -> None:
    def check(n: int) -> Result[int, str]:
        if n in (1, 3):
            return Err(f"bad {n}")
        return Ok(n)

    assert run_batch([0, 1, 2, 3], check) == Err("bad 1")


def test_every_item_runs_even_when_one_fails() -> None:
    seen: list[int] = []
    lock = threading.Lock()

    def record(n: int) -> Result[int, str]:
        with lock:
            seen.append(n)
        return Err("boom") if n == 0 else Ok(n)

    run_batch([0, 1, 2], record, max_workers=1)

    assert sorted(seen) == [0, 1, 2]


def test_worker_bound() -> None:
    active = 0
    peak = 0
    lock = threading.Lock()

    def track(n: int) -> Result[int, str]:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.01)
        with lock:
            active -= 1
        return Ok(n)

    run_batch(list(range(10)), track, max_workers=2)

    assert peak <= 2
