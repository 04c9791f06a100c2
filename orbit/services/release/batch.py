from __future__ import annotations

import concurrent.futures
from collections.abc import Callable, Sequence

from orbit.core.result import Err, Ok, Result
from orbit.services.release.timeouts import MAX_PARALLEL_IO

__all__ = ["run_batch"]


def run_batch[T, R, E](
    items: Sequence[T],
    fn: Callable[[T], Result[R, E]],
    *,
    max_workers: int = MAX_PARALLEL_IO,
) -> Result[list[R], E]:
    """Apply ``fn`` to every item on a bounded thread pool.

    All items run to completion. The first failure in input order fails the
    batch; otherwise values come back in input order.
    """
    if not items:
        return Ok([])

    workers = max(1, min(max_workers, len(items)))
    by_index: dict[int, Result[R, E]] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        future_map = {executor.submit(fn, item): idx for idx, item in enumerate(items)}
        for future in concurrent.futures.as_completed(future_map):
            by_index[future_map[future]] = future.result()

    values: list[R] = []
    for idx in range(len(items)):
        result = by_index[idx]
        if isinstance(result, Err):
            return Err(result.error)
        values.append(result.value)
    return Ok(values)
