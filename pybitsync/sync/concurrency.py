"""Thread pool fan-out shared by the scanner, downloader and engine."""

from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")


def run_all(tasks: Sequence[Callable[[], T]], max_workers: int) -> list[T]:
    """Run tasks in parallel and return their results in task order.

    The first task to fail decides the outcome: its exception is raised as
    soon as it happens, tasks that have not started yet are cancelled, and
    tasks already running are left to finish with their results discarded.

    Args:
        tasks: Zero-argument callables
        max_workers: Maximum number of tasks running at the same time

    Returns:
        List of task results, in the order of tasks

    Examples:
        >>> run_all([lambda: 1, lambda: 2], max_workers=2)
        [1, 2]
    """
    if not tasks:
        return []

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers))
    futures: list[Future[T]] = []
    try:
        futures = [executor.submit(task) for task in tasks]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for future in futures:
            error = future.exception() if future in done else None
            if error is not None:
                raise error
        return [future.result() for future in futures]
    finally:
        # Does not block on running tasks when leaving with an exception
        executor.shutdown(wait=False, cancel_futures=True)
