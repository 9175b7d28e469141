"""Fan-out helpers for concurrent store reads bounded by a call deadline."""

import time
from collections.abc import Callable, Generator, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TypeVar

from article_recommender.ranker.errors import RecommendationError, StoreUnavailableError


T = TypeVar("T")
K = TypeVar("K")


@dataclass(frozen=True)
class Deadline:
    """Absolute point in monotonic time after which waits give up.

    Attributes:
        expires_at: ``time.monotonic()`` value, or None for no deadline.
    """

    expires_at: float | None

    @classmethod
    def after(cls, seconds: float | None) -> "Deadline":
        """Create a deadline ``seconds`` from now (None means unbounded)."""
        if seconds is None:
            return cls(expires_at=None)
        return cls(expires_at=time.monotonic() + seconds)

    def remaining(self) -> float | None:
        """Seconds left before expiry, never negative; None if unbounded."""
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())


@contextmanager
def store_executor(max_workers: int) -> Generator[ThreadPoolExecutor]:
    """Yield a thread pool that is shut down without waiting on exit.

    Reads still running after a deadline expired are abandoned rather than
    joined, so a hung store cannot hold the caller past its timeout.

    Args:
        max_workers: Maximum parallel store reads.
    """
    executor = ThreadPoolExecutor(
        max_workers=max_workers, thread_name_prefix="store-read"
    )
    try:
        yield executor
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def await_store_read(future: Future[T], operation: str, deadline: Deadline) -> T:
    """Wait for one store read.

    Args:
        future: The submitted read.
        operation: Name of the read, used in errors.
        deadline: Call deadline.

    Returns:
        The read's result.

    Raises:
        StoreUnavailableError: If the read raised or did not finish in time.
    """
    try:
        return future.result(timeout=deadline.remaining())
    except TimeoutError as e:
        future.cancel()
        raise StoreUnavailableError(operation, "deadline exceeded") from e
    except RecommendationError:
        raise
    except Exception as e:
        raise StoreUnavailableError(operation, str(e) or type(e).__name__) from e


def gather_store_reads(
    executor: ThreadPoolExecutor,
    reads: dict[str, Callable[[], object]],
    deadline: Deadline,
) -> dict[str, object]:
    """Dispatch independent reads concurrently and join all of them.

    Args:
        executor: Pool to run the reads on.
        reads: Operation name to zero-argument callable.
        deadline: Call deadline shared by every read.

    Returns:
        Operation name to result.

    Raises:
        StoreUnavailableError: On the first read that failed or timed out.
    """
    futures = {name: executor.submit(read) for name, read in reads.items()}
    return {
        name: await_store_read(future, name, deadline)
        for name, future in futures.items()
    }


def fan_out(
    executor: ThreadPoolExecutor,
    keys: Iterable[K],
    read: Callable[[K], T],
    operation: str,
    deadline: Deadline,
) -> list[tuple[K, T]]:
    """Run ``read`` for every key concurrently, keeping key order.

    Args:
        executor: Pool to run the reads on.
        keys: Inputs, one read each.
        read: Per-key store read.
        operation: Name of the read, used in errors.
        deadline: Call deadline shared by every read.

    Returns:
        (key, result) pairs in input order.
    """
    submitted = [(key, executor.submit(read, key)) for key in keys]
    return [
        (key, await_store_read(future, operation, deadline))
        for key, future in submitted
    ]
