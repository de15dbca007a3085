"""
Batch and parallel Paillier operations.

Sequential helpers (batch_*) map the cipher core over arrays. BatchEngine
runs the same work on a bounded worker pool:

    1. The input is split into num_workers contiguous ranges of
       len // num_workers items; the last range absorbs the remainder
       (some ranges are empty for short inputs)
    2. One task per range runs the operation sequentially over its items
    3. Each task's results land in a disjoint slice of a preallocated list
    4. The caller joins every task before returning; the first failure (in
       range order) is re-raised

There is no cancellation or timeout: once dispatched, a task runs to
completion.
"""

from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, List, Optional, Sequence

from ..config import get_settings
from ..errors import DimensionMismatchError
from ..logging import get_logger
from .cipher import Ciphertext, Plaintext, add, decrypt, encrypt, mult
from .keys import PrivateKey, PublicKey

logger = get_logger(__name__)


# =============================================================================
# Sequential batch helpers
# =============================================================================


def batch_encrypt(pk: PublicKey, values: Sequence[Plaintext]) -> List[Ciphertext]:
    """Encrypt each plaintext in order."""
    return [encrypt(pk, m) for m in values]


def batch_decrypt(pk: PublicKey, sk: PrivateKey, values: Sequence[Ciphertext]) -> List[Plaintext]:
    """Decrypt each ciphertext in order."""
    return [decrypt(pk, sk, c) for c in values]


def batch_add(pk: PublicKey, c1: Sequence[Ciphertext], c2: Sequence[Ciphertext]) -> List[Ciphertext]:
    """Elementwise homomorphic addition."""
    if len(c1) != len(c2):
        raise DimensionMismatchError("batch_add", expected=(len(c1),), actual=(len(c2),))
    return [add(pk, a, b) for a, b in zip(c1, c2)]


def batch_mult(pk: PublicKey, c: Sequence[Ciphertext], scalars: Sequence[int]) -> List[Ciphertext]:
    """Elementwise homomorphic multiplication by plaintext scalars."""
    if len(c) != len(scalars):
        raise DimensionMismatchError("batch_mult", expected=(len(c),), actual=(len(scalars),))
    return [mult(pk, ci, k) for ci, k in zip(c, scalars)]


# =============================================================================
# Parallel engine
# =============================================================================


def partition(length: int, num_workers: int) -> List[range]:
    """Split ``range(length)`` into ``num_workers`` contiguous ranges."""
    if num_workers < 1:
        raise ValueError("num_workers must be at least 1")
    chunk_size = length // num_workers
    ranges = []
    for i in range(num_workers):
        start = i * chunk_size
        end = length if i == num_workers - 1 else (i + 1) * chunk_size
        ranges.append(range(start, end))
    return ranges


def _run_chunk(fn: Callable[[Any], Any], items: List[Any]) -> List[Any]:
    return [fn(item) for item in items]


class BatchEngine:
    """
    Fixed-size worker pool for data-parallel cipher operations.

    ``executor="thread"`` shares memory with the caller. ``executor="process"``
    sidesteps the GIL for CPU-bound exponentiation but requires the mapped
    callable and its items to be picklable.
    """

    def __init__(self, num_workers: Optional[int] = None, executor: Optional[str] = None):
        """
        Args:
            num_workers: Worker count (default: ``HESettings.batch_workers``)
            executor: "thread" or "process" (default: ``HESettings.batch_executor``)
        """
        settings = get_settings(batch_workers=num_workers, batch_executor=executor)
        self.num_workers = settings.batch_workers
        self.executor = settings.batch_executor

    def __repr__(self) -> str:
        return f"BatchEngine(num_workers={self.num_workers}, executor={self.executor!r})"

    def _make_executor(self) -> Executor:
        if self.executor == "process":
            return ProcessPoolExecutor(max_workers=self.num_workers)
        return ThreadPoolExecutor(max_workers=self.num_workers, thread_name_prefix="cryptalearn-batch")

    def map(self, fn: Callable[[Any], Any], items: Sequence[Any]) -> List[Any]:
        """
        Apply ``fn`` to every item, one task per contiguous range.

        Returns:
            Results in input order
        """
        items = list(items)
        results: List[Any] = [None] * len(items)
        ranges = partition(len(items), self.num_workers)
        logger.debug(
            f"Dispatching {len(items)} items over {self.num_workers} {self.executor} workers: "
            f"{[len(r) for r in ranges]}"
        )

        with self._make_executor() as pool:
            futures = [pool.submit(_run_chunk, fn, items[r.start : r.stop]) for r in ranges]
            # Exiting the pool joins every task even if one fails
            for r, future in zip(ranges, futures):
                results[r.start : r.stop] = future.result()

        return results

    def parallel_encrypt(self, pk: PublicKey, values: Sequence[Plaintext]) -> List[Ciphertext]:
        """Encrypt plaintexts in parallel; equivalent to batch_encrypt."""
        return self.map(partial(encrypt, pk), values)

    def parallel_decrypt(
        self,
        pk: PublicKey,
        sk: PrivateKey,
        values: Sequence[Ciphertext],
    ) -> List[Plaintext]:
        """Decrypt ciphertexts in parallel; equivalent to batch_decrypt."""
        return self.map(partial(decrypt, pk, sk), values)


def parallel_encrypt(
    pk: PublicKey,
    values: Sequence[Plaintext],
    num_workers: Optional[int] = None,
) -> List[Ciphertext]:
    """Encrypt ``values`` on a BatchEngine with ``num_workers`` workers."""
    return BatchEngine(num_workers=num_workers).parallel_encrypt(pk, values)


def parallel_decrypt(
    pk: PublicKey,
    sk: PrivateKey,
    values: Sequence[Ciphertext],
    num_workers: Optional[int] = None,
) -> List[Plaintext]:
    """Decrypt ``values`` on a BatchEngine with ``num_workers`` workers."""
    return BatchEngine(num_workers=num_workers).parallel_decrypt(pk, sk, values)


__all__ = [
    "batch_encrypt",
    "batch_decrypt",
    "batch_add",
    "batch_mult",
    "partition",
    "BatchEngine",
    "parallel_encrypt",
    "parallel_decrypt",
]
