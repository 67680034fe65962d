from __future__ import annotations

import heapq
import itertools
import logging
import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor

from . import checks
from . import precision
from .apnum import Complex, Float, as_complex, as_float, one, zero

logger = logging.getLogger(__name__)

# Fewer operands than this are multiplied on the calling thread
PARALLEL_THRESHOLD = 8


def _coerce(values) -> tuple[list, int]:
    if any(isinstance(v, (Complex, complex)) for v in values):
        values = [as_complex(v) for v in values]
    else:
        values = [as_float(v) for v in values]
    radix = values[0].radix
    for v in values[1:]:
        checks.check_same_radix(values[0], v, "parallel")
    return values, radix


class _SizeHeap:
    """Operands ordered by mantissa size; pops wait until two operands are available."""

    def __init__(self, values):
        self._counter = itertools.count()
        self._heap = [(v.size, next(self._counter), v) for v in values]
        heapq.heapify(self._heap)
        self._cond = threading.Condition()

    def pop_pair(self):
        with self._cond:
            while len(self._heap) < 2:
                self._cond.wait()
            a = heapq.heappop(self._heap)[2]
            b = heapq.heappop(self._heap)[2]
        return a, b

    def push(self, value) -> None:
        with self._cond:
            heapq.heappush(self._heap, (value.size, next(self._counter), value))
            self._cond.notify()

    def result(self):
        with self._cond:
            return self._heap[0][2]


def _multiply_pair(heap: _SizeHeap) -> None:
    a, b = heap.pop_pair()
    heap.push(a * b)


def product(*values, workers: int | None = None):
    """Product of the operands, smallest first as in Huffman coding.

    Every operand is set to the lowest input precision widened by ``sqrt(n)``
    digits for the accumulated rounding; the result has the lowest input
    precision. An empty product is an exact one.
    """
    if not values:
        return one(precision.get_radix())
    values, radix = _coerce(values)
    for v in values:
        if v.is_zero():
            return zero(radix) if isinstance(v, Float) else Complex(zero(radix))
    target = min(v.precision for v in values)
    wp = precision.extend(target, math.isqrt(len(values)))
    heap = _SizeHeap([v.with_precision(wp) for v in values])
    count = len(values) - 1
    if count >= PARALLEL_THRESHOLD:
        workers = workers or min(count, os.cpu_count() or 1)
        logger.debug("product of %d operands on %d threads", len(values), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(_multiply_pair, heap) for _ in range(count)]
            for future in futures:
                future.result()
    else:
        for _ in range(count):
            _multiply_pair(heap)
    result = heap.result()
    return result if target >= precision.EXACT else result.set_precision(target)


def _sum_floats(values: list[Float]) -> Float:
    # Smallest magnitude first, so the low digits are collected before they can be rounded away
    ordered = sorted((v for v in values if not v.is_zero()), key=lambda v: v.scale)
    if not ordered:
        return zero(values[0].radix)
    total = ordered[0]
    for v in ordered[1:]:
        total = total + v
    return total


def sum(*values):
    """Sum of the operands in order of increasing magnitude; an empty sum is an exact zero."""
    if not values:
        return zero(precision.get_radix())
    values, _ = _coerce(values)
    if isinstance(values[0], Complex):
        return Complex(_sum_floats([v.real for v in values]), _sum_floats([v.imag for v in values]))
    return _sum_floats(values)


__all__ = ["PARALLEL_THRESHOLD", "product", "sum"]
