# Copyright (c) Meta Platforms, Inc. and affiliates.
import itertools
import math
from enum import Enum
from logging import getLogger
from typing import Any, Iterable

import numpy as np

from unfolds import EagerMaterializationOfInfiniteSequence, ShapeLengthMismatch
from unfolds.iterators.rest_iterator import ResumableView
from unfolds.metadata import element_type, size_classification
from unfolds.size import Exact, Infinite, Shaped, Unknown

logger = getLogger(__name__)

_NUMPY_SCALAR_TYPES = (bool, int, float, complex, np.bool_, np.number)
_END = object()


class MemoryOrder(str, Enum):
    # C: last dimension varies fastest, numpy's native layout
    C = "C"
    # F: first dimension varies fastest
    F = "F"


class MismatchPolicy(str, Enum):
    # Pull one element past the declared length to catch over-long sequences
    raise_ = "raise"
    # Stop at the declared length without looking ahead; short sequences still raise
    truncate = "truncate"


def _resolve_dtype(dtype: Any, eltype: type | None) -> np.dtype | None:
    if dtype is not None:
        return np.dtype(dtype)
    if eltype is None:
        return None
    if isinstance(eltype, type) and issubclass(eltype, _NUMPY_SCALAR_TYPES):
        return np.dtype(eltype)
    return np.dtype(object)


def _round_trips(arr: np.ndarray, buffer: list) -> bool:
    for produced, stored in zip(buffer, arr.tolist()):
        if isinstance(produced, np.generic):
            produced = produced.item()
        if type(produced) is not type(stored):
            return False
        # NaN never compares equal to itself
        if produced != stored and produced == produced:
            return False
    return True


def _from_buffer(buffer: list, dtype: np.dtype | None) -> np.ndarray:
    if dtype is None:
        try:
            arr = np.array(buffer)
        except ValueError:
            # ragged elements
            arr = None
        # numpy's guess may coerce mixed values (ints to floats, numbers to strings)
        if arr is not None and arr.ndim == 1 and _round_trips(arr, buffer):
            return arr
        dtype = np.dtype(object)
    out = np.empty(len(buffer), dtype=dtype)
    for i, element in enumerate(buffer):
        out[i] = element
    return out


def _check_exhausted(it, expected: int, on_mismatch: MismatchPolicy):
    if on_mismatch == MismatchPolicy.truncate:
        return
    if isinstance(it, ResumableView):
        # look ahead without consuming from the caller's view
        state, exhausted = it.state, it.exhausted
        if next(it, _END) is not _END:
            it.state, it.exhausted = state, exhausted
            raise ShapeLengthMismatch(expected, expected + 1, at_least=True)
        return
    if next(it, _END) is not _END:
        raise ShapeLengthMismatch(expected, expected + 1, at_least=True)


def _collect_sized(
    it, dims: tuple[int, ...], dtype, order: MemoryOrder, on_mismatch: MismatchPolicy
) -> np.ndarray:
    n = math.prod(dims)
    if dtype is None:
        logger.debug(f"Buffering {n} elements of unknown type into shape {dims}")
        buffer = list(itertools.islice(it, n))
        if len(buffer) < n:
            raise ShapeLengthMismatch(n, len(buffer))
        _check_exhausted(it, n, on_mismatch)
        return _from_buffer(buffer, None).reshape(dims, order=order.value)

    logger.debug(f"Preallocating {dims} array of {dtype} in {order.value} order")
    out = np.empty(dims, dtype=dtype, order=order.value)
    # a view, since out is contiguous in the requested order
    flat = out.reshape(-1, order=order.value)
    produced = 0
    for element in itertools.islice(it, n):
        flat[produced] = element
        produced += 1
    if produced < n:
        raise ShapeLengthMismatch(n, produced)
    _check_exhausted(it, n, on_mismatch)
    return out


def collect(
    itr: Iterable,
    *,
    dtype: Any = None,
    order: MemoryOrder | str = MemoryOrder.C,
    on_mismatch: MismatchPolicy | str = MismatchPolicy.raise_,
) -> np.ndarray:
    """
    Materialize `itr` into a numpy array, choosing the strategy from its size
    classification:

    - Infinite: refused with EagerMaterializationOfInfiniteSequence before any
      element is pulled
    - Exact(n): a preallocated array of length n
    - Shaped(dims): a preallocated array of shape dims, filled in `order`
      (row-major by default, so collecting 1..9 with shape (3, 3) gives
      [[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    - Unknown: a growable buffer

    The dtype is `dtype` if given, else derived from the declared element type,
    else inferred from the values. An inferred dtype is only kept when every
    value survives it unchanged; mixed values such as [1, "a"] or
    [2**53 + 1, 0.5] are stored in an object array instead.

    A declared Exact/Shaped size that disagrees with what is produced raises
    ShapeLengthMismatch. By default one element past the declared length is
    looked at to catch over-long sequences; a ResumableView is left where the
    declared length ends. To collect a finite prefix of an endless sequence,
    re-declare its size and pass on_mismatch="truncate":

        collect(resume(view, view.state, size=n), on_mismatch="truncate")
    """
    order = MemoryOrder(order)
    on_mismatch = MismatchPolicy(on_mismatch)
    size = size_classification(itr)
    resolved_dtype = _resolve_dtype(dtype, element_type(itr))

    if isinstance(size, Infinite):
        raise EagerMaterializationOfInfiniteSequence(
            "Refusing to materialize a sequence declared infinite; collect a finite prefix "
            "with collect(resume(view, view.state, size=n), on_mismatch='truncate')"
        )
    if isinstance(size, Unknown):
        logger.debug("Collecting sequence of unknown size into a growable buffer")
        return _from_buffer(list(itr), resolved_dtype)
    if isinstance(size, Exact):
        dims = (size.length,)
    else:
        assert isinstance(size, Shaped)
        dims = size.dims
    # arrays yield rows when iterated; their elements come in row-major order
    it = iter(itr.flat) if isinstance(itr, np.ndarray) else iter(itr)
    return _collect_sized(it, dims, resolved_dtype, order, on_mismatch)
