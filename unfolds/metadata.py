# Copyright (c) Meta Platforms, Inc. and affiliates.
from collections.abc import Sized
from typing import Any

import numpy as np

from unfolds.iterators.abstract_iterator import SteppableSequence
from unfolds.iterators.rest_iterator import ResumableView
from unfolds.size import (
    SIZE_CLASSES,
    SIZE_UNKNOWN,
    Exact,
    Infinite,
    Shaped,
    SizeClass,
    Unknown,
)


def size_classification(obj: Any) -> SizeClass:
    """
    What a consumer may assume about how many elements `obj` yields.
    A view reports its declared size as is; it is never checked against
    what traversal actually produces.
    """
    if isinstance(obj, ResumableView):
        return obj.size
    if isinstance(obj, SteppableSequence):
        return obj.size
    if isinstance(obj, np.ndarray):
        return Shaped(tuple(int(d) for d in obj.shape) or (1,))
    if isinstance(obj, Sized):
        return Exact(len(obj))
    return SIZE_UNKNOWN


def element_type(obj: Any) -> type | None:
    """Declared element type, or None when it is only known by iterating."""
    if isinstance(obj, (ResumableView, SteppableSequence)):
        return obj.eltype
    if isinstance(obj, np.ndarray):
        return obj.dtype.type
    return None


def has_element_type(obj: Any) -> bool:
    return element_type(obj) is not None


def _size_of(obj: Any) -> SizeClass:
    if isinstance(obj, SIZE_CLASSES):
        return obj
    return size_classification(obj)


def length(obj: Any) -> int:
    size = _size_of(obj)
    if isinstance(size, (Exact, Shaped)):
        return size.length
    if isinstance(size, Infinite):
        raise TypeError("An infinite sequence has no length")
    assert isinstance(size, Unknown)
    raise TypeError("Sequence length is unknown")


def shape(obj: Any) -> tuple[int, ...]:
    size = _size_of(obj)
    if isinstance(size, Shaped):
        return size.dims
    if isinstance(size, Exact):
        return (size.length,)
    if isinstance(size, Infinite):
        raise TypeError("An infinite sequence has no shape")
    assert isinstance(size, Unknown)
    raise TypeError("Sequence shape is unknown")
