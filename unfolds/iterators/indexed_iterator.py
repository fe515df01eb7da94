# Copyright (c) Meta Platforms, Inc. and affiliates.
from collections.abc import Sequence
from typing import Any

import numpy as np

from unfolds.iterators.abstract_iterator import SteppableSequence
from unfolds.size import Exact, Shaped, SizeClass


class IndexedSequence(SteppableSequence[Any, int]):
    """
    Steps through a Python sequence or numpy array by position. The state is
    the index of the next element, so resuming at state 2 skips two elements.
    Arrays are walked element by element in row-major order, matching the
    order in which a Shaped size is filled.
    """

    def __init__(self, items: Sequence | np.ndarray):
        self.items = items

    @classmethod
    def supports(cls, obj: Any) -> bool:
        return isinstance(obj, (Sequence, np.ndarray))

    @property
    def eltype(self) -> type | None:
        if isinstance(self.items, np.ndarray):
            return self.items.dtype.type
        return None

    @property
    def size(self) -> SizeClass:
        if isinstance(self.items, np.ndarray):
            return Shaped(tuple(int(d) for d in self.items.shape) or (1,))
        return Exact(len(self.items))

    def step(self, state: int) -> tuple[Any, int] | None:
        if isinstance(self.items, np.ndarray):
            if state >= self.items.size:
                return None
            return self.items.flat[state], state + 1
        if state >= len(self.items):
            return None
        return self.items[state], state + 1
