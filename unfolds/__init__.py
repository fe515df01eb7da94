# Copyright (c) Meta Platforms, Inc. and affiliates.
class UnfoldsError(Exception):
    pass


class InvalidSizeArgument(UnfoldsError, ValueError):
    pass


class MalformedTransitionResult(UnfoldsError, TypeError):
    pass


class EagerMaterializationOfInfiniteSequence(UnfoldsError):
    pass


class ShapeLengthMismatch(UnfoldsError):
    def __init__(self, expected: int, actual: int, *, at_least: bool = False):
        self.expected = expected
        self.actual = actual
        self.at_least = at_least
        qualifier = "at least " if at_least else ""
        super().__init__(
            f"Declared size promises {expected} elements, but the sequence produced {qualifier}{actual}"
        )


from unfolds.collect import collect
from unfolds.iterators.rest_iterator import ResumableView, make_view, resume
from unfolds.iterators.unfold_iterator import Unfold, Unfolder, unfold
from unfolds.metadata import (
    element_type,
    has_element_type,
    length,
    shape,
    size_classification,
)
from unfolds.size import (
    IS_INFINITE,
    SIZE_UNKNOWN,
    Exact,
    Infinite,
    Shaped,
    SizeClass,
    Unknown,
    normalize,
)
