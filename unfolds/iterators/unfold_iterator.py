# Copyright (c) Meta Platforms, Inc. and affiliates.
from logging import getLogger
from typing import Any, Callable, TypeVar

from unfolds import MalformedTransitionResult
from unfolds.iterators.abstract_iterator import SteppableSequence
from unfolds.iterators.rest_iterator import ResumableView, make_view
from unfolds.size import SIZE_UNKNOWN, normalize

logger = getLogger(__name__)

T = TypeVar("T")
S = TypeVar("S")

Transition = Callable[[S], tuple[T, S] | None]

# None is a legitimate initial state (e.g. a finished Collatz path)
_NO_STATE = object()


class Unfold(SteppableSequence[T, S]):
    """
    Sequence generated by repeatedly applying `transition` to a state.

    `transition(state)` must return either `(element, next_state)` or `None`,
    in which case the sequence ends. Its return value must depend only on
    `state`, so that resuming from a captured state replays the same elements.
    An Unfold never claims a size; sizes are attached by ResumableView.
    """

    def __init__(self, transition: Transition, eltype: type | None = None):
        if not callable(transition):
            raise TypeError(f"transition must be callable, got {transition!r}")
        self._transition = transition
        self._eltype = eltype

    @property
    def transition(self) -> Transition:
        return self._transition

    @property
    def eltype(self) -> type | None:
        return self._eltype

    def step(self, state: S) -> tuple[T, S] | None:
        result = self._transition(state)
        if result is None:
            logger.debug(f"Transition signalled the end of the sequence at state {state!r}")
            return None
        if not isinstance(result, tuple) or len(result) != 2:
            raise MalformedTransitionResult(
                f"Transition must return None or an (element, next_state) pair, got {result!r} for state {state!r}"
            )
        return result


class Unfolder:
    """
    Curried unfold: transition, eltype and size bundled up, waiting only for
    the initial state.
    """

    def __init__(
        self, transition: Transition, *, eltype: type | None = None, size=SIZE_UNKNOWN
    ):
        self.sequence = Unfold(transition, eltype)
        self.size = normalize(size)

    def __call__(self, initial_state: Any) -> ResumableView:
        return make_view(self.sequence, initial_state, size=self.size)


def unfold(
    transition: Transition,
    initial_state: Any = _NO_STATE,
    *,
    eltype: type | None = None,
    size=SIZE_UNKNOWN,
):
    """
    unfold(transition, initial_state, *, eltype=None, size=SIZE_UNKNOWN)

    Lazy sequence of the elements produced by `transition` starting from
    `initial_state`. This is a while loop in iterator form:

        acc = []
        state = initial_state
        while (x := transition(state)) is not None:
            element, state = x
            acc.append(element)

    `eltype` declares the element type ahead of traversal. `size` is one of:

    - an integer, the number of elements
    - a tuple of integers, the shape of the sequence (length is their product)
    - IS_INFINITE, the sequence never ends
    - SIZE_UNKNOWN, the default

    Sizes are taken on trust; a wrong declaration only shows up when a
    consumer materializes the sequence.

    Leaving out `initial_state` returns an Unfolder which builds the view once
    it is called with one:

        fib = unfold(lambda ab: (ab[0], (ab[1], ab[0] + ab[1])), eltype=int)
        list(itertools.islice(fib((1, 1)), 4))  # [1, 1, 2, 3]
    """
    if initial_state is _NO_STATE:
        return Unfolder(transition, eltype=eltype, size=size)
    return make_view(Unfold(transition, eltype), initial_state, size=size)
