# Copyright (c) Meta Platforms, Inc. and affiliates.
from logging import getLogger
from typing import Any, Generator

from pydantic import BaseModel, ConfigDict, Field

from unfolds.iterators.abstract_iterator import (
    IteratorState,
    StatefulIterator,
    SteppableSequence,
)
from unfolds.iterators.indexed_iterator import IndexedSequence
from unfolds.size import IS_INFINITE, SIZE_UNKNOWN, Infinite, SizeClass, normalize

logger = getLogger(__name__)


class ResumableViewState(BaseModel, IteratorState):
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)
    state: Any
    size: SizeClass = SIZE_UNKNOWN
    exhausted: bool = False
    sequence: SteppableSequence = Field(exclude=True)

    def build(self) -> "ResumableView":
        view = ResumableView(self.sequence, self.state, size=self.size)
        view.exhausted = self.exhausted
        return view


class ResumableView(StatefulIterator):
    """
    Yields the same elements as `sequence`, but starting at `state`, and
    reports `size` instead of whatever the sequence itself knows.

    Iterating advances the view's own state one element at a time and never
    runs ahead of the consumer, so `view.state` is always the continuation of
    what has been consumed so far. The wrapped sequence is never modified;
    any number of views may share it.
    """

    def __init__(self, sequence: SteppableSequence, state: Any, *, size=SIZE_UNKNOWN):
        self.sequence = sequence
        self.state = state
        self.size = normalize(size)
        self.exhausted = False

    @property
    def eltype(self) -> type | None:
        return self.sequence.eltype

    def get_state(self) -> ResumableViewState:
        return ResumableViewState(
            state=self.state,
            size=self.size,
            exhausted=self.exhausted,
            sequence=self.sequence,
        )

    def __iter__(self):
        return self

    def __next__(self):
        if self.exhausted:
            raise StopIteration
        result = self.sequence.step(self.state)
        if result is None:
            self.exhausted = True
            raise StopIteration
        element, self.state = result
        return element

    def create_iter(self) -> Generator[Any, Any, None]:
        yield from self

    def __repr__(self):
        return f"ResumableView({self.sequence!r}, state={self.state!r}, size={self.size!r})"


def make_view(sequence: SteppableSequence, initial_state: Any, *, size=SIZE_UNKNOWN):
    return ResumableView(sequence, initial_state, size=size)


def _inherited_size(source: Any) -> SizeClass:
    # Resuming never makes an infinite sequence finite unless told so
    if isinstance(source, ResumableView) and isinstance(source.size, Infinite):
        return IS_INFINITE
    if isinstance(source, SteppableSequence) and isinstance(source.size, Infinite):
        return IS_INFINITE
    return SIZE_UNKNOWN


def resume(sequence: Any, state: Any, size=None) -> ResumableView:
    """
    resume(sequence, state, size=None)

    A view that yields the same elements as `sequence`, starting at `state`.
    `sequence` may be an existing view (the new view wraps the same underlying
    sequence), any SteppableSequence, or a Python sequence / numpy array, in
    which case the state is an index:

        list(resume([1, 2, 3, 4], 1))  # [2, 3, 4]

    `size` re-declares what remains after `state`. When left out it is
    IS_INFINITE for infinite sources and SIZE_UNKNOWN otherwise.
    """
    new_size = _inherited_size(sequence) if size is None else normalize(size)
    if isinstance(sequence, ResumableView):
        underlying = sequence.sequence
    elif isinstance(sequence, SteppableSequence):
        underlying = sequence
    elif IndexedSequence.supports(sequence):
        underlying = IndexedSequence(sequence)
    else:
        raise TypeError(
            f"Cannot resume {type(sequence).__name__}: expected a ResumableView, a SteppableSequence, a sequence or a numpy array"
        )
    logger.debug(f"Resuming {type(underlying).__name__} at state {state!r} with size {new_size!r}")
    return ResumableView(underlying, state, size=new_size)
