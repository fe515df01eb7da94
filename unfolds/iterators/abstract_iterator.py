# Copyright (c) Meta Platforms, Inc. and affiliates.
import abc
from typing import Any, Generator, Generic, TypeVar

from unfolds.size import SIZE_UNKNOWN, SizeClass

T = TypeVar("T")
C = TypeVar("C")
S = TypeVar("S")


class StatefulIterator(Generic[T, C], abc.ABC):

    @abc.abstractmethod
    def get_state(self) -> C:
        pass

    @abc.abstractmethod
    def create_iter(self) -> Generator[T, Any, None]:
        pass


class IteratorState(Generic[C]):
    @abc.abstractmethod
    def build(self) -> StatefulIterator[T, C]:
        pass


class SteppableSequence(Generic[T, S], abc.ABC):
    """
    A sequence driven by an explicit state. step(state) returns
    (element, next_state), or None once the sequence is exhausted.
    """

    @abc.abstractmethod
    def step(self, state: S) -> tuple[T, S] | None:
        pass

    @property
    def eltype(self) -> type | None:
        return None

    @property
    def size(self) -> SizeClass:
        return SIZE_UNKNOWN
