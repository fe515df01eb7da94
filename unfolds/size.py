# Copyright (c) Meta Platforms, Inc. and affiliates.
import math
import operator
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from unfolds import InvalidSizeArgument

Dim = Annotated[StrictInt, Field(ge=0)]


class Unknown(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["unknown"] = "unknown"


class Infinite(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["infinite"] = "infinite"


class Exact(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["exact"] = "exact"
    length: Dim

    def __init__(self, length: int, **kwargs):
        try:
            super().__init__(length=length, **kwargs)
        except ValidationError as e:
            raise InvalidSizeArgument(f"Invalid exact size {length!r}: {e}") from e


class Shaped(BaseModel):
    """
    Multi-dimensional extent. The flat length is prod(dims); consumers that
    reshape fill in row-major (C) order unless told otherwise.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
    kind: Literal["shaped"] = "shaped"
    dims: Annotated[tuple[Dim, ...], Field(min_length=1)]

    def __init__(self, dims: tuple[int, ...], **kwargs):
        try:
            super().__init__(dims=dims, **kwargs)
        except ValidationError as e:
            raise InvalidSizeArgument(f"Invalid shape {dims!r}: {e}") from e

    @property
    def length(self) -> int:
        return math.prod(self.dims)

    @property
    def ndim(self) -> int:
        return len(self.dims)


SizeClass = Annotated[
    Union[Unknown, Infinite, Exact, Shaped], Field(discriminator="kind")
]
SIZE_CLASSES = (Unknown, Infinite, Exact, Shaped)

SIZE_UNKNOWN = Unknown()
IS_INFINITE = Infinite()


def _as_dim(raw: Any) -> int | None:
    # bool is an int subclass but never a size
    if isinstance(raw, bool):
        return None
    try:
        value = operator.index(raw)
    except TypeError:
        return None
    if value < 0:
        return None
    return value


def normalize(raw: Any) -> SizeClass:
    """
    Map a raw size argument onto a SizeClass:

    - SIZE_UNKNOWN / IS_INFINITE markers (or any SizeClass value) pass through
    - a non-negative integer n becomes Exact(n)
    - a non-empty tuple of non-negative integers becomes Shaped(dims)

    Anything else raises InvalidSizeArgument.
    """
    if isinstance(raw, SIZE_CLASSES):
        return raw
    if isinstance(raw, tuple):
        if len(raw) == 0:
            raise InvalidSizeArgument("A shaped size needs at least one dimension")
        dims = tuple(_as_dim(d) for d in raw)
        if any(d is None for d in dims):
            raise InvalidSizeArgument(
                f"Every dimension of a shaped size must be a non-negative integer, got {raw!r}"
            )
        return Shaped(dims)
    n = _as_dim(raw)
    if n is None:
        raise InvalidSizeArgument(
            f"size must be SIZE_UNKNOWN, IS_INFINITE, a non-negative integer or a tuple of them, got {raw!r}"
        )
    return Exact(n)
