# Copyright (c) Meta Platforms, Inc. and affiliates.
import itertools

import numpy as np
import pytest

from unfolds import (
    IS_INFINITE,
    Exact,
    Infinite,
    Shaped,
    Unfold,
    Unknown,
    element_type,
    has_element_type,
    length,
    resume,
    shape,
    size_classification,
    unfold,
)


def naturals(**kwargs):
    return unfold(lambda n: (n, n + 1), 0, **kwargs)


def test_size_classification_round_trips():
    assert size_classification(naturals(size=7)) == Exact(7)
    assert size_classification(naturals(size=Exact(7))) == Exact(7)
    assert size_classification(naturals(size=(2, 5))) == Shaped((2, 5))
    assert size_classification(naturals(size=IS_INFINITE)) == Infinite()
    assert size_classification(naturals()) == Unknown()


def test_size_classification_is_not_verified():
    # declared size is reported as is, even when obviously wrong
    itr = unfold(lambda x: None, 0, size=100)
    assert size_classification(itr) == Exact(100)
    assert list(itr) == []
    assert size_classification(itr) == Exact(100)


def test_size_classification_of_other_objects():
    assert size_classification(Unfold(lambda x: None)) == Unknown()
    assert size_classification([1, 2, 3]) == Exact(3)
    assert size_classification(np.zeros((2, 3))) == Shaped((2, 3))
    assert size_classification(x for x in range(3)) == Unknown()
    assert size_classification(itertools.count()) == Unknown()


def test_element_type():
    itr = naturals(eltype=int, size=IS_INFINITE)
    assert element_type(itr) is int
    assert has_element_type(itr)
    for _ in range(5):
        next(itr)
        assert element_type(itr) is int
    assert element_type(resume(itr, 10)) is int
    assert element_type(naturals()) is None
    assert not has_element_type(naturals())
    assert element_type(np.zeros(3, dtype=np.float32)) is np.float32
    assert element_type([1, 2]) is None


def test_length_and_shape():
    assert length(naturals(size=9)) == 9
    assert shape(naturals(size=9)) == (9,)
    assert length(naturals(size=(3, 3))) == 9
    assert shape(naturals(size=(3, 3))) == (3, 3)
    assert length(Shaped((2, 0))) == 0
    assert length([1, 2]) == 2
    assert shape(np.zeros((4, 2))) == (4, 2)


@pytest.mark.parametrize("size", [IS_INFINITE, Unknown()])
def test_length_and_shape_unavailable(size):
    with pytest.raises(TypeError):
        length(naturals(size=size))
    with pytest.raises(TypeError):
        shape(naturals(size=size))
