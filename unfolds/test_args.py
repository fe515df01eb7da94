# Copyright (c) Meta Platforms, Inc. and affiliates.
import pydantic
import pytest

from unfolds import unfold
from unfolds.args import CollectArgs
from unfolds.collect import MemoryOrder, MismatchPolicy


def one_to_nine(size):
    return unfold(lambda x: None if x > 9 else (x, x + 1), 1, eltype=int, size=size)


def test_collect_args_defaults():
    args = CollectArgs()
    assert args.order == MemoryOrder.C
    assert args.on_mismatch == MismatchPolicy.raise_
    assert args.collect(one_to_nine((3, 3))).tolist() == [
        [1, 2, 3],
        [4, 5, 6],
        [7, 8, 9],
    ]


def test_collect_args_column_major():
    args = CollectArgs(order="F", dtype="int32")
    out = args.collect(one_to_nine((3, 3)))
    assert out.dtype.name == "int32"
    assert out.tolist() == [[1, 4, 7], [2, 5, 8], [3, 6, 9]]


def test_collect_args_rejects_unknown_fields():
    with pytest.raises(pydantic.ValidationError):
        CollectArgs(ordering="C")
    with pytest.raises(pydantic.ValidationError):
        CollectArgs(on_mismatch="pad")


def test_collect_args_yaml_round_trip(tmp_path):
    path = str(tmp_path / "collect.yaml")
    args = CollectArgs(order="F", on_mismatch="truncate", dtype="float64")
    args.dump_to_yaml_file(path)
    with open(path) as f:
        text = f.read()
    assert "on_mismatch: truncate" in text
    assert "order: F" in text
    assert CollectArgs.from_yaml_file(path) == args


def test_collect_args_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert CollectArgs.from_yaml_file(str(path)) == CollectArgs()
