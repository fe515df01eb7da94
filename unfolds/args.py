# Copyright (c) Meta Platforms, Inc. and affiliates.
import logging
from typing import Iterable

import numpy as np
import yaml
from pydantic import BaseModel, ConfigDict

from unfolds.collect import MemoryOrder, MismatchPolicy, collect

logger = logging.getLogger()


class CollectArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")
    order: MemoryOrder = MemoryOrder.C
    on_mismatch: MismatchPolicy = MismatchPolicy.raise_
    # Anything np.dtype accepts, e.g. "int64" or "complex128"
    dtype: str | None = None

    def collect(self, itr: Iterable) -> np.ndarray:
        return collect(
            itr, dtype=self.dtype, order=self.order, on_mismatch=self.on_mismatch
        )

    def dump_to_yaml_file(
        self, path: str, log_config: bool = True, sort_keys: bool = True
    ):
        model_dict = self.model_dump(mode="json")
        yaml_str = yaml.dump(
            model_dict,
            allow_unicode=True,
            sort_keys=sort_keys,
            default_flow_style=False,
        )
        with open(path, "w") as f:
            if log_config:
                logger.info("Using the following collect config:")
                logger.info(yaml_str)
            f.write(yaml_str)

    @classmethod
    def from_yaml_file(cls, path: str) -> "CollectArgs":
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})
