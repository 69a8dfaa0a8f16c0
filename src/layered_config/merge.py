"""
Recursive merge of configuration instances.

Earlier layers win: a leaf that already holds a non-zero value is never overwritten,
and nested structures are merged leaf by leaf instead of being replaced wholesale.
"""

from __future__ import annotations

import copy
from typing import TypeVar

from layered_config.models import LayeredModel, field_specs, is_zero

T = TypeVar("T", bound=LayeredModel)


def merge_into(dst: T, src: T) -> None:
    """
    Merge `src` into `dst` in place. `src` is never modified.

    Both instances must share one schema type; fields are paired by their declared
    position in that schema.

    A source value equal to the zero value (0, "", False) cannot be told apart from
    "unset", so it stays eligible for replacement by a later non-zero source.
    """
    if type(src) is not type(dst):
        raise TypeError(f"cannot merge {type(src).__name__} into {type(dst).__name__}")

    for spec in field_specs(type(dst)):
        src_value = getattr(src, spec.name)
        if spec.nested is not None:
            merge_into(getattr(dst, spec.name), src_value)
            continue
        zero = spec.zero()
        if is_zero(getattr(dst, spec.name), zero) and not is_zero(src_value, zero):
            setattr(dst, spec.name, copy.copy(src_value))


def apply_defaults(instance: LayeredModel) -> None:
    """Give every zero-valued optional leaf its declared default, recursively."""
    for spec in field_specs(type(instance)):
        if spec.nested is not None:
            apply_defaults(getattr(instance, spec.name))
            continue
        if spec.required or not is_zero(getattr(instance, spec.name), spec.zero()):
            continue
        setattr(instance, spec.name, spec.default())
