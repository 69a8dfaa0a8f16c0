from __future__ import annotations

from typing import List

from layered_config.models import LayeredModel, field_specs, is_zero


def find_empty_required_fields(instance: LayeredModel, path_prefix: str = "") -> List[str]:
    """
    Return the dotted paths of required leaves that still hold their zero value.

    Every unset field is reported, in declaration order, not only the first one.
    """
    if not isinstance(instance, LayeredModel):
        raise TypeError(f"expected a LayeredModel instance, got {type(instance).__name__}")

    empty: List[str] = []
    for spec in field_specs(type(instance)):
        path = f"{path_prefix}.{spec.name}" if path_prefix else spec.name
        value = getattr(instance, spec.name)
        if spec.nested is not None:
            empty.extend(find_empty_required_fields(value, path))
        elif spec.required and is_zero(value, spec.zero()):
            empty.append(path)
    return empty
