from __future__ import annotations

import collections.abc
import copy
import enum
import types
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any, ClassVar, Literal, Optional, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

_ZERO_TYPES: Tuple[type, ...] = (bool, int, float, complex, str, bytes, list, tuple, set, frozenset, dict)
_CONTAINER_ZEROS: Tuple[type, ...] = (list, tuple, set, frozenset, dict)


def zero_value(annotation: Any) -> Any:
    """
    Return the zero value of a leaf annotation.

    Optional and union leaves zero to None, so an explicit 0 or "" stored in them is
    distinguishable from "unset".
    """
    origin = get_origin(annotation)
    if origin is Annotated:
        return zero_value(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType or origin is Literal:
        return None

    target = origin or annotation
    if not isinstance(target, type):
        return None
    if issubclass(target, LayeredModel):
        return target.zero()
    if issubclass(target, enum.Enum):
        return None
    for zero_type in _ZERO_TYPES:
        if issubclass(target, zero_type):
            return zero_type()
    if issubclass(target, collections.abc.Mapping):
        return {}
    if issubclass(target, collections.abc.Set):
        return frozenset()
    if issubclass(target, collections.abc.Sequence):
        return []
    return None


def is_zero(value: Any, zero: Any) -> bool:
    if zero is None:
        return value is None
    if isinstance(zero, _CONTAINER_ZEROS):
        # Any empty container is unset, whatever concrete type validation produced.
        return isinstance(value, collections.abc.Collection) and not isinstance(value, (str, bytes)) and len(value) == 0
    return value == zero


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One schema field, classified once per schema class."""

    name: str
    key: str
    annotation: Any
    info: FieldInfo
    nested: Optional[Type["LayeredModel"]]

    @property
    def required(self) -> bool:
        return self.nested is None and self.info.is_required()

    def zero(self) -> Any:
        if self.nested is not None:
            return self.nested.zero()
        return copy.copy(_leaf_zero(self.annotation))

    def default(self) -> Any:
        """Declared default of an optional leaf, or the zero value."""
        if self.nested is not None or self.info.is_required():
            return self.zero()
        return copy.copy(self.info.get_default(call_default_factory=True))

    def extra(self, key: str) -> Any:
        extra = self.info.json_schema_extra
        if isinstance(extra, dict):
            return extra.get(key)
        return None


def _leaf_zero(annotation: Any) -> Any:
    try:
        return _cached_leaf_zero(annotation)
    except TypeError:
        # Unhashable annotations (e.g. Annotated with dict metadata).
        return zero_value(annotation)


@lru_cache(maxsize=None)
def _cached_leaf_zero(annotation: Any) -> Any:
    return zero_value(annotation)


def _nested_model(annotation: Any) -> Optional[Type["LayeredModel"]]:
    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    if isinstance(annotation, type) and issubclass(annotation, LayeredModel):
        return annotation
    return None


@lru_cache(maxsize=None)
def field_specs(model: Type["LayeredModel"]) -> Tuple[FieldSpec, ...]:
    """The declared fields of a schema class, in declaration order."""
    specs = []
    for name, info in model.model_fields.items():
        specs.append(
            FieldSpec(
                name=name,
                key=info.alias or name,
                annotation=info.annotation,
                info=info,
                nested=_nested_model(info.annotation),
            )
        )
    return tuple(specs)


class LayeredModel(BaseModel):
    """
    Base class for configuration schemas that can be assembled from layered sources.

    Nested structures are fields annotated with another LayeredModel subclass. Leaves
    declared without a default are required; leaves with a default are optional and
    receive the default only when no source sets them.

    Schemas must stay mutable: the loader merges sources into one instance in place.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    # Prepended to every environment variable name derived from this schema.
    env_prefix: ClassVar[str] = ""

    @classmethod
    def zero(cls):
        """Build an instance with every leaf at its zero value, skipping validation."""
        values = {spec.name: spec.zero() for spec in field_specs(cls)}
        return cls.model_construct(_fields_set=set(), **values)

    def merge_from(self, other: "LayeredModel") -> None:
        """Fill zero-valued leaves of this instance from `other`, recursively."""
        from layered_config.merge import merge_into

        merge_into(self, other)


class FileRotationSettings(LayeredModel):
    """Daily rotation of the log file, as done by TimedRotatingFileHandler."""

    backup_count: int = 5


class FileLoggingSettings(LayeredModel):
    # Empty disables file logging.
    path: str = ""
    rotation: FileRotationSettings = Field(default_factory=FileRotationSettings)


class LoggingSettings(LayeredModel):
    """Logging section that host applications can embed in their own schema."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: FileLoggingSettings = Field(default_factory=FileLoggingSettings)
