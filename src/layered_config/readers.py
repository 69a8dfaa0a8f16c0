from __future__ import annotations

import collections.abc
import dataclasses
import json
import logging
import tomllib
import types
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, Mapping, Optional, Type, Union, get_args, get_origin, is_typeddict

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from layered_config.errors import ConfigReadError
from layered_config.interfaces import EnvironmentSource
from layered_config.models import LayeredModel, field_specs

logger = logging.getLogger(__name__)

ENVIRONMENT_SOURCE = "environment"
_NESTING_SEPARATOR = "__"
_STRUCTURED_SUFFIXES = {".yaml", ".yml", ".json", ".toml"}

# Schema settings that change how a single value is validated.
_VALIDATION_CONFIG_KEYS = (
    "strict",
    "str_strip_whitespace",
    "str_to_lower",
    "str_to_upper",
    "str_min_length",
    "str_max_length",
    "coerce_numbers_to_str",
    "arbitrary_types_allowed",
    "use_enum_values",
    "allow_inf_nan",
    "regex_engine",
    "hide_input_in_errors",
    "val_json_bytes",
)


def is_dotenv_path(path: Path) -> bool:
    """True for .env, *.env and .env.<name> files such as .env.local."""
    name = path.name.lower()
    if name == ".env" or path.suffix.lower() == ".env":
        return True
    return name.startswith(".env.") and path.suffix.lower() not in _STRUCTURED_SUFFIXES


def _has_own_config(annotation: Any) -> bool:
    # TypeAdapter refuses a config for types that carry their own.
    if not isinstance(annotation, type):
        return False
    return issubclass(annotation, BaseModel) or dataclasses.is_dataclass(annotation) or is_typeddict(annotation)


def _validation_config(model: Type[LayeredModel]) -> Optional[ConfigDict]:
    values = {key: model.model_config[key] for key in _VALIDATION_CONFIG_KEYS if key in model.model_config}
    return ConfigDict(**values) if values else None


@lru_cache(maxsize=None)
def _field_adapter(model: Type[LayeredModel], name: str) -> TypeAdapter:
    info = model.model_fields[name]
    config = None if _has_own_config(info.annotation) else _validation_config(model)
    annotation = info.annotation
    if info.metadata:
        annotation = Annotated[(annotation, *info.metadata)]
    return TypeAdapter(annotation, config=config)


def _is_container(annotation: Any) -> bool:
    origin = get_origin(annotation)
    if origin is Annotated:
        return _is_container(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        return len(args) == 1 and _is_container(args[0])
    target = origin or annotation
    if not isinstance(target, type) or issubclass(target, (str, bytes)):
        return False
    return issubclass(target, (collections.abc.Mapping, collections.abc.Sequence, collections.abc.Set))


def _join(key_path: str, key: Any) -> str:
    return f"{key_path}.{key}" if key_path else str(key)


def populate(
    instance: LayeredModel,
    data: Mapping[Any, Any],
    *,
    source: str,
    from_strings: bool = False,
    key_path: str = "",
) -> None:
    """
    Copy the values present in `data` onto `instance`, validating each leaf on its own.

    Keys that are absent leave their field at the zero value. With `from_strings`, leaves
    of container type are decoded from JSON text first.
    """
    model = type(instance)
    by_key = {}
    for spec in field_specs(model):
        by_key[spec.key] = spec
        by_key.setdefault(spec.name, spec)

    if model.model_config.get("extra") == "forbid":
        unknown = [key for key in data if key not in by_key]
        if unknown:
            raise ConfigReadError(source, f"unknown configuration key: {_join(key_path, unknown[0])}")

    for key, value in data.items():
        spec = by_key.get(key)
        if spec is None:
            continue
        dotted = _join(key_path, spec.name)

        if spec.nested is not None:
            if value is None:
                continue
            if not isinstance(value, Mapping):
                raise ConfigReadError(source, f"{dotted} must be a mapping, got {type(value).__name__}")
            populate(getattr(instance, spec.name), value, source=source, from_strings=from_strings, key_path=dotted)
            continue

        if from_strings and isinstance(value, str) and _is_container(spec.annotation):
            try:
                value = json.loads(value)
            except ValueError as exc:
                raise ConfigReadError(source, f"{dotted} must be JSON: {exc}") from exc
        try:
            validated = _field_adapter(model, spec.name).validate_python(value)
        except ValidationError as exc:
            raise ConfigReadError(source, f"invalid value for {dotted}: {exc}") from exc
        setattr(instance, spec.name, validated)


def _nest_dotenv(values: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    nested: Dict[str, Any] = {}
    for name, value in values.items():
        if value is None:
            continue
        segments = [segment.lower() for segment in name.split(_NESTING_SEPARATOR) if segment]
        if not segments:
            continue
        cur = nested
        for segment in segments[:-1]:
            cur = cur.setdefault(segment, {})
            if not isinstance(cur, dict):
                raise ValueError(f"{name} conflicts with a value set for {segment}")
        cur[segments[-1]] = value
    return nested


class FileReader:
    """
    Reads one config file, picking the parser from the file extension.

    Supported: .yaml/.yml, .json, .toml and dotenv files (.env, *.env, .env.local and
    other .env.<name> files). Anything else is parsed as YAML.
    """

    def read(self, path: Path, instance: LayeredModel) -> None:
        source = str(path)
        data, from_strings = self._parse(path)
        populate(instance, data, source=source, from_strings=from_strings)
        logger.debug("Read config layer from file. path=%s keys=%d", source, len(data))

    def _parse(self, path: Path) -> tuple[Mapping[Any, Any], bool]:
        suffix = path.suffix.lower()
        is_dotenv = is_dotenv_path(path)
        try:
            if is_dotenv:
                data: Any = _nest_dotenv(dotenv_values(path))
            else:
                text = path.read_text(encoding="utf-8")
                if not text.strip():
                    data = {}
                elif suffix == ".json":
                    data = json.loads(text)
                elif suffix == ".toml":
                    data = tomllib.loads(text)
                else:
                    data = yaml.safe_load(text)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ConfigReadError(str(path), str(exc)) from exc

        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigReadError(str(path), f"top-level document must be a mapping, got {type(data).__name__}")
        return data, is_dotenv


class EnvironmentReader:
    """
    Populates a schema from environment variables.

    The variable for a leaf is the schema's `env_prefix` followed by the upper-cased field
    path joined with "__" (e.g. APP_DATABASE__HOST). A leaf can name its variable with
    `Field(json_schema_extra={"env": "NAME"})`; a nested field can replace its path
    segment with `Field(json_schema_extra={"env_prefix": "DB_"})`.
    """

    def __init__(self, environment: EnvironmentSource) -> None:
        self._environment = environment

    def read(self, instance: LayeredModel) -> None:
        data = self._collect(type(instance), type(instance).env_prefix)
        populate(instance, data, source=ENVIRONMENT_SOURCE, from_strings=True)
        logger.debug("Read config layer from environment. keys=%d", len(data))

    def _collect(self, model: Type[LayeredModel], prefix: str) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for spec in field_specs(model):
            if spec.nested is not None:
                segment = spec.extra("env_prefix")
                if segment is None:
                    segment = spec.name.upper() + _NESTING_SEPARATOR
                nested = self._collect(spec.nested, prefix + segment)
                if nested:
                    data[spec.key] = nested
                continue

            name = prefix + (spec.extra("env") or spec.name.upper())
            value = self._environment.get(name)
            if value is not None:
                data[spec.key] = value
        return data
