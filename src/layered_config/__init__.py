"""Typed configuration assembled from layered file and environment sources."""

from layered_config.environment import MappingEnvironment, ProcessEnvironment
from layered_config.errors import (
    ConfigError,
    ConfigPathNotFoundError,
    ConfigReadError,
    ConfigSchemaError,
    ConfigValidationError,
    UnsupportedFormatError,
)
from layered_config.loader import ConfigLoadRequest, LayeredConfigLoader, get_config
from layered_config.merge import merge_into
from layered_config.models import LayeredModel, LoggingSettings
from layered_config.readers import EnvironmentReader, FileReader
from layered_config.resolver import WalkingResolver
from layered_config.saver import save_config
from layered_config.validation import find_empty_required_fields

__all__ = [
    "ConfigError",
    "ConfigLoadRequest",
    "ConfigPathNotFoundError",
    "ConfigReadError",
    "ConfigSchemaError",
    "ConfigValidationError",
    "EnvironmentReader",
    "FileReader",
    "LayeredConfigLoader",
    "LayeredModel",
    "LoggingSettings",
    "MappingEnvironment",
    "ProcessEnvironment",
    "UnsupportedFormatError",
    "WalkingResolver",
    "find_empty_required_fields",
    "get_config",
    "merge_into",
    "save_config",
]
