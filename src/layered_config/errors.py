from __future__ import annotations

from typing import Sequence


class ConfigError(RuntimeError):
    """Base class for every error raised while loading or saving configuration."""


class ConfigReadError(ConfigError):
    """A source could not be parsed or did not fit the schema."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"failed to read config from {source}: {message}")


class ConfigValidationError(ConfigError):
    """Required fields are still unset after every source was merged."""

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"empty fields: [{', '.join(self.fields)}]")


class ConfigPathNotFoundError(ConfigError):
    def __init__(self, path_hint: str) -> None:
        self.path_hint = path_hint
        super().__init__(f"config path not found: {path_hint}")


class UnsupportedFormatError(ConfigError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"no serializer for config file: {path}")


class ConfigSchemaError(ConfigError):
    """The merged configuration breaks a validator declared on the schema."""

    def __init__(self, schema: str, message: str) -> None:
        self.schema = schema
        super().__init__(f"config does not satisfy {schema}: {message}")
