from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError

from layered_config.environment import ProcessEnvironment
from layered_config.errors import ConfigReadError, ConfigSchemaError, ConfigValidationError
from layered_config.interfaces import (
    EnvironmentSource,
    EnvironmentSourceReader,
    FieldValidator,
    FileSourceReader,
    SourceResolver,
)
from layered_config.merge import apply_defaults, merge_into
from layered_config.models import LayeredModel
from layered_config.readers import ENVIRONMENT_SOURCE, EnvironmentReader, FileReader
from layered_config.resolver import WalkingResolver
from layered_config.validation import find_empty_required_fields

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=LayeredModel)


@dataclass(frozen=True, slots=True)
class ConfigLoadRequest:
    """
    Where to read configuration layers from.

    Earlier paths take precedence over later ones. Every path is searched for up to
    `search_depth` parent directories; a path that resolves to nothing is replaced by
    the environment.
    """

    paths: Sequence[str] = ()
    search_depth: int = 0


class LayeredConfigLoader:
    """
    Builds one validated configuration instance from an ordered list of sources.

    For each path: resolve it to a file and read that file, or read the environment when
    no file is found, then merge the result into the accumulator (first value wins).
    Declared defaults fill whatever is still unset, and the result is rejected if any
    required field remains empty. The merged result is finally validated as a whole, so
    the schema's own field and model validators run once on the final values.
    """

    def __init__(
        self,
        *,
        resolver: Optional[SourceResolver] = None,
        file_reader: Optional[FileSourceReader] = None,
        environment: Optional[EnvironmentSource] = None,
        env_reader: Optional[EnvironmentSourceReader] = None,
        validator: Optional[FieldValidator] = None,
    ) -> None:
        self._resolver = resolver or WalkingResolver()
        self._file_reader = file_reader or FileReader()
        self._env_reader = env_reader or EnvironmentReader(environment or ProcessEnvironment())
        self._validator = validator or find_empty_required_fields

    def load(self, schema: Type[T], request: ConfigLoadRequest) -> T:
        config = schema.zero()

        for path_hint in request.paths:
            layer = schema.zero()
            config_path = self._resolver.resolve(path_hint, request.search_depth)
            if config_path is not None:
                source = str(config_path)
                _read_layer(source, self._file_reader.read, config_path, layer)
            else:
                source = ENVIRONMENT_SOURCE
                _read_layer(source, self._env_reader.read, layer)
            merge_into(config, layer)
            logger.debug("Merged config layer. hint=%s source=%s", path_hint, source)

        apply_defaults(config)

        empty_fields = self._validator(config, "")
        if empty_fields:
            raise ConfigValidationError(empty_fields)

        # Field and model validators declared on the schema only see the merged result.
        try:
            config = schema.model_validate(config.model_dump(by_alias=True))
        except ValidationError as exc:
            raise ConfigSchemaError(schema.__name__, str(exc)) from exc

        logger.info("Config loaded. schema=%s layers=%d", schema.__name__, len(request.paths))
        return config


def _read_layer(source: str, read: Callable[..., None], *args: Any) -> None:
    # Collaborators may raise anything; the caller always sees which source failed.
    try:
        read(*args)
    except ConfigReadError:
        raise
    except Exception as exc:
        raise ConfigReadError(source, str(exc)) from exc


def get_config(
    schema: Type[T],
    paths: Sequence[str | Path],
    search_depth: int = 0,
    *,
    dotenv_path: Optional[str | Path] = None,
    resolver: Optional[SourceResolver] = None,
    environment: Optional[EnvironmentSource] = None,
) -> T:
    """
    Load `schema` from `paths` with the default readers.

    Raises:
        ConfigReadError: A file or the environment could not be read.
        ConfigValidationError: Required fields are unset after merging every source.
        ConfigSchemaError: A validator declared on the schema rejects the merged result.
    """
    if environment is None:
        environment = ProcessEnvironment(dotenv_path=dotenv_path)
    loader = LayeredConfigLoader(resolver=resolver, environment=environment)
    request = ConfigLoadRequest(paths=tuple(str(p) for p in paths), search_depth=search_depth)
    return loader.load(schema, request)
