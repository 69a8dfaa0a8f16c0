from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel

from layered_config.errors import ConfigPathNotFoundError, UnsupportedFormatError
from layered_config.interfaces import SourceResolver
from layered_config.readers import is_dotenv_path
from layered_config.resolver import WalkingResolver

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}
_UNWRITABLE_SUFFIXES = {".toml"}


def _serialize(value: Any, path: Path) -> str:
    suffix = path.suffix.lower()
    if is_dotenv_path(path) or suffix in _UNWRITABLE_SUFFIXES:
        raise UnsupportedFormatError(str(path))

    payload = value.model_dump(mode="json", by_alias=True) if isinstance(value, BaseModel) else value
    if suffix in _YAML_SUFFIXES:
        return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    return json.dumps(payload, indent=2)


def _atomic_write_text(path: Path, text: str) -> None:
    # Write through symlinks and keep the permissions of the file being replaced.
    target = path.resolve()
    tmp_path = target.with_suffix(target.suffix + ".tmp")
    try:
        tmp_path.write_text(text, encoding="utf-8")
        shutil.copymode(target, tmp_path)
        tmp_path.replace(target)
    finally:
        tmp_path.unlink(missing_ok=True)


def save_config(
    value: Any,
    path_hint: str | Path,
    search_depth: int = 0,
    *,
    resolver: Optional[SourceResolver] = None,
) -> Path:
    """
    Serialize `value` over an existing config file.

    The file is located the same way the loader locates it; this never creates a new
    file. YAML files are written as YAML, everything else as JSON. Serializer and OS
    errors propagate unchanged.

    Raises:
        ConfigPathNotFoundError: No existing file matches `path_hint`.
        UnsupportedFormatError: The file is TOML or dotenv.
    """
    resolver = resolver or WalkingResolver()
    config_path = resolver.resolve(str(path_hint), search_depth)
    if config_path is None:
        raise ConfigPathNotFoundError(str(path_hint))

    _atomic_write_text(config_path, _serialize(value, config_path))
    logger.info("Config saved. path=%s", config_path)
    return config_path
