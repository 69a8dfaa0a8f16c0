from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ProcessEnvironment:
    """
    The process environment, optionally seeded from a .env file.

    The .env file is loaded once on construction and never overrides variables that are
    already set.
    """

    def __init__(self, dotenv_path: Optional[str | Path] = None) -> None:
        if dotenv_path is not None:
            _load_dotenv_if_present(Path(dotenv_path))

    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)


class MappingEnvironment:
    """An in-memory environment backed by a plain mapping."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)


def _load_dotenv_if_present(dotenv_path: Path) -> None:
    if not dotenv_path.exists():
        logger.debug("No .env file found. path=%s", dotenv_path)
        return
    load_dotenv(dotenv_path=dotenv_path, override=False)
    logger.debug("Loaded .env file. path=%s", dotenv_path)
