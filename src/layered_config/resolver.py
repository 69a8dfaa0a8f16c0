from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class WalkingResolver:
    """
    Locate a config file by walking up parent directories.

    A relative hint is tried against `base_dir` first, then against each parent up to
    `max_depth` levels. `base_dir` defaults to the working directory at call time.
    """

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else None

    def resolve(self, path_hint: str, max_depth: int) -> Optional[Path]:
        hint = Path(path_hint).expanduser()
        if hint.is_absolute():
            return hint if hint.is_file() else None

        directory = (self._base_dir or Path.cwd()).resolve()
        for _ in range(max(0, max_depth) + 1):
            candidate = directory / hint
            if candidate.is_file():
                logger.debug("Resolved config path. hint=%s path=%s", path_hint, candidate)
                return candidate
            if directory.parent == directory:
                break
            directory = directory.parent

        logger.debug("Config path not found. hint=%s max_depth=%s", path_hint, max_depth)
        return None
