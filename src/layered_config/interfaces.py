from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Protocol

from layered_config.models import LayeredModel


class SourceResolver(Protocol):
    def resolve(self, path_hint: str, max_depth: int) -> Optional[Path]:
        """Return the concrete file for `path_hint`, or None when nothing is found."""


class FileSourceReader(Protocol):
    def read(self, path: Path, instance: LayeredModel) -> None:
        """Populate `instance` from the file at `path`. Raises ConfigReadError."""


class EnvironmentSource(Protocol):
    """
    Read-only view of environment variables.

    Injected into the loader instead of reading os.environ directly, so tests can use
    an in-memory mapping.
    """

    def get(self, name: str) -> Optional[str]:
        ...


class EnvironmentSourceReader(Protocol):
    def read(self, instance: LayeredModel) -> None:
        """Populate `instance` from environment variables. Raises ConfigReadError."""


class FieldValidator(Protocol):
    def __call__(self, instance: LayeredModel, path_prefix: str = "") -> List[str]:
        """Return dotted paths of required fields that are still unset."""
