"""Resource paths with ``${variable}`` substitution from global path variables."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourcePath:
    """A path that may refer to global path variables as ``${name}``."""

    unparsed: str = ""

    def is_empty(self) -> bool:
        return not self.unparsed

    def parsed_str(self) -> str:
        """Return the path with every ``${name}`` replaced by its variable."""
        p = self.unparsed
        while (begin := p.find("${")) != -1:
            if begin + 2 == len(p):
                break
            end = p.find("}", begin + 2)
            if end == -1:
                break
            name = p[begin + 2 : end]
            p = p[:begin] + get_global_path_var(name).unparsed + p[end + 1 :]
        return p

    def parsed(self) -> Path:
        return Path(self.parsed_str())

    def __str__(self) -> str:
        return self.unparsed


_EMPTY_PATH = ResourcePath("")
_path_vars: dict[str, ResourcePath] | None = None


def _global_vars() -> dict[str, ResourcePath]:
    global _path_vars
    if _path_vars is None:
        _path_vars = {"cwd": ResourcePath(Path.cwd().as_posix())}
    return _path_vars


def list_global_path_vars() -> list[tuple[str, ResourcePath]]:
    """Return all global path variables sorted by name."""
    return sorted(_global_vars().items(), key=lambda item: item[0])


def get_global_path_var(name: str) -> ResourcePath:
    """Return a global path variable, or an empty path (with a warning) if unset."""
    try:
        return _global_vars()[name]
    except KeyError:
        logger.warning("Path variable '%s' not found!", name)
        return _EMPTY_PATH


def set_global_path_var(name: str, value: ResourcePath | str) -> None:
    if not isinstance(value, ResourcePath):
        value = ResourcePath(value)
    _global_vars()[name] = value