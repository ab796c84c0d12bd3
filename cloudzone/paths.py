"""Resolution of descriptor and molecular data files.

Relative names are looked up in the current directory first, then in the
caller's search directories, the directories listed in the
``CLOUDZONE_DATA_PATH`` environment variable and finally inside the
installed package, so bundled descriptors such as
``cloudfiles/MilkyWayGMC.desc`` load from any working directory.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import SourceUnavailable

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"

ENV_SEARCH_PATH = "CLOUDZONE_DATA_PATH"


def env_search_dirs() -> List[Path]:
    """Directories listed in ``CLOUDZONE_DATA_PATH`` (``os.pathsep`` separated)."""

    raw = os.environ.get(ENV_SEARCH_PATH, "")
    return [Path(item).expanduser() for item in raw.split(os.pathsep) if item.strip()]


def candidate_paths(name: str | Path, search_dirs: Iterable[str | Path] = ()) -> List[Path]:
    """Return every location probed for ``name``, in lookup order."""

    path = Path(name).expanduser()
    candidates = [path]
    if path.is_absolute():
        return candidates
    for directory in list(search_dirs) + env_search_dirs():
        candidates.append(Path(directory).expanduser() / path)
    candidates.append(PACKAGE_DIR / path)
    candidates.append(DATA_DIR / path)
    return candidates


def find_file(name: str | Path, search_dirs: Sequence[str | Path] = ()) -> Path:
    """Return the first existing file among :func:`candidate_paths`."""

    tried: List[str] = []
    for candidate in candidate_paths(name, search_dirs):
        if candidate.is_file():
            if tried:
                logger.debug("Resolved %s to %s after %d misses", name, candidate, len(tried))
            return candidate
        tried.append(str(candidate))
    raise SourceUnavailable(str(name), tried)


__all__ = [
    "PACKAGE_DIR",
    "DATA_DIR",
    "ENV_SEARCH_PATH",
    "env_search_dirs",
    "candidate_paths",
    "find_file",
]
