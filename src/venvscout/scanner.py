"""
filesystem scanning for venvscout.

implements the full recursive scan of the home directory and the quick scan
of the search directories.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Final

from .classifier import MARKER_FILENAME, classify
from .config import LocatorConfig
from .errors import EnvironmentUnavailable
from .models import Environment

logger = logging.getLogger(__name__)

# substrings that exclude a directory from descent (case-insensitive)
EXCLUDED_SUBSTRINGS: Final[tuple[str, ...]] = ("temp", "cache", "tmp")

# directory names that are never descended into
EXCLUDED_NAMES: Final[frozenset[str]] = frozenset(
    {
        "node_modules",
        "$RECYCLE.BIN",
        "System Volume Information",
    }
)


def is_excluded_dir(name: str) -> bool:
    """
    check if a directory should be pruned from a full scan.

    arguments:
        `name: str`
            directory base name

    returns: `bool`
        true if the directory must not be descended into
    """
    lowered = name.lower()
    if any(s in lowered for s in EXCLUDED_SUBSTRINGS):
        return True
    return name in EXCLUDED_NAMES


def is_excluded_path(path: Path, root: Path) -> bool:
    """
    check every component of a path below the scan root for excluded names.

    this is a second pass over what the walk already pruned, and only looks
    at components below `root` so a scan root that itself lives under a
    temporary directory still yields results.

    arguments:
        `path: Path`
            candidate environment directory
        `root: Path`
            the scan root

    returns: `bool`
        true if the path should be dropped
    """
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts

    for part in parts:
        lowered = part.lower()
        if "node_modules" in lowered or any(s in lowered for s in EXCLUDED_SUBSTRINGS):
            return True
    return False


def iter_marker_files(root: Path) -> Iterator[Path]:
    """
    walk a directory tree and yield every pyvenv.cfg file.

    symbolic links are not followed and excluded directories are pruned
    before descent.

    arguments:
        `root: Path`
            directory to walk

    yields: `Path`
        paths to pyvenv.cfg files
    """

    def _on_error(error: OSError) -> None:
        logger.debug("skipping unreadable directory: %s", error)

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False, onerror=_on_error):
        dirnames[:] = [d for d in dirnames if not is_excluded_dir(d)]
        if MARKER_FILENAME in filenames:
            yield Path(dirpath, MARKER_FILENAME)


def classify_all(candidates: Iterable[Path], jobs: int | None = None) -> list[Environment]:
    """
    classify candidate directories in parallel.

    arguments:
        `candidates: Iterable[Path]`
            environment roots to classify
        `jobs: int | None`
            number of workers (default: cpu count)

    returns: `list[Environment]`
        every candidate that classified as an environment
    """
    paths = list(candidates)
    if not paths:
        return []

    num_jobs = jobs if jobs is not None else (os.cpu_count() or 1)
    logger.debug("classifying %d candidates with %d workers", len(paths), num_jobs)

    with ThreadPoolExecutor(max_workers=num_jobs) as executor:
        results = list(executor.map(classify, paths))

    return [env for env in results if env is not None]


def scan_all(config: LocatorConfig) -> list[Environment]:
    """
    scan the whole home directory for environments.

    arguments:
        `config: LocatorConfig`
            runtime configuration

    returns: `list[Environment]`
        every environment found; order is not guaranteed
    """
    try:
        root = config.require_home()
    except EnvironmentUnavailable as e:
        logger.warning("cannot scan: %s", e)
        return []

    start = time.perf_counter()
    logger.debug("scanning for %s files under %s", MARKER_FILENAME, root)

    candidates: list[Path] = []
    marker_count = 0
    for marker in iter_marker_files(root):
        marker_count += 1
        parent = marker.parent
        if is_excluded_path(parent, root):
            logger.debug("skipping excluded path: %s", parent)
            continue
        candidates.append(parent)

    environments = classify_all(candidates, jobs=config.jobs)

    for env in environments:
        logger.debug("found: %s (%s) at %s", env.name, env.kind.value, env.location)
    logger.debug(
        "scan complete: %d environments from %d %s files (%.2fs)",
        len(environments),
        marker_count,
        MARKER_FILENAME,
        time.perf_counter() - start,
    )
    return environments


def scan_directories(dirs: Iterable[Path]) -> list[Environment]:
    """
    list the environments directly inside each of the given directories.

    arguments:
        `dirs: Iterable[Path]`
            directories to look in, in order

    returns: `list[Environment]`
        environments in directory order, then name order within a directory
    """
    environments: list[Environment] = []

    for directory in dirs:
        if not directory.is_dir():
            logger.debug('directory not found: "%s"', directory)
            continue

        logger.debug('checking "%s"', directory)
        try:
            children = sorted(p for p in directory.iterdir() if p.is_dir())
        except OSError as e:
            logger.debug("cannot list %s: %s", directory, e)
            continue

        for child in children:
            if (env := classify(child)) is not None:
                logger.debug("added %s (%s)", env.name, env.kind.value)
                environments.append(env)
            else:
                logger.debug("skipping non-python folder: %s", child.name)

    return environments
