"""
name resolution for venvscout.

looks an environment up by name in the cache first, then in the search
directories. the first match wins in both places.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from .cache import EnvironmentCache
from .classifier import activation_script, classify
from .errors import CacheReadError, NotFound
from .models import Environment

logger = logging.getLogger(__name__)


def find_in_cache(name: str, cache: EnvironmentCache) -> Environment | None:
    """
    look a name up in the cache, skipping stale records.

    arguments:
        `name: str`
            environment name, matched case-insensitively
        `cache: EnvironmentCache`
            the environment cache

    returns: `Environment | None`
        the first cached match whose activation entry point still exists
    """
    if not cache.exists():
        return None

    logger.debug("checking cache...")
    try:
        environments = cache.load()
    except CacheReadError as e:
        logger.debug("ignoring unusable cache: %s", e)
        return None

    for env in environments:
        if not env.matches(name):
            continue
        if activation_script(env.location).is_file():
            logger.debug(
                "found in cache: %s (%s) at %s", env.name, env.kind.value, env.location
            )
            return env
        logger.debug("cached path no longer valid: %s", env.location)

    return None


def find_in_directories(name: str, dirs: Iterable[Path]) -> Environment | None:
    """
    look for `<dir>/<name>` in each directory, in order.

    arguments:
        `name: str`
            environment name
        `dirs: Iterable[Path]`
            directories to search

    returns: `Environment | None`
        the first candidate that classifies as an environment
    """
    logger.debug("searching predefined directories...")
    for directory in dirs:
        if not directory.is_dir():
            logger.debug('directory not found: "%s"', directory)
            continue

        candidate = directory.joinpath(name)
        if not candidate.is_dir():
            continue

        if (env := classify(candidate)) is not None:
            logger.debug("found %s environment at: %s", env.kind.value, candidate)
            return env

    return None


def find(
    name: str,
    predefined_dirs: Iterable[Path],
    cache: EnvironmentCache,
) -> Environment | None:
    """
    resolve an environment by name.

    arguments:
        `name: str`
            environment name, matched case-insensitively in the cache
        `predefined_dirs: Iterable[Path]`
            directories searched when the cache has no valid match
        `cache: EnvironmentCache`
            the environment cache

    returns: `Environment | None`
        the resolved environment, or none if it was not found anywhere
    """
    if (env := find_in_cache(name, cache)) is not None:
        return env
    return find_in_directories(name, predefined_dirs)


def find_by_input(environments: Sequence[Environment], text: str) -> Environment | None:
    """
    pick an environment from a listing by 1-based number or by name.

    arguments:
        `environments: Sequence[Environment]`
            the listed environments
        `text: str`
            user input

    returns: `Environment | None`
        the selected environment, or none if nothing matches
    """
    text = text.strip()

    if text.isdigit():
        index = int(text)
        if 0 < index <= len(environments):
            return environments[index - 1]

    for env in environments:
        if env.matches(text):
            return env

    return None


def require(
    name: str,
    predefined_dirs: Iterable[Path],
    cache: EnvironmentCache,
) -> Environment:
    """
    resolve an environment by name, failing if it cannot be found.

    raises: `NotFound`
        if neither the cache nor the predefined directories have a match
    """
    if (env := find(name, predefined_dirs, cache)) is None:
        raise NotFound(f'environment "{name}" not found.')
    return env
