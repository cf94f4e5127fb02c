"""
core entry points for venvscout.

the `Locator` class ties the cache, scanner and resolver together and turns
every failure into an `Outcome` with a human-readable message, so callers
never have to handle venvscout exceptions themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, TypeVar, final

from .cache import EnvironmentCache
from .config import LocatorConfig, search_dirs
from .errors import CacheReadError, CacheWriteError, NotFound
from .models import Environment
from .resolver import require
from .scanner import scan_all, scan_directories

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Outcome(Generic[T]):
    """
    result of a locator operation.

    attributes:
        `ok: bool`
            whether the operation succeeded
        `message: str`
            human-readable diagnostic, may be empty
        `value: T`
            the operation's result
    """

    ok: bool
    message: str
    value: T


@final
class Locator:
    """
    finds, lists and caches python environments.

    attributes:
        `config: LocatorConfig`
            runtime configuration
        `cache: EnvironmentCache`
            the persistent environment cache
    """

    config: LocatorConfig
    cache: EnvironmentCache

    def __init__(self, config: LocatorConfig | None = None) -> None:
        """
        Initialise the locator.

        arguments:
            `config: LocatorConfig | None`
                runtime configuration (default: read from the environment)
        """
        self.config = config if config is not None else LocatorConfig.from_environment()
        self.cache = EnvironmentCache(self.config.cache_path)

    def search_dirs(self) -> list[Path]:
        """get the directories searched when the cache has no match."""
        return search_dirs(self.config)

    def resolve(self, name: str) -> Outcome[Environment | None]:
        """
        Resolve an environment by name.

        arguments:
            `name: str`
                environment name

        returns: `Outcome[Environment | None]`
            the environment on success, a "not found" diagnostic otherwise
        """
        logger.debug("searching for environment: %s", name)
        try:
            env = require(name, self.search_dirs(), self.cache)
        except NotFound as e:
            tip = (
                "try running with --scan to update the cache and find new environments."
                if self.cache.exists()
                else "try running with --scan to perform a comprehensive search."
            )
            return Outcome(ok=False, message=f"{e}\n{tip}", value=None)

        return Outcome(ok=True, message="", value=env)

    def scan(self) -> Outcome[list[Environment]]:
        """
        Scan the home directory and replace the cache with the results.

        a failure to save the cache does not fail the scan.

        returns: `Outcome[list[Environment]]`
            every environment found
        """
        environments = scan_all(self.config)
        message = f"found {len(environments)} environments."

        try:
            self.cache.save(environments)
        except CacheWriteError as e:
            logger.debug("cache not saved: %s", e)
            return Outcome(ok=True, message=f"{message}\nwarning: {e}", value=environments)

        return Outcome(ok=True, message=f"{message}\ncache updated.", value=environments)

    def list_environments(self) -> Outcome[list[Environment]]:
        """
        List known environments.

        uses the cache when it is present and loadable, otherwise lists the
        environments directly inside the search directories.

        returns: `Outcome[list[Environment]]`
            the listed environments
        """
        message = ""
        if self.cache.exists():
            try:
                return Outcome(ok=True, message="", value=self.cache.load())
            except CacheReadError as e:
                message = f"warning: failed to load cache: {e}\n"

        environments = scan_directories(self.search_dirs())
        message += "searched for python environments in predefined directories."
        return Outcome(ok=True, message=message, value=environments)

    def clear_cache(self) -> Outcome[bool]:
        """
        Remove the cache file.

        returns: `Outcome[bool]`
            whether a cache file was removed
        """
        try:
            removed = self.cache.clear()
        except CacheWriteError as e:
            return Outcome(ok=False, message=str(e), value=False)

        if removed:
            return Outcome(
                ok=True,
                message=f"cache file removed successfully: {self.cache.path}",
                value=True,
            )
        return Outcome(ok=True, message=f"cache file does not exist: {self.cache.path}", value=False)
