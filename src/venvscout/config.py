"""
configuration loading for venvscout.

this module holds the runtime configuration passed into every component,
loads the optional user configuration file, and builds the ordered list of
directories searched for environments.
"""

from __future__ import annotations

import logging
import os
import tempfile
import tomllib
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from .errors import ConfigReadError, EnvironmentUnavailable

logger = logging.getLogger(__name__)

CACHE_FILENAME: Final[str] = "python_venv_cache.json"
CONFIG_FILENAME: Final[str] = "python_venv_config.toml"
HOME_PLACEHOLDER: Final[str] = "%USERPROFILE%"

# subdirectories checked under every anchor directory
VENV_SUBDIRS: Final[tuple[str, ...]] = (".venv", "venv", ".venvs", "venvs")


@dataclass
class LocatorConfig:
    """
    runtime configuration for venvscout.

    attributes:
        `home_dir: Path | None`
            the user's home directory, or none if it cannot be determined
        `temp_dir: Path`
            system temporary directory
        `cache_path: Path`
            path to the persistent environment cache
        `config_path: Path | None`
            path to the optional user configuration file
        `jobs: int | None`
            number of parallel workers for a full scan (default: cpu count)
    """

    home_dir: Path | None
    temp_dir: Path
    cache_path: Path
    config_path: Path | None = None
    jobs: int | None = None

    @classmethod
    def for_home(cls, home_dir: Path | None, temp_dir: Path) -> LocatorConfig:
        """
        build a configuration with the default file locations for a home directory.

        arguments:
            `home_dir: Path | None`
                the user's home directory
            `temp_dir: Path`
                directory the cache file lives in

        returns: `LocatorConfig`
            configuration with derived cache and config paths
        """
        return cls(
            home_dir=home_dir,
            temp_dir=temp_dir,
            cache_path=temp_dir.joinpath(CACHE_FILENAME),
            config_path=home_dir.joinpath(".config", CONFIG_FILENAME) if home_dir else None,
        )

    @classmethod
    def from_environment(cls) -> LocatorConfig:
        """
        Load configuration from environment variables.

        the home directory comes from USERPROFILE, falling back to HOME.
        VENVSCOUT_CACHE_PATH, VENVSCOUT_CONFIG_PATH and VENVSCOUT_JOBS
        override the defaults.

        returns: `LocatorConfig`
            configuration with values from environment
        """
        home_raw = os.environ.get("USERPROFILE") or os.environ.get("HOME")
        home_dir = Path(home_raw) if home_raw else None

        config = cls.for_home(home_dir, Path(tempfile.gettempdir()))

        if cache_path := os.environ.get("VENVSCOUT_CACHE_PATH"):
            config.cache_path = Path(cache_path)

        if config_path := os.environ.get("VENVSCOUT_CONFIG_PATH"):
            config.config_path = Path(config_path)

        if jobs := os.environ.get("VENVSCOUT_JOBS"):
            with suppress(ValueError):
                config.jobs = max(1, int(jobs))

        return config

    def require_home(self) -> Path:
        """
        get the home directory or fail.

        returns: `Path`
            the home directory

        raises: `EnvironmentUnavailable`
            if the home directory could not be determined
        """
        if self.home_dir is None:
            raise EnvironmentUnavailable("could not determine USERPROFILE")
        return self.home_dir


def read_user_config(config_path: Path) -> dict[str, Any]:
    """
    read and parse the user configuration file.

    arguments:
        `config_path: Path`
            path to the toml configuration file

    returns: `dict[str, Any]`
        parsed configuration table

    raises: `ConfigReadError`
        if the file is missing, unreadable or not valid toml
    """
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigReadError(f"cannot read {config_path}: {e}") from e


def load_user_directories(config: LocatorConfig) -> list[str] | None:
    """
    load the custom search directories from the user configuration file.

    arguments:
        `config: LocatorConfig`
            runtime configuration

    returns: `list[str] | None`
        the configured directories, or none if the file is absent, unreadable,
        malformed, or declares no directories
    """
    if config.config_path is None or not config.config_path.exists():
        return None

    try:
        data = read_user_config(config.config_path)
    except ConfigReadError as e:
        logger.debug("ignoring user config: %s", e)
        return None

    directories = data.get("directories")
    if not isinstance(directories, list) or not directories:
        return None

    if not all(isinstance(d, str) for d in directories):
        logger.debug("ignoring user config: 'directories' must be a list of strings")
        return None

    return list(directories)


def predefined_dirs(config: LocatorConfig) -> list[Path]:
    """
    build the fixed fallback list of conventional environment directories.

    arguments:
        `config: LocatorConfig`
            runtime configuration

    returns: `list[Path]`
        the home directory and conventional venv folders beneath it,
        or an empty list if the home directory is unavailable
    """
    try:
        home = config.require_home()
    except EnvironmentUnavailable as e:
        logger.debug("no predefined directories: %s", e)
        return []

    programs = home.joinpath("AppData", "Local", "Programs")
    anchors = [
        home,
        home.joinpath("code"),
        home.joinpath("code", "python"),
        programs,
        programs.joinpath("Python"),
    ]

    dirs: list[Path] = []
    for anchor in anchors:
        dirs.append(anchor)
        dirs.extend(anchor.joinpath(sub) for sub in VENV_SUBDIRS)
    return dirs


def search_dirs(config: LocatorConfig) -> list[Path]:
    """
    get the ordered list of directories to search for environments.

    user-configured directories win over the predefined list. the
    %USERPROFILE% placeholder is expanded; entries are not checked for
    existence here.

    arguments:
        `config: LocatorConfig`
            runtime configuration

    returns: `list[Path]`
        directories to search, in order
    """
    if custom := load_user_directories(config):
        home = str(config.home_dir) if config.home_dir is not None else ""
        return [Path(d.replace(HOME_PLACEHOLDER, home)) for d in custom]

    return predefined_dirs(config)
