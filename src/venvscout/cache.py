"""
persistent environment cache for venvscout.

stores the result of a full scan as a versioned json document so later runs
can resolve names without walking the filesystem.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Final, final

from .errors import CacheFormatError, CacheReadError, CacheWriteError
from .models import EnvKind, Environment

logger = logging.getLogger(__name__)

CACHE_VERSION: Final[int] = 1


def environment_to_dict(env: Environment) -> dict[str, Any]:
    """serialise an environment to a json-compatible dictionary."""
    return {
        "name": env.name,
        "kind": env.kind.value,
        "location": str(env.location),
        "python_version": env.python_version,
    }


def environment_from_dict(data: Any) -> Environment:
    """
    deserialise an environment record.

    accepts both the current record layout and the legacy one written by
    older tools, which used `env_type` and `path` keys.

    arguments:
        `data: Any`
            a decoded json object

    returns: `Environment`
        the reconstructed environment

    raises: `CacheFormatError`
        if the record does not match either layout
    """
    if not isinstance(data, dict):
        raise CacheFormatError(f"expected an object, got {type(data).__name__}")

    name = data.get("name")
    kind = data.get("kind", data.get("env_type"))
    location = data.get("location", data.get("path"))
    python_version = data.get("python_version")

    if not isinstance(name, str) or not isinstance(location, str) or not isinstance(kind, str):
        raise CacheFormatError(f"malformed environment record: {data!r}")
    if python_version is not None and not isinstance(python_version, str):
        raise CacheFormatError(f"malformed python_version in record: {data!r}")

    try:
        env_kind = EnvKind(kind)
    except ValueError as e:
        raise CacheFormatError(f"unknown environment kind: {kind!r}") from e

    return Environment(
        name=name,
        kind=env_kind,
        location=Path(location),
        python_version=python_version,
    )


@final
class EnvironmentCache:
    """
    file-backed cache of discovered environments.

    attributes:
        `path: Path`
            location of the cache file
    """

    path: Path

    def __init__(self, path: Path) -> None:
        """
        Initialise the environment cache.

        arguments:
            `path: Path`
                location of the cache file
        """
        self.path = path

    def exists(self) -> bool:
        """check whether a cache file is present."""
        return self.path.is_file()

    def load(self) -> list[Environment]:
        """
        Load cached environments.

        returns: `list[Environment]`
            environments in the order they were saved

        raises: `CacheReadError`
            if the cache file is missing or unreadable
        raises: `CacheFormatError`
            if the cache file contents cannot be parsed
        """
        logger.debug("loading cache from %s", self.path)
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise CacheReadError(f"cannot read cache file {self.path}: {e}") from e

        try:
            document = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise CacheFormatError(f"cache file {self.path} is not valid utf-8: {e}") from e
        except json.JSONDecodeError as e:
            raise CacheFormatError(f"cache file {self.path} is not valid json: {e}") from e

        # legacy caches are a bare array of records
        if isinstance(document, list):
            records = document
        elif isinstance(document, dict):
            version = document.get("version")
            if version != CACHE_VERSION:
                raise CacheFormatError(f"unsupported cache version: {version!r}")
            records = document.get("environments")
            if not isinstance(records, list):
                raise CacheFormatError("cache file has no environment list")
        else:
            raise CacheFormatError(f"unexpected cache document: {type(document).__name__}")

        environments = [environment_from_dict(record) for record in records]
        logger.debug("loaded %d environments from cache", len(environments))
        return environments

    def save(self, environments: Sequence[Environment]) -> None:
        """
        Save environments, replacing any previous cache.

        arguments:
            `environments: Sequence[Environment]`
                environments to persist

        raises: `CacheWriteError`
            if the cache file cannot be written
        """
        logger.debug("saving %d environments to %s", len(environments), self.path)
        document = {
            "version": CACHE_VERSION,
            "environments": [environment_to_dict(env) for env in environments],
        }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            _ = self.path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except OSError as e:
            raise CacheWriteError(f"cannot write cache file {self.path}: {e}") from e

    def clear(self) -> bool:
        """
        Remove the cache file.

        returns: `bool`
            true if a file was removed, false if there was none

        raises: `CacheWriteError`
            if the file exists but cannot be removed
        """
        if not self.path.exists():
            return False

        try:
            self.path.unlink()
        except OSError as e:
            raise CacheWriteError(f"failed to remove cache file at {self.path}: {e}") from e

        return True
