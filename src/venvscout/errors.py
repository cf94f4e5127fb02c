"""
exception hierarchy for venvscout.

none of these are fatal to the process: the `Locator` facade turns them into
failed outcomes or narrower fallback behaviour.
"""

from __future__ import annotations


class VenvScoutError(Exception):
    """base exception for all venvscout errors."""


class NotFound(VenvScoutError):
    """raised when a name is unresolved after the cache and directory search."""


class CacheReadError(VenvScoutError):
    """raised when the cache file is missing or cannot be read."""


class CacheFormatError(CacheReadError):
    """raised when the cache file cannot be parsed into environment records."""


class CacheWriteError(VenvScoutError):
    """raised when the cache file cannot be written or removed."""


class ConfigReadError(VenvScoutError):
    """raised when the user configuration file cannot be read or parsed."""


class EnvironmentUnavailable(VenvScoutError):
    """raised when the home directory cannot be determined."""


class ActivationFailure(VenvScoutError):
    """raised when the shell that activates an environment cannot be launched."""
