"""
python virtual environment locator for windows.

venvscout finds python environments by name, either in a set of predefined
directories or through a parallel scan of the whole user folder, and caches
scan results for fast lookups.

usage:
    ```python
    from venvscout import Locator

    locator = Locator()
    outcome = locator.resolve("myenv")
    if outcome.ok:
        print(outcome.value.location)
    ```
"""

from __future__ import annotations

from .cache import EnvironmentCache
from .classifier import classify
from .config import LocatorConfig, search_dirs
from .core import Locator, Outcome
from .models import EnvKind, Environment
from .resolver import find
from .scanner import scan_all

__version__ = "0.1.0"
__all__ = [
    "EnvKind",
    "Environment",
    "EnvironmentCache",
    "Locator",
    "LocatorConfig",
    "Outcome",
    "classify",
    "find",
    "scan_all",
    "search_dirs",
]
