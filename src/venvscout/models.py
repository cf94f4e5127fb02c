"""
models for venvscout.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import final


class EnvKind(Enum):
    """
    enumeration of environment kinds venvscout can tell apart.

    the kind is best-effort metadata; an environment of kind `UNKNOWN` is
    still activatable.
    """

    VENV = "venv"
    CONDA = "conda"
    UV = "uv"
    UNKNOWN = "unknown"


@final
@dataclass(frozen=True)
class Environment:
    """
    an activatable python environment found on disk.

    attributes:
        `name: str`
            base name of the environment directory, used as the lookup key
        `kind: EnvKind`
            the detected environment kind
        `location: Path`
            absolute path to the environment root
        `python_version: str | None`
            interpreter version recorded in pyvenv.cfg, if any
    """

    name: str
    kind: EnvKind
    location: Path
    python_version: str | None = None

    def matches(self, name: str) -> bool:
        """case-insensitive name comparison."""
        return self.name.casefold() == name.casefold()
