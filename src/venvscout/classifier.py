"""
environment classification for venvscout.

decides whether a directory is an activatable python environment and, if so,
what kind it is. all checks are plain filesystem reads.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from packaging.version import InvalidVersion, Version

from .models import EnvKind, Environment

logger = logging.getLogger(__name__)

MARKER_FILENAME: Final[str] = "pyvenv.cfg"
CONDA_MARKER: Final[str] = "conda-meta"
UV_SIGNATURE: Final[str] = "uv"

# keys pyvenv.cfg writers use for the interpreter version, in preference order
VERSION_KEYS: Final[tuple[str, ...]] = ("version", "version_info")


def activation_script(path: Path) -> Path:
    """
    get the activation entry point of an environment.

    arguments:
        `path: Path`
            environment root

    returns: `Path`
        path to scripts/activate.bat under the root
    """
    return path.joinpath("Scripts", "activate.bat")


def _read_marker(path: Path) -> str | None:
    """read pyvenv.cfg, or none if it is absent or unreadable."""
    marker = path.joinpath(MARKER_FILENAME)
    if not marker.is_file():
        return None
    try:
        return marker.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("cannot read %s: %s", marker, e)
        return None


def detect_kind(path: Path, marker_text: str | None = None) -> EnvKind:
    """
    detect the kind of environment rooted at a path.

    checks, in priority order: a conda-meta directory, a pyvenv.cfg mentioning
    uv, then the activation entry point. the uv check is a substring search
    and can misclassify a venv whose pyvenv.cfg merely contains "uv".

    arguments:
        `path: Path`
            environment root
        `marker_text: str | None`
            already-read pyvenv.cfg contents, read from disk if none

    returns: `EnvKind`
        the detected kind
    """
    if path.joinpath(CONDA_MARKER).is_dir():
        return EnvKind.CONDA

    if marker_text is None:
        marker_text = _read_marker(path)
    if marker_text is not None and UV_SIGNATURE in marker_text:
        return EnvKind.UV

    if activation_script(path).is_file():
        return EnvKind.VENV

    return EnvKind.UNKNOWN


def parse_python_version(marker_text: str) -> str | None:
    """
    extract the interpreter version from pyvenv.cfg contents.

    arguments:
        `marker_text: str`
            pyvenv.cfg contents

    returns: `str | None`
        normalised version string, or none if no usable version is recorded
    """
    values: dict[str, str] = {}
    for line in marker_text.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            values[key.strip().lower()] = value.strip()

    for key in VERSION_KEYS:
        raw = values.get(key)
        if not raw:
            continue
        # version_info may look like "3.12.1.final.0"
        for candidate in (raw, ".".join(raw.split(".")[:3])):
            try:
                return str(Version(candidate))
            except InvalidVersion:
                continue

    return None


def read_python_version(path: Path) -> str | None:
    """read the interpreter version recorded in an environment's pyvenv.cfg."""
    marker_text = _read_marker(path)
    if marker_text is None:
        return None
    return parse_python_version(marker_text)


def classify(path: Path) -> Environment | None:
    """
    classify a candidate environment directory.

    arguments:
        `path: Path`
            candidate environment root

    returns: `Environment | None`
        the environment, or none if the directory has no activation entry point
    """
    if not activation_script(path).is_file():
        return None

    marker_text = _read_marker(path)
    return Environment(
        name=path.name,
        kind=detect_kind(path, marker_text),
        location=path.absolute(),
        python_version=parse_python_version(marker_text) if marker_text else None,
    )
