"""
conftest for venvscout tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest import mock

import pytest

from venvscout.config import LocatorConfig

PYVENV_CFG = "home = C:\\Python312\ninclude-system-site-packages = false\nversion = 3.12.1\n"
UV_PYVENV_CFG = "home = C:\\Python312\nimplementation = CPython\nuv = 0.4.18\nversion_info = 3.12.1\n"


def make_env(
    root: Path,
    *,
    pyvenv_cfg: str | None = PYVENV_CFG,
    conda: bool = False,
    activate: bool = True,
) -> Path:
    """create a fake environment directory.

    arguments:
        `root: Path`
            environment root to create
        `pyvenv_cfg: str | None`
            pyvenv.cfg contents, or none to omit the file
        `conda: bool`
            whether to add a conda-meta directory
        `activate: bool`
            whether to add scripts/activate.bat

    returns: `Path`
        the environment root
    """
    root.mkdir(parents=True, exist_ok=True)
    if pyvenv_cfg is not None:
        (root / "pyvenv.cfg").write_text(pyvenv_cfg)
    if conda:
        (root / "conda-meta").mkdir()
    if activate:
        (root / "Scripts").mkdir()
        (root / "Scripts" / "activate.bat").write_text("@echo off\n")
    return root


@pytest.fixture(autouse=True)
def isolated_environment():
    """keep the test runner's environment variables out of config loading."""
    with mock.patch.dict(
        os.environ,
        {"VENVSCOUT_CACHE_PATH": "", "VENVSCOUT_CONFIG_PATH": "", "VENVSCOUT_JOBS": ""},
        clear=False,
    ):
        yield


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """create an empty fake home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """create a fake system temporary directory."""
    path = tmp_path / "systemp"
    path.mkdir()
    return path


@pytest.fixture
def config(home: Path, temp_dir: Path) -> LocatorConfig:
    """create a locator configuration rooted at the fake home."""
    return LocatorConfig.for_home(home, temp_dir)


@pytest.fixture
def env_factory():
    """provide the fake environment builder to tests."""
    return make_env


@pytest.fixture
def uv_cfg() -> str:
    """pyvenv.cfg contents written by uv."""
    return UV_PYVENV_CFG
