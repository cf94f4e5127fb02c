"""
tests for the ape and spe command-line tools.
"""

from __future__ import annotations

from pathlib import Path
from unittest import mock

import pytest

from venvscout import __version__
from venvscout.cli import activate, ape_main, format_environments, spe_main
from venvscout.config import LocatorConfig
from venvscout.core import Locator
from venvscout.errors import ActivationFailure
from venvscout.models import EnvKind, Environment


@pytest.fixture
def locator(config: LocatorConfig) -> Locator:
    """create a locator for the fake home."""
    return Locator(config)


@pytest.fixture
def runner() -> mock.MagicMock:
    """a stand-in for subprocess.run."""
    return mock.MagicMock()


class TestApe:
    """tests for ape."""

    def test_help(self, capsys) -> None:
        """test that --help works."""
        with pytest.raises(SystemExit) as exc_info:
            _ = ape_main(["--help"])
        assert exc_info.value.code == 0

        captured = capsys.readouterr()
        assert "ape" in captured.out
        assert "--scan" in captured.out
        assert "--clean" in captured.out

    @pytest.mark.parametrize("entry", [ape_main, spe_main])
    def test_version(self, entry, capsys) -> None:
        """test that --version reports the package version."""
        with pytest.raises(SystemExit) as exc_info:
            _ = entry(["--version"])
        assert exc_info.value.code == 0

        assert __version__ in capsys.readouterr().out

    def test_unknown_flag(self, capsys) -> None:
        """test that unknown flags are rejected."""
        with pytest.raises(SystemExit) as exc_info:
            _ = ape_main(["--bogus"])
        assert exc_info.value.code == 2

    def test_activates_environment(
        self, locator: Locator, runner: mock.MagicMock, home: Path, env_factory, capsys
    ) -> None:
        """test that a found environment is launched in a new shell."""
        env = env_factory(home / "venvs" / "finance")

        result = ape_main(["finance"], locator=locator, runner=runner)

        assert result == 0
        runner.assert_called_once_with(
            ["cmd", "/k", str(env / "Scripts" / "activate.bat")], check=False
        )
        assert 'activating "finance" (venv)' in capsys.readouterr().out

    def test_not_found(self, locator: Locator, runner: mock.MagicMock, capsys) -> None:
        """test that a missing environment is reported without crashing."""
        result = ape_main(["ghost"], locator=locator, runner=runner)

        assert result == 1
        runner.assert_not_called()
        err = capsys.readouterr().err
        assert 'environment "ghost" not found.' in err
        assert "spe" in err

    def test_no_name(self, locator: Locator, capsys) -> None:
        """test that a missing name is an error."""
        result = ape_main([], locator=locator)

        assert result == 1
        assert "no environment name specified" in capsys.readouterr().err

    def test_scan_without_name(self, locator: Locator, home: Path, env_factory, capsys) -> None:
        """test that --scan alone lists the results and updates the cache."""
        env_factory(home / "projects" / "site" / ".venv")

        result = ape_main(["--scan"], locator=locator)

        assert result == 0
        out = capsys.readouterr().out
        assert "found 1 environments." in out
        assert ".venv" in out
        assert locator.cache.exists()

    def test_scan_then_activate(
        self, locator: Locator, runner: mock.MagicMock, home: Path, env_factory
    ) -> None:
        """test that --scan with a name activates after scanning."""
        env_factory(home / "projects" / "deep" / "webenv")

        result = ape_main(["-s", "webenv"], locator=locator, runner=runner)

        assert result == 0
        runner.assert_called_once()

    def test_clean(self, locator: Locator, capsys) -> None:
        """test that --clean removes the cache."""
        locator.cache.save([])

        result = ape_main(["-c"], locator=locator)

        assert result == 0
        assert not locator.cache.exists()
        assert "removed successfully" in capsys.readouterr().out

    def test_activation_failure(self, locator: Locator, home: Path, env_factory, capsys) -> None:
        """test that a shell launch failure is reported."""
        env_factory(home / "venvs" / "finance")
        runner = mock.MagicMock(side_effect=FileNotFoundError("cmd"))

        result = ape_main(["finance"], locator=locator, runner=runner)

        assert result == 1
        assert "failed to activate environment" in capsys.readouterr().err


class TestSpe:
    """tests for spe."""

    def test_select_by_number(
        self, locator: Locator, runner: mock.MagicMock, home: Path, env_factory, capsys
    ) -> None:
        """test picking an environment by its number."""
        env_factory(home / "venvs" / "alpha")
        beta = env_factory(home / "venvs" / "beta")

        result = spe_main([], locator=locator, runner=runner, prompt=lambda _: "2")

        assert result == 0
        runner.assert_called_once_with(
            ["cmd", "/k", str(beta / "Scripts" / "activate.bat")], check=False
        )
        out = capsys.readouterr().out
        assert "alpha" in out and "beta" in out

    def test_retries_until_valid(
        self, locator: Locator, runner: mock.MagicMock, home: Path, env_factory, capsys
    ) -> None:
        """test that an unknown selection prompts again."""
        env_factory(home / "venvs" / "alpha")
        answers = iter(["zzz", "ALPHA"])

        result = spe_main([], locator=locator, runner=runner, prompt=lambda _: next(answers))

        assert result == 0
        runner.assert_called_once()
        assert 'environment "zzz" not found.' in capsys.readouterr().out

    def test_quit(self, locator: Locator, runner: mock.MagicMock, home: Path, env_factory) -> None:
        """test that q exits without activating."""
        env_factory(home / "venvs" / "alpha")

        result = spe_main([], locator=locator, runner=runner, prompt=lambda _: "Q")

        assert result == 1
        runner.assert_not_called()

    def test_end_of_input(self, locator: Locator, home: Path, env_factory) -> None:
        """test that closed stdin exits cleanly."""
        env_factory(home / "venvs" / "alpha")

        def _eof(_: str) -> str:
            raise EOFError

        assert spe_main([], locator=locator, prompt=_eof) == 1

    def test_nothing_found(self, locator: Locator, capsys) -> None:
        """test the message when there are no environments."""
        result = spe_main([], locator=locator, prompt=lambda _: "q")

        assert result == 1
        out = capsys.readouterr().out
        assert "no python environments found." in out
        assert "spe --scan" in out


class TestActivate:
    """tests for activate()."""

    def test_missing_script(self, tmp_path: Path) -> None:
        """test that a missing activation script raises ActivationFailure."""
        env = Environment("gone", EnvKind.VENV, tmp_path / "gone")

        with pytest.raises(ActivationFailure, match="activation script not found"):
            activate(env, runner=mock.MagicMock())

    def test_launcher_error(self, tmp_path: Path, env_factory) -> None:
        """test that an OSError from the launcher raises ActivationFailure."""
        root = env_factory(tmp_path / "proj")
        env = Environment("proj", EnvKind.VENV, root)
        runner = mock.MagicMock(side_effect=PermissionError("denied"))

        with pytest.raises(ActivationFailure, match="failed to activate environment"):
            activate(env, runner=runner)

    def test_shell_exit_status_ignored(self, tmp_path: Path, env_factory) -> None:
        """test that a non-zero exit from the activated shell is not a failure."""
        root = env_factory(tmp_path / "proj")
        env = Environment("proj", EnvKind.VENV, root)
        runner = mock.MagicMock(return_value=mock.MagicMock(returncode=1))

        assert activate(env, runner=runner) is None
        runner.assert_called_once_with(
            ["cmd", "/k", str(root / "Scripts" / "activate.bat")], check=False
        )


def test_format_environments() -> None:
    """test the listing table."""
    table = format_environments(
        [
            Environment("proj1", EnvKind.VENV, Path("/envs/proj1"), "3.12.1"),
            Environment("data", EnvKind.CONDA, Path("/envs/data")),
        ]
    )

    lines = table.splitlines()
    assert len(lines) == 4
    assert lines[2].split() == ["1.", "proj1", "venv", "3.12.1", str(Path("/envs/proj1"))]
    assert lines[3].split() == ["2.", "data", "conda", "-", str(Path("/envs/data"))]
