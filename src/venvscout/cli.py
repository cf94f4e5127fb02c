"""
command-line interface for venvscout.

provides two tools: `ape` activates a named environment, `spe` lists the
known environments and activates the one the user picks.
"""

from __future__ import annotations

import argparse
import logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from typing import Any

from . import __version__
from .classifier import activation_script
from .core import Locator
from .errors import ActivationFailure
from .models import Environment
from .resolver import find_by_input

logger = logging.getLogger(__name__)

Runner = Callable[..., Any]


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """add the flags shared by ape and spe."""
    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="enable verbose output (shows debug information)",
    )
    _ = parser.add_argument(
        "-s",
        "--scan",
        action="store_true",
        help="perform a comprehensive scan and update the cache",
    )
    _ = parser.add_argument(
        "-c",
        "--clean",
        action="store_true",
        help="remove the cache file and exit",
    )
    _ = parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )


def create_ape_parser() -> argparse.ArgumentParser:
    """
    create the argument parser for ape.

    returns: `argparse.ArgumentParser`
        configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="ape",
        description="activate a python environment by name",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  ape myenv              # activate environment named 'myenv'
  ape -s                 # scan entire user folder and update cache
  ape -s myenv           # scan and then activate 'myenv'
  ape -v finance         # activate 'finance' with debug output
  ape -c                 # remove the cache file

custom directories are read from %USERPROFILE%\\.config\\python_venv_config.toml:
  directories = ["%USERPROFILE%\\\\projects", "C:\\\\dev\\\\python"]
        """,
    )
    _ = parser.add_argument(
        "env_name",
        nargs="?",
        help="name of the environment to activate",
    )
    _add_common_arguments(parser)
    return parser


def create_spe_parser() -> argparse.ArgumentParser:
    """
    create the argument parser for spe.

    returns: `argparse.ArgumentParser`
        configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="spe",
        description="list python environments and activate one",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  spe                    # list and activate an environment (uses cache if present)
  spe -s                 # scan entire user folder and update cache
  spe -c                 # remove the cache file
        """,
    )
    _add_common_arguments(parser)
    return parser


def _configure_logging(verbose: bool) -> None:
    """enable debug logging if requested."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[%(name)s] %(message)s",
        )


def _clean(locator: Locator) -> int:
    """remove the cache file and report the result."""
    print("removing cache file...")
    outcome = locator.clear_cache()
    if not outcome.ok:
        print(f"error: {outcome.message}", file=sys.stderr)
        return 1
    print(outcome.message)
    return 0


def activate(env: Environment, runner: Runner = subprocess.run) -> None:
    """
    open a new command prompt with an environment activated.

    the exit status of the shell is not checked; it only reflects how the
    user left the interactive session.

    arguments:
        `env: Environment`
            the environment to activate
        `runner: Runner`
            subprocess launcher (default: `subprocess.run`)

    raises: `ActivationFailure`
        if the activation script is missing or the shell cannot be launched
    """
    script = activation_script(env.location)
    if not script.is_file():
        raise ActivationFailure(f'activation script not found at "{script}"')

    logger.debug("activating: %s", env.location)
    logger.debug("type: %s", env.kind.value)
    logger.debug("activation script: %s", script)

    print(f'activating "{env.name}" ({env.kind.value})...')
    print(f"[{env.name} activated - type 'deactivate' or 'exit' to close]")

    try:
        _ = runner(["cmd", "/k", str(script)], check=False)
    except OSError as e:
        raise ActivationFailure(f"failed to activate environment: {e}") from e


def _activate_and_report(env: Environment, runner: Runner) -> int:
    """activate an environment, returning an exit code."""
    try:
        activate(env, runner=runner)
    except ActivationFailure as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


def format_environments(environments: Sequence[Environment]) -> str:
    """
    format environments as a numbered table.

    arguments:
        `environments: Sequence[Environment]`
            environments to format

    returns: `str`
        the formatted table
    """
    lines = [
        f"  {'#':<4}{'name':<21}{'type':<9}{'python':<9}path",
        f"  {'--':<4}{'-' * 20:<21}{'-' * 8:<9}{'-' * 8:<9}{'-' * 46}",
    ]
    for i, env in enumerate(environments, 1):
        lines.append(
            f"  {str(i) + '.':<4}{env.name:<21}{env.kind.value:<9}"
            f"{env.python_version or '-':<9}{env.location}"
        )
    return "\n".join(lines)


def ape_main(
    argv: Sequence[str] | None = None,
    locator: Locator | None = None,
    runner: Runner = subprocess.run,
) -> int:
    """
    main entry point for ape.

    arguments:
        `argv: Sequence[str] | None`
            command line arguments. if None, uses sys.argv.
        `locator: Locator | None`
            locator to use (default: configured from the environment)
        `runner: Runner`
            subprocess launcher used for activation

    returns: `int`
        exit code (0 for success, 1 for error)
    """
    parser = create_ape_parser()
    args = parser.parse_args(argv)

    # extract args with getattr to avoid Any propagation from Namespace
    env_name_raw = getattr(args, "env_name", None)
    env_name = str(env_name_raw) if env_name_raw is not None else None  # pyright: ignore[reportAny]
    verbose = bool(getattr(args, "verbose", False))
    scan = bool(getattr(args, "scan", False))
    clean = bool(getattr(args, "clean", False))

    _configure_logging(verbose)
    locator = locator if locator is not None else Locator()

    if clean:
        return _clean(locator)

    logger.debug("directories to be searched: %s", [str(d) for d in locator.search_dirs()])

    if scan:
        print("performing comprehensive scan, this may take a moment...")
        outcome = locator.scan()
        print(outcome.message)

        if env_name is None:
            if outcome.value:
                print("\nfound environments:\n")
                print(format_environments(outcome.value))
            print("\nrun 'ape <env_name>' to activate an environment.")
            return 0

    if env_name is None:
        print("error: no environment name specified.", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    resolved = locator.resolve(env_name)
    if not resolved.ok or resolved.value is None:
        print(f"error: {resolved.message}", file=sys.stderr)
        print("or use 'spe' to see all available environments.", file=sys.stderr)
        return 1

    return _activate_and_report(resolved.value, runner)


def spe_main(
    argv: Sequence[str] | None = None,
    locator: Locator | None = None,
    runner: Runner = subprocess.run,
    prompt: Callable[[str], str] = input,
) -> int:
    """
    main entry point for spe.

    arguments:
        `argv: Sequence[str] | None`
            command line arguments. if None, uses sys.argv.
        `locator: Locator | None`
            locator to use (default: configured from the environment)
        `runner: Runner`
            subprocess launcher used for activation
        `prompt: Callable[[str], str]`
            reads the user's selection (default: `input`)

    returns: `int`
        exit code (0 for success, 1 for error or no selection)
    """
    parser = create_spe_parser()
    args = parser.parse_args(argv)

    verbose = bool(getattr(args, "verbose", False))
    scan = bool(getattr(args, "scan", False))
    clean = bool(getattr(args, "clean", False))

    _configure_logging(verbose)
    locator = locator if locator is not None else Locator()

    if clean:
        return _clean(locator)

    if scan:
        print("performing comprehensive scan, this may take a moment...")
        outcome = locator.scan()
    else:
        outcome = locator.list_environments()
    if outcome.message:
        print(outcome.message)

    environments = outcome.value
    if not environments:
        print("no python environments found.")
        if not scan:
            print("tip: try running 'spe --scan' for a comprehensive search.")
        return 1

    print(format_environments(environments))
    print()

    while True:
        try:
            choice = prompt("enter the number or name of the environment, or q to quit\n> ")
        except EOFError:
            return 1

        if choice.strip().lower() == "q":
            print("exiting...")
            return 1

        if (env := find_by_input(environments, choice)) is not None:
            return _activate_and_report(env, runner)

        print(f'\nenvironment "{choice.strip()}" not found.\n')


def main() -> None:
    """console script entry point for ape."""
    sys.exit(ape_main())


def select_main() -> None:
    """console script entry point for spe."""
    sys.exit(spe_main())


if __name__ == "__main__":
    main()
