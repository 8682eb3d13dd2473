#!/usr/bin/env python3
"""Runs the code style checks and the unit tests of the package."""

from __future__ import annotations

import argparse
import os
import subprocess as sp
import sys
from pathlib import Path

PACKAGE = "heatgrid"  # name of the package that needs to be tested
PACKAGE_PATH = Path(__file__).resolve().parents[1]  # base path of the package


def run_test_codestyle(*, verbose: bool = True) -> int:
    """Check the code style of the package and the examples with ruff.

    Returns:
        int: The largest return code of the checks
    """
    retcodes = []
    for folder in [PACKAGE, "examples", "tests"]:
        if verbose:
            print(f"Checking codestyle in folder {folder}...")
        retcodes.append(sp.run(["ruff", "check", PACKAGE_PATH / folder]).returncode)
    return max(retcodes)


def run_unit_tests(
    *,
    runslow: bool = False,
    runinteractive: bool = False,
    num_cores: str | int = 1,
    coverage: bool = False,
    nojit: bool = False,
    pattern: str | None = None,
    pytest_args: list[str] | None = None,
) -> int:
    """Run the unit tests.

    Args:
        runslow (bool):
            Whether to run the slow tests
        runinteractive (bool):
            Whether to run the interactive tests
        num_cores (int or str):
            Number of cores to use (`auto` for automatic choice)
        coverage (bool):
            Whether to determine the test coverage
        nojit (bool):
            Whether to disable numba jit compilation
        pattern (str):
            A pattern that determines which tests are ran
        pytest_args (list of str):
            Additional arguments forwarded to py.test

    Returns:
        int: The return code indicating success or failure
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(PACKAGE_PATH) + ":" + env.get("PYTHONPATH", "")
    env["MPLBACKEND"] = "agg"
    if nojit:
        env["NUMBA_DISABLE_JIT"] = "1"
    else:
        env["NUMBA_BOUNDSCHECK"] = "1"

    args = [sys.executable, "-m", "pytest", "-c", "pyproject.toml", "-rs", "-rw"]
    if runslow:
        args.append("--runslow")
    if runinteractive:
        args.append("--runinteractive")

    if num_cores == "auto":
        num_cores = os.cpu_count() or 1
    else:
        num_cores = int(num_cores)
    if num_cores > 1:
        args.extend(["-n", str(num_cores), "--durations=10"])
    if pattern is not None:
        args.extend(["-k", pattern])
    if coverage:
        args.extend(["--cov-report", "html:scripts/coverage", f"--cov={PACKAGE}"])
    args.extend(pytest_args or [])
    args.append("tests")

    return sp.run(args, env=env, cwd=PACKAGE_PATH).returncode


def main() -> int:
    """The main program controlling the tests.

    Returns:
        int: The return code indicating success or failure
    """
    parser = argparse.ArgumentParser(
        description=f"Run tests of the `{PACKAGE}` package.",
        epilog="All test categories are run if no specific categories are selected.",
    )
    group = parser.add_argument_group("Test categories")
    group.add_argument("-s", "--style", action="store_true", help="Test code style")
    group.add_argument("-u", "--unit", action="store_true", help="Run unit tests")

    group = parser.add_argument_group("Additional arguments")
    group.add_argument("--runslow", action="store_true", help="Also run slow tests")
    group.add_argument(
        "--runinteractive", action="store_true", help="Also run interactive tests"
    )
    group.add_argument("--coverage", action="store_true", help="Record test coverage")
    group.add_argument(
        "--num_cores",
        metavar="CORES",
        type=str,
        default=1,
        help="Number of cores to use (`auto` for automatic choice)",
    )
    group.add_argument(
        "--nojit", action="store_true", help="Do not use just-in-time compilation"
    )
    group.add_argument("--pattern", metavar="PATTERN", help="Only run matching tests")
    parser.add_argument("pytest_args", nargs="*", help=argparse.SUPPRESS)

    args = parser.parse_args()
    run_all = not (args.style or args.unit)

    retcodes = []
    if run_all or args.style:
        retcodes.append(run_test_codestyle())
    if run_all or args.unit:
        retcodes.append(
            run_unit_tests(
                runslow=args.runslow,
                runinteractive=args.runinteractive,
                num_cores=args.num_cores,
                coverage=args.coverage,
                nojit=args.nojit,
                pattern=args.pattern,
                pytest_args=args.pytest_args,
            )
        )
    return max(retcodes)


if __name__ == "__main__":
    sys.exit(main())
