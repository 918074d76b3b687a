#!/usr/bin/env python3
"""
Run the full erdkit test suite.

Usage:
    python run_tests.py                # default: verbose, stop on first failure
    python run_tests.py -k keystore    # filter by keyword
    python run_tests.py --cov          # with coverage for erdkit_core
    python run_tests.py -- --tb=long   # pass extra flags to pytest
"""

import argparse
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
TESTS_DIR = ROOT / "tests"


def run_tests(pytest_args: list[str]) -> int:
    """Invoke pytest and return its exit code."""
    print("=== Running test suite ===")
    cmd = [
        sys.executable, "-m", "pytest",
        str(TESTS_DIR),
        "-x",
        "-v",
        "--tb=short",
        *pytest_args,
    ]
    return subprocess.call(cmd, cwd=ROOT)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the erdkit test suite.")
    parser.add_argument(
        "-k",
        metavar="EXPRESSION",
        help="Only run tests matching the given pytest keyword expression.",
    )
    parser.add_argument(
        "--cov",
        action="store_true",
        help="Collect coverage for erdkit_core (needs pytest-cov).",
    )
    args, extra = parser.parse_known_args()

    pytest_args = extra
    if args.k:
        pytest_args = ["-k", args.k, *pytest_args]
    if args.cov:
        pytest_args = ["--cov=erdkit_core", "--cov-report=term-missing", *pytest_args]

    return run_tests(pytest_args)


if __name__ == "__main__":
    raise SystemExit(main())
