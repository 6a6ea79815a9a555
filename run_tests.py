#!/usr/bin/env python3
"""
Test runner script for tradeplot.
Run all tests or specific test suites.
"""
import sys
import subprocess


def run_tests(test_path: str = "", verbose: bool = True, markers: str = "") -> int:
    """
    Run pytest with specified options.

    Args:
        test_path: Specific test file or directory to run
        verbose: Enable verbose output
        markers: Pytest marker expression (e.g., "not slow")

    Returns:
        Exit code
    """
    cmd = ["pytest", test_path or "tests/"]

    if verbose:
        cmd.append("-v")

    if markers:
        cmd.extend(["-m", markers])

    # Add coverage if available
    try:
        import pytest_cov  # noqa: F401
        cmd.extend(["--cov=tradeplot", "--cov-report=term-missing"])
    except ImportError:
        pass

    print(f"Running: {' '.join(cmd)}")
    print("=" * 60)

    result = subprocess.run(cmd)
    return result.returncode


SUITES = {
    "chart": "tests/test_collector.py",
    "cli": "tests/test_cli.py",
    "bus": "tests/test_event_bus.py",
}


def main() -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Run tradeplot tests")
    parser.add_argument(
        "test",
        nargs="?",
        default="",
        help="Specific test file or directory (default: all tests)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Less verbose output",
    )
    parser.add_argument(
        "-m", "--markers",
        default="",
        help="Run tests matching marker expression (e.g., 'not slow')",
    )
    parser.add_argument(
        "--suite",
        choices=sorted(SUITES),
        help="Run a single named suite",
    )

    args = parser.parse_args()

    test_path = SUITES[args.suite] if args.suite else args.test
    return run_tests(test_path, verbose=not args.quiet, markers=args.markers)


if __name__ == "__main__":
    sys.exit(main())
