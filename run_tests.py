#!/usr/bin/env python3
"""
CLI test runner for Discussion Coach.

Usage: python run_tests.py [--verbose] [--list] [pattern]
  --verbose  Show detailed output for each test
  --list     Print matching test ids without running them
  pattern    Optional: run only tests matching this string (e.g. "report", "session")
"""

import sys
import os
import argparse
import logging
import unittest

# Ensure project root is on path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)


def _flatten(suite, acc):
    for t in suite:
        if isinstance(t, unittest.TestSuite):
            _flatten(t, acc)
        else:
            acc.append(t)
    return acc


def collect_tests(pattern=None):
    """Discover tests under tests/, optionally keeping only ids containing pattern."""
    loader = unittest.TestLoader()
    start_dir = os.path.join(PROJECT_ROOT, "tests")
    suite = loader.discover(start_dir, pattern="test_*.py")
    if not pattern:
        return suite
    pat = pattern.lower()
    filtered = unittest.TestSuite(t for t in _flatten(suite, []) if pat in t.id().lower())
    return filtered


def run_tests(verbose=False, pattern=None):
    """Discover and run tests. Returns (total, failures, errors)."""
    suite = collect_tests(pattern)
    runner = unittest.TextTestRunner(verbosity=2 if verbose else 1)
    result = runner.run(suite)
    return result.testsRun, len(result.failures), len(result.errors)


def main():
    parser = argparse.ArgumentParser(
        description="Run Discussion Coach test suite",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_tests.py
  python run_tests.py --verbose
  python run_tests.py report
  python run_tests.py session
  python run_tests.py --list scorer
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List matching tests and exit",
    )
    parser.add_argument(
        "pattern",
        nargs="?",
        default=None,
        help="Run only tests matching this string",
    )
    args = parser.parse_args()

    # Scoring code logs warnings on purpose in failure-path tests
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.ERROR)

    if args.list:
        for t in _flatten(collect_tests(args.pattern), []):
            print(t.id())
        return 0

    print("=" * 60)
    print("Discussion Coach - Test Suite")
    print("=" * 60)
    if args.pattern:
        print(f"Filter: tests matching '{args.pattern}'")
    print()

    total, failures, errors = run_tests(verbose=args.verbose, pattern=args.pattern)

    print()
    print("=" * 60)
    if total == 0:
        print("No tests matched")
        return 1
    if failures == 0 and errors == 0:
        print(f"OK: {total} test(s) passed")
        return 0
    print(f"FAILED: {failures} failure(s), {errors} error(s) out of {total} test(s)")
    print()
    print("Troubleshooting:")
    print("  - Failures usually mean a scoring rule or report text changed")
    print("  - Errors usually mean a missing dependency (numpy, requests, openai)")
    print("  - Run with --verbose to see full tracebacks")
    return 1


if __name__ == "__main__":
    sys.exit(main())
