#!/usr/bin/env python3
"""
Test runner script for twitch-proxy

Usage:
    python run_tests.py              # Run all tests
    python run_tests.py --unit       # Run only unit tests (no network)
    python run_tests.py --integration # Run only live Twitch tests
    python run_tests.py --coverage   # Run with coverage report
"""

import os
import sys
import subprocess
import argparse


def run_command(cmd, env=None):
    """Run a command and return the exit code"""
    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, env=env)
    return result.returncode


def main():
    parser = argparse.ArgumentParser(description="Run tests for twitch-proxy")
    parser.add_argument("--unit", action="store_true",
                        help="Run only unit tests")
    parser.add_argument("--integration", action="store_true",
                        help="Run only integration tests against live Twitch")
    parser.add_argument("--coverage", action="store_true",
                        help="Run with coverage report")
    parser.add_argument("--verbose", "-v",
                        action="store_true", help="Verbose output")
    parser.add_argument("--file", help="Run specific test file")

    args = parser.parse_args()

    cmd = [sys.executable, "-m", "pytest"]
    env = os.environ.copy()

    if args.verbose:
        cmd.append("-vv")

    if args.coverage:
        cmd.extend(["--cov=src", "--cov-report=term-missing"])

    if args.unit:
        cmd.extend(["-m", "not integration", "tests/"])
    elif args.integration:
        # Integration tests skip themselves unless explicitly enabled
        env["TWITCH_PROXY_LIVE_TESTS"] = "1"
        cmd.extend(["-m", "integration", "tests/"])
    elif args.file:
        cmd.append(args.file)
    else:
        cmd.append("tests/")

    exit_code = run_command(cmd, env=env)

    if exit_code == 0:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ Tests failed with exit code {exit_code}")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
