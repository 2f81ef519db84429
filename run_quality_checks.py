#!/usr/bin/env python
"""Local quality checks and tests runner with auto-fix capabilities.

Usage:
    python run_quality_checks.py                    # Run all checks (no fixes)
    python run_quality_checks.py --fix              # Run all checks + auto fixes
    python run_quality_checks.py --fix --skip lint  # Fix but skip linting
    python run_quality_checks.py --verbose          # Detailed output
"""

import argparse
import subprocess
import sys

# Directories to check
PACKAGE_DIRS = ["chip8vm", "chip8vm_gui"]
TESTS_DIR = "tests"
DIRS_TO_CHECK = [*PACKAGE_DIRS, TESTS_DIR]


class CheckRunner:
    """Runs quality checks and tests with optional auto-fixes."""

    def __init__(self, fix: bool = False, verbose: bool = False, skip_checks: list[str] | None = None):
        self.fix = fix
        self.verbose = verbose
        self.skip_checks = skip_checks or []
        self.failed_checks: list[str] = []
        self.passed_checks: list[str] = []

    def run_command(
        self,
        cmd: list[str],
        name: str,
        key: str,
        show_output: bool = True,
    ) -> bool:
        """Run a shell command and return success status.

        Args:
            cmd: Command and arguments as list
            name: Friendly name for the check
            key: Short name accepted by --skip
            show_output: Whether to show command output

        Returns:
            True if command succeeded, False otherwise
        """
        if key in self.skip_checks:
            print(f"[skip] {name}")
            return True

        print(f"\n{'=' * 70}")
        print(f"Running: {name}")
        print(f"{'=' * 70}")

        try:
            if self.verbose or show_output:
                result = subprocess.run(cmd, check=False)
                success = result.returncode == 0
            else:
                result = subprocess.run(cmd, check=False, capture_output=True, text=True)
                success = result.returncode == 0
                if not success:
                    print(result.stdout)
                    print(result.stderr)
        except FileNotFoundError as e:
            print(f"[error] {e}")
            print("   Make sure all tools are installed: pip install -e .[dev]")
            self.failed_checks.append(name)
            return False

        if success:
            print(f"[ok] {name} passed")
            self.passed_checks.append(name)
        else:
            print(f"[fail] {name} failed")
            self.failed_checks.append(name)
        return success

    def check_black_formatting(self) -> bool:
        if self.fix:
            return self.run_command(["black", *DIRS_TO_CHECK], "Black Formatting (auto-fix enabled)", "formatting")
        return self.run_command(["black", "--check", *DIRS_TO_CHECK], "Black Formatting Check", "formatting")

    def check_isort_imports(self) -> bool:
        if self.fix:
            return self.run_command(["isort", *DIRS_TO_CHECK], "isort Import Ordering (auto-fix enabled)", "imports")
        return self.run_command(["isort", "--check-only", *DIRS_TO_CHECK], "isort Import Ordering Check", "imports")

    def check_pylint(self) -> bool:
        return self.run_command(["pylint", *PACKAGE_DIRS], "Pylint Code Quality Check", "lint")

    def check_mypy(self) -> bool:
        return self.run_command(["mypy", *PACKAGE_DIRS], "Mypy Type Checking", "type")

    def check_vulture(self) -> bool:
        """Check for dead code with Vulture."""
        return self.run_command(["vulture", *PACKAGE_DIRS], "Vulture Dead Code Check", "deadcode")

    def check_radon_complexity(self) -> bool:
        return self.run_command(["radon", "cc", *PACKAGE_DIRS, "-a"], "Radon Code Complexity Check", "complexity")

    def run_tests(self) -> bool:
        """Run pytest with coverage."""
        return self.run_command(
            ["pytest", "--cov=chip8vm", "--cov=chip8vm_gui", "--cov-report=term-missing", TESTS_DIR],
            "Pytest + Coverage",
            "tests",
        )

    def print_summary(self) -> None:
        print(f"\n{'=' * 70}")
        print("SUMMARY")
        print(f"{'=' * 70}")

        if self.passed_checks:
            print(f"\nPassed ({len(self.passed_checks)}):")
            for check in self.passed_checks:
                print(f"   - {check}")

        if self.failed_checks:
            print(f"\nFailed ({len(self.failed_checks)}):")
            for check in self.failed_checks:
                print(f"   - {check}")
        else:
            print("\nAll checks passed!")

        print(f"\n{'=' * 70}")

    def run_all(self) -> int:
        """Run all checks in order.

        Returns:
            0 if all checks passed, non-zero otherwise
        """
        fix_text = "with auto-fixes" if self.fix else "without fixes"
        print(f"\nStarting quality checks {fix_text}...\n")

        checks = [
            self.check_black_formatting,
            self.check_isort_imports,
            self.check_pylint,
            self.check_mypy,
            self.check_vulture,
            self.check_radon_complexity,
            self.run_tests,
        ]
        for check_func in checks:
            check_func()

        self.print_summary()
        return 0 if not self.failed_checks else 1


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Run local quality checks and tests with optional auto-fixes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_quality_checks.py              # Run all checks
  python run_quality_checks.py --fix        # Run + auto-fix formatting/imports
  python run_quality_checks.py --skip deadcode  # Skip dead code check
        """,
    )
    parser.add_argument(
        "--fix",
        "--apply",
        action="store_true",
        dest="fix",
        help="Automatically fix issues (formatting, imports) where possible",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed output from all commands")
    parser.add_argument(
        "--skip",
        nargs="+",
        default=[],
        help="Skip specific checks (formatting, imports, lint, type, deadcode, complexity, tests)",
    )
    args = parser.parse_args()

    runner = CheckRunner(fix=args.fix, verbose=args.verbose, skip_checks=args.skip)
    return runner.run_all()


if __name__ == "__main__":
    sys.exit(main())
