"""
Tantrums Command-Line Interface.

Runs the analysis engine over source files and prints the findings.

Usage:
    tantrums lint program.42AHH             # Rust-style report
    tantrums lint src/ --json               # Every .42AHH file, as JSON
    tantrums lint a.42AHH --allow unused-variable --deny W0003
    tantrums rules                          # List the rule catalog

Exit status: 0 when no errors were found, 1 when at least one error was
found, 2 for usage, configuration or file problems.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

from tantrums import __version__
from tantrums.analysis.engine import Analyzer
from tantrums.analysis.rules import ALL_RULES, LintCategory, LintConfiguration, LintLevel
from tantrums.config import CliOverrides, load_configuration
from tantrums.language import FILE_EXTENSIONS
from tantrums.utils.diagnostics import Diagnostic, sort_key
from tantrums.utils.errors import AnalysisError, ConfigError

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_USAGE = 2


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    # Text colors
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    # Styles
    BOLD = "\033[1m"

    # Reset
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.BLUE = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""

    @classmethod
    def enabled(cls) -> bool:
        return bool(cls.RESET)


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    # Disable colors if not a TTY or if NO_COLOR is set
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


# Initialize on module load
_init_colors()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="tantrums",
        description="Tantrums - static analysis for .42AHH programs",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Lint command
    lint_parser = subparsers.add_parser(
        "lint",
        aliases=["l"],
        help="Analyze Tantrums files",
    )
    lint_parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        metavar="FILE",
        help="Input files (.42AHH) or directories to search",
    )
    lint_parser.add_argument(
        "--json",
        action="store_true",
        help="Output diagnostics as JSON",
    )
    lint_parser.add_argument(
        "--allow",
        action="append",
        default=[],
        metavar="RULE",
        help="Disable a rule (e.g., 'unused-variable' or 'W0401'); repeatable",
    )
    lint_parser.add_argument(
        "--warn",
        action="append",
        default=[],
        metavar="RULE",
        help="Report a rule as a warning; repeatable",
    )
    lint_parser.add_argument(
        "--deny",
        action="append",
        default=[],
        metavar="RULE",
        help="Report a rule as an error; repeatable",
    )
    lint_parser.add_argument(
        "--warn-all",
        action="store_true",
        help="Report every rule as a warning",
    )
    lint_parser.add_argument(
        "--check-string-lines",
        action="store_true",
        help="Look for undefined variables on lines holding string literals too",
    )
    lint_parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Configuration file (default: nearest tantrums.toml)",
    )
    lint_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    # Rules command
    subparsers.add_parser(
        "rules",
        help="List all rules",
    )

    return parser


# =============================================================================
# Lint Command
# =============================================================================


def _is_source_file(path: Path) -> bool:
    return path.suffix.lower() in {ext.lower() for ext in FILE_EXTENSIONS}


def collect_inputs(paths: list[Path]) -> list[Path]:
    """Expand directories into the Tantrums files below them."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file() and _is_source_file(p)))
        else:
            files.append(path)
    return files


def _overrides(args: argparse.Namespace) -> CliOverrides:
    return CliOverrides(
        allow=tuple(args.allow),
        warn=tuple(args.warn),
        deny=tuple(args.deny),
        warn_all=args.warn_all,
        skip_string_literal_lines=False if args.check_string_lines else None,
    )


def cmd_lint(args: argparse.Namespace) -> int:
    """Handle the lint command."""
    if args.no_color:
        Colors.disable()

    overrides = _overrides(args)
    configs: dict[Optional[Path], LintConfiguration] = {}
    results: list[tuple[Path, str, list[Diagnostic]]] = []
    status = EXIT_OK

    for input_path in collect_inputs(args.inputs):
        try:
            source = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"{Colors.RED}Error:{Colors.RESET} cannot read {input_path}: {e}", file=sys.stderr)
            status = EXIT_USAGE
            continue

        try:
            key = args.config if args.config is not None else input_path.parent.resolve()
            if key not in configs:
                configs[key] = load_configuration(args.config, input_path.parent, overrides)
            diagnostics = Analyzer(configs[key]).analyze(source)
        except ConfigError as e:
            print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
            return EXIT_USAGE
        except AnalysisError as e:
            print(f"{Colors.RED}Internal error:{Colors.RESET} {input_path}: {e}", file=sys.stderr)
            status = EXIT_USAGE
            continue

        diagnostics = sorted(diagnostics, key=sort_key)
        results.append((input_path, source, diagnostics))
        if status == EXIT_OK and any(d.is_error for d in diagnostics):
            status = EXIT_ERRORS

    if args.json:
        _print_lint_json(results)
    else:
        for input_path, source, diagnostics in results:
            _print_lint_report(input_path, source, diagnostics)

    return status


def _print_lint_report(input_path: Path, source: str, diagnostics: list[Diagnostic]) -> None:
    """
    Print a Rust-style formatted report with source context.

    Example output:
        warning[W0401]: Variable 'int x' is declared but never used.
          --> example.42AHH:3:9
            |
          3 |     int x = 5;
            |         ^
            |
    """
    if not diagnostics:
        print(f"{Colors.GREEN}[ok]{Colors.RESET} {input_path}: No issues found")
        return

    for diagnostic in diagnostics:
        print(diagnostic.render(source, str(input_path), use_color=Colors.enabled()))
        print()

    errors = sum(1 for d in diagnostics if d.is_error)
    warnings = len(diagnostics) - errors
    print(f"{input_path}: found {errors} error(s) and {warnings} warning(s)")


def _print_lint_json(results: list[tuple[Path, str, list[Diagnostic]]]) -> None:
    """Print results as JSON (positions are 0-based)."""
    files: list[dict[str, Any]] = []
    for input_path, _, diagnostics in results:
        errors = sum(1 for d in diagnostics if d.is_error)
        files.append(
            {
                "file": str(input_path),
                "diagnostics": [d.to_dict() for d in diagnostics],
                "summary": {
                    "errors": errors,
                    "warnings": len(diagnostics) - errors,
                },
            }
        )
    print(json.dumps({"files": files}, indent=2))


# =============================================================================
# Rules Command
# =============================================================================


def cmd_rules(args: argparse.Namespace) -> int:
    """Print all available rules grouped by category."""
    print(f"\n{Colors.BOLD}Available Rules{Colors.RESET}")
    print("=" * 60)

    for category in LintCategory:
        rules = sorted(
            (rule for rule in ALL_RULES.values() if rule.category == category),
            key=lambda r: r.code,
        )
        if not rules:
            continue

        print(f"\n{Colors.CYAN}{category.value.upper()}{Colors.RESET}")
        for rule in rules:
            level_str = (
                f"{Colors.YELLOW}warn{Colors.RESET}"
                if rule.level == LintLevel.WARN
                else f"{Colors.RED}deny{Colors.RESET}"
            )
            print(f"  {rule.code} {rule.name:30s} [{level_str}]")
            # Truncate message for display
            msg = rule.message.replace("{}", "<name>")
            if len(msg) > 60:
                msg = msg[:57] + "..."
            print(f"    {Colors.GRAY}{msg}{Colors.RESET}")

    print()
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_USAGE

    command_handlers = {
        "lint": cmd_lint,
        "l": cmd_lint,
        "rules": cmd_rules,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
