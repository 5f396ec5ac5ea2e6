"""Entry point for the toolcheck CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from toolcheck.config import settings
from toolcheck.health.catalog import ChecksFileError, build_checks
from toolcheck.health.report_run import run_health_report
from toolcheck.platform import Platform
from toolcheck.report import CollectingReporter, ConsoleReporter

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.WARNING),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)


def run_check(as_json: bool = False, include_github: bool = True) -> int:
    """Run the full report. Returns the process exit code."""
    if as_json:
        collector = CollectingReporter()
        run_health_report(collector, settings, include_github=include_github)
        print(json.dumps(collector.to_dict(), indent=2))
        return 1 if collector.has_errors else 0

    console.print(Panel("Checking toolchain health", style="bold blue"))
    reporter = ConsoleReporter(console)
    with console.status("[bold green]Running checks..."):
        orchestrator = run_health_report(reporter, settings, include_github=include_github)
    reporter.summary()
    console.print(f"[dim]{orchestrator.completed}/{orchestrator.dispatched} tool checks completed[/dim]")
    return 1 if reporter.has_errors else 0


def list_checks() -> None:
    """Print the probes that would run on this platform."""
    table = Table(title="Checks")
    table.add_column("Name")
    table.add_column("Command")
    table.add_column("Relaxed")
    for spec in build_checks(Platform.current(), settings):
        table.add_row(spec.name, " ".join([spec.cmd, *spec.args]), "yes" if spec.relaxed else "")
    console.print(table)


def main() -> None:
    parser = argparse.ArgumentParser(description="Toolchain health checks")
    sub = parser.add_subparsers(dest="command")

    check_parser = sub.add_parser("check", help="Run all health checks")
    check_parser.add_argument("--json", action="store_true", help="Print results as JSON")
    check_parser.add_argument("--no-github", action="store_true", help="Skip the GitHub rate limit check")

    sub.add_parser("list", help="List the checks for this platform")

    args = parser.parse_args()

    try:
        if args.command == "check":
            sys.exit(run_check(as_json=args.json, include_github=not args.no_github))
        elif args.command == "list":
            list_checks()
        else:
            parser.print_help()
            sys.exit(1)
    except ChecksFileError as e:
        console.print(f"[bold red]{escape(str(e))}[/bold red]")
        sys.exit(2)


if __name__ == "__main__":
    main()
