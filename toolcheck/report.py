"""Reporting sinks — turn (level, message) pairs into visible output."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Any, Protocol

from rich.console import Console
from rich.markup import escape


class ReportLevel(str, Enum):
    OK = "ok"
    WARN = "warn"
    ERROR = "error"


class Reporter(Protocol):
    def start(self, title: str) -> None: ...

    def report(self, level: ReportLevel, message: str) -> None: ...


_LEVEL_STYLE = {
    ReportLevel.OK: ("OK", "bold green"),
    ReportLevel.WARN: ("WARNING", "bold yellow"),
    ReportLevel.ERROR: ("ERROR", "bold red"),
}


class ConsoleReporter:
    """Prints each report line to a rich console as it arrives."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.counts: Counter[ReportLevel] = Counter()

    def start(self, title: str) -> None:
        self.console.rule(f"[bold]{escape(title)}[/bold]", align="left")

    def report(self, level: ReportLevel, message: str) -> None:
        self.counts[level] += 1
        label, style = _LEVEL_STYLE[level]
        self.console.print(f"- [{style}]{label}[/{style}] {escape(message)}")

    def summary(self) -> None:
        self.console.print(
            f"\n[dim]{self.counts[ReportLevel.OK]} ok, "
            f"{self.counts[ReportLevel.WARN]} warnings, "
            f"{self.counts[ReportLevel.ERROR]} errors[/dim]"
        )

    @property
    def has_errors(self) -> bool:
        return self.counts[ReportLevel.ERROR] > 0


class CollectingReporter:
    """Keeps every report in memory, in arrival order."""

    def __init__(self) -> None:
        self.sections: list[str] = []
        self.entries: list[tuple[ReportLevel, str]] = []

    def start(self, title: str) -> None:
        self.sections.append(title)

    def report(self, level: ReportLevel, message: str) -> None:
        self.entries.append((level, message))

    def messages(self, level: ReportLevel | None = None) -> list[str]:
        return [m for lvl, m in self.entries if level is None or lvl == level]

    @property
    def has_errors(self) -> bool:
        return any(lvl == ReportLevel.ERROR for lvl, _ in self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sections": list(self.sections),
            "results": [{"level": lvl.value, "message": m} for lvl, m in self.entries],
        }
