"""Full health report — interpreter, registries, toolchain and GitHub API."""

from __future__ import annotations

import logging
import sys

from ..config import Settings
from ..core.spawn import spawn
from ..github.client import GitHubClient, report_rate_limit
from ..platform import Platform
from ..registry.sources import iter_sources, report_registries
from ..report import Reporter, ReportLevel
from .catalog import build_checks
from .checks import Spawner
from .engine import HealthOrchestrator

logger = logging.getLogger(__name__)

MIN_PYTHON = (3, 10)


def report_interpreter(reporter: Reporter, version_info: tuple[int, ...] = tuple(sys.version_info)) -> None:
    required = ".".join(str(p) for p in MIN_PYTHON)
    if tuple(version_info[:2]) >= MIN_PYTHON:
        reporter.report(ReportLevel.OK, f"Python version >= {required}")
    else:
        reporter.report(ReportLevel.ERROR, f"Python version < {required}")


def run_health_report(
    reporter: Reporter,
    settings: Settings,
    platform: Platform | None = None,
    spawner: Spawner = spawn,
    github: GitHubClient | None = None,
    include_github: bool = True,
) -> HealthOrchestrator:
    """Run every check and report it. Blocks until all of them have reported."""
    platform = platform or Platform.current()
    reporter.start("toolcheck report")
    report_interpreter(reporter)
    report_registries(iter_sources(settings), reporter)

    orchestrator = HealthOrchestrator(reporter, spawner=spawner, timeout=settings.check_timeout)
    checks = build_checks(platform, settings)

    extra_tasks = []
    if include_github:
        client = github or GitHubClient(
            base_url=settings.github_api_url,
            token=settings.github_token,
            timeout=settings.github_timeout,
        )

        async def check_rate_limit() -> None:
            report_rate_limit(await client.fetch_rate_limit(), reporter)

        extra_tasks.append(check_rate_limit)

    orchestrator.run(checks, extra_tasks)
    return orchestrator
