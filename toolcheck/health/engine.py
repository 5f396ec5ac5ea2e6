"""Health check orchestrator — fans out every check and waits for all of them.

Each check becomes one task on the cooperative scheduler. Tasks are never
awaited one by one: the orchestrator dispatches everything, then blocks once
in ``run_until_idle`` while results are reported in the order processes exit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..core.scheduler import CooperativeScheduler, TaskBody
from ..core.spawn import spawn
from ..report import Reporter
from .checks import CheckSpec, HealthCheck, Spawner, run_check

logger = logging.getLogger(__name__)


class HealthOrchestrator:
    """Runs a set of checks concurrently and reports each one as it completes.

    Lifecycle:
        orchestrator = HealthOrchestrator(reporter)
        orchestrator.run(build_checks(platform, settings))
    """

    def __init__(
        self,
        reporter: Reporter,
        scheduler: CooperativeScheduler | None = None,
        spawner: Spawner = spawn,
        timeout: float | None = None,
        on_result: Callable[[HealthCheck], Any] | None = None,
    ) -> None:
        self.reporter = reporter
        self.scheduler = scheduler or CooperativeScheduler()
        self.spawner = spawner
        self.timeout = timeout
        self.on_result = on_result
        # Only ever touched from the loop thread, so no lock
        self.completed = 0
        self.dispatched = 0
        self.results: list[HealthCheck] = []

    def make_check(self, spec: CheckSpec) -> TaskBody:
        """Task body for one check: spawn, classify, report."""

        async def body() -> None:
            healthcheck = await run_check(spec, self.spawner, timeout=self.timeout)
            self._report(healthcheck)

        return body

    def dispatch(self, spec: CheckSpec) -> None:
        self.dispatched += 1
        self.scheduler.dispatch(self.make_check(spec), name=f"check-{spec.name}")

    def run(self, specs: Iterable[CheckSpec], extra_tasks: Iterable[TaskBody] = ()) -> int:
        """Dispatch every check and extra task, then block until all have finished.

        Returns the number of checks that reported.
        """
        for spec in specs:
            self.dispatch(spec)
        for task in extra_tasks:
            self.scheduler.dispatch(task)

        logger.info("Dispatched %d checks", self.dispatched)
        self.scheduler.run_until_idle()
        logger.info("Completed %d/%d checks", self.completed, self.dispatched)
        return self.completed

    def _report(self, healthcheck: HealthCheck) -> None:
        self.completed += 1
        self.results.append(healthcheck)
        self.reporter.report(healthcheck.report_level(), healthcheck.message())
        if self.on_result:
            try:
                self.on_result(healthcheck)
            except Exception:
                logger.exception("Result callback error")
