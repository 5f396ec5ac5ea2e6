"""Check definitions, outcomes and the classifier that maps process output to one.

Every check resolves to exactly one of four outcomes:
- success: the tool ran and its version (if validated) is acceptable
- version-mismatch: the tool ran but its version was rejected
- parse-error: the version validator could not make sense of the output
- not-available: the tool could not be run at all

Severity is policy: a relaxed check reports failures as warnings.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from ..core.result import Result
from ..core.spawn import ProcessOutput, SpawnHook, close_stdin
from ..report import ReportLevel

logger = logging.getLogger(__name__)

VersionCheck = Callable[[str], str | None]
Spawner = Callable[..., Awaitable[Result[ProcessOutput]]]


# ── Models ───────────────────────────────────────────────────────────────────


class Outcome(str, Enum):
    SUCCESS = "success"
    VERSION_MISMATCH = "version-mismatch"
    PARSE_ERROR = "parse-error"
    NOT_AVAILABLE = "not-available"


@dataclass(frozen=True)
class CheckSpec:
    """How to probe one tool, and how to judge what it prints."""

    cmd: str
    name: str
    args: tuple[str, ...] = ()
    use_stderr: bool = False
    version_check: VersionCheck | None = None
    relaxed: bool = False
    close_stdin: bool = True


@dataclass(frozen=True)
class HealthCheck:
    """Classified outcome of running one CheckSpec."""

    outcome: Outcome
    name: str
    version: str | None = None
    reason: str | None = None
    relaxed: bool = False

    def display_version(self) -> str | None:
        # Some tools (sh) print nothing at all on success
        if self.outcome == Outcome.SUCCESS and not self.version:
            return "Ok"
        return self.version

    def report_level(self) -> ReportLevel:
        if self.outcome == Outcome.SUCCESS:
            return ReportLevel.OK
        if self.outcome == Outcome.PARSE_ERROR:
            return ReportLevel.WARN
        return ReportLevel.WARN if self.relaxed else ReportLevel.ERROR

    def message(self) -> str:
        if self.outcome == Outcome.SUCCESS:
            return f"{self.name}: {self.display_version()}"
        if self.outcome == Outcome.VERSION_MISMATCH:
            return f"{self.name}: unsupported version {self.display_version()}. {self.reason}"
        if self.outcome == Outcome.PARSE_ERROR:
            return f"{self.name}: failed to parse version"
        return f"{self.name}: not available"

    def __str__(self) -> str:
        return self.message()


# ── Classifier ───────────────────────────────────────────────────────────────


def extract_version(text: str) -> str:
    """First non-blank line of ``text``, verbatim. Empty if there is none."""
    for line in text.split("\n"):
        if line.strip():
            return line.rstrip("\r")
    return ""


def classify(spec: CheckSpec, output: ProcessOutput) -> HealthCheck:
    """Turn captured process output into a HealthCheck. Pure."""
    version = extract_version(output.stderr if spec.use_stderr else output.stdout)

    if spec.version_check is not None:
        try:
            reason = spec.version_check(version)
        except Exception as e:
            logger.debug("Version check for %s failed on %r: %s", spec.name, version, e)
            return HealthCheck(
                outcome=Outcome.PARSE_ERROR,
                name=spec.name,
                version="N/A",
                relaxed=spec.relaxed,
            )
        if reason:
            return HealthCheck(
                outcome=Outcome.VERSION_MISMATCH,
                name=spec.name,
                version=version,
                reason=reason,
                relaxed=spec.relaxed,
            )

    return HealthCheck(
        outcome=Outcome.SUCCESS,
        name=spec.name,
        version=version,
        relaxed=spec.relaxed,
    )


def not_available(spec: CheckSpec) -> HealthCheck:
    return HealthCheck(outcome=Outcome.NOT_AVAILABLE, name=spec.name, relaxed=spec.relaxed)


async def run_check(
    spec: CheckSpec,
    spawner: Spawner,
    timeout: float | None = None,
) -> HealthCheck:
    """Spawn the probe and classify it. A failed spawn is always not-available."""
    on_spawn: SpawnHook | None = close_stdin if spec.close_stdin else None
    result = await spawner(spec.cmd, spec.args, on_spawn, timeout=timeout)
    return (
        result
        .on_failure(lambda e: logger.debug("%s unavailable: %s", spec.name, e))
        .map(lambda output: classify(spec, output))
        .get_or_else(not_available(spec))
    )

