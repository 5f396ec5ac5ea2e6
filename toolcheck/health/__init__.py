"""Health subsystem — check catalog, classifier, orchestrator."""

from .catalog import ChecksFileError, VersionParseError, build_checks, load_checks_file, min_version_check
from .checks import CheckSpec, HealthCheck, Outcome, classify, extract_version, run_check
from .engine import HealthOrchestrator
from .report_run import run_health_report
