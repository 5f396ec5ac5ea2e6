"""Catalog of probes — which tools to check, and how to judge their versions.

The list is assembled once per run from platform and environment facts;
the orchestrator itself never looks at the platform.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from ..config import Settings
from ..platform import Platform
from .checks import CheckSpec, VersionCheck

logger = logging.getLogger(__name__)

SEMVER_PATTERN = r"(\d+)\.(\d+)(?:\.(\d+))?"


class VersionParseError(Exception):
    """Raised by a version check when the output holds no recognizable version."""


class ChecksFileError(Exception):
    """Raised when the checks file is missing or malformed."""


# ── Version checks ───────────────────────────────────────────────────────────


def parse_version(text: str, pattern: str = SEMVER_PATTERN) -> tuple[int, ...]:
    """Numeric groups of the first match of ``pattern`` in ``text``."""
    match = re.search(pattern, text)
    if not match:
        raise VersionParseError(f"No version matching {pattern!r} in {text!r}")
    return tuple(int(g) for g in match.groups() if g is not None)


def min_version_check(
    minimum: str,
    message: str | None = None,
    pattern: str = SEMVER_PATTERN,
) -> VersionCheck:
    """Build a version check rejecting anything older than ``minimum``."""
    required = tuple(int(part) for part in minimum.split("."))
    reason = message or f"Version must be >= {minimum}."

    def check(version: str) -> str | None:
        found = parse_version(version, pattern)
        # Compare only as many components as the pattern captured
        if found < required[: len(found)]:
            return reason
        return None

    return check


# Parses output such as "go version go1.17.3 darwin/arm64"
check_go = min_version_check("1.17", "Go version must be >= 1.17.", r"go(\d+)\.(\d+)")
check_cargo = min_version_check("1.60.0", "Some cargo installations require Rust >= 1.60.0.")
# --dev flag needs luarocks 3
check_luarocks = min_version_check("3", "Luarocks version must be >= 3.0.0.", r"(\d+)\.\d+\.\d+")
check_npm = min_version_check("6", "npm version must be >= 6", r"(\d+)\.\d+\.\d+")
# Parses output such as "v16.3.1"
check_node = min_version_check("14", "Node version must be >= 14", r"v(\d+)\.\d+\.\d+")


# ── Catalog ──────────────────────────────────────────────────────────────────


def build_checks(platform: Platform, settings: Settings) -> list[CheckSpec]:
    """All probes that apply to ``platform``, in report order."""
    checks = [
        CheckSpec(cmd="unzip", args=("-v",), name="unzip"),
        CheckSpec(cmd="go", args=("version",), name="Go", relaxed=True, version_check=check_go),
        CheckSpec(cmd="cargo", args=("--version",), name="cargo", relaxed=True, version_check=check_cargo),
        CheckSpec(
            cmd="luarocks", args=("--version",), name="luarocks", relaxed=True, version_check=check_luarocks,
        ),
        CheckSpec(cmd="ruby", args=("--version",), name="Ruby", relaxed=True),
        CheckSpec(cmd="gem", args=("--version",), name="RubyGem", relaxed=True),
        CheckSpec(cmd="composer", args=("--version",), name="Composer", relaxed=True),
        CheckSpec(cmd="php", args=("--version",), name="PHP", relaxed=True),
        CheckSpec(cmd="npm", args=("--version",), name="npm", version_check=check_npm),
        CheckSpec(cmd="node", args=("--version",), name="node", version_check=check_node),
        CheckSpec(cmd="python3", args=("--version",), name="python3", relaxed=True),
        CheckSpec(cmd="python3", args=("-m", "pip", "--version"), name="pip3", relaxed=True),
        CheckSpec(cmd="javac", args=("-version",), name="javac", relaxed=True),
        CheckSpec(cmd="java", args=("-version",), name="java", use_stderr=True, relaxed=True),
        CheckSpec(cmd="julia", args=("--version",), name="julia", relaxed=True),
        CheckSpec(cmd="wget", args=("--version",), name="wget"),
        # wget is preferred over curl, so curl is only nice to have
        CheckSpec(cmd="curl", args=("--version",), name="curl", relaxed=True),
        CheckSpec(
            cmd="gzip",
            args=("--version",),
            name="gzip",
            use_stderr=platform.is_mac,  # Apple gzip prints its version to stderr
            relaxed=platform.is_win,
        ),
        CheckSpec(cmd="tar", args=("--version",), name="tar"),
        CheckSpec(
            cmd="pwsh",
            args=(
                "-NoProfile",
                "-Command",
                '$PSVersionTable.PSVersion, $PSVersionTable.OS, $PSVersionTable.Platform -join " "',
            ),
            name="pwsh",
            relaxed=not platform.is_win,
        ),
    ]

    if platform.is_unix:
        checks.append(CheckSpec(cmd="bash", args=("--version",), name="bash"))
        checks.append(CheckSpec(cmd="sh", name="sh"))

    if platform.is_win:
        checks.append(CheckSpec(cmd="python", args=("--version",), name="python", relaxed=True))
        checks.append(CheckSpec(cmd="python", args=("-m", "pip", "--version"), name="pip", relaxed=True))
        checks.append(CheckSpec(cmd="7z", args=("--help",), name="7z", relaxed=True))

    if settings.python3_host_prog:
        host_prog = os.path.expanduser(os.path.expandvars(settings.python3_host_prog))
        checks.append(CheckSpec(cmd=host_prog, args=("--version",), name="python3_host_prog", relaxed=True))
        checks.append(
            CheckSpec(cmd=host_prog, args=("-m", "pip", "--version"), name="python3_host_prog pip", relaxed=True)
        )

    if settings.java_home:
        checks.append(
            CheckSpec(
                cmd=str(Path(settings.java_home) / "bin" / "java"),
                args=("-version",),
                name="JAVA_HOME",
                use_stderr=True,
                relaxed=True,
            )
        )

    if settings.checks_file:
        checks.extend(load_checks_file(Path(settings.checks_file).expanduser()))

    return checks


# ── Checks file ──────────────────────────────────────────────────────────────


def load_checks_file(path: Path) -> list[CheckSpec]:
    """Load user-defined probes from YAML.

    Format:
        checks:
          - name: deno
            cmd: deno
            args: ["--version"]
            relaxed: true
            min_version: "1.40"
            version_pattern: 'deno (\\d+)\\.(\\d+)'
    """
    if not path.exists():
        raise ChecksFileError(f"Checks file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ChecksFileError(f"Invalid YAML in {path}: {e}") from e

    entries = raw.get("checks", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ChecksFileError(f"{path}: expected a list of checks")

    checks = [_parse_check(entry, path) for entry in entries]
    logger.info("Loaded %d checks from %s", len(checks), path)
    return checks


def _parse_check(entry: Any, path: Path) -> CheckSpec:
    if not isinstance(entry, dict) or not entry.get("cmd"):
        raise ChecksFileError(f"{path}: every check needs a 'cmd': {entry!r}")

    version_check = None
    if entry.get("min_version"):
        try:
            version_check = min_version_check(
                str(entry["min_version"]),
                entry.get("message"),
                entry.get("version_pattern", SEMVER_PATTERN),
            )
        except ValueError as e:
            raise ChecksFileError(f"{path}: bad min_version {entry['min_version']!r}") from e

    args = entry.get("args", [])
    if not isinstance(args, list):
        raise ChecksFileError(f"{path}: 'args' must be a list: {entry!r}")

    return CheckSpec(
        cmd=str(entry["cmd"]),
        name=str(entry.get("name", entry["cmd"])),
        args=tuple(str(a) for a in args),
        use_stderr=bool(entry.get("use_stderr", False)),
        relaxed=bool(entry.get("relaxed", False)),
        close_stdin=bool(entry.get("close_stdin", True)),
        version_check=version_check,
    )
