"""Tests for the probe catalog and version checks."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from toolcheck.config import Settings
from toolcheck.health.catalog import (
    ChecksFileError,
    VersionParseError,
    build_checks,
    check_cargo,
    check_go,
    check_luarocks,
    check_node,
    check_npm,
    load_checks_file,
    min_version_check,
    parse_version,
)
from toolcheck.health.checks import CheckSpec
from toolcheck.platform import Platform

LINUX = Platform.from_sys_platform("linux")
MAC = Platform.from_sys_platform("darwin")
WINDOWS = Platform.from_sys_platform("win32")


def by_name(checks: list[CheckSpec]) -> dict[str, CheckSpec]:
    return {c.name: c for c in checks}


# ── Version checks ───────────────────────────────────────────────────────────


class TestVersionChecks:
    def test_parse_version(self) -> None:
        assert parse_version("cargo 1.72.0 (103a7ff2e 2023-08-15)") == (1, 72, 0)
        assert parse_version("tool 2.5") == (2, 5)

    def test_parse_version_fails(self) -> None:
        with pytest.raises(VersionParseError):
            parse_version("no digits here")

    @pytest.mark.parametrize(
        "output, rejected",
        [
            ("go version go1.17.3 darwin/arm64", False),
            ("go version go1.21.0 linux/amd64", False),
            ("go version go1.16.15 linux/amd64", True),
            ("go version go2.0 linux/amd64", False),
        ],
    )
    def test_go(self, output: str, rejected: bool) -> None:
        assert bool(check_go(output)) is rejected

    def test_cargo(self) -> None:
        assert check_cargo("cargo 1.59.0 (49d8809dc 2022-02-10)") == "Some cargo installations require Rust >= 1.60.0."
        assert check_cargo("cargo 1.60.0 (d1fd9fe2c 2022-03-01)") is None

    def test_luarocks(self) -> None:
        assert check_luarocks("/usr/bin/luarocks 3.9.2") is None
        assert check_luarocks("/usr/bin/luarocks 2.4.4") == "Luarocks version must be >= 3.0.0."

    def test_npm(self) -> None:
        assert check_npm("8.1.2") is None
        assert check_npm("5.6.0") == "npm version must be >= 6"

    def test_node(self) -> None:
        assert check_node("v16.3.1") is None
        assert check_node("v12.22.12") == "Node version must be >= 14"

    def test_unparsable_output_raises(self) -> None:
        for check in (check_go, check_cargo, check_luarocks, check_npm, check_node):
            with pytest.raises(VersionParseError):
                check("command not recognized")

    def test_min_version_default_message(self) -> None:
        check = min_version_check("2.30")
        assert check("git version 2.29.1") == "Version must be >= 2.30."
        assert check("git version 2.43.0") is None


# ── build_checks ─────────────────────────────────────────────────────────────


class TestBuildChecks:
    def test_linux(self, settings: Settings) -> None:
        checks = by_name(build_checks(LINUX, settings))
        assert {"bash", "sh", "npm", "node", "Go", "gzip", "pwsh"} <= set(checks)
        assert "7z" not in checks
        assert checks["sh"].args == ()
        assert checks["gzip"].use_stderr is False
        assert checks["gzip"].relaxed is False
        assert checks["pwsh"].relaxed is True
        assert checks["java"].use_stderr is True
        assert checks["npm"].relaxed is False
        assert checks["curl"].relaxed is True

    def test_windows(self, settings: Settings) -> None:
        checks = by_name(build_checks(WINDOWS, settings))
        assert {"python", "pip", "7z"} <= set(checks)
        assert "bash" not in checks
        assert checks["gzip"].relaxed is True
        assert checks["pwsh"].relaxed is False

    def test_mac_gzip_reads_stderr(self, settings: Settings) -> None:
        checks = by_name(build_checks(MAC, settings))
        assert checks["gzip"].use_stderr is True
        assert "bash" in checks

    def test_catalog_order_is_stable(self, settings: Settings) -> None:
        names = [c.name for c in build_checks(LINUX, settings)]
        assert names[0] == "unzip"
        assert names[-2:] == ["bash", "sh"]

    def test_python3_host_prog(self, settings: Settings) -> None:
        settings.python3_host_prog = "/opt/py/bin/python3"
        checks = by_name(build_checks(LINUX, settings))
        assert checks["python3_host_prog"].cmd == "/opt/py/bin/python3"
        assert checks["python3_host_prog pip"].args == ("-m", "pip", "--version")
        assert checks["python3_host_prog"].relaxed is True

    def test_java_home(self, settings: Settings) -> None:
        settings.java_home = "/usr/lib/jvm/java-17"
        check = by_name(build_checks(LINUX, settings))["JAVA_HOME"]
        assert Path(check.cmd) == Path("/usr/lib/jvm/java-17/bin/java")
        assert check.use_stderr is True
        assert check.relaxed is True

    def test_checks_file_appended(self, settings: Settings, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text("checks:\n  - name: deno\n    cmd: deno\n    args: ['--version']\n")
        settings.checks_file = str(path)
        checks = build_checks(LINUX, settings)
        assert checks[-1].name == "deno"


# ── Checks file ──────────────────────────────────────────────────────────────


class TestChecksFile:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text(textwrap.dedent("""\
            checks:
              - name: deno
                cmd: deno
                args: ["--version"]
                relaxed: true
                min_version: "1.40"
                version_pattern: 'deno (\\d+)\\.(\\d+)'
              - cmd: cat
                close_stdin: false
                use_stderr: true
        """))

        deno, cat = load_checks_file(path)
        assert deno.name == "deno"
        assert deno.args == ("--version",)
        assert deno.relaxed is True
        assert deno.version_check is not None
        assert deno.version_check("deno 1.39.4 (release)") == "Version must be >= 1.40."
        assert deno.version_check("deno 1.41.0 (release)") is None

        assert cat.name == "cat"
        assert cat.close_stdin is False
        assert cat.use_stderr is True
        assert cat.version_check is None

    def test_bare_list(self, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text("- cmd: make\n  args: ['--version']\n")
        assert [c.cmd for c in load_checks_file(path)] == ["make"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ChecksFileError, match="not found"):
            load_checks_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text("checks: [unclosed\n")
        with pytest.raises(ChecksFileError, match="Invalid YAML"):
            load_checks_file(path)

    def test_missing_cmd(self, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text("checks:\n  - name: nothing\n")
        with pytest.raises(ChecksFileError, match="cmd"):
            load_checks_file(path)

    def test_args_must_be_list(self, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text("checks:\n  - cmd: deno\n    args: --version\n")
        with pytest.raises(ChecksFileError, match="args"):
            load_checks_file(path)

    def test_bad_min_version(self, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text("checks:\n  - cmd: x\n    min_version: 'one.two'\n")
        with pytest.raises(ChecksFileError, match="min_version"):
            load_checks_file(path)

    def test_not_a_list(self, tmp_path: Path) -> None:
        path = tmp_path / "checks.yaml"
        path.write_text("checks: 42\n")
        with pytest.raises(ChecksFileError):
            load_checks_file(path)
