"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from toolcheck.config import Settings
from toolcheck.core.result import Err, Result
from toolcheck.core.spawn import ProcessOutput, SpawnError
from toolcheck.report import CollectingReporter


@pytest.fixture
def reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the host environment and any .env file."""
    return Settings(
        _env_file=None,
        python3_host_prog="",
        java_home="",
        checks_file="",
        registries=[],
        data_dir=str(tmp_path / "data"),
        check_timeout=None,
    )


@pytest.fixture
def fake_spawner() -> Callable[..., Any]:
    """Build an async spawner that answers from a {cmd: Result} table.

    Unknown commands fail like a missing executable. ``delays`` maps a
    command to seconds to sleep before answering, ``None`` to never answer.
    """

    def factory(
        outputs: dict[str, Result[ProcessOutput]],
        delays: dict[str, float | None] | None = None,
    ) -> Callable[..., Any]:
        calls: list[tuple[str, tuple[str, ...]]] = []

        async def spawner(cmd: str, args: tuple[str, ...] = (), on_spawn: Any = None, **kwargs: Any):
            calls.append((cmd, tuple(args)))
            if delays and cmd in delays:
                if delays[cmd] is None:
                    await asyncio.Event().wait()
                await asyncio.sleep(delays[cmd])
            return outputs.get(cmd, Err(SpawnError(f"Command not found: {cmd}")))

        spawner.calls = calls  # type: ignore[attr-defined]
        return spawner

    return factory
