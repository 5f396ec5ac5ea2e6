"""Async process runner — spawns a command and captures its output.

``spawn`` never raises for process failures: a missing executable, a
non-zero exit, an I/O error or an expired timeout all come back as
``Err``. The child is always released (stdin closed, killed and reaped
if still running) whichever way the call ends, cancellation included.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .result import Err, Ok, Result

logger = logging.getLogger(__name__)


# ── Errors ───────────────────────────────────────────────────────────────────


class SpawnError(Exception):
    """Raised when a process could not be started or its output not read."""


class ProcessExitError(SpawnError):
    """The process ran but exited with a non-zero status."""

    def __init__(self, cmd: str, output: ProcessOutput) -> None:
        self.cmd = cmd
        self.output = output
        super().__init__(f"{cmd} exited with code {output.exit_code}")


class ProcessTimeoutError(SpawnError):
    """The process did not exit within the allotted time and was killed."""


# ── Models ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProcessOutput:
    exit_code: int
    stdout: str
    stderr: str


SpawnHook = Callable[[asyncio.subprocess.Process], Any]


def close_stdin(process: asyncio.subprocess.Process) -> None:
    """on_spawn hook: close the child's stdin right away.

    Some programs (``sh`` for one) read stdin until EOF and would never exit.
    """
    if process.stdin is not None and not process.stdin.is_closing():
        process.stdin.close()


# ── Runner ───────────────────────────────────────────────────────────────────


async def spawn(
    cmd: str,
    args: Sequence[str] = (),
    on_spawn: SpawnHook | None = None,
    *,
    cwd: str | None = None,
    env: Mapping[str, str] | None = None,
    check_exit: bool = True,
    timeout: float | None = None,
) -> Result[ProcessOutput]:
    """Run ``cmd`` with ``args`` and wait for it to exit.

    Only the calling task is suspended while the process runs.
    """
    argv = [cmd, *args]
    logger.debug("Spawning %s", shlex.join(argv))

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError:
        return Err(SpawnError(f"Command not found: {cmd}"))
    except PermissionError:
        return Err(SpawnError(f"Permission denied: {cmd}"))
    except OSError as e:
        return Err(SpawnError(f"Failed to spawn {cmd}: {e}"))

    try:
        if on_spawn is not None:
            on_spawn(process)
        output = await asyncio.wait_for(_collect(process), timeout)
    except asyncio.TimeoutError:
        logger.debug("%s timed out after %ss", cmd, timeout)
        return Err(ProcessTimeoutError(f"{cmd} timed out after {timeout}s"))
    except Exception as e:
        return Err(SpawnError(f"I/O error while running {cmd}: {type(e).__name__}: {e}"))
    finally:
        await _release(process)

    logger.debug("%s exited with code %d", cmd, output.exit_code)
    if check_exit and output.exit_code != 0:
        return Err(ProcessExitError(cmd, output))
    return Ok(output)


async def _collect(process: asyncio.subprocess.Process) -> ProcessOutput:
    """Read both pipes to EOF, then wait for the exit status."""
    stdout, stderr = await asyncio.gather(
        _read(process.stdout),
        _read(process.stderr),
    )
    exit_code = await process.wait()
    return ProcessOutput(exit_code=exit_code, stdout=stdout, stderr=stderr)


async def _read(stream: asyncio.StreamReader | None) -> str:
    if stream is None:
        return ""
    data = await stream.read()
    return data.decode("utf-8", errors="replace")


async def _release(process: asyncio.subprocess.Process) -> None:
    close_stdin(process)
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
