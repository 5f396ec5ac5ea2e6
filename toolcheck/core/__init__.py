"""Core — Result type, async process runner, cooperative scheduler."""

from .result import Err, Ok, Result, run_catching
from .scheduler import CooperativeScheduler, TaskState, run_blocking
from .spawn import (
    ProcessExitError,
    ProcessOutput,
    ProcessTimeoutError,
    SpawnError,
    close_stdin,
    spawn,
)
