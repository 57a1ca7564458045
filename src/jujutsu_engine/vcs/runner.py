"""Subprocess runner for the ``jj`` executable."""

from __future__ import annotations

import asyncio
import os
from typing import Callable, Optional, Protocol, Sequence

from jujutsu_engine.runtime import telemetry

from .models import CommandResult

Notify = Callable[[str, str], None]
FailureHandler = Callable[[CommandResult], None]


class Runner(Protocol):
    """Anything able to execute a jj argument vector."""

    async def run(self, args: Sequence[str]) -> CommandResult:  # pragma: no cover
        ...


def _log_notify(message: str, level: str) -> None:
    telemetry.log(level, message, logger_name="jujutsu_engine.vcs")


class CommandRunner:
    """Runs ``jj`` and waits for it to exit.

    ``run`` never raises for command failures; it returns the result with the
    exit status and captured streams. ``call`` layers the default failure
    policy on top: report stderr once through ``notify`` and hand back
    ``None`` so the calling flow stops. Nothing is retried.
    """

    def __init__(
        self,
        binary: str = "jj",
        *,
        cwd: str | os.PathLike[str] | None = None,
        notify: Notify | None = None,
        extra_env: Optional[dict[str, str]] = None,
    ) -> None:
        self.binary = binary
        self.cwd = cwd
        self.notify = notify or _log_notify
        self._env = {**os.environ, **(extra_env or {})}

    async def run(self, args: Sequence[str]) -> CommandResult:
        argv = (self.binary, *args)
        with telemetry.span(
            "vcs::run",
            logger_name="jujutsu_engine.vcs",
            component="vcs",
            metadata={"argv": argv},
        ) as handle:
            try:
                process = await asyncio.create_subprocess_exec(
                    *argv,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=self.cwd,
                    env=self._env,
                )
            except FileNotFoundError:
                handle.add_metadata("returncode", 127)
                return CommandResult(
                    args=tuple(args),
                    returncode=127,
                    stderr=f"{self.binary}: command not found",
                )
            stdout, stderr = await process.communicate()
            returncode = process.returncode if process.returncode is not None else -1
            handle.add_metadata("returncode", returncode)
            return CommandResult(
                args=tuple(args),
                returncode=returncode,
                stdout=stdout.decode("utf-8", errors="replace"),
                stderr=stderr.decode("utf-8", errors="replace"),
            )

    async def call(
        self,
        args: Sequence[str],
        *,
        failure: str = "Command failed",
        on_error: FailureHandler | None = None,
    ) -> CommandResult | None:
        result = await self.run(args)
        if result.ok:
            return result
        if on_error is not None:
            on_error(result)
        else:
            self.notify(f"{failure}: {result.stderr.strip()}", "error")
        return None


__all__ = ["CommandRunner", "Runner", "Notify", "FailureHandler"]
