"""kubectl execution shared by the cluster data sources.

Blocking kubectl processes run in worker threads via ``asyncio.to_thread`` so
the Textual event loop stays responsive during refresh cycles.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from collections.abc import Awaitable, Callable

from kubelens.constants.timeouts import KUBECTL_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

KubectlRunner = Callable[[tuple[str, ...]], Awaitable[str]]


class KubectlCommandError(RuntimeError):
    """kubectl exited non-zero or could not be started."""

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stdout: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout


class KubectlController:
    """Runs kubectl against an optional context."""

    def __init__(
        self,
        context: str | None = None,
        *,
        kubectl_binary: str = "kubectl",
        command_timeout: int = KUBECTL_COMMAND_TIMEOUT,
    ) -> None:
        self.context = context
        self._kubectl_binary = kubectl_binary
        self._command_timeout = command_timeout

    def build_command(self, args: tuple[str, ...]) -> list[str]:
        cmd = [self._kubectl_binary]
        if self.context:
            cmd.extend(["--context", self.context])
        cmd.extend(args)
        return cmd

    def _run_kubectl_sync(self, args: tuple[str, ...]) -> str:
        """Run a kubectl command synchronously (thread-safe wrapper target)."""
        cmd = self.build_command(args)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._command_timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise KubectlCommandError(f"{' '.join(cmd[:3])}: {exc}") from exc
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise KubectlCommandError(
                stderr or "kubectl command failed",
                returncode=result.returncode,
                stdout=result.stdout or "",
            )
        return result.stdout

    async def run_kubectl(self, args: tuple[str, ...]) -> str:
        return await asyncio.to_thread(self._run_kubectl_sync, args)
