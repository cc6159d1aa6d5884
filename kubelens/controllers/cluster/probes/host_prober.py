"""Host health prober - out-of-band service state checks over ssh.

The probe runs ``systemctl status <service>`` on the node and reads the
``Active:`` line. It is advisory: every failure degrades to
ProbeState.UNKNOWN and nothing is raised to the refresh cycle.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess

from kubelens.constants.defaults import PROBE_SSH_BINARY_DEFAULT
from kubelens.constants.enums import ProbeState

logger = logging.getLogger(__name__)

_KNOWN_STATES = {state.value: state for state in ProbeState if state is not ProbeState.UNKNOWN}


def extract_status(output: str) -> ProbeState:
    """Parse the service state token from ``systemctl status`` output."""
    for line in output.splitlines():
        if "Active:" not in line:
            continue
        fields = line.split()
        try:
            token = fields[fields.index("Active:") + 1]
        except (ValueError, IndexError):
            return ProbeState.UNKNOWN
        return _KNOWN_STATES.get(token.lower(), ProbeState.UNKNOWN)
    return ProbeState.UNKNOWN


class HostProber:
    """Checks a systemd service on a node through ssh."""

    def __init__(
        self,
        *,
        ssh_binary: str = PROBE_SSH_BINARY_DEFAULT,
        user: str | None = None,
        use_sudo: bool = True,
        timeout_seconds: float | None = None,
    ) -> None:
        self._ssh_binary = ssh_binary
        self._user = user
        self._use_sudo = use_sudo
        self._timeout = timeout_seconds

    def build_command(self, address: str, service: str) -> list[str]:
        target = f"{self._user}@{address}" if self._user else address
        cmd = [
            self._ssh_binary,
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            "BatchMode=yes",
            target,
        ]
        if self._use_sudo:
            cmd.extend(["sudo", "-n"])
        cmd.extend(["systemctl", "status", service])
        return cmd

    def _probe_sync(self, address: str, service: str) -> ProbeState:
        cmd = self.build_command(address, service)
        try:
            # Popen's context exit waits on the child, so it is reaped on every path.
            with subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
            ) as proc:
                try:
                    output, _ = proc.communicate(timeout=self._timeout)
                except subprocess.TimeoutExpired:
                    proc.kill()
                    proc.communicate()
                    logger.debug("Probe of %s on %s timed out", service, address)
                    return ProbeState.UNKNOWN
        except OSError as exc:
            logger.debug("Probe of %s on %s failed to start: %s", service, address, exc)
            return ProbeState.UNKNOWN

        # systemctl exits non-zero for inactive/failed units; the output is still valid.
        state = extract_status(output or "")
        logger.debug("Probe of %s on %s: %r", service, address, state.value)
        return state

    async def probe(self, address: str, service: str) -> ProbeState:
        """Return the service state on ``address``; never raises."""
        if not address or address.startswith("<"):
            return ProbeState.UNKNOWN
        try:
            return await asyncio.to_thread(self._probe_sync, address, service)
        except Exception as exc:
            logger.debug("Probe of %s on %s errored: %s", service, address, exc)
            return ProbeState.UNKNOWN
