"""Tests for the kubectl base controller."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from kubelens.controllers.base import KubectlCommandError, KubectlController


@pytest.mark.unit
@pytest.mark.fast
class TestKubectlController:
    """Tests for KubectlController."""

    def test_build_command_with_context(self) -> None:
        """A configured context is passed to kubectl."""
        controller = KubectlController("prod")
        assert controller.build_command(("get", "nodes")) == [
            "kubectl",
            "--context",
            "prod",
            "get",
            "nodes",
        ]

    def test_build_command_without_context(self) -> None:
        """No context means kubectl's current context."""
        assert KubectlController().build_command(("version",)) == ["kubectl", "version"]

    @pytest.mark.asyncio
    async def test_run_kubectl_returns_stdout(self) -> None:
        """Successful commands return stdout."""
        result = MagicMock(returncode=0, stdout="ok", stderr="")
        with patch("subprocess.run", return_value=result):
            assert await KubectlController().run_kubectl(("get", "nodes")) == "ok"

    def test_nonzero_exit_raises_with_stdout(self) -> None:
        """Non-zero exits raise with the return code and stdout kept."""
        result = MagicMock(returncode=1, stdout="no\n", stderr="")
        with patch("subprocess.run", return_value=result):
            with pytest.raises(KubectlCommandError) as excinfo:
                KubectlController()._run_kubectl_sync(("auth", "can-i", "get", "nodes"))
        assert excinfo.value.returncode == 1
        assert excinfo.value.stdout == "no\n"

    def test_timeout_raises(self) -> None:
        """Timeouts raise KubectlCommandError."""
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("kubectl", 1)):
            with pytest.raises(KubectlCommandError):
                KubectlController()._run_kubectl_sync(("get", "nodes"))
