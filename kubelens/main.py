"""CLI entrypoint for KubeLens."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from kubelens import __version__
from kubelens.models.state.app_settings import AppSettings, ConfigLoadError
from kubelens.models.state.config_manager import ConfigManager

logger = logging.getLogger("kubelens")

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_path() -> Path:
    """Resolve the log file path under XDG_STATE_HOME, falling back to /tmp."""
    state_home = os.environ.get("XDG_STATE_HOME")
    base = Path(state_home) if state_home else Path.home() / ".local" / "state"
    log_dir = base / "kubelens"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return Path("/tmp/kubelens.log")
    return log_dir / "kubelens.log"


def setup_logging(level: str, log_file: str | None = None) -> Path:
    """Send log records to a file; the terminal belongs to the TUI."""
    path = Path(log_file).expanduser() if log_file else get_log_path()
    logging.basicConfig(
        filename=str(path),
        level=getattr(logging, level.upper(), logging.INFO),
        format=_LOG_FORMAT,
        force=True,
    )
    return path


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kubelens",
        description="KubeLens: live terminal overview of a Kubernetes cluster.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--context", default=None, help="kubectl context to use")
    parser.add_argument(
        "--namespace",
        "-n",
        default=None,
        help="Only list pods in this namespace (default: all namespaces)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Refresh interval in seconds (default: from settings)",
    )
    parser.add_argument(
        "--probe-service",
        default=None,
        help="systemd service checked on every node over ssh",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level (default: from settings)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings YAML (default: ~/.config/kubelens/settings.yaml)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> AppSettings:
    """Load persisted settings and apply command-line overrides.

    Raises:
        ConfigLoadError: The settings file or an override is invalid.
    """
    settings = ConfigManager.load(args.config)
    overrides: dict[str, Any] = {
        key: value
        for key, value in (
            ("context", args.context),
            ("namespace", args.namespace),
            ("refresh_interval", args.interval),
            ("probe_service", args.probe_service),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    if not overrides:
        return settings
    try:
        return AppSettings.model_validate({**settings.model_dump(), **overrides})
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid command-line option: {exc}") from exc


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the kubelens CLI."""
    args = _parse_args(argv)
    try:
        settings = build_settings(args)
    except ConfigLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    log_path = setup_logging(settings.log_level, settings.log_file)
    logger.info("Starting KubeLens (log file: %s)", log_path)

    from kubelens.app import KubeLensApp

    app = KubeLensApp(settings)
    app.run()
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
