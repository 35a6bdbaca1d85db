"""Environment-driven application configuration."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import shlex


APP_NAME = "mod-deck"
DEFAULT_CALL_TIMEOUT = 30.0


def _default_socket() -> str:
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR") or "/tmp"
    return str(Path(runtime_dir) / f"{APP_NAME}.sock")


def _default_prefs_path() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home).expanduser() if config_home else Path.home() / ".config"
    return base / APP_NAME / "ui-prefs.json"


@dataclass(slots=True)
class AppConfig:
    """How to reach the backend and where to keep UI preferences."""

    backend_command: list[str] | None = None
    socket_address: str | None = None
    prefs_path: Path | None = None
    call_timeout: float | None = DEFAULT_CALL_TIMEOUT
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.prefs_path is None:
            self.prefs_path = _default_prefs_path()
        if not self.backend_command and not self.socket_address:
            self.socket_address = _default_socket()

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> AppConfig:
        env = os.environ if env is None else env
        command_raw = env.get("MOD_DECK_BACKEND", "").strip()
        prefs_raw = env.get("MOD_DECK_PREFS", "").strip()
        timeout_raw = env.get("MOD_DECK_CALL_TIMEOUT", "").strip()

        timeout: float | None = DEFAULT_CALL_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValueError(
                    f"MOD_DECK_CALL_TIMEOUT must be a number of seconds, got {timeout_raw!r}"
                ) from exc
            if timeout < 0:
                raise ValueError("MOD_DECK_CALL_TIMEOUT must be >= 0")
            if timeout == 0:
                timeout = None

        level = env.get("MOD_DECK_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"MOD_DECK_LOG_LEVEL is not a logging level: {level!r}")

        return cls(
            backend_command=shlex.split(command_raw) if command_raw else None,
            socket_address=env.get("MOD_DECK_SOCKET", "").strip() or None,
            prefs_path=Path(prefs_raw).expanduser() if prefs_raw else None,
            call_timeout=timeout,
            log_level=level,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
