from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_FETCH_TIMEOUT = 30.0


@dataclass(slots=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    # None means wait for the remote indefinitely.
    fetch_timeout: Optional[float] = DEFAULT_FETCH_TIMEOUT
    products_file: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        env_path: Path = Path(".env"),
    ) -> "Settings":
        """Build settings from the process environment, then a ``.env`` file."""

        environ = os.environ if environ is None else environ
        dotenv = _read_dotenv(env_path)

        def lookup(key: str) -> Optional[str]:
            value = environ.get(key)
            if value is None or not value.strip():
                value = dotenv.get(key)
            if value is None:
                return None
            return value.strip() or None

        settings = cls()
        host = lookup("HOST")
        if host is not None:
            settings.host = host
        port = lookup("PORT")
        if port is not None:
            settings.port = _parse_port(port)
        timeout = lookup("MOCKUP_FETCH_TIMEOUT")
        if timeout is not None:
            settings.fetch_timeout = parse_timeout(timeout)
        products = lookup("MOCKUP_PRODUCTS_FILE")
        if products is not None:
            settings.products_file = Path(products)
        level = lookup("LOG_LEVEL")
        if level is not None:
            settings.log_level = parse_log_level(level)
        return settings


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise ValueError(f"PORT must be an integer, got {value!r}") from exc
    if not 0 < port < 65536:
        raise ValueError(f"PORT out of range: {port}")
    return port


def parse_timeout(value: str) -> Optional[float]:
    try:
        timeout = float(value)
    except ValueError as exc:
        raise ValueError(f"MOCKUP_FETCH_TIMEOUT must be a number, got {value!r}") from exc
    if timeout < 0:
        raise ValueError(f"MOCKUP_FETCH_TIMEOUT must not be negative, got {timeout}")
    return timeout or None


def parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}")
    return level


def _read_dotenv(env_path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    if not env_path.exists():
        return values

    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if "=" not in stripped:
                continue
            key, raw_value = stripped.split("=", 1)
            values[key.strip()] = raw_value.strip().strip('"').strip("'")
    except OSError:
        logger.debug("Unable to read %s", env_path, exc_info=True)
    return values
