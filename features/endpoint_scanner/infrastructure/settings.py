from __future__ import annotations

import os
from pathlib import Path
from typing import Final, Optional, Tuple


ENV_FILE: Final[Path] = Path(".env")
DEFAULT_CONFIG_PATH: Final[str] = "endpoints.yaml"
DEFAULT_NMAP_BIN: Final[str] = "nmap"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"


def _parse_env_line(raw_line: str) -> Optional[Tuple[str, str]]:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):]
    key, _, value = line.partition("=")
    key = key.strip()
    value = value.strip()
    if not key:
        return None
    if value[:1] in ("'", '"') and value.endswith(value[0]) and len(value) > 1:
        return key, value[1:-1]
    return key, value.split("#", 1)[0].strip()


def load_env_file(path: Path = ENV_FILE) -> None:
    """Seed scanner settings from a .env file; real environment variables win."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return
    for raw_line in text.splitlines():
        parsed = _parse_env_line(raw_line)
        if parsed is not None:
            os.environ.setdefault(*parsed)


load_env_file()


def endpoints_config_path() -> Path:
    raw = os.getenv("ENDPOINT_SCANNER_CONFIG", "").strip()
    return Path(raw or DEFAULT_CONFIG_PATH)


def nmap_binary() -> str:
    raw = os.getenv("NMAP_BIN", "").strip()
    return raw or DEFAULT_NMAP_BIN


def probe_timeout_seconds() -> Optional[float]:
    """Unset, unparsable or non-positive values mean no timeout."""
    raw = os.getenv("PROBE_TIMEOUT_SECONDS")
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def log_level() -> str:
    raw = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    return raw or DEFAULT_LOG_LEVEL
