from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, List, Optional, Tuple


ENV_FILE: Final[Path] = Path(".env")
ENV_PREFIX: Final[str] = "PROXY_MONITOR_"
DEFAULT_PROXIES: Final[List[str]] = [f"socks5://127.0.0.1:{port}" for port in range(1082, 1088)]
DEFAULT_PROBE_URL: Final[str] = "https://ifconfig.me/ip"
DEFAULT_PROBE_TIMEOUT: Final[float] = 5.0
DEFAULT_SCHEDULE: Final[str] = "daily"
DEFAULT_CHECK_HOUR: Final[int] = 19
DEFAULT_LANGUAGE: Final[str] = "zh"
DEFAULT_SUBJECT_PREFIX: Final[str] = "「PX」"
DEFAULT_SENDER_NAME: Final[str] = "Monitor"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
SCHEDULES: Final[tuple] = ("daily", "hourly")
LANGUAGES: Final[tuple] = ("zh", "en")
_TRUTHY: Final[tuple] = ("1", "true", "yes", "on")


def parse_env_line(raw_line: str) -> Optional[Tuple[str, str]]:
    """Split one ``.env`` line into key and value, or None for blanks and comments.

    Accepts an optional ``export`` prefix. Quoted values keep ``#`` and
    surrounding spaces, which SMTP passwords often need; unquoted values end at
    the first `` #``.
    """

    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):]

    key, value = (part.strip() for part in line.split("=", 1))
    if not key:
        return None

    quote = value[:1]
    if quote in ("'", '"') and quote in value[1:]:
        return key, value[1:value.index(quote, 1)]
    if value.startswith("#"):
        return key, ""
    return key, value.split(" #", 1)[0].rstrip()


def _load_env_file(path: Path = ENV_FILE) -> List[str]:
    """Copy ``.env`` entries into os.environ without overriding variables already set.

    Returns the keys that were applied.
    """

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        # Missing or unreadable file: rely on the existing environment.
        return []

    applied: List[str] = []
    for raw_line in lines:
        parsed = parse_env_line(raw_line)
        if parsed is None:
            continue
        key, value = parsed
        if key not in os.environ:
            os.environ[key] = value
            applied.append(key)
    return applied


def _env(name: str, default: str = "") -> str:
    return os.getenv(ENV_PREFIX + name, default).strip()


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def proxy_endpoints() -> List[str]:
    raw = _env("PROXIES")
    if not raw:
        return list(DEFAULT_PROXIES)
    return _split_csv(raw)


def smtp_addr() -> str:
    return _env("SMTP_ADDR")


def smtp_user() -> str:
    return _env("SMTP_USER")


def smtp_password() -> str:
    # Passwords may legitimately carry surrounding whitespace.
    return os.getenv(ENV_PREFIX + "SMTP_PASS", "")


def smtp_recipients() -> List[str]:
    return _split_csv(_env("SMTP_TO"))


def check_now() -> bool:
    return _env("CHECK_NOW").lower() in _TRUTHY


def probe_url() -> str:
    return _env("PROBE_URL") or DEFAULT_PROBE_URL


def probe_timeout() -> float:
    raw = _env("PROBE_TIMEOUT")
    if not raw:
        return DEFAULT_PROBE_TIMEOUT
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_PROBE_TIMEOUT
    return max(1.0, min(300.0, value))


def schedule_mode() -> str:
    raw = _env("SCHEDULE").lower()
    return raw if raw in SCHEDULES else DEFAULT_SCHEDULE


def check_hour() -> int:
    raw = _env("CHECK_HOUR")
    if not raw:
        return DEFAULT_CHECK_HOUR
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_CHECK_HOUR
    return max(0, min(23, value))


def language() -> str:
    raw = _env("LANGUAGE").lower()
    return raw if raw in LANGUAGES else DEFAULT_LANGUAGE


def subject_prefix() -> str:
    return os.getenv(ENV_PREFIX + "SUBJECT_PREFIX", DEFAULT_SUBJECT_PREFIX)


def sender_name() -> str:
    return _env("SENDER_NAME") or DEFAULT_SENDER_NAME


def log_level() -> str:
    return (_env("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()


@dataclass
class MonitorConfig:
    proxies: List[str]
    smtp_addr: str = ""
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_recipients: List[str] = field(default_factory=list)
    check_now: bool = False
    probe_url: str = DEFAULT_PROBE_URL
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    schedule: str = DEFAULT_SCHEDULE
    check_hour: int = DEFAULT_CHECK_HOUR
    language: str = DEFAULT_LANGUAGE
    subject_prefix: str = DEFAULT_SUBJECT_PREFIX
    sender_name: str = DEFAULT_SENDER_NAME
    log_level: str = DEFAULT_LOG_LEVEL


def load_config() -> MonitorConfig:
    _load_env_file()
    return MonitorConfig(
        proxies=proxy_endpoints(),
        smtp_addr=smtp_addr(),
        smtp_user=smtp_user(),
        smtp_password=smtp_password(),
        smtp_recipients=smtp_recipients(),
        check_now=check_now(),
        probe_url=probe_url(),
        probe_timeout=probe_timeout(),
        schedule=schedule_mode(),
        check_hour=check_hour(),
        language=language(),
        subject_prefix=subject_prefix(),
        sender_name=sender_name(),
        log_level=log_level(),
    )
