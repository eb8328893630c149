import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _parse_bool(raw: Optional[str], default: bool = False) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _parse_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass
class Settings:
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = 8000
    admin_login: Optional[str] = None
    admin_password: Optional[str] = None
    unique_names_on_update: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    try:
        port = int(os.getenv("PORT", "8000"))
    except ValueError:
        raise RuntimeError("PORT must be an integer.")
    return Settings(
        allowed_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS", "*")) or ["*"],
        port=port,
        admin_login=os.getenv("ADMIN_LOGIN") or None,
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        unique_names_on_update=_parse_bool(os.getenv("UNIQUE_DEVICE_NAMES_ON_UPDATE")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
