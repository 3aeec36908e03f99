"""
Environment-driven settings. The environment label and port are display-only.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env(*names: str, default: Optional[str] = None) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value not in (None, ""):
            return value
    return default


def _int_env(name: str, *fallbacks: str, default: int) -> int:
    raw = _env(name, *fallbacks)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _list_env(name: str, default: str = "") -> List[str]:
    return [item.strip() for item in (_env(name, default=default) or "").split(",") if item.strip()]


@dataclass
class Settings:
    env_label: str = "development"
    port: int = 3000
    feature_flags: List[str] = field(default_factory=list)
    opponent_delay_ms: int = 400
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.env_label == "production"

    @property
    def show_port(self) -> bool:
        return not self.is_production

    @property
    def opponent_delay(self) -> float:
        return self.opponent_delay_ms / 1000.0


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Read settings from TTT_* variables (NODE_ENV / PORT are honoured as fallbacks)."""
    delay = _int_env("TTT_OPPONENT_DELAY_MS", default=400)
    if delay < 0:
        raise ValueError(f"TTT_OPPONENT_DELAY_MS must not be negative, got {delay}")
    return Settings(
        env_label=_env("TTT_ENV", "NODE_ENV", default="development"),
        port=_int_env("TTT_PORT", "PORT", default=3000),
        feature_flags=_list_env("TTT_FEATURE_FLAGS"),
        opponent_delay_ms=delay,
        cors_origins=_list_env("TTT_CORS_ORIGINS", default="*"),
        log_level=(_env("TTT_LOG_LEVEL", default="INFO") or "INFO").upper(),
    )
