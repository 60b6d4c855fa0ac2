from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_API_BASE_URL = "https://api.saqan.com/api/public"
DEFAULT_MEDIA_ORIGIN = "https://www.saqan.com"
DEFAULT_HTTP_TIMEOUT = 15.0


def _default_data_root() -> Path:
    env_dir = os.getenv("REELFEED_DATA_DIR", "").strip()
    if env_dir:
        return Path(env_dir).expanduser()

    system = platform.system()
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "ReelFeed"
    if system == "Windows":
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata) / "ReelFeed"
        return Path.home() / "AppData" / "Roaming" / "ReelFeed"
    return Path.home() / ".local" / "share" / "ReelFeed"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class FeedSettings:
    api_base_url: str = DEFAULT_API_BASE_URL
    media_origin: str = DEFAULT_MEDIA_ORIGIN
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    data_root: Optional[Path] = None
    log_dir: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "FeedSettings":
        return cls(
            api_base_url=os.getenv("REELFEED_API_BASE_URL", "").strip() or DEFAULT_API_BASE_URL,
            media_origin=os.getenv("REELFEED_MEDIA_ORIGIN", "").strip() or DEFAULT_MEDIA_ORIGIN,
            http_timeout=_env_float("REELFEED_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            data_root=_default_data_root(),
            log_dir=os.getenv("REELFEED_LOG_DIR") or None,
            log_level=os.getenv("REELFEED_LOG_LEVEL", "").strip().upper() or "INFO",
        )

    @property
    def data_dir(self) -> Path:
        return (self.data_root or _default_data_root()) / "data"

    @property
    def storage_path(self) -> Path:
        return self.data_dir / "storage.json"

    @property
    def log_file(self) -> Optional[Path]:
        if not self.log_dir:
            return None
        return Path(self.log_dir).expanduser() / "reelfeed.log"

    def ensure_dirs(self) -> "FeedSettings":
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self


__all__ = ["FeedSettings", "DEFAULT_API_BASE_URL", "DEFAULT_MEDIA_ORIGIN", "DEFAULT_HTTP_TIMEOUT"]
