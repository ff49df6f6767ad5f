# config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


@dataclass
class AppSettings:
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"])
    analysis_timeout_s: float = 90.0

    @staticmethod
    def from_env() -> "AppSettings":
        defaults = AppSettings()
        origins = _split_csv(os.getenv("CORS_ORIGINS", ""))
        return AppSettings(
            cors_origins=origins or defaults.cors_origins,
            analysis_timeout_s=float(os.getenv("ANALYSIS_TIMEOUT_S", "90")),
        )


_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    global _settings
    if _settings is None:
        _settings = AppSettings.from_env()
    return _settings
