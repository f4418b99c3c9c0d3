from __future__ import annotations
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Tuple

WEEKDAY_LABELS: Dict[str, Tuple[str, ...]] = {
    "fr": ("Lun.", "Mar.", "Mer.", "Jeu.", "Ven.", "Sam.", "Dim."),
    "en": ("Mon.", "Tue.", "Wed.", "Thu.", "Fri.", "Sat.", "Sun."),
}


@dataclass(frozen=True)
class ApiConfig:
    api_key: str | None = None


def get_api_config() -> ApiConfig:
    return ApiConfig(api_key=os.getenv("API_KEY") or None)


@dataclass(frozen=True)
class DefaultsConfig:
    start_date: datetime = datetime(2018, 1, 1)


def get_defaults_config() -> DefaultsConfig:
    raw = os.getenv("DEFAULT_START_DATE")
    if not raw:
        return DefaultsConfig()
    return DefaultsConfig(start_date=datetime.strptime(raw, "%Y-%m-%d"))


@dataclass(frozen=True)
class LocaleConfig:
    weekday_labels: Tuple[str, ...] = WEEKDAY_LABELS["fr"]  # Monday first


def get_locale_config() -> LocaleConfig:
    locale = os.getenv("DASHBOARD_LOCALE", "fr").lower()
    return LocaleConfig(weekday_labels=WEEKDAY_LABELS.get(locale, WEEKDAY_LABELS["fr"]))


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"


def get_log_config() -> LogConfig:
    return LogConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
