from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    log_level: str = "INFO"


class TelegramConfig(BaseModel):
    bot_username: str = ""
    token: str = Field(default="", repr=False)
    endpoint: str = "https://api.telegram.org"
    timeout: float = 10.0
    disable_web_page_preview: bool = True
    proxy_url: str | None = Field(default=None, repr=False)


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    telegram: TelegramConfig = TelegramConfig()

    @classmethod
    def load(cls, path: str | None = None) -> "Settings":
        env_path = os.getenv("ENV_PATH", ".env")
        load_dotenv(env_path)
        config_path = Path(path or os.getenv("CONFIG_PATH", "config.yaml"))
        data: dict[str, Any] = {}
        if config_path.exists():
            data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}

        app = data.get("app") or {}
        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            app["log_level"] = log_level
        data["app"] = app

        telegram = data.get("telegram") or {}
        token = os.getenv("TELEGRAM_BOT_TOKEN")
        if token:
            telegram["token"] = token
        endpoint = os.getenv("TELEGRAM_API_ENDPOINT")
        if endpoint:
            telegram["endpoint"] = endpoint
        proxy_url = os.getenv("TELEGRAM_PROXY_URL")
        if proxy_url:
            telegram["proxy_url"] = proxy_url
        data["telegram"] = telegram

        return cls(**data)
