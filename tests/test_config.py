from tgmarkdown.config import Settings


def test_settings_load_env_overrides(tmp_path, monkeypatch) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "app:\n  log_level: INFO\n"
        "telegram:\n  bot_username: md_preview_bot\n  timeout: 5\n",
        encoding="utf-8",
    )

    monkeypatch.setenv("ENV_PATH", str(tmp_path / "missing.env"))
    monkeypatch.setenv("CONFIG_PATH", str(config_path))
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "secret-token")
    monkeypatch.setenv("TELEGRAM_PROXY_URL", "http://proxy:8888")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("TELEGRAM_API_ENDPOINT", raising=False)

    settings = Settings.load()
    assert settings.telegram.bot_username == "md_preview_bot"
    assert settings.telegram.timeout == 5.0
    assert settings.telegram.token == "secret-token"
    assert settings.telegram.proxy_url == "http://proxy:8888"
    assert settings.telegram.endpoint == "https://api.telegram.org"
    assert settings.app.log_level == "debug"
    assert "secret-token" not in repr(settings.telegram)


def test_settings_defaults_without_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ENV_PATH", str(tmp_path / "missing.env"))
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "missing.yaml"))
    for name in ("TELEGRAM_BOT_TOKEN", "TELEGRAM_API_ENDPOINT", "TELEGRAM_PROXY_URL", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.load()
    assert settings.app.log_level == "INFO"
    assert settings.telegram.token == ""
    assert settings.telegram.disable_web_page_preview is True
