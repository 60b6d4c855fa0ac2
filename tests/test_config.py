import logging
from pathlib import Path

from reelfeed.config import DEFAULT_API_BASE_URL, DEFAULT_HTTP_TIMEOUT, FeedSettings
from reelfeed.logging import setup_feed_logging


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("REELFEED_API_BASE_URL", "https://staging.example/api/public")
    monkeypatch.setenv("REELFEED_HTTP_TIMEOUT", "4.5")
    monkeypatch.setenv("REELFEED_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("REELFEED_MEDIA_ORIGIN", raising=False)

    settings = FeedSettings.from_env().ensure_dirs()

    assert settings.api_base_url == "https://staging.example/api/public"
    assert settings.http_timeout == 4.5
    assert settings.storage_path == tmp_path / "data" / "storage.json"
    assert (tmp_path / "data").is_dir()


def test_settings_ignore_bad_values(monkeypatch):
    monkeypatch.setenv("REELFEED_API_BASE_URL", "   ")
    monkeypatch.setenv("REELFEED_HTTP_TIMEOUT", "soon")

    settings = FeedSettings.from_env()

    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT


def test_setup_feed_logging_uses_settings(tmp_path):
    settings = FeedSettings(log_dir=str(tmp_path / "logs"), log_level="debug")
    logger = setup_feed_logging(settings)
    try:
        setup_feed_logging(settings)

        assert logger.name == "reelfeed"
        assert logger.level == logging.DEBUG
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert Path(file_handlers[0].baseFilename) == settings.log_file

        logging.getLogger("reelfeed.feed_cache").debug("cache warmed")
        file_handlers[0].flush()
        assert "reelfeed.feed_cache - DEBUG - cache warmed" in settings.log_file.read_text(encoding="utf-8")

        setup_feed_logging(settings, level=logging.WARNING)
        assert all(h.level == logging.WARNING for h in logger.handlers)
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()


def test_log_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("REELFEED_LOG_DIR", str(tmp_path))
    monkeypatch.setenv("REELFEED_LOG_LEVEL", "warning")

    settings = FeedSettings.from_env()

    assert settings.log_level == "WARNING"
    assert settings.log_file == tmp_path / "reelfeed.log"
    assert FeedSettings().log_file is None
