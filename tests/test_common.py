"""Tests for shared common modules: config, logging, rate limiter, HTTP client."""

import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from shop_tracker.common.config import Config
from shop_tracker.common.http_client import HTTPClient
from shop_tracker.common.logging import setup_logging
from shop_tracker.common.rate_limiter import RateLimiter


class TestConfig:
    def test_defaults(self, monkeypatch):
        for var in (
            "MONTHLY_ANALYSIS_LIMIT",
            "ALERT_INTERVAL_MINUTES",
            "NOTIFICATION_ICON",
            "DEFAULT_CURRENCY",
            "EXTRACTION_PROFILES_PATH",
        ):
            monkeypatch.delenv(var, raising=False)
        config = Config()

        assert config.monthly_limit == 10
        assert config.alert_interval_minutes == 60.0
        assert config.notification_icon == "icons/icon128.png"
        assert config.default_currency == "USD"
        assert config.extraction_profiles_abs_path is None

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MONTHLY_ANALYSIS_LIMIT", "25")
        monkeypatch.setenv("ALERT_INTERVAL_MINUTES", "15")
        monkeypatch.setenv("PROXY_LIST", "http://p1:8080, http://p2:8080,")
        monkeypatch.setenv("REQUEST_TIMEOUT", "5")

        config = Config()

        assert config.monthly_limit == 25
        assert config.alert_interval_minutes == 15.0
        assert config.proxy_list == ["http://p1:8080", "http://p2:8080"]
        assert config.request_timeout == 5

    def test_relative_paths_resolve_to_project_root(self, project_root):
        config = Config(database_path="data/x.db")
        assert config.database_abs_path == project_root.resolve() / "data" / "x.db"

    def test_absolute_paths_kept(self, tmp_path):
        config = Config(database_path=str(tmp_path / "x.db"), extraction_profiles_path=str(tmp_path / "p.yaml"))
        assert config.database_abs_path == tmp_path / "x.db"
        assert config.extraction_profiles_abs_path == tmp_path / "p.yaml"


class TestSetupLogging:
    def test_idempotent(self):
        name = "shop_tracker.test_idempotent"
        logger = setup_logging(logging.DEBUG, module_name=name)
        again = setup_logging(logging.DEBUG, module_name=name)

        assert logger is again
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_http_library_loggers_held_at_warning(self):
        setup_logging(logging.DEBUG, module_name="shop_tracker.test_noisy")

        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("fake_useragent").level == logging.WARNING

    def test_format(self):
        logger = setup_logging(module_name="shop_tracker.test_format")
        assert logger.handlers[0].formatter._fmt == "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class TestRateLimiter:
    def test_interval(self):
        assert RateLimiter(requests_per_minute=30).interval == 2.0

    def test_same_host_is_spaced(self):
        limiter = RateLimiter(requests_per_minute=60)
        with patch("shop_tracker.common.rate_limiter.time.sleep") as sleep:
            limiter.wait("https://shop.example.com/product/1")
            limiter.wait("https://shop.example.com/product/2")

        sleep.assert_called_once()
        assert 0 < sleep.call_args[0][0] <= 1.0

    def test_hosts_are_independent(self):
        limiter = RateLimiter(requests_per_minute=60)
        with patch("shop_tracker.common.rate_limiter.time.sleep") as sleep:
            limiter.wait("https://a.example.com/product/1")
            limiter.wait("https://b.example.com/product/1")

        sleep.assert_not_called()


def _response(status=200, text="<html></html>"):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}", response=resp)
    return resp


@pytest.fixture
def client(temp_config):
    temp_config.rate_limit_rpm = 6000
    with patch("shop_tracker.common.http_client.UserAgent") as ua:
        ua.return_value.random = "test-agent"
        http = HTTPClient(temp_config)
    http._session = MagicMock()
    http._rate_limiter = MagicMock()
    yield http
    http.close()


class TestHTTPClient:
    def test_successful_get(self, client):
        client._session.get.return_value = _response(text="<h1>ok</h1>")

        resp = client.get("https://shop.example.com/product/1")

        assert resp.text == "<h1>ok</h1>"
        headers = client._session.get.call_args.kwargs["headers"]
        assert headers["User-Agent"] == "test-agent"

    def test_retries_server_errors(self, client):
        client._session.get.side_effect = [_response(503), _response(200, "ok")]

        with patch("shop_tracker.common.http_client.time.sleep") as sleep:
            resp = client.get("https://shop.example.com/product/1")

        assert resp.text == "ok"
        assert client._session.get.call_count == 2
        sleep.assert_called_once_with(1.0)

    def test_client_error_not_retried(self, client):
        client._session.get.return_value = _response(404)

        with pytest.raises(requests.HTTPError):
            client.get("https://shop.example.com/product/1")

        assert client._session.get.call_count == 1

    def test_gives_up_after_max_retries(self, client):
        client._session.get.side_effect = requests.ConnectionError("down")

        with patch("shop_tracker.common.http_client.time.sleep"):
            with pytest.raises(requests.ConnectionError):
                client.get("https://shop.example.com/product/1")

        assert client._session.get.call_count == HTTPClient.MAX_RETRIES

    def test_cache_key_saves_html(self, client, temp_config):
        client._session.get.return_value = _response(text="<h1>cached</h1>")

        client.get("https://shop.example.com/product/1", cache_key="product/1")

        files = list(Path(temp_config.raw_html_cache_abs_dir).glob("product_1_*.html"))
        assert len(files) == 1
        assert files[0].read_text(encoding="utf-8") == "<h1>cached</h1>"

    def test_proxies_rotate(self, temp_config):
        temp_config.rate_limit_rpm = 6000
        temp_config.proxy_list = ["http://p1:8080", "http://p2:8080"]
        with patch("shop_tracker.common.http_client.UserAgent"):
            http = HTTPClient(temp_config)
        http._session = MagicMock()
        http._rate_limiter = MagicMock()
        http._session.get.return_value = _response()

        http.get("https://a.example.com/")
        http.get("https://b.example.com/")

        used = [c.kwargs["proxies"]["https"] for c in http._session.get.call_args_list]
        assert used == ["http://p1:8080", "http://p2:8080"]
