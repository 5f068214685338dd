"""Tests for settings and the immutable run options."""

import pytest
from pydantic import ValidationError

from core.config import AppSettings, CheckOptions, split_endpoints, write_user_env_vars


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
    for key in ("DNSCHECK_API_ENDPOINTS", "DNSCHECK_STRICT", "DNSCHECK_REQUESTS_PER_SECOND"):
        monkeypatch.delenv(key, raising=False)


class TestSplitEndpoints:
    def test_trims_and_drops_blanks(self):
        assert split_endpoints(" https://a/?ip= , ,https://b/ ") == ("https://a/?ip=", "https://b/")


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.concurrency == 2
        assert settings.requests_per_second == 2.0
        assert settings.max_retries == 2
        assert settings.http_timeout_seconds == 10.0
        assert settings.endpoint_list == ("https://uapis.cn/api/v1/network/ipinfo?ip=",)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DNSCHECK_API_ENDPOINTS", "https://a/,https://b/")
        monkeypatch.setenv("DNSCHECK_STRICT", "true")
        settings = AppSettings()
        assert settings.endpoint_list == ("https://a/", "https://b/")
        assert settings.strict is True

    def test_user_env_file_is_read(self):
        write_user_env_vars({"DNSCHECK_REQUESTS_PER_SECOND": "0.5"})
        assert AppSettings().requests_per_second == 0.5


class TestCheckOptions:
    def test_none_overrides_keep_settings(self):
        options = CheckOptions.from_settings(AppSettings(), concurrency=None, max_retries=5)
        assert options.concurrency == 2
        assert options.max_retries == 5

    def test_is_frozen(self):
        options = CheckOptions.from_settings(AppSettings())
        with pytest.raises(ValidationError):
            options.strict = True  # type: ignore[misc]

    def test_requires_an_endpoint(self):
        with pytest.raises(ValidationError):
            CheckOptions.from_settings(AppSettings(), endpoints=())
