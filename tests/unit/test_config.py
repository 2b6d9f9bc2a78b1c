"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from httpways._internal.config import HttpWaysConfig, load_config
from httpways._internal.errors import ConfigError

_ENV_VARS = (
    "HTTPWAYS_HOST",
    "HTTPWAYS_PORT",
    "HTTPWAYS_APP_NAME",
    "HTTPWAYS_PAGE_SUFFIX",
    "HTTPWAYS_TIMEOUT",
    "HTTPWAYS_POOL_SIZE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestHttpWaysConfig:
    """Tests for the HttpWaysConfig dataclass."""

    def test_defaults(self):
        """HttpWaysConfig has sensible defaults."""
        config = HttpWaysConfig()
        assert config.host == "localhost"
        assert config.port == 8080
        assert config.app_name == "demo"
        assert config.page_suffix == ""
        assert config.request_timeout == 30.0
        assert config.connection_pool_size == 10

    def test_frozen(self):
        """HttpWaysConfig is immutable."""
        config = HttpWaysConfig()
        with pytest.raises(AttributeError):
            config.port = 9090  # type: ignore[misc]

    def test_base_url(self):
        """base_url is the application root with a trailing slash."""
        config = HttpWaysConfig(host="example.org", port=9000, app_name="shop")
        assert config.base_url == "http://example.org:9000/shop/"

    def test_make_url(self):
        """make_url composes host, port, application and page."""
        config = HttpWaysConfig(port=9000)
        assert config.make_url("helloWorld") == "http://localhost:9000/demo/helloWorld"

    def test_make_url_with_suffix(self):
        """The page suffix is appended to every page name."""
        config = HttpWaysConfig(app_name="groovy", page_suffix=".groovy")
        assert config.make_url("post") == "http://localhost:8080/groovy/post.groovy"
        assert config.page("post") == "post.groovy"

    def test_empty_page_is_base_url(self):
        """An empty page yields the base URL, without the suffix."""
        config = HttpWaysConfig(page_suffix=".groovy")
        assert config.make_url("") == config.base_url


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_defaults_from_env(self):
        """load_config returns defaults when no env vars are set."""
        assert load_config() == HttpWaysConfig()

    def test_values_from_env(self, monkeypatch: pytest.MonkeyPatch):
        """Every HTTPWAYS_* variable is read from the environment."""
        monkeypatch.setenv("HTTPWAYS_HOST", "10.0.0.5")
        monkeypatch.setenv("HTTPWAYS_PORT", "9090")
        monkeypatch.setenv("HTTPWAYS_APP_NAME", "/groovy/")
        monkeypatch.setenv("HTTPWAYS_PAGE_SUFFIX", ".groovy")
        monkeypatch.setenv("HTTPWAYS_TIMEOUT", "2.5")
        monkeypatch.setenv("HTTPWAYS_POOL_SIZE", "3")

        config = load_config()
        assert config.host == "10.0.0.5"
        assert config.port == 9090
        assert config.app_name == "groovy"
        assert config.page_suffix == ".groovy"
        assert config.request_timeout == 2.5
        assert config.connection_pool_size == 3

    def test_invalid_port_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        """Non-integer HTTPWAYS_PORT raises ConfigError."""
        monkeypatch.setenv("HTTPWAYS_PORT", "eighty")
        with pytest.raises(ConfigError, match="must be an integer"):
            load_config()

    @pytest.mark.parametrize("port", ["0", "65536", "-1"])
    def test_out_of_range_port_raises_error(self, monkeypatch: pytest.MonkeyPatch, port: str):
        """HTTPWAYS_PORT outside 1..65535 raises ConfigError."""
        monkeypatch.setenv("HTTPWAYS_PORT", port)
        with pytest.raises(ConfigError, match="between 1 and 65535"):
            load_config()

    def test_empty_app_name_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        """An HTTPWAYS_APP_NAME of only slashes raises ConfigError."""
        monkeypatch.setenv("HTTPWAYS_APP_NAME", "/")
        with pytest.raises(ConfigError, match="must not be empty"):
            load_config()

    def test_invalid_timeout_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        """Non-numeric HTTPWAYS_TIMEOUT raises ConfigError."""
        monkeypatch.setenv("HTTPWAYS_TIMEOUT", "abc")
        with pytest.raises(ConfigError, match="must be a number"):
            load_config()

    def test_zero_timeout_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        """HTTPWAYS_TIMEOUT of 0 raises ConfigError."""
        monkeypatch.setenv("HTTPWAYS_TIMEOUT", "0")
        with pytest.raises(ConfigError, match="must be positive"):
            load_config()

    def test_zero_pool_size_raises_error(self, monkeypatch: pytest.MonkeyPatch):
        """HTTPWAYS_POOL_SIZE of 0 raises ConfigError."""
        monkeypatch.setenv("HTTPWAYS_POOL_SIZE", "0")
        with pytest.raises(ConfigError, match="must be >= 1"):
            load_config()
