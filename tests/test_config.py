"""Tests for crawlgate.config — GateConfig frozen dataclass."""

import pytest

from crawlgate.config import DEV_RENDER_TOKEN, GateConfig
from crawlgate.errors import ConfigurationError


class TestGateConfig:
    def test_defaults(self) -> None:
        cfg = GateConfig()

        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000
        assert cfg.environment == "development"
        assert cfg.render_service_url == "https://service.prerender.io"
        assert cfg.render_token_header == "X-Prerender-Token"
        assert cfg.render_timeout == 5.0
        assert cfg.legacy_param == "_escaped_fragment_"
        assert cfg.methods == ("GET", "HEAD")
        assert cfg.origin_url is None

    def test_frozen(self) -> None:
        cfg = GateConfig()

        with pytest.raises(AttributeError):
            cfg.render_token = "x"  # type: ignore[misc]

    @pytest.mark.parametrize("env", ["production", "PROD", " staging "])
    def test_production_like(self, env: str) -> None:
        assert GateConfig(environment=env).is_production

    def test_development_not_production(self) -> None:
        assert not GateConfig().is_production


class TestResolveToken:
    def test_explicit_token_wins(self) -> None:
        cfg = GateConfig(render_token="explicit")
        assert cfg.resolve_token({"PRERENDER_TOKEN": "from-env"}) == "explicit"

    def test_env_token(self) -> None:
        assert GateConfig().resolve_token({"PRERENDER_TOKEN": " from-env "}) == "from-env"

    def test_custom_env_var(self) -> None:
        cfg = GateConfig(render_token_env="SHOP_RENDER_TOKEN")
        assert cfg.resolve_token({"SHOP_RENDER_TOKEN": "abc"}) == "abc"

    def test_env_read_at_call_time(self, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = GateConfig()
        monkeypatch.setenv("PRERENDER_TOKEN", "first")
        assert cfg.resolve_token() == "first"
        monkeypatch.setenv("PRERENDER_TOKEN", "second")
        assert cfg.resolve_token() == "second"

    def test_development_placeholder(self) -> None:
        assert GateConfig().resolve_token({}) == DEV_RENDER_TOKEN

    def test_production_never_uses_placeholder(self) -> None:
        with pytest.raises(ConfigurationError, match="PRERENDER_TOKEN"):
            GateConfig(environment="production").resolve_token({})


class TestValidate:
    def test_valid_production(self) -> None:
        GateConfig(environment="production", render_token="t").validate()

    def test_production_without_token_fails_fast(self) -> None:
        with pytest.raises(ConfigurationError):
            GateConfig(environment="production").validate({})

    def test_rejects_schemeless_service_url(self) -> None:
        with pytest.raises(ConfigurationError, match="render_service_url"):
            GateConfig(render_service_url="service.prerender.io").validate({})

    @pytest.mark.parametrize("field", ["render_timeout", "origin_timeout"])
    def test_rejects_non_positive_timeouts(self, field: str) -> None:
        with pytest.raises(ConfigurationError, match=field):
            GateConfig(**{field: 0}).validate({})

    def test_rejects_empty_methods(self) -> None:
        with pytest.raises(ConfigurationError):
            GateConfig(methods=()).validate({})


class TestFromEnv:
    def test_empty_env_gives_defaults(self) -> None:
        assert GateConfig.from_env({}) == GateConfig()

    def test_reads_variables(self) -> None:
        cfg = GateConfig.from_env(
            {
                "CRAWLGATE_HOST": "0.0.0.0",
                "CRAWLGATE_PORT": "9000",
                "CRAWLGATE_DEBUG": "true",
                "CRAWLGATE_ENV": "production",
                "CRAWLGATE_ORIGIN_URL": "http://storefront:3000",
                "CRAWLGATE_RENDER_SERVICE_URL": "https://render.internal/",
                "CRAWLGATE_RENDER_TIMEOUT": "2.5",
                "CRAWLGATE_TRUST_FORWARDED": "1",
                "CRAWLGATE_LOG_LEVEL": "WARNING",
            }
        )
        assert cfg.host == "0.0.0.0"
        assert cfg.port == 9000
        assert cfg.debug is True
        assert cfg.is_production
        assert cfg.origin_url == "http://storefront:3000"
        assert cfg.render_service_url == "https://render.internal"
        assert cfg.render_timeout == 2.5
        assert cfg.trust_forwarded_headers is True
        assert cfg.log_level == "warning"

    @pytest.mark.parametrize(
        ("name", "value"), [("CRAWLGATE_PORT", "eighty"), ("CRAWLGATE_RENDER_TIMEOUT", "soon")]
    )
    def test_invalid_numbers(self, name: str, value: str) -> None:
        with pytest.raises(ConfigurationError, match=name):
            GateConfig.from_env({name: value})
