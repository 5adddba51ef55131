"""Gateway configuration.

GateConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups. ``GateConfig.from_env()`` builds one from
``CRAWLGATE_*`` environment variables for container deployments.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from crawlgate.errors import ConfigurationError

# Placeholder only. Never returned in a production-like environment.
DEV_RENDER_TOKEN = "crawlgate-development-token"

PRODUCTION_ENVIRONMENTS = frozenset({"production", "prod", "staging"})


@dataclass(frozen=True, slots=True)
class GateConfig:
    """Gateway configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = GateConfig(environment="production", render_token="s3cr3t")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    environment: str = "development"

    # Origin (standalone deployments proxy pass-through traffic here)
    origin_url: str | None = None
    origin_timeout: float = 30.0

    # Prerendering service
    render_service_url: str = "https://service.prerender.io"
    render_token: str | None = None
    render_token_env: str = "PRERENDER_TOKEN"
    render_token_header: str = "X-Prerender-Token"
    render_timeout: float = 5.0

    # Classification
    legacy_param: str = "_escaped_fragment_"
    methods: tuple[str, ...] = ("GET", "HEAD")
    signatures_file: str | Path | None = None  # None = packaged defaults

    # Behind a load balancer: honour X-Forwarded-Proto / X-Forwarded-Host
    trust_forwarded_headers: bool = False

    # Logging
    log_level: str = "info"

    @property
    def is_production(self) -> bool:
        """True for environments that must never use the placeholder token."""
        return self.environment.strip().lower() in PRODUCTION_ENVIRONMENTS

    def resolve_token(self, environ: Mapping[str, str] | None = None) -> str:
        """Resolve the prerender auth token.

        Order:
            1. Explicit ``render_token``
            2. The ``render_token_env`` environment variable, read now
            3. ``DEV_RENDER_TOKEN``, outside production-like environments

        Raises:
            ConfigurationError: No token is configured in a production-like
                environment.
        """
        if self.render_token:
            return self.render_token
        env = os.environ if environ is None else environ
        token = env.get(self.render_token_env, "").strip()
        if token:
            return token
        if self.is_production:
            msg = (
                f"No prerender token configured for environment {self.environment!r}. "
                f"Set {self.render_token_env} or GateConfig(render_token=...)."
            )
            raise ConfigurationError(msg)
        return DEV_RENDER_TOKEN

    def validate(self, environ: Mapping[str, str] | None = None) -> None:
        """Fail fast on settings that would break every forwarded request."""
        if not self.render_service_url.startswith(("http://", "https://")):
            msg = f"render_service_url must be an http(s) URL, got {self.render_service_url!r}"
            raise ConfigurationError(msg)
        if self.render_timeout <= 0:
            msg = f"render_timeout must be positive, got {self.render_timeout}"
            raise ConfigurationError(msg)
        if self.origin_timeout <= 0:
            msg = f"origin_timeout must be positive, got {self.origin_timeout}"
            raise ConfigurationError(msg)
        if not self.methods:
            raise ConfigurationError("methods must name at least one HTTP method")
        self.resolve_token(environ)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GateConfig":
        """Build a config from ``CRAWLGATE_*`` environment variables.

        Unset variables keep the dataclass defaults.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get("CRAWLGATE_HOST", defaults.host),
            port=_env_int(env, "CRAWLGATE_PORT", defaults.port),
            debug=_env_bool(env, "CRAWLGATE_DEBUG", defaults.debug),
            environment=env.get("CRAWLGATE_ENV", defaults.environment),
            origin_url=env.get("CRAWLGATE_ORIGIN_URL") or None,
            render_service_url=env.get(
                "CRAWLGATE_RENDER_SERVICE_URL", defaults.render_service_url
            ).rstrip("/"),
            render_timeout=_env_float(env, "CRAWLGATE_RENDER_TIMEOUT", defaults.render_timeout),
            signatures_file=env.get("CRAWLGATE_SIGNATURES_FILE") or None,
            trust_forwarded_headers=_env_bool(
                env, "CRAWLGATE_TRUST_FORWARDED", defaults.trust_forwarded_headers
            ),
            log_level=env.get("CRAWLGATE_LOG_LEVEL", defaults.log_level).lower(),
        )


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    val = env.get(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    val = env.get(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        msg = f"{name} must be an integer, got {val!r}"
        raise ConfigurationError(msg) from None


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    val = env.get(name)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        msg = f"{name} must be a number, got {val!r}"
        raise ConfigurationError(msg) from None
