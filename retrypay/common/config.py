"""Central environment-driven settings for the payment service.

The process loads this once at startup. Retry and gateway simulation behavior
is controlled by environment variables (see `.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "retrypay"
    service_version: str = "1.0.0"
    log_level: str = "INFO"
    max_retries: int = 3
    retry_delay_ms: int = 1000
    gateway_failure_rate: float = 0.3
    gateway_latency_ms: int = 100
    tracing_enabled: bool = True
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()
