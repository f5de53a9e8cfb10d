"""Central environment-driven settings shared by the gateway and scripts.

Each process loads this once at startup. Behavior is controlled by
environment variables (see `.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "payment-gateway"
    log_level: str = "INFO"
    paypal_client_id: str = ""
    paypal_client_secret: str = ""
    # Unset means outbound provider calls wait indefinitely.
    paypal_timeout_seconds: float | None = None
    otel_exporter_otlp_endpoint: str | None = None
    gateway_url: str = "http://localhost:8000"
    ledger_url: str = "http://localhost:54321"
    ledger_api_key: str = ""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = CommonSettings()
