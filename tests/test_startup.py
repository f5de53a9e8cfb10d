"""Startup diagnostics must never print secrets."""

from crowdpay.common.startup import log_startup_config, warn_missing_credentials


def test_secret_like_keys_are_redacted(monkeypatch):
    monkeypatch.setenv("PAYPAL_CLIENT_SECRET", "s3cr3t")
    monkeypatch.setenv("LEDGER_API_KEY", "k3y")
    monkeypatch.setenv("SERVICE_NAME", "payment-gateway")
    monkeypatch.delenv("PAYPAL_CLIENT_ID", raising=False)

    config = log_startup_config(
        "payment-gateway",
        ["PAYPAL_CLIENT_SECRET", "LEDGER_API_KEY", "SERVICE_NAME", "PAYPAL_CLIENT_ID"],
    )

    assert config == {
        "service": "payment-gateway",
        "PAYPAL_CLIENT_SECRET": "<redacted>",
        "LEDGER_API_KEY": "<redacted>",
        "SERVICE_NAME": "payment-gateway",
        "PAYPAL_CLIENT_ID": "<unset>",
    }


def test_missing_credentials_warning():
    assert warn_missing_credentials("", "secret") is True
    assert warn_missing_credentials("id", "secret") is False
