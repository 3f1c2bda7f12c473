from paypay.core.settings import Settings

# Settings singleton
_settings = None
_client = None


def get_settings() -> Settings:
    """Return the process-wide settings."""
    assert _settings is not None, "Settings not initialized. Call init_settings() first."
    return _settings


def init_settings(**overrides) -> Settings:
    """Initialize settings singleton from the environment."""
    global _settings, _client
    _settings = Settings(**overrides)
    _client = None
    return _settings


def clear_settings():
    """Clear settings singleton."""
    global _settings, _client
    _settings = None
    _client = None


def get_client():
    """Default PayPayClient bound to the settings singleton."""
    global _client
    if _client is None:
        from paypay.payments.paypay_service import PayPayClient

        _client = PayPayClient(settings=get_settings())
    return _client
