from oriento.config.settings import Settings


def make_test_settings(**overrides) -> Settings:
    """
    Settings for tests: never read the developer's .env, log to the console only.
    """
    values = {
        "ENV": "testing",
        "TESTING": True,
        "LOG_FORMAT": "text",
        "LOG_LEVEL": "INFO",
        "LOG_TO_STDOUT": True,
        "GEMINI_API_KEY": "test-key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)
