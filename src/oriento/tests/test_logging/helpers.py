from types import SimpleNamespace


def logging_settings(**overrides) -> SimpleNamespace:
    """Duck-typed settings carrying only what the logging builder reads."""
    values = {
        "ENV": "testing",
        "LOG_LEVEL": "INFO",
        "LOG_FORMAT": "json",
        "LOG_TO_STDOUT": True,
        "LOG_DIR": None,
        "LOG_MAX_BYTES": 1_000_000,
        "LOG_BACKUP_COUNT": 1,
        "ENABLE_SQL_LOGGING": False,
        "LOG_USE_QUEUE": False,
        "LOG_QUEUE_MAX_SIZE": 0,
    }
    values.update(overrides)
    return SimpleNamespace(**values)
