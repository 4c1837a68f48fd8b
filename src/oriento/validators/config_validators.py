def to_uppercase(value: str | None) -> str | None:
    """
    Converts a string to uppercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().upper()


def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.strip().lower()


def blank_to_none(value: str | None) -> str | None:
    """
    Treat empty / whitespace-only env values as unset.

    `GEMINI_API_KEY=` in a .env file should behave like a missing key,
    not like a key made of an empty string.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value
