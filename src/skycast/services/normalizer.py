"""City input normalization."""

import re

from ..core.errors import InvalidInputError

_DISALLOWED = re.compile(r"[^\w\s,-]")
_WHITESPACE = re.compile(r"\s+")


def normalize_city(raw: object) -> str:
    """Turn user input into the locality token sent to the geocoder.

    Trims the input, drops characters other than word characters, whitespace,
    commas and hyphens, collapses whitespace runs and keeps only the part
    before the first comma.

    Args:
        raw: Value typed by the user

    Returns:
        Cleaned city name

    Raises:
        InvalidInputError: If the input is not a string or nothing usable remains

    Example:
        >>> normalize_city("  New   York, NY  ")
        'New York'
        >>> normalize_city("São Paulo!")
        'São Paulo'
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInputError()

    cleaned = _DISALLOWED.sub("", raw.strip())
    cleaned = _WHITESPACE.sub(" ", cleaned)
    cleaned = cleaned.split(",", 1)[0].strip()

    if not cleaned:
        raise InvalidInputError()
    return cleaned
