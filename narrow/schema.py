from typing import Any, List

MAX_DEPTH = 32


def _validate_object(obj: Any, path: str, errors: List[str], depth: int) -> None:
    if depth > MAX_DEPTH:
        errors.append(f"Object at '{path}' is nested deeper than {MAX_DEPTH} levels")
        return
    for key, value in obj.items():
        where = f"{path}.{key}" if path else str(key)
        if not isinstance(key, str):
            errors.append(f"Key at '{where}' must be a string")
        if isinstance(value, dict):
            _validate_object(value, where, errors, depth + 1)
        elif not isinstance(value, str):
            errors.append(
                f"Value at '{where}' must be a string or an object, got {type(value).__name__}"
            )


def validate_keyed_source(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    A keyed source is an object whose values are strings (emitted on commit)
    or nested objects (descended into on commit).
    """
    errors: List[str] = []
    if not isinstance(data, dict):
        errors.append(f"Keyed source must be an object, got {type(data).__name__}")
        return errors
    _validate_object(data, "", errors, 1)
    return errors


def validate_settings(settings: Any) -> List[str]:
    errors: List[str] = []

    for f in ("lines", "columns", "lineheight", "maxhist"):
        v = getattr(settings, f)
        if not isinstance(v, int) or isinstance(v, bool):
            errors.append(f"Setting '{f}' must be an integer")
        elif v < 0:
            errors.append(f"Setting '{f}' must not be negative")

    if not errors and (settings.lines > 0) != (settings.columns > 0):
        errors.append("Settings 'lines' and 'columns' must both be set for a grid layout")

    if not isinstance(settings.word_delimiters, str):
        errors.append("Setting 'word_delimiters' must be a string")

    if settings.prompt is not None and not isinstance(settings.prompt, str):
        errors.append("Setting 'prompt' must be a string if provided")

    level = settings.log_level
    if not isinstance(level, str) or level.upper() not in (
        "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    ):
        errors.append(f"Setting 'log_level' is not a valid level: {level!r}")

    return errors
