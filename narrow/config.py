"""
Settings for a narrow session.

Defaults below are overridden by NARROW_* environment variables (a .env
file in the working directory is loaded first) and then by command line
flags.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .items import parse_priority_items
from .schema import validate_settings

MIN_LINEHEIGHT = 8

ENV_PREFIX = "NARROW_"

_BOOL_TRUE = {"1", "true", "yes", "on"}
_BOOL_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised for invalid settings."""
    pass


class Settings:
    def __init__(
        self,
        fuzzy: bool = True,
        case_insensitive: bool = False,
        lines: int = 0,
        columns: int = 0,
        lineheight: int = 0,
        maxhist: int = 64,
        histnodup: bool = True,
        histfile: Optional[Path] = None,
        prompt: Optional[str] = None,
        priority_items: Optional[List[str]] = None,
        word_delimiters: str = " ",
        password: bool = False,
        log_level: str = "WARNING",
        log_dir: Optional[Path] = None,
    ):
        self.fuzzy = fuzzy
        self.case_insensitive = case_insensitive
        self.lines = lines
        self.columns = columns
        self.lineheight = lineheight
        self.maxhist = maxhist
        self.histnodup = histnodup
        self.histfile = histfile
        self.prompt = prompt
        self.priority_items = list(priority_items or [])
        self.word_delimiters = word_delimiters
        self.password = password
        self.log_level = log_level
        self.log_dir = log_dir

    def set_lines(self, lines: int) -> None:
        """``-l``: rows in the grid; a single column unless set."""
        self.lines = lines
        if self.columns == 0:
            self.columns = 1

    def set_columns(self, columns: int) -> None:
        """``-g``: columns in the grid; a single row unless set."""
        self.columns = columns
        if self.lines == 0:
            self.lines = 1

    def set_lineheight(self, lineheight: int) -> None:
        self.lineheight = max(lineheight, MIN_LINEHEIGHT)

    @property
    def is_grid(self) -> bool:
        return self.lines > 0

    def effective_rows(self, candidate_count: int) -> int:
        """Grid rows never exceed the number of candidates."""
        return min(self.lines, candidate_count)

    def validate(self) -> None:
        errors = validate_settings(self)
        if errors:
            raise ConfigError("; ".join(errors))

    def as_dict(self) -> Dict[str, Any]:
        return dict(vars(self))

    def __repr__(self) -> str:
        return f"Settings({self.as_dict()!r})"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _BOOL_TRUE:
        return True
    if value in _BOOL_FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from NARROW_* variables on top of the defaults."""
    env = os.environ if environ is None else environ
    settings = Settings()

    def get(key: str) -> Optional[str]:
        return env.get(ENV_PREFIX + key)

    for key, attr in (("FUZZY", "fuzzy"), ("IGNORE_CASE", "case_insensitive"),
                      ("HISTNODUP", "histnodup"), ("PASSWORD", "password")):
        raw = get(key)
        if raw is not None:
            setattr(settings, attr, _parse_bool(ENV_PREFIX + key, raw))

    raw = get("LINES")
    if raw is not None:
        settings.set_lines(_parse_int(ENV_PREFIX + "LINES", raw))
    raw = get("COLUMNS")
    if raw is not None:
        settings.set_columns(_parse_int(ENV_PREFIX + "COLUMNS", raw))
    raw = get("LINEHEIGHT")
    if raw is not None:
        settings.set_lineheight(_parse_int(ENV_PREFIX + "LINEHEIGHT", raw))
    raw = get("MAXHIST")
    if raw is not None:
        settings.maxhist = _parse_int(ENV_PREFIX + "MAXHIST", raw)

    if get("HISTFILE"):
        settings.histfile = Path(get("HISTFILE")).expanduser()
    if get("PROMPT") is not None:
        settings.prompt = get("PROMPT")
    if get("PRIORITY"):
        settings.priority_items = parse_priority_items(get("PRIORITY"))
    if get("WORD_DELIMITERS") is not None:
        settings.word_delimiters = get("WORD_DELIMITERS")
    if get("LOG_LEVEL"):
        settings.log_level = get("LOG_LEVEL").upper()
    if get("LOG_DIR"):
        settings.log_dir = Path(get("LOG_DIR")).expanduser()

    return settings
