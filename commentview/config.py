"""Persistent JSON config helpers.

Stores the comment author label, daily-note date format, default collapse
state, re-parse debounce window, and Pygments style.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import getpass
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .comments.timestamps import DEFAULT_DATE_FORMAT

logger = logging.getLogger(__name__)

APP_NAME = "commentview"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_AUTHOR_NAME = "Anonymous"
DEFAULT_DEBOUNCE_SECONDS = 0.5
MAX_DEBOUNCE_SECONDS = 60.0
DEFAULT_STYLE = "monokai"


@dataclass(frozen=True)
class Settings:
    """Resolved settings with every value validated."""

    author_name: str = DEFAULT_AUTHOR_NAME
    date_format: str = DEFAULT_DATE_FORMAT
    collapse_by_default: bool = False
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    style: str = DEFAULT_STYLE


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.debug("Ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem/serialization errors are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("Could not write config %s: %s", CONFIG_PATH, exc)


def _default_author_name() -> str:
    try:
        login = getpass.getuser().strip()
    except Exception:
        return DEFAULT_AUTHOR_NAME
    return login or DEFAULT_AUTHOR_NAME


def _load_nonempty_str(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_author_name() -> str:
    """Return the configured author label, else the login name."""
    return _load_nonempty_str("author_name") or _default_author_name()


def save_author_name(author_name: str) -> None:
    """Persist the author label used in new comment headers."""
    stripped = str(author_name).strip()
    if not stripped:
        return
    config = load_config()
    config["author_name"] = stripped
    save_config(config)


def load_date_format() -> str:
    """Return the strftime pattern for daily-note links in headers.

    Patterns that do not contain any directive are rejected.
    """
    value = _load_nonempty_str("date_format")
    if value is None or "%" not in value:
        return DEFAULT_DATE_FORMAT
    return value


def save_date_format(date_format: str) -> None:
    stripped = str(date_format).strip()
    if "%" not in stripped:
        return
    config = load_config()
    config["date_format"] = stripped
    save_config(config)


def load_collapse_by_default() -> bool:
    """Return whether freshly parsed comments start with replies hidden.

    Only explicit boolean values are accepted; anything else is ``False``.
    """
    value = load_config().get("collapse_by_default")
    return bool(value) if isinstance(value, bool) else False


def save_collapse_by_default(collapse: bool) -> None:
    config = load_config()
    config["collapse_by_default"] = bool(collapse)
    save_config(config)


def load_debounce_seconds() -> float:
    """Read the re-parse debounce window constrained to ``(0, 60]`` seconds."""
    value = load_config().get("debounce_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_DEBOUNCE_SECONDS
    if value <= 0 or value > MAX_DEBOUNCE_SECONDS:
        return DEFAULT_DEBOUNCE_SECONDS
    return float(value)


def load_style_name() -> str:
    """Load persisted Pygments style name."""
    return _load_nonempty_str("style") or DEFAULT_STYLE


def load_settings() -> Settings:
    """Resolve every setting in one pass."""
    return Settings(
        author_name=load_author_name(),
        date_format=load_date_format(),
        collapse_by_default=load_collapse_by_default(),
        debounce_seconds=load_debounce_seconds(),
        style=load_style_name(),
    )
