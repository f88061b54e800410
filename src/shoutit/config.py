"""Credential loading for the ShoutIt relay.

The credentials live in a TOML file under the user's home directory:

    ~/.cogciprocate/shoutit.toml

    app_id = "YOUR_APP_ID"
    rest_api_key = "YOUR_REST_API_KEY"

If the file does not exist it is created empty, which then fails to parse
and tells the operator which keys to add. Loading happens once at the
process entry point; the resulting Configuration is passed to the server.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from shoutit.errors import (
    REQUIRED_KEYS,
    ConfigFileError,
    ConfigParseError,
    InvalidConfigValue,
    NoHomeDirectory,
)

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".cogciprocate"
CONFIG_FILE_NAME = "shoutit.toml"


@dataclass(frozen=True)
class Configuration:
    """Provider credentials shared read-only by every request."""

    app_id: str
    rest_api_key: str

    def __repr__(self) -> str:
        return f"Configuration(app_id={self.app_id!r}, rest_api_key='***')"


def default_config_path(home: str | Path | None = None) -> Path:
    """Resolve the config file path under the user's home directory.

    Raises:
        NoHomeDirectory: If no home directory can be determined.
    """
    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as err:
            raise NoHomeDirectory(f"Unable to determine user home directory: {err}") from err
    return Path(home) / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def ensure_config_file(path: Path) -> bool:
    """Create the config file (and its directory) if missing.

    Returns:
        True if the file was created.

    Raises:
        ConfigFileError: If the directory or file cannot be created.
    """
    if path.is_file():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
    except OSError as err:
        raise ConfigFileError(f"Error creating ShoutIt config file '{path}': {err}", path) from err
    logger.info("Created empty config file: %s", path)
    return True


def is_header_safe(value: str) -> bool:
    """Check that a value can be sent as an HTTP header value.

    Only visible ASCII, space and tab are allowed. Control characters
    (C0, DEL, C1) and non-ASCII line separators are rejected.
    """
    return all(ch == "\t" or 0x20 <= ord(ch) <= 0x7E for ch in value)


def parse_config(text: str, path: Path) -> Configuration:
    """Parse and validate a config document.

    Raises:
        ConfigParseError: If the TOML is malformed or required keys are missing.
        InvalidConfigValue: If a value is empty or not header-safe.
    """
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise ConfigParseError(str(err), path) from err

    missing = [key for key in REQUIRED_KEYS if key not in document]
    if missing:
        raise ConfigParseError(f"missing field(s) {', '.join(missing)}", path)

    values: dict[str, str] = {}
    for key in REQUIRED_KEYS:
        value = document[key]
        if not isinstance(value, str):
            raise ConfigParseError(
                f"invalid type for '{key}': expected a string, got {type(value).__name__}",
                path,
            )
        if not value:
            raise InvalidConfigValue(key, "value must not be empty", path)
        if not is_header_safe(value):
            raise InvalidConfigValue(key, "value must be visible ASCII, space or tab", path)
        values[key] = value

    return Configuration(**values)


def load_config(path: str | Path | None = None, home: str | Path | None = None) -> Configuration:
    """Load credentials, creating an empty config file if none exists.

    Args:
        path: Explicit config file path. Defaults to ~/.cogciprocate/shoutit.toml.
        home: Home directory used to resolve the default path.

    Returns:
        The validated Configuration.

    Raises:
        ConfigError: Any failure. Callers should treat it as fatal.
    """
    config_path = Path(path) if path is not None else default_config_path(home)
    logger.info("Loading config from %s", config_path)

    ensure_config_file(config_path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigFileError(
            f"Error reading ShoutIt config file '{config_path}': {err}", config_path
        ) from err

    config = parse_config(text, config_path)
    logger.debug("Loaded config for app_id=%s", config.app_id)
    return config
