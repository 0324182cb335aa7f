"""Configuration management for git-weekly-report."""

import os
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import yaml

from .errors import ConfigurationError
from .models import WEEK, ReportWindow

DEFAULT_ENDPOINT = "https://api.github.com"
START_DATE_FORMAT = "%m-%d-%Y"

_DURATION_PATTERN = re.compile(r"(\d+(?:\.\d+)?)([wdhms])")
_DURATION_UNITS = {
    "w": "weeks",
    "d": "days",
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
}


@dataclass
class Config:
    """Values read from a configuration file; all optional."""

    user: str | None = None
    token: str | None = None
    token_file: str | None = None
    endpoint: str | None = None
    start: str | None = None
    duration: str | None = None
    output: str | None = None


@dataclass
class Settings:
    """Fully resolved settings for one report run."""

    user: str
    token: str | None
    endpoint: str
    start: datetime
    duration: timedelta
    output: str | None = None

    @property
    def window(self) -> ReportWindow:
        return ReportWindow(start=self.start, duration=self.duration)


def _expand_env_vars(value: str) -> str:
    """Expand environment variable references in a string.

    Supports ${VAR_NAME} syntax. Returns the original string if the
    environment variable is not set.

    Args:
        value: String potentially containing ${VAR_NAME} references

    Returns:
        String with environment variables expanded
    """
    if not isinstance(value, str):
        return value

    pattern = re.compile(r"\$\{([^}]+)\}")

    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))

    return pattern.sub(replacer, value)


def load_config(config_path: str | Path) -> Config:
    """Load and parse configuration from a YAML file.

    Args:
        config_path: Path to the configuration file

    Returns:
        Parsed configuration object

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Unable to parse {config_path}: {e}") from e

    if not raw_config:
        raise ConfigurationError("Configuration file is empty")

    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration must be a mapping")

    known = set(Config.__dataclass_fields__)
    unknown = sorted(str(key) for key in raw_config if key not in known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = {}
    for key, value in raw_config.items():
        if value is None:
            continue
        # YAML turns bare dates and numbers into non-strings
        values[key] = _expand_env_vars(str(value))

    return Config(**values)


def parse_start_date(value: str) -> datetime:
    """Parse a start date in M-D-YYYY format as midnight UTC.

    Raises:
        ConfigurationError: If the value is not a valid date
    """
    try:
        parsed = datetime.strptime(value.strip(), START_DATE_FORMAT)
    except ValueError as e:
        raise ConfigurationError(f"Unable to parse start time '{value}': {e}") from e
    return parsed.replace(tzinfo=timezone.utc)


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``7d``, ``168h`` or ``1w2d12h30m``.

    Raises:
        ConfigurationError: If the value is malformed or not positive
    """
    text = value.strip().lower()
    if not text or _DURATION_PATTERN.sub("", text):
        raise ConfigurationError(f"Invalid duration: '{value}'")

    kwargs = {}
    for amount, unit in _DURATION_PATTERN.findall(text):
        name = _DURATION_UNITS[unit]
        kwargs[name] = kwargs.get(name, 0) + float(amount)

    duration = timedelta(**kwargs)
    if duration <= timedelta(0):
        raise ConfigurationError(f"Duration must be positive: '{value}'")
    return duration


def last_completed_week_monday(today: date | None = None) -> datetime:
    """Return midnight UTC of the Monday starting the last full week.

    On a Monday this is one week back; on a Sunday it is thirteen days back.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    monday = today - timedelta(days=today.weekday() + 7)
    return datetime(monday.year, monday.month, monday.day, tzinfo=timezone.utc)


def read_token_file(token_file: str | Path) -> str:
    """Read an API token from a file, dropping the trailing newline.

    Raises:
        ConfigurationError: If the file cannot be read
    """
    try:
        content = Path(token_file).read_text()
    except OSError as e:
        raise ConfigurationError(f"Unable to read token file '{token_file}': {e}") from e
    return content.removesuffix("\n")


def resolve_settings(
    config: Config | None = None,
    user: str | None = None,
    token_file: str | None = None,
    start: str | None = None,
    duration: str | None = None,
    endpoint: str | None = None,
    output: str | None = None,
    today: date | None = None,
) -> Settings:
    """Merge file configuration with command-line overrides.

    Command-line values win over the configuration file. A token file given
    on the command line replaces any token from the file.

    Raises:
        ConfigurationError: If a value is missing or invalid
    """
    config = config or Config()

    user = user or config.user
    if not user:
        raise ConfigurationError("A GitHub user must be given with --user or in the config file")

    token = None
    if token_file:
        token = read_token_file(token_file)
    elif config.token:
        token = config.token
    elif config.token_file:
        token = read_token_file(config.token_file)

    start = start or config.start
    start_time = parse_start_date(start) if start else last_completed_week_monday(today)

    duration = duration or config.duration
    length = parse_duration(duration) if duration else WEEK

    return Settings(
        user=user,
        token=token or None,
        endpoint=endpoint or config.endpoint or DEFAULT_ENDPOINT,
        start=start_time,
        duration=length,
        output=output or config.output,
    )
