"""Tests for configuration loading and settings resolution."""

import os
from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from git_weekly_report.config import (
    DEFAULT_ENDPOINT,
    Config,
    last_completed_week_monday,
    load_config,
    parse_duration,
    parse_start_date,
    read_token_file,
    resolve_settings,
)
from git_weekly_report.errors import ConfigurationError


class TestLoadConfig:
    def test_full_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "user: octo\n"
            "token: ${WEEKLY_TEST_TOKEN}\n"
            "start: 3-4-2024\n"
            "duration: 14d\n"
            "output: report.md\n"
        )

        with patch.dict(os.environ, {"WEEKLY_TEST_TOKEN": "abc123"}):
            config = load_config(path)

        assert config.user == "octo"
        assert config.token == "abc123"
        assert config.start == "3-4-2024"
        assert config.duration == "14d"
        assert config.output == "report.md"
        assert config.endpoint is None

    def test_unset_env_var_kept(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("user: octo\ntoken: ${WEEKLY_TEST_UNSET}\n")

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("WEEKLY_TEST_UNSET", None)
            config = load_config(path)

        assert config.token == "${WEEKLY_TEST_UNSET}"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        with pytest.raises(ConfigurationError, match="empty"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- octo\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("user: octo\nyear: 2024\n")

        with pytest.raises(ConfigurationError, match="year"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("user: [octo\n")

        with pytest.raises(ConfigurationError, match="Unable to parse"):
            load_config(path)


class TestParseStartDate:
    def test_unpadded(self):
        assert parse_start_date("3-4-2024") == datetime(2024, 3, 4, tzinfo=timezone.utc)

    def test_padded(self):
        assert parse_start_date("03-04-2024") == datetime(2024, 3, 4, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["2024-03-04", "13-1-2024", "soon", ""])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError, match="Unable to parse start time"):
            parse_start_date(value)


class TestParseDuration:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("7d", timedelta(days=7)),
            ("168h", timedelta(hours=168)),
            ("1w", timedelta(weeks=1)),
            ("36h30m", timedelta(hours=36, minutes=30)),
            ("90s", timedelta(seconds=90)),
            ("1.5d", timedelta(hours=36)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "7", "week", "7d junk", "-1d"])
    def test_invalid(self, value):
        with pytest.raises(ConfigurationError, match="Invalid duration"):
            parse_duration(value)

    def test_zero(self):
        with pytest.raises(ConfigurationError, match="positive"):
            parse_duration("0h")


class TestLastCompletedWeekMonday:
    @pytest.mark.parametrize(
        "today, expected",
        [
            (date(2024, 3, 11), date(2024, 3, 4)),  # Monday
            (date(2024, 3, 12), date(2024, 3, 4)),  # Tuesday
            (date(2024, 3, 16), date(2024, 3, 4)),  # Saturday
            (date(2024, 3, 17), date(2024, 3, 4)),  # Sunday
            (date(2024, 3, 18), date(2024, 3, 11)),  # next Monday
        ],
    )
    def test_weekdays(self, today, expected):
        result = last_completed_week_monday(today)

        assert result.date() == expected
        assert result.tzinfo == timezone.utc
        assert (result.hour, result.minute) == (0, 0)


class TestReadTokenFile:
    def test_strips_trailing_newline(self, tmp_path):
        path = tmp_path / "token"
        path.write_text("ghp_secret\n")

        assert read_token_file(path) == "ghp_secret"

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Unable to read token file"):
            read_token_file(tmp_path / "nope")


class TestResolveSettings:
    def test_defaults(self):
        settings = resolve_settings(user="octo", today=date(2024, 3, 13))

        assert settings.user == "octo"
        assert settings.token is None
        assert settings.endpoint == DEFAULT_ENDPOINT
        assert settings.start == datetime(2024, 3, 4, tzinfo=timezone.utc)
        assert settings.duration == timedelta(days=7)
        assert settings.window.end == datetime(2024, 3, 11, tzinfo=timezone.utc)
        assert settings.output is None

    def test_requires_user(self):
        with pytest.raises(ConfigurationError, match="user"):
            resolve_settings(Config())

    def test_overrides_win(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("from-file\n")
        config = Config(
            user="octo",
            token="from-config",
            start="1-1-2024",
            duration="1d",
            endpoint="https://ghe.example/api/v3",
        )

        settings = resolve_settings(
            config,
            user="other",
            token_file=str(token_file),
            start="2-1-2024",
            duration="2d",
        )

        assert settings.user == "other"
        assert settings.token == "from-file"
        assert settings.start == datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert settings.duration == timedelta(days=2)
        assert settings.endpoint == "https://ghe.example/api/v3"

    def test_token_file_from_config(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("abc\n")

        settings = resolve_settings(Config(user="octo", token_file=str(token_file)))

        assert settings.token == "abc"

    def test_bad_start(self):
        with pytest.raises(ConfigurationError):
            resolve_settings(Config(user="octo", start="yesterday"))
