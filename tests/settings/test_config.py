"""
Tests for ProcessConfiguration.
"""

from argparse import Namespace

import pytest

from src.settings.config import ConfigError, ProcessConfiguration, read_properties
from src.settings.schema import SETTINGS, Setting


class TestDefaultsAndAccess:
    """Tests for loading defaults and reading settings."""

    def test_load_defaults(self, configuration):
        for setting in SETTINGS:
            assert getattr(configuration, setting.name) == setting.default

    def test_unknown_setting_attribute(self, configuration):
        with pytest.raises(AttributeError):
            configuration.NOT_A_SETTING

    def test_attribute_assignment_validated(self, configuration):
        configuration.PORT = 9090

        assert configuration.PORT == 9090

        with pytest.raises(ConfigError):
            configuration.FROM_MAIL = "not-an-email"

    def test_set_unknown_setting(self, configuration):
        with pytest.raises(ConfigError) as excinfo:
            configuration.set("NOT_A_SETTING", 1)

        assert excinfo.value.key == "NOT_A_SETTING"

    def test_custom_schema(self):
        config = ProcessConfiguration(settings=[Setting("LIMIT", "--limit", int, 3)], ignored=[])
        config.load_defaults()

        assert config.dump() == {"LIMIT": 3}


class TestApplyArguments:
    """Tests for applying parsed command-line values."""

    def test_namespace(self, configuration):
        configuration.apply_arguments(Namespace(PORT=9000, REDIS_SSL=True, unrelated="x"))

        assert configuration.PORT == 9000
        assert configuration.REDIS_SSL is True

    def test_mapping(self, configuration):
        configuration.apply_arguments({"PROJECT_NAME": "Sentinel"})

        assert configuration.PROJECT_NAME == "Sentinel"
        assert configuration.PORT == 4080

    def test_invalid_email_rejected(self, configuration):
        with pytest.raises(ConfigError) as excinfo:
            configuration.apply_arguments({"REPLY_TO": "nobody"})

        assert excinfo.value.key == "REPLY_TO"
        assert excinfo.value.raw_value == "nobody"


class TestOverrideFromFile:
    """Tests for the properties file override."""

    def test_overrides_declared_settings(self, configuration, properties_file):
        path = properties_file(
            "# deployment overrides\n"
            "PORT=8080\n"
            "ENABLE_EMAIL=true\n"
            "PROJECT_NAME=Sentinel Jobs\n"
            "FROM_MAIL=alerts@example.com\n"
        )

        configuration.override_from_file(path)

        assert configuration.PORT == 8080
        assert configuration.ENABLE_EMAIL is True
        assert configuration.PROJECT_NAME == "Sentinel Jobs"
        assert configuration.FROM_MAIL == "alerts@example.com"

    def test_absent_and_empty_keys_keep_current_value(self, configuration, properties_file):
        configuration.set("REDIS_PORT", 6380)
        path = properties_file("REDIS_HOSTNAME=\nSMTP_HOST\nUNDECLARED=1\n")

        configuration.override_from_file(path)

        assert configuration.REDIS_PORT == 6380
        assert configuration.REDIS_HOSTNAME == "127.0.0.1"
        assert configuration.SMTP_HOST is None
        assert "UNDECLARED" not in configuration.dump()

    def test_string_values_verbatim(self, configuration, properties_file):
        """Quotes and inline hashes are part of the value."""
        path = properties_file('PROJECT_NAME="Sherlock"\nSMTP_PASSWORD=pa ss #1\n')

        configuration.override_from_file(path)

        assert configuration.PROJECT_NAME == '"Sherlock"'
        assert configuration.SMTP_PASSWORD == "pa ss #1"

    def test_keys_case_sensitive(self, configuration, properties_file):
        configuration.override_from_file(properties_file("port=1234\n"))

        assert configuration.PORT == 4080

    def test_file_wins_over_current_value(self, configuration, properties_file):
        """File values overwrite values set earlier, e.g. from the command line."""
        configuration.apply_arguments({"PORT": 9999})

        configuration.override_from_file(properties_file("PORT=8080\n"))

        assert configuration.PORT == 8080

    def test_coercion_failure_names_key_and_value(self, configuration, properties_file):
        """Settings before the bad key are applied, then loading stops."""
        path = properties_file("PORT=8080\nENABLE_EMAIL=notabool\nPROJECT_NAME=late\n")

        with pytest.raises(ConfigError) as excinfo:
            configuration.override_from_file(path)

        assert excinfo.value.key == "ENABLE_EMAIL"
        assert excinfo.value.raw_value == "notabool"
        assert "ENABLE_EMAIL" in str(excinfo.value)
        assert "notabool" in str(excinfo.value)
        assert configuration.PORT == 8080
        assert configuration.PROJECT_NAME is None

    def test_integer_coercion_failure(self, configuration, properties_file):
        with pytest.raises(ConfigError) as excinfo:
            configuration.override_from_file(properties_file("REDIS_PORT=six\n"))

        assert excinfo.value.key == "REDIS_PORT"
        assert excinfo.value.raw_value == "six"

    def test_validator_failure(self, configuration, properties_file):
        with pytest.raises(ConfigError) as excinfo:
            configuration.override_from_file(properties_file("FAILURE_EMAIL=ops\n"))

        assert excinfo.value.key == "FAILURE_EMAIL"

    def test_missing_file(self, configuration, tmp_path):
        with pytest.raises(ConfigError) as excinfo:
            configuration.override_from_file(str(tmp_path / "missing.properties"))

        assert excinfo.value.key == "CONFIG_FILE"

    def test_apply_config_file_without_path(self, configuration):
        configuration.apply_config_file()

        assert configuration.PORT == 4080

    def test_apply_config_file_uses_config_setting(self, configuration, properties_file):
        configuration.set("CONFIG_FILE", properties_file("EXECUTION_DELAY=5\n"))

        configuration.apply_config_file()

        assert configuration.EXECUTION_DELAY == 5


class TestFreezeAndDump:
    """Tests for the frozen state and diagnostics."""

    def test_frozen_rejects_writes(self, configuration, properties_file):
        configuration.freeze()

        assert configuration.frozen is True
        with pytest.raises(ConfigError):
            configuration.set("PORT", 1)
        with pytest.raises(ConfigError):
            configuration.PORT = 1
        with pytest.raises(ConfigError):
            configuration.load_defaults()
        with pytest.raises(ConfigError):
            configuration.override_from_file(properties_file("PORT=1\n"))
        assert configuration.PORT == 4080

    def test_dump_excludes_ignored(self, configuration):
        configuration.set("REDIS_PASSWORD", "hunter2")

        dump = configuration.dump()

        assert "REDIS_PASSWORD" not in dump
        assert "KEYSTORE_PASSWORD" not in dump
        assert "SMTP_PASSWORD" not in dump
        assert dump["PORT"] == 4080
        assert "hunter2" not in repr(configuration)

    def test_dump_includes_every_other_setting(self, configuration):
        dump = configuration.dump()

        assert len(dump) == len(SETTINGS) - 4

    def test_log_settings(self, configuration):
        configuration.log_settings()


class TestReadProperties:
    """Tests for properties text parsing."""

    def test_comments_and_blank_lines_skipped(self):
        lines = ["# comment\n", "! also a comment\n", "\n", "   \n", "PORT=8080\n"]

        assert read_properties(lines) == {"PORT": "8080"}

    def test_value_keeps_everything_after_first_equals(self):
        properties = read_properties(["URL = http://host/?a=b #frag\r\n"])

        assert properties == {"URL": "http://host/?a=b #frag"}

    def test_key_without_equals_is_empty(self):
        assert read_properties(["SMTP_HOST\n"]) == {"SMTP_HOST": ""}

    def test_later_key_wins(self):
        assert read_properties(["PORT=1\n", "PORT=2\n"]) == {"PORT": "2"}
