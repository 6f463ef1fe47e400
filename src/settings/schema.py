"""
Declared process settings.

Every setting is described once here; the command-line parser and the
configuration file override both read this table.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def validate_emails(value: str) -> bool:
    """Validate a comma-separated list of email addresses."""
    emails = [email.strip() for email in value.split(",")]
    return all(EMAIL_PATTERN.match(email) for email in emails)


def parse_int(text: str) -> int:
    if not INTEGER_PATTERN.match(text.strip()):
        raise ValueError(f"not an integer: {text!r}")
    return int(text)


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered not in ("true", "false"):
        raise ValueError(f"not a boolean: {text!r}")
    return lowered == "true"


PARSERS: dict[type, Callable[[str], Any]] = {
    int: parse_int,
    bool: parse_bool,
    str: str,
}


@dataclass(frozen=True)
class Setting:
    """Setting definition."""

    name: str
    flag: str
    type: type
    default: Any = None
    description: str = ""
    validator: Callable[[Any], bool] | None = None

    def parse(self, text: str) -> Any:
        """Convert configuration text to the setting's type.

        Raises:
            ValueError: If the text does not represent a value of the type
        """
        return PARSERS[self.type](text)

    def is_valid(self, value: Any) -> bool:
        if value is None or self.validator is None:
            return True
        return self.validator(value)


SETTINGS = (
    Setting("CONFIG_FILE", "--config", str, None, "Path to a configuration file"),
    Setting("VERSION", "--version", str, "v0.0.0", "Version of the service"),
    Setting(
        "EGADS_CONFIG_FILENAME",
        "--egads-config-filename",
        str,
        "resources/egads_config.ini",
        "EGADS config file (default is used if not provided)",
    ),
    Setting("PORT", "--port", int, 4080, "Port for the server to listen on"),
    Setting(
        "INTERVAL_MINUTES",
        "--interval-minutes",
        int,
        180,
        "Training period for the EGADS model at minute granularity",
    ),
    Setting(
        "INTERVAL_HOURS",
        "--interval-hours",
        int,
        672,
        "Training period for the EGADS model at hour granularity",
    ),
    Setting(
        "INTERVAL_DAYS",
        "--interval-days",
        int,
        28,
        "Training period for the EGADS model at day granularity",
    ),
    Setting(
        "INTERVAL_WEEKS",
        "--interval-weeks",
        int,
        12,
        "Training period for the EGADS model at week granularity",
    ),
    Setting(
        "INTERVAL_MONTHS",
        "--interval-months",
        int,
        6,
        "Training period for the EGADS model at month granularity",
    ),
    Setting("ENABLE_EMAIL", "--enable-email", bool, False, "Send anomaly report emails"),
    Setting(
        "FROM_MAIL",
        "--from-mail",
        str,
        None,
        "FROM address for the email service",
        validate_emails,
    ),
    Setting(
        "REPLY_TO",
        "--reply-to",
        str,
        None,
        "REPLY TO address for the email service",
        validate_emails,
    ),
    Setting("SMTP_HOST", "--smtp-host", str, None, "SMTP host for the email service"),
    Setting("SMTP_PORT", "--smtp-port", int, 25, "SMTP port for the email service"),
    Setting("SMTP_USER", "--smtp-user", str, None, "SMTP user for the email service"),
    Setting("SMTP_PASSWORD", "--smtp-password", str, None, "SMTP password for the email service"),
    Setting(
        "FAILURE_EMAIL",
        "--failure-email",
        str,
        None,
        "Email receiving pipeline failures",
        validate_emails,
    ),
    Setting(
        "EXECUTION_DELAY",
        "--execution-delay",
        int,
        30,
        "Seconds between each check of the job queue",
    ),
    Setting(
        "VALID_DOMAINS",
        "--valid-domains",
        str,
        None,
        "Comma-separated list of valid email domains, e.g. 'yahoo,gmail'",
    ),
    Setting("REDIS_HOSTNAME", "--redis-host", str, "127.0.0.1", "Hostname of the redis server"),
    Setting("REDIS_PORT", "--redis-port", int, 6379, "Port of the redis server"),
    Setting("REDIS_SSL", "--redis-ssl", bool, False, "Use SSL when connecting to redis"),
    Setting(
        "REDIS_TIMEOUT",
        "--redis-timeout",
        int,
        5000,
        "Timeout in milliseconds when connecting to redis",
    ),
    Setting("REDIS_PASSWORD", "--redis-password", str, None, "Password to authenticate with redis"),
    Setting("REDIS_CLUSTERED", "--redis-clustered", bool, False, "Whether redis is a cluster"),
    Setting(
        "PROPHET_URL",
        "--prophet-url",
        str,
        "127.0.0.1:4080",
        "Prophet service URL, e.g. 'prophet-service.com:8000'",
    ),
    Setting(
        "PROPHET_TIMEOUT",
        "--prophet-timeout",
        int,
        120000,
        "Timeout in milliseconds when querying the Prophet service",
    ),
    Setting(
        "PROPHET_PRINCIPAL",
        "--prophet-principal",
        str,
        "prophet-principal",
        "Principal of the Prophet service",
    ),
    Setting("DEBUG_MODE", "--debug-mode", bool, False, "Enable debug mode"),
    Setting(
        "DISABLE_SECURITY_FILTER",
        "--disable-security-filter",
        bool,
        False,
        "Disable the security filter on routes",
    ),
    Setting(
        "TIMESERIES_COMPLETENESS",
        "--timeseries-completeness",
        int,
        60,
        "Minimum percentage of datapoints for a timeseries to be analyzed",
    ),
    Setting("PROJECT_NAME", "--project-name", str, None, "Project name displayed on the UI"),
    Setting("EXTERNAL_FILE_PATH", "--external-file-path", str, None, "Path to external files"),
    Setting(
        "HTTP_CLIENT_TIMEOUT",
        "--http-client-timeout",
        int,
        20000,
        "Timeout in milliseconds for the http client",
    ),
    Setting(
        "BACKUP_REDIS_DB_PATH",
        "--backup-redis-db-path",
        str,
        None,
        "Local JSON dump file for redis backups (no backup when unset)",
    ),
    Setting(
        "DRUID_BROKERS_LIST_FILE",
        "--druid-brokers-list-file",
        str,
        None,
        "File listing permitted druid broker hosts as <host>:<port>,... (any host when unset)",
    ),
    Setting("TRUSTSTORE_PATH", "--truststore-path", str, None, "Truststore location for mTLS"),
    Setting("TRUSTSTORE_TYPE", "--truststore-type", str, "jks", "Truststore type for mTLS"),
    Setting(
        "TRUSTSTORE_PASSWORD", "--truststore-password", str, None, "Truststore password for mTLS"
    ),
    Setting("KEYSTORE_PATH", "--keystore-path", str, None, "Keystore location for mTLS"),
    Setting("KEYSTORE_TYPE", "--keystore-type", str, "jks", "Keystore type for mTLS"),
    Setting("KEYSTORE_PASSWORD", "--keystore-password", str, None, "Keystore password for mTLS"),
    Setting(
        "KEY_DIR",
        "--key-dir",
        str,
        None,
        "Directory holding one private key per cluster principal for mTLS",
    ),
    Setting(
        "CERT_DIR",
        "--cert-dir",
        str,
        None,
        "Directory holding one certificate per cluster principal for mTLS",
    ),
    Setting(
        "HTTPS_HOSTNAME_VERIFICATION",
        "--https-hostname-verification",
        bool,
        True,
        "Verify hostnames on mTLS connections",
    ),
    Setting(
        "CUSTOM_SSL_CONTEXT_PROVIDER_CLASS",
        "--custom-ssl-context-provider-class",
        str,
        "DefaultSslContextProvider",
        "SSL context provider for mTLS connections",
    ),
    Setting(
        "CUSTOM_SECRET_PROVIDER_CLASS",
        "--custom-secret-provider-class",
        str,
        "DefaultSecretProvider",
        "Secret provider for passwords",
    ),
)

# Never shown in diagnostic output
PRINT_IGNORED = frozenset(
    {
        "HELP",
        "PRINT_IGNORED",
        "REDIS_PASSWORD",
        "SMTP_PASSWORD",
        "TRUSTSTORE_PASSWORD",
        "KEYSTORE_PASSWORD",
    }
)
