"""
Command-line front end for the process configuration.

Usage:
    python -m src.settings.cli [options]
"""

import argparse
import logging
import sys
from collections.abc import Sequence

import structlog

from src.core.logger import level_from_env, setup_logging

from .config import ConfigError, ProcessConfiguration
from .schema import SETTINGS

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """One flag per declared setting, defaulting to its compiled-in value"""
    parser = argparse.ArgumentParser(
        description="Anomaly detection job service settings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
        Examples:
        # Defaults only
        python -m src.settings.cli

        # Override from a properties file (file values win over flags)
        python -m src.settings.cli --config /etc/jobs/service.properties

        # Custom redis
        python -m src.settings.cli --redis-host redis.internal --redis-port 6380 --redis-ssl
        """,
    )

    for setting in SETTINGS:
        help_text = f"{setting.description} (default: {setting.default})"
        if setting.type is bool:
            parser.add_argument(
                setting.flag,
                dest=setting.name,
                action=argparse.BooleanOptionalAction,
                default=setting.default,
                help=help_text,
            )
        else:
            parser.add_argument(
                setting.flag,
                dest=setting.name,
                type=setting.type,
                default=setting.default,
                help=help_text,
            )

    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments"""
    return build_parser().parse_args(argv)


def load_configuration(argv: Sequence[str] | None = None) -> ProcessConfiguration:
    """Run the startup load sequence and return the frozen configuration.

    Defaults are applied first, then the command line, then the file named
    by --config. Nothing may read the configuration before this returns.

    Raises:
        ConfigError: If any value is invalid or the config file cannot be read
    """
    config = ProcessConfiguration()
    config.load_defaults()
    config.apply_arguments(parse_arguments(argv))
    config.apply_config_file()
    config.freeze()
    return config


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point"""
    setup_logging(level=level_from_env())

    try:
        config = load_configuration(argv)
    except ConfigError as e:
        logger.error("Configuration failed to load", key=e.key, value=e.raw_value, error=str(e))
        return 1

    if config.DEBUG_MODE:
        setup_logging(level=logging.DEBUG)

    config.log_settings()
    logger.info("Configuration loaded", version=config.VERSION, port=config.PORT)
    return 0


if __name__ == "__main__":
    sys.exit(main())
