"""
Process-wide configuration.

Settings are loaded once at startup: compiled-in defaults, then values given
on the command line, then the optional configuration file. The file always
has the final say, including over command-line values. Once loaded the
configuration is frozen and handed to every component that needs it.
"""

from argparse import Namespace
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from .schema import PRINT_IGNORED, SETTINGS, Setting

logger = structlog.get_logger(__name__)

COMMENT_PREFIXES = ("#", "!")


class ConfigError(Exception):
    """A setting could not be loaded"""

    def __init__(self, message: str, key: str | None = None, raw_value: Any = None):
        self.key = key
        self.raw_value = raw_value
        super().__init__(message)


class ProcessConfiguration:
    """Typed settings store, read through attributes (``config.PORT``)"""

    def __init__(
        self,
        settings: Iterable[Setting] = SETTINGS,
        ignored: Iterable[str] = PRINT_IGNORED,
    ):
        self._schema = {setting.name: setting for setting in settings}
        self._ignored = frozenset(ignored)
        self._values: dict[str, Any] = {}
        self._frozen = False

    def load_defaults(self) -> None:
        """Reset every setting to its compiled-in default"""
        self._check_writable()
        for setting in self._schema.values():
            self._values[setting.name] = setting.default

    def apply_arguments(self, args: Namespace | Mapping[str, Any]) -> None:
        """Set every declared setting present in parsed command-line arguments

        Raises:
            ConfigError: If a value fails its setting's validator
        """
        values = vars(args) if isinstance(args, Namespace) else args
        for name in self._schema:
            if name in values:
                self.set(name, values[name])

    def apply_config_file(self) -> None:
        """Apply the file named by CONFIG_FILE, if any

        Raises:
            ConfigError: If the file cannot be read or holds an invalid value
        """
        path = self._values.get("CONFIG_FILE")
        if path is None:
            logger.info("No configuration file specified, using default/passed settings")
            return
        self.override_from_file(path)

    def override_from_file(self, path: str) -> None:
        """Overwrite settings with the values found in a properties file.

        Only declared settings whose key is present with a non-empty value
        are changed. Keys are matched case-sensitively. Settings are applied
        in declaration order and loading stops at the first bad value, so
        settings declared before it keep their new value.

        Raises:
            ConfigError: If the file cannot be opened or a value cannot be
                converted to its setting's type
        """
        self._check_writable()
        logger.info("Attempting to read config file", path=path)
        try:
            with open(path, encoding="utf-8") as stream:
                properties = read_properties(stream)
        except OSError as e:
            raise ConfigError(
                f"Could not read config file {path}: {e}", key="CONFIG_FILE", raw_value=path
            ) from e

        applied = 0
        for setting in self._schema.values():
            raw_value = properties.get(setting.name)
            if not raw_value:
                continue
            try:
                value = setting.parse(raw_value)
            except ValueError as e:
                logger.error(
                    "Could not set setting",
                    setting=setting.name,
                    value=raw_value,
                    error=str(e),
                )
                raise ConfigError(
                    f"Failed to set {setting.name} to value {raw_value}",
                    key=setting.name,
                    raw_value=raw_value,
                ) from e
            self.set(setting.name, value, raw_value=raw_value)
            applied += 1

        logger.info("Config file applied", path=path, settings_applied=applied)

    def set(self, name: str, value: Any, raw_value: Any = None) -> None:
        """Assign one setting

        Raises:
            ConfigError: If the configuration is frozen, the setting is not
                declared or the value fails validation
        """
        self._check_writable()
        setting = self._schema.get(name)
        if setting is None:
            raise ConfigError(f"Unknown setting {name}", key=name, raw_value=value)
        if not setting.is_valid(value):
            raw_value = value if raw_value is None else raw_value
            raise ConfigError(
                f"Failed to set {name} to value {raw_value}", key=name, raw_value=raw_value
            )
        self._values[name] = value

    def freeze(self) -> None:
        """Forbid any further change"""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def dump(self) -> dict[str, Any]:
        """Every setting except the ignored ones, for diagnostics"""
        return {
            name: value for name, value in self._values.items() if name not in self._ignored
        }

    def log_settings(self) -> None:
        logger.info("Printing all settings...")
        for name, value in self.dump().items():
            logger.info("Setting", name=name, value=value)

    def _check_writable(self):
        if self._frozen:
            raise ConfigError("Configuration is frozen and cannot be changed")

    def __getattr__(self, name: str) -> Any:
        values = self.__dict__.get("_values", {})
        if name in values:
            return values[name]
        raise AttributeError(f"{type(self).__name__} has no setting {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(frozen={self._frozen}, settings={self.dump()})"


def read_properties(lines: Iterable[str]) -> dict[str, str]:
    """Parse flat ``KEY=value`` properties text.

    Blank lines and lines starting with ``#`` or ``!`` are skipped. The key
    is stripped and the value loses only its leading whitespace, so quotes
    and ``#`` inside a value are kept verbatim. A line without ``=`` is a
    key with an empty value.
    """
    properties = {}
    for line in lines:
        line = line.rstrip("\r\n")
        stripped = line.lstrip()
        if not stripped or stripped.startswith(COMMENT_PREFIXES):
            continue
        key, _, value = stripped.partition("=")
        properties[key.strip()] = value.lstrip()
    return properties
