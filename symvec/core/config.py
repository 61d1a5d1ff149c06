'''
Configuration management for symvec.

The configuration is a small set of dataclass sections held by a process-wide
ConfigManager. Values are layered:

1. Defaults built into the package
2. Environment variables named SYMVEC_<SECTION>_<OPTION>
3. Runtime modifications through set_config

The numerical section holds the single tolerance used to decide whether a
matrix is symmetric positive definite, so the threshold is defined in one
place rather than scattered through the matrix routines.
'''

import os
import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Literal, Optional, Union, get_args, get_origin, get_type_hints

import numpy as np

from .exceptions import ConfigurationError
from .types import LogLevel

# Set up module-level logger
logger = logging.getLogger("symvec.core.config")

CONFIG_ENV_PREFIX = "SYMVEC_"

_FLOAT_EPS = float(np.finfo(np.float64).eps)
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigSection(Enum):
    """Enumeration of configuration sections."""
    NUMERICAL = "numerical"
    LOGGING = "logging"


@dataclass
class NumericalConfig:
    """
    Numerical configuration settings.

    Attributes:
        sympd_tolerance: Relative tolerance for the symmetry part of the
            symmetric positive definite test, scaled by max(1, max|M|)
        pinv_rtol: Relative cutoff for small singular values in the
            pseudo-inverse (None uses SciPy's default)
        singular_rcond: Reciprocal condition number below which a matrix that
            must be inverted is treated as singular
    """
    sympd_tolerance: float = 100 * _FLOAT_EPS
    pinv_rtol: Optional[float] = None
    singular_rcond: float = _FLOAT_EPS


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Level of the package logger
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to attach a console handler
    """
    log_level: LogLevel = "WARNING"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True


@dataclass
class SymvecConfig:
    """Complete configuration combining all sections."""
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _coerce(value: Any, hint: Any) -> Any:
    """Convert a raw value (often an environment string) to the annotated type."""
    if get_origin(hint) is Union:
        args = [a for a in get_args(hint) if a is not type(None)]
        if value is None or (isinstance(value, str) and value.strip().lower() in ("", "none")):
            return None
        hint = args[0]
    if hint is bool:
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1", "y")
        return bool(value)
    if hint in (int, float):
        return hint(value)
    if get_origin(hint) is Literal:
        return str(value).strip().upper()
    return str(value)


class ConfigManager:
    """
    Configuration manager for symvec.

    Holds the current configuration, applies environment overrides and keeps
    the package logger in sync with the logging section.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the configuration manager has been initialized
        _modified_keys: Options changed at runtime, as "section.option"
    """

    def __init__(self):
        """Initialize the configuration manager with default settings."""
        self._config = SymvecConfig()
        self._initialized = False
        self._modified_keys = set()

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        Applies environment variable overrides, validates the result and sets
        up logging. Calling it again is a no-op.
        """
        if self._initialized:
            return

        self._apply_env_overrides()
        self._validate_config()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _apply_env_overrides(self) -> None:
        """Apply SYMVEC_<SECTION>_<OPTION> environment variables."""
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX):
                continue

            key = env_var[len(CONFIG_ENV_PREFIX):]
            parts = key.lower().split('_', 1)

            if len(parts) != 2:
                continue

            section, option = parts

            try:
                ConfigSection(section)
            except ValueError:
                continue

            section_obj = getattr(self._config, section)
            if not hasattr(section_obj, option):
                continue

            hint = get_type_hints(type(section_obj))[option]
            try:
                setattr(section_obj, option, _coerce(value, hint))
                logger.debug(f"Applied environment override: {env_var}={value}")
            except (TypeError, ValueError) as e:
                logger.warning(f"Failed to apply environment override {env_var}: {e}")

    def _setup_logging(self) -> None:
        """Configure the package logger from the logging section."""
        root_logger = logging.getLogger("symvec")

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.setLevel(getattr(logging, self._config.logging.log_level))

        if self._config.logging.console_logging:
            formatter = logging.Formatter(
                fmt=self._config.logging.log_format,
                datefmt=self._config.logging.log_date_format
            )
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

    def _validate_config(self) -> None:
        """Validate every section, resetting invalid values to their defaults."""
        for section in ConfigSection:
            section_obj = getattr(self._config, section.value)
            for f in fields(section_obj):
                self._validate_constraint(section_obj, f.name, getattr(section_obj, f.name))

    def _validate_constraint(self, section: Any, attr_name: str, value: Any) -> None:
        """
        Validate a specific constraint on a configuration value.

        Args:
            section: The configuration section
            attr_name: The attribute name
            value: The attribute value
        """
        defaults = type(section)()

        if attr_name in ("sympd_tolerance", "singular_rcond") and not (0 < value < 1):
            logger.warning(f"Invalid {attr_name}: {value}, must be between 0 and 1")
            setattr(section, attr_name, getattr(defaults, attr_name))

        elif attr_name == "pinv_rtol" and value is not None and value < 0:
            logger.warning(f"Invalid pinv_rtol: {value}, must be non-negative")
            setattr(section, attr_name, None)

        elif attr_name == "log_level" and value not in _VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level: {value}, using {defaults.log_level}")
            setattr(section, attr_name, defaults.log_level)

    def _get_section(self, section: str, option: Optional[str] = None) -> Any:
        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=section if option is None else f"{section}.{option}",
                issue="Section not found"
            )
        section_obj = getattr(self._config, section)
        if option is not None and not hasattr(section_obj, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                issue="Option not found"
            )
        return section_obj

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Returns:
            The configuration value, or the default if not found
        """
        section_obj = getattr(self._config, section, None)
        if section_obj is None or not hasattr(section_obj, option):
            return default
        return getattr(section_obj, option)

    def set(self, section: str, option: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            value: The value to set

        Raises:
            ConfigurationError: If the section or option is not found, or the
                value cannot be converted to the option's type
        """
        section_obj = self._get_section(section, option)
        hint = get_type_hints(type(section_obj))[option]

        try:
            typed_value = _coerce(value, hint)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to set configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue=str(e)
            ) from e

        setattr(section_obj, option, typed_value)
        self._validate_constraint(section_obj, option, typed_value)
        self._modified_keys.add(f"{section}.{option}")

        if section == ConfigSection.LOGGING.value:
            self._setup_logging()

        logger.debug(f"Set configuration option: {section}.{option}={value}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to default values.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The configuration option to reset, or None to reset the entire section

        Raises:
            ConfigurationError: If the section or option is not found
        """
        if section is None:
            self._config = SymvecConfig()
            self._modified_keys.clear()
            self._setup_logging()
            logger.debug("Reset all configuration to defaults")
            return

        section_obj = self._get_section(section, option)
        default_section = getattr(SymvecConfig(), section)

        if option is None:
            setattr(self._config, section, default_section)
            self._modified_keys = {k for k in self._modified_keys if not k.startswith(f"{section}.")}
            logger.debug(f"Reset configuration section: {section}")
        else:
            setattr(section_obj, option, getattr(default_section, option))
            self._modified_keys.discard(f"{section}.{option}")
            logger.debug(f"Reset configuration option: {section}.{option}")

        if section == ConfigSection.LOGGING.value:
            self._setup_logging()

    def get_modified_options(self) -> Dict[str, Dict[str, Any]]:
        """
        Get a dictionary of options modified at runtime.

        Returns:
            Nested dictionary of modified options with their current values
        """
        result: Dict[str, Dict[str, Any]] = {}
        for key in self._modified_keys:
            section, option = key.split(".", 1)
            result.setdefault(section, {})[option] = self.get(section, option)
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration to a nested dictionary."""
        return {
            section.value: {
                f.name: getattr(getattr(self._config, section.value), f.name)
                for f in fields(getattr(self._config, section.value))
            }
            for section in ConfigSection
        }


# Create a singleton instance of the configuration manager
_config_manager = ConfigManager()


def initialize_config() -> None:
    """Initialize the configuration system, applying environment overrides."""
    _config_manager.initialize()


def get_config(section: str, option: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        section: The configuration section
        option: The configuration option
        default: Default value if the option is not found

    Returns:
        The configuration value, or the default if not found
    """
    if not _config_manager._initialized:
        initialize_config()

    return _config_manager.get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """
    Set a configuration value.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    if not _config_manager._initialized:
        initialize_config()

    _config_manager.set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """
    Reset configuration to default values.

    Args:
        section: The configuration section to reset, or None to reset all
        option: The configuration option to reset, or None to reset the entire section
    """
    if not _config_manager._initialized:
        initialize_config()

    _config_manager.reset(section, option)


def get_config_manager() -> ConfigManager:
    """Return the process-wide configuration manager."""
    return _config_manager


def get_numerical_config() -> NumericalConfig:
    """Return the numerical configuration section."""
    if not _config_manager._initialized:
        initialize_config()

    return _config_manager._config.numerical
