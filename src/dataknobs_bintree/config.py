"""Settings for the bintree package.

Settings come from three layers, later layers winning:

1. Defaults declared on BinTreeSettings
2. A dictionary or a YAML/JSON file passed to load_settings()
3. Environment variables named DATAKNOBS_BINTREE__0__<FIELD>

Files are read with dataknobs_config.Config, so the settings live in the
``bintree`` section and the usual ``settings`` defaults apply:

```yaml
bintree:
  buffer_capacity: 250
  indent_width: 2
```

A dictionary source may also hold the fields at top level.
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from dataknobs_config import Config
from dataknobs_config import ValidationError as ConfigValidationError
from dataknobs_config.environment import EnvironmentOverrides
from dataknobs_config.exceptions import FileNotFoundError as ConfigFileNotFoundError

from .exceptions import ConfigNotFoundError, ConfigurationError

logger = logging.getLogger(__name__)

SECTION = "bintree"

_environment = EnvironmentOverrides()

ENV_PREFIX = f"{_environment.prefix}{SECTION.upper()}{_environment.ENV_SEPARATOR}"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Keys dataknobs_config adds to every atomic config
_CONFIG_KEYS = ("type", "name")


@dataclass(frozen=True)
class BinTreeSettings:
    """Tunable values used by trees, buffers and the demo driver.

    Attributes:
        buffer_capacity: Default slot count of a SequenceBuffer.
        indent_width: Spaces per depth level in the sideways display.
        sentinel: Token that ends one tree in driver input.
        empty_tree_notice: Written by BinTree.display() for an empty tree.
        empty_display_notice: Written by BinTree.display_sideways() for an empty tree.
        log_level: Level applied to the package logger by the CLI.
    """

    buffer_capacity: int = 100
    indent_width: int = 4
    sentinel: str = "$$"
    empty_tree_notice: str = "! -- tree is empty -- !"
    empty_display_notice: str = "! -- cannot display empty tree -- !"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            # bool is an int subclass; true/false is never a count
            if not isinstance(value, f.type) or isinstance(value, bool):
                raise ConfigurationError(
                    f"{f.name} must be of type {f.type.__name__}",
                    context={f.name: value},
                )
        if self.buffer_capacity < 1:
            raise ConfigurationError(
                "buffer_capacity must be a positive integer",
                context={"buffer_capacity": self.buffer_capacity},
            )
        if self.indent_width < 0:
            raise ConfigurationError(
                "indent_width must be a non-negative integer",
                context={"indent_width": self.indent_width},
            )
        if not self.sentinel or any(ch.isspace() for ch in self.sentinel):
            raise ConfigurationError(
                "sentinel must be a single non-empty token",
                context={"sentinel": self.sentinel},
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Unsupported log level '{self.log_level}'",
                context={"log_level": self.log_level, "expected": sorted(_LOG_LEVELS)},
            )
        object.__setattr__(self, "log_level", self.log_level.upper())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BinTreeSettings":
        """Create settings from a dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown setting(s): {', '.join(unknown)}",
                context={"unknown": unknown, "known": sorted(known)},
            )
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def env_var(name: str) -> str:
    """Name of the environment variable overriding setting ``name``."""
    return _environment.reference_to_env_var(f"xref:{SECTION}", name)


def env_overrides(environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    """Collect environment overrides for the bintree section.

    Variable names follow dataknobs_config, e.g. DATAKNOBS_BINTREE__0__INDENT_WIDTH.
    Values are typed by the BinTreeSettings field they override, so "007"
    stays a string for the sentinel and "1" stays an integer for a width.

    Args:
        environ: Mapping to read instead of os.environ

    Returns:
        Dictionary of field name to typed value

    Raises:
        ConfigurationError: If an integer setting holds a non-integer value
    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for f in fields(BinTreeSettings):
        key = env_var(f.name)
        if key not in environ:
            continue
        raw = environ[key]
        if f.type is int:
            try:
                overrides[f.name] = int(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"{key} must be an integer", context={"variable": key, "value": raw}
                ) from e
        else:
            overrides[f.name] = raw
    return overrides


def _read_section(source: Union[str, Path, Dict[str, Any]]) -> Dict[str, Any]:
    """Load ``source`` through dataknobs_config and return the bintree section."""
    if isinstance(source, dict) and SECTION not in source and "settings" not in source:
        source = {SECTION: source}
    try:
        config = Config(source, use_env=False)
    except ConfigFileNotFoundError as e:
        raise ConfigNotFoundError(str(e), context={"path": str(source)}) from e
    except ConfigValidationError as e:
        raise ConfigurationError(str(e), context={"source": str(source)}) from e
    except (AttributeError, TypeError) as e:
        # Config expects a mapping of section name to mapping(s)
        raise ConfigurationError(
            f"Settings must be a mapping with a '{SECTION}' section",
            context={"source": str(source)},
        ) from e

    if SECTION not in config.get_types():
        return {}
    section = config.get(SECTION)
    for key in _CONFIG_KEYS:
        section.pop(key, None)
    return section


def load_settings(
    source: Union[str, Path, Dict[str, Any], None] = None,
    use_env: bool = True,
) -> BinTreeSettings:
    """Build settings from an optional source plus environment overrides.

    Args:
        source: Settings dictionary or path to a YAML/JSON file
        use_env: Whether DATAKNOBS_BINTREE__0__* variables are applied

    Returns:
        The resolved BinTreeSettings

    Raises:
        ConfigNotFoundError: If a file source does not exist
        ConfigurationError: If the source or a value is invalid
    """
    if source is None:
        data: Dict[str, Any] = {}
    elif isinstance(source, (dict, str, Path)):
        data = _read_section(source)
    else:
        raise ConfigurationError(f"Invalid settings source type: {type(source)}")

    settings = BinTreeSettings.from_dict(data)
    if use_env:
        overrides = env_overrides()
        if overrides:
            logger.debug("Applying environment overrides: %s", overrides)
            settings = replace(settings, **overrides)
    return settings


_settings: BinTreeSettings | None = None


def get_settings() -> BinTreeSettings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: BinTreeSettings) -> None:
    """Install settings as the process-wide default."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget the cached process-wide settings."""
    global _settings
    _settings = None
