"""Configuration file support.

The optional YAML file provides defaults for the bus options, e.g.::

    bus: 1
    force: true

Options given on the command line take precedence over the file.
"""

import io
import logging
import pathlib

import yaml

from . import I2C_BUS, UPiSException

logger = logging.getLogger("upis.config")

DEFAULT_CONFIG_PATH = pathlib.Path("/etc/upis.yml")

DEFAULTS = {
    "bus": I2C_BUS,
    "force": True,
}

TYPES = {
    "bus": int,
    "force": bool,
}


class ConfigError(UPiSException):
    """Raised for unreadable or malformed configuration files."""

    pass


def load_config(fp: io.TextIOBase | None = None) -> dict:
    """Load the configuration file merged over the defaults.

    Args:
        fp: Open configuration file. If None, DEFAULT_CONFIG_PATH is read
            when it exists.

    Returns:
        Dictionary with all keys of DEFAULTS

    Raises:
        ConfigError: if the file isn't valid YAML or holds values of wrong type
    """
    config = dict(DEFAULTS)

    if fp is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("No configuration file at %s, using defaults", DEFAULT_CONFIG_PATH)
            return config
        with DEFAULT_CONFIG_PATH.open() as default_fp:
            return _merge(config, default_fp)

    return _merge(config, fp)


def _merge(config: dict, fp: io.TextIOBase) -> dict:
    name = getattr(fp, "name", "<config>")
    try:
        raw = yaml.safe_load(fp)
    except yaml.YAMLError as ex:
        raise ConfigError(f"{name} is not valid YAML: {ex}") from ex

    if raw is None:
        logger.debug("Configuration %s is empty", name)
        return config
    if not isinstance(raw, dict):
        raise ConfigError(f"{name} must contain a mapping, got {type(raw).__name__}")

    for key, value in raw.items():
        if key not in TYPES:
            logger.warning("Ignoring unknown configuration key '%s' in %s", key, name)
            continue
        # bool is a subclass of int, reject it for integer options
        if not isinstance(value, TYPES[key]) or (TYPES[key] is int and isinstance(value, bool)):
            raise ConfigError(f"{name}: '{key}' must be of type {TYPES[key].__name__}, got {value!r}")
        config[key] = value

    logger.debug("Configuration loaded from %s: %s", name, config)
    return config


def resolve(config: dict, **overrides) -> dict:
    """Apply command line overrides, ignoring those left unset (None)."""
    resolved = dict(config)
    resolved.update({key: value for key, value in overrides.items() if value is not None})
    return resolved
