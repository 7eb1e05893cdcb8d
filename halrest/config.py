# Configuration settings should be set in app.config
# Settings that aren't found in the app config are taken from the HALREST class variables,
# these may be overridden with HALAPI keyword arguments or environment variables
import os
import logging
from flask import current_app
import halrest
from typing import Any, Optional


def get_config(option: str, default: Optional[Any] = None) -> Any:
    """Retrieve a configuration parameter
    :param option: configuration parameter
    :param default: value returned when the option isn't configured anywhere
    :return: configuration value
    """
    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # RuntimeError: working outside of the app context
        result = getattr(halrest.HALREST, option, None)
    if result is None:
        result = os.environ.get(option, None)
    if result is None:
        return default
    return result


def get_int_config(option: str) -> int:
    """
    :param option: configuration parameter holding an integer (env vars are strings)
    :return: integer configuration value
    """
    return int(get_config(option))


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return halrest.log.getEffectiveLevel() < logging.INFO
