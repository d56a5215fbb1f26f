"""Common utilities shared by native-stage modules."""

from .config import ConfigLoader
from .logging import PACKAGE_LOGGER, configure_logging, setup_logging
from .logging_config import LoggingConfig
from .errors import NativeStageError, ConfigurationError
from .config_utils import expand_path_variables

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'PACKAGE_LOGGER',
    'configure_logging',
    'setup_logging',
    'NativeStageError',
    'ConfigurationError',
    'expand_path_variables',
]
