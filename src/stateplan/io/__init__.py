"""Import definitions for logging, configuration, and file utilities."""

from .logging import configure_logging as configure_logging
from .logging import console as console
from .logging import log_info as log_info
