"""
Console logging for JsHunter.
Colored level-aware output with verbose and silent switches used by the CLI and web UI.
"""

import logging
import sys

from colorama import Fore, Style, init

init(autoreset=True)

LOGGER_NAME = "jshunter"


class ColoredFormatter(logging.Formatter):
    """Prefix each record with a colored level tag."""

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, "")
        message = super().format(record)
        return f"{color}[{record.levelname[0]}]{Style.RESET_ALL} {message}"


def _build_logger() -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(logging.INFO)
    log.propagate = False

    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColoredFormatter("%(asctime)s %(message)s", datefmt="%H:%M:%S"))
        log.addHandler(handler)

    return log


logger = _build_logger()


def set_verbose(enabled: bool = True):
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)


def set_silent(enabled: bool = True):
    logger.setLevel(logging.ERROR if enabled else logging.INFO)
