"""
Core utilities and helper functions.

This module contains file helpers, base64 helpers and logging setup
shared across NekoLink.
"""

import base64
import logging
import os
import sys
from typing import Iterable, List

from .errors import MissingInputFile


def safe_b64decode(data: str) -> bytes:
    """Safely decode base64 data with proper padding."""
    padded = data + "=" * (-len(data) % 4)
    return base64.b64decode(padded)


def check_input_file(path: str, role: str = "input") -> str:
    """Ensure a file exists and is non-empty, raising MissingInputFile otherwise."""
    if not os.path.isfile(path) or os.path.getsize(path) == 0:
        raise MissingInputFile(path, role)
    return path


def read_text(path: str) -> str:
    """Read a whole UTF-8 text file, tolerating a BOM."""
    with open(path, "r", encoding="utf-8-sig") as f:
        return f.read()


def read_lines(path: str) -> List[str]:
    """Read lines from file, stripping whitespace and dropping blank lines."""
    with open(path, "r", encoding="utf-8-sig") as f:
        return [line.strip() for line in f if line.strip()]


def write_lines(filepath: str, lines: Iterable[str]) -> int:
    """Write lines to file, one per line. Returns the number written."""
    count = 0
    with open(filepath, "w", encoding="utf-8", newline="\n") as f:
        for line in lines:
            if line:
                f.write(line + "\n")
                count += 1
    return count


def setup_logging(level: str = "INFO"):
    """Setup colored logging for the application."""
    from colorama import Fore, Style, init

    init(autoreset=True)

    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    class ColoredFormatter(logging.Formatter):
        FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
        DATEFMT = "%Y-%m-%d %H:%M:%S"
        FORMATS = {
            logging.DEBUG: Fore.CYAN + FORMAT + Style.RESET_ALL,
            logging.INFO: Fore.GREEN + FORMAT + Style.RESET_ALL,
            logging.WARNING: Fore.YELLOW + FORMAT + Style.RESET_ALL,
            logging.ERROR: Fore.RED + FORMAT + Style.RESET_ALL,
            logging.CRITICAL: Fore.RED + Style.BRIGHT + FORMAT + Style.RESET_ALL,
        }

        def format(self, record):
            log_fmt = self.FORMATS.get(record.levelno, self.FORMAT)
            formatter = logging.Formatter(log_fmt, datefmt=self.DATEFMT)
            return formatter.format(record)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(ColoredFormatter())

    logging.basicConfig(level=logging.DEBUG, handlers=[console_handler], force=True)
