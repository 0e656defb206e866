"""
NekoLink console UI - prompts and link display for the terminal front-end.

All reads go through an injectable ``input_fn`` so the prompt loops can be
driven from tests.
"""

import logging
import shutil
import sys
from typing import Callable, Optional

from colorama import Fore, Style

from nekolink.core.config import DEFAULT_MTU, MAX_MTU, MIN_MTU
from nekolink.core.models import GenerationOutcome, LinkRecord
from nekolink.parsers.wireguard_parser import is_valid_mtu

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]

RULE_WIDTH = 120


def _safe_write(stream, text: str):
    """Write text to stream, replacing unencodable chars."""
    try:
        stream.write(text)
        stream.flush()
    except UnicodeEncodeError:
        stream.write(text.encode("ascii", errors="replace").decode("ascii"))
        stream.flush()


def _width() -> int:
    return min(RULE_WIDTH, shutil.get_terminal_size((RULE_WIDTH, 24)).columns)


def rule(char: str = "-", title: str = "") -> str:
    """A full-width ruler line, optionally with a centred title."""
    width = _width()
    if not title:
        return char * width
    title = f" {title} "
    return title.center(width, char)


class ConsoleUI:
    """Terminal prompts and output for interactive and batch runs."""

    def __init__(self, input_fn: InputFn = input, stream=None):
        self.input_fn = input_fn
        self.stream = stream or sys.stdout

    def write(self, text: str = ""):
        _safe_write(self.stream, text + "\n")

    def print_banner(self):
        self.write(f"{Fore.CYAN}{Style.BRIGHT}NekoLink{Style.RESET_ALL} - "
                   "WireGuard/WARP config to NekoRay link converter")
        self.write("Generated links import into NekoRay / NekoBox; switch the core to sing-box.")
        self.write()

    def ask(self, text: str) -> str:
        """Prompt once and return the stripped answer."""
        return self.input_fn(text).strip()

    def prompt_mtu(self, config_mtu: Optional[str] = None) -> Optional[int]:
        """Ask for an MTU override until the answer is empty or valid.

        Returns None when the user keeps the config (or default) value.
        """
        current = config_mtu or f"{DEFAULT_MTU} (default)"
        self.write(f"Change the MTU? Leave empty to keep {current}.")
        while True:
            answer = self.ask(f"MTU ({MIN_MTU}-{MAX_MTU}): ")
            if not answer:
                return None
            if is_valid_mtu(answer):
                return int(answer)
            self.write(f"{Fore.YELLOW}MTU must be an integer between {MIN_MTU} and {MAX_MTU}.{Style.RESET_ALL}")

    def prompt_endpoint(self) -> str:
        return self.ask("\nEndpoint (host:port, e.g. 162.159.192.1:2408): ")

    def prompt_prefix(self) -> str:
        return self.ask("Name prefix for the node (e.g. CN, empty for none): ")

    def show_reject(self, outcome: GenerationOutcome):
        self.write(f"{Fore.YELLOW}Not a valid endpoint ({outcome.reason.value}): "
                   f"{outcome.token!r}{Style.RESET_ALL}")

    def show_outcome(self, outcome: GenerationOutcome):
        """One status line per batch item."""
        if outcome.ok:
            self.write(f"{Fore.GREEN}[+]{Style.RESET_ALL} {outcome.link.display_name}")
        else:
            self.write(f"{Fore.RED}[x]{Style.RESET_ALL} {outcome.token} ({outcome.reason.value})")

    def show_link(self, link: LinkRecord):
        self.write()
        self.write(rule("-", f"NekoRay link: {link.display_name}"))
        self.write(link.uri)
        self.write(rule("-"))
        self.write()
        self.write(rule("+"))

    def wait_for_enter(self):
        """Pause before exit so a double-clicked console stays open."""
        try:
            self.input_fn("\nPress Enter to exit...")
        except (EOFError, KeyboardInterrupt):
            pass
