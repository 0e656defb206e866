#!/usr/bin/env python3
"""
NekoLink - WireGuard/WARP configuration to NekoRay link converter

Usage:
    nekolink [options]                    interactive mode
    nekolink [options] --batch [FILE]     one link per endpoint listed in FILE
    nekolink [options] TOKEN [TOKEN ...]  links for the endpoints given

Endpoint forms: 162.159.192.1:2408, [2606:4700:d0::1]:2408,
engage.cloudflareclient.com:2408, "162.159.192.1 2408"

Options:
    --config FILE    WireGuard configuration file (default: wg-config.conf)
    --output FILE    batch output file (default: nekoray_links.txt)
    --mtu N          MTU override, 1280-1500
    --prefix NAME    node name prefix, e.g. CN
    --no-progress    disable the batch progress bar
    -h, --help       show this help message
    -v, --version    show version
"""

import logging
import sys
from typing import Any, Dict, List, Optional

from nekolink import __version__
from nekolink.core.config import NekoLinkConfig
from nekolink.core.errors import NekoLinkError, OutputWriteError
from nekolink.core.utils import check_input_file, read_lines, setup_logging, write_lines
from nekolink.orchestrator import LinkOrchestrator
from nekolink.parsers.wireguard_parser import parse_wireguard_file, resolve_mtu
from nekolink.ui.console import ConsoleUI, rule

logger = logging.getLogger(__name__)

_VALUE_OPTIONS = {
    "--config": "config_file",
    "--output": "output_file",
    "--mtu": "mtu",
    "--prefix": "name_prefix",
}


class UsageError(Exception):
    """Invalid command line."""


def parse_args(argv: List[str]) -> Dict[str, Any]:
    """Parse command line arguments into an options dict."""
    options: Dict[str, Any] = {"mode": "interactive", "tokens": [], "overrides": {}}
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("-h", "--help"):
            options["mode"] = "help"
            return options
        if arg in ("-v", "--version"):
            options["mode"] = "version"
            return options
        if arg in _VALUE_OPTIONS:
            if i + 1 >= len(argv):
                raise UsageError(f"{arg} requires a value")
            options["overrides"][_VALUE_OPTIONS[arg]] = argv[i + 1]
            i += 2
            continue
        if arg == "--no-progress":
            options["overrides"]["show_progress"] = False
        elif arg == "--batch":
            options["mode"] = "batch"
            if i + 1 < len(argv) and not argv[i + 1].startswith("-"):
                options["overrides"]["endpoints_file"] = argv[i + 1]
                i += 1
        elif arg.startswith("--"):
            raise UsageError(f"unknown option {arg}")
        else:
            options["tokens"].append(arg)
        i += 1

    if options["tokens"]:
        if options["mode"] == "batch":
            raise UsageError("endpoint arguments cannot be combined with --batch")
        options["mode"] = "tokens"
    return options


def run_interactive(orchestrator: LinkOrchestrator, ui: ConsoleUI, config: NekoLinkConfig) -> int:
    """Prompt for endpoints until EOF, printing a link for each."""
    prefix = config.get("name_prefix") or ui.prompt_prefix
    ui.write(rule("+"))
    while True:
        try:
            link = orchestrator.generate_until_valid(ui.prompt_endpoint, prefix, on_reject=ui.show_reject)
        except (EOFError, KeyboardInterrupt):
            ui.write()
            return 0
        ui.show_link(link)


def run_batch(orchestrator: LinkOrchestrator, ui: ConsoleUI, config: NekoLinkConfig) -> int:
    """Generate links for every endpoint in the endpoints file."""
    endpoints_file = check_input_file(config.get("endpoints_file"), "endpoint list")
    tokens = read_lines(endpoints_file)
    logger.info(f"Loaded {len(tokens)} endpoints from {endpoints_file}")

    show_progress = config.get("show_progress", True)
    links = orchestrator.generate(
        tokens,
        config.get("name_prefix", ""),
        on_outcome=ui.show_outcome,
        show_progress=show_progress,
    )
    if not links:
        logger.warning("No links generated; output file not written")
        return 1

    output_file = config.get("output_file")
    try:
        count = write_lines(output_file, [link.uri for link in links])
    except OSError as e:
        raise OutputWriteError(output_file, e.strerror or str(e)) from e
    logger.info(f"Wrote {count} links to {output_file}")
    return 0


def run_tokens(orchestrator: LinkOrchestrator, ui: ConsoleUI, config: NekoLinkConfig,
               tokens: List[str]) -> int:
    """Generate links for endpoints given on the command line."""
    links = orchestrator.generate(tokens, config.get("name_prefix", ""))
    for link in links:
        ui.write(link.uri)
    return 0 if links else 1


def main(argv: Optional[List[str]] = None, ui: Optional[ConsoleUI] = None) -> int:
    """Main entry point."""
    try:
        options = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        print(f"nekolink: {e}", file=sys.stderr)
        print("Try 'nekolink --help' for more information.", file=sys.stderr)
        return 2

    if options["mode"] == "help":
        print(__doc__)
        return 0
    if options["mode"] == "version":
        print(f"NekoLink v{__version__}")
        return 0

    config = NekoLinkConfig()
    config.update(options["overrides"])
    setup_logging(config.get("log_level", "INFO"))

    errors = config.validate()
    if errors:
        logger.error("Configuration errors found:")
        for error in errors:
            logger.error(f"  - {error}")
        return 1

    ui = ui or ConsoleUI()
    mode = options["mode"]

    try:
        params = parse_wireguard_file(config.get("config_file"))
        logger.info(f"Loaded WireGuard config {config.get('config_file')} "
                    f"({len(params.addresses)} address(es))")

        override = config.get("mtu")
        if mode == "interactive":
            ui.print_banner()
            if override is None:
                override = ui.prompt_mtu(params.mtu)
        mtu = resolve_mtu(override, params.mtu)
        logger.info(f"Using MTU {mtu}")

        orchestrator = LinkOrchestrator(params, mtu)
        if mode == "batch":
            return run_batch(orchestrator, ui, config)
        if mode == "tokens":
            return run_tokens(orchestrator, ui, config, options["tokens"])
        return run_interactive(orchestrator, ui, config)
    except NekoLinkError as e:
        logger.error(str(e))
        if config.get("pause_on_exit"):
            ui.wait_for_enter()
        return 1
    except (EOFError, KeyboardInterrupt):
        ui.write()
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
