"""
NekoLink orchestrator - endpoint to link workflow.

This module runs the endpoint parser and the link renderer over one or
many endpoint tokens. Batch callers skip rejected tokens and keep going;
interactive callers ask again until a token is accepted.
"""

import logging
from typing import Callable, Iterable, Iterator, List, Optional, Union

from tqdm import tqdm

from nekolink.core.models import (
    BatchReport, GenerationOutcome, LinkRecord, ParsedEndpoint, RejectReason, WireGuardParams
)
from nekolink.generators.nekoray_link import NekoRayLinkRenderer
from nekolink.parsers.endpoint_parser import EndpointParser

OutcomeCallback = Callable[[GenerationOutcome], None]


class LinkOrchestrator:
    """Turns endpoint tokens into NekoRay links for one WireGuard profile."""

    def __init__(self, params: WireGuardParams, mtu: int,
                 parser: Optional[EndpointParser] = None):
        self.params = params
        self.mtu = mtu
        self.logger = logging.getLogger(__name__)
        self.parser = parser or EndpointParser()
        self.renderer = NekoRayLinkRenderer(params, mtu)

    def process(self, token: str, prefix: str = "", index: int = 0) -> GenerationOutcome:
        """Parse and render a single token. Never raises for a bad token."""
        result = self.parser.try_parse(token)
        if isinstance(result, RejectReason):
            return GenerationOutcome(index=index, token=token, reason=result)
        link = self.renderer.render(result, prefix)
        return GenerationOutcome(index=index, token=token, link=link)

    def iter_outcomes(self, tokens: Iterable[str], prefix: str = "") -> Iterator[GenerationOutcome]:
        """Yield one outcome per token, in input order."""
        for index, token in enumerate(tokens):
            yield self.process(token, prefix, index)

    def generate(self, tokens: Iterable[str], prefix: str = "",
                 on_outcome: Optional[OutcomeCallback] = None,
                 show_progress: bool = False) -> List[LinkRecord]:
        """Generate links for all tokens, skipping the ones that fail to parse."""
        tokens = list(tokens)
        report = BatchReport()

        with tqdm(total=len(tokens), desc="Generating links", unit="link",
                  disable=not show_progress) as pbar:
            for outcome in self.iter_outcomes(tokens, prefix):
                report.add(outcome)
                if not outcome.ok:
                    self.logger.warning(f"Skipped {outcome.token!r}: {outcome.reason.value}")
                if on_outcome:
                    # Clear the bar while the caller prints its status line.
                    with tqdm.external_write_mode():
                        on_outcome(outcome)
                pbar.update(1)

        self.logger.info(
            f"Generated {len(report.links)}/{report.total} links ({len(report.skipped)} skipped)"
        )
        return report.links

    def accept_until_valid(self, read_token: Callable[[], str],
                           on_reject: Optional[OutcomeCallback] = None) -> ParsedEndpoint:
        """Read tokens until one parses and return the endpoint.

        read_token may raise EOFError or KeyboardInterrupt to stop asking.
        """
        attempt = 0
        while True:
            token = read_token()
            result = self.parser.try_parse(token)
            if not isinstance(result, RejectReason):
                return result
            self.logger.debug(f"Rejected {token!r}: {result.value}")
            if on_reject:
                on_reject(GenerationOutcome(index=attempt, token=token, reason=result))
            attempt += 1

    def generate_until_valid(self, read_token: Callable[[], str],
                             prefix: Union[str, Callable[[], str]] = "",
                             on_reject: Optional[OutcomeCallback] = None) -> LinkRecord:
        """Read tokens until one is accepted and return its link.

        prefix may be a callable; it is then called once, after a token
        has been accepted.
        """
        endpoint = self.accept_until_valid(read_token, on_reject)
        if callable(prefix):
            prefix = prefix()
        return self.renderer.render(endpoint, prefix)
