"""
Multi-provider rate pipeline.

Runs every registered provider stage over a cart, threading one StageResult
through them. Stages that came back empty leave a RetryMarker behind; those
are run again on up to settings.RATE_RETRY_PASSES extra passes. Every other
stage sees a non-empty roster without its own marker and skips itself.

No winning rate is picked here: callers get every quote and every error.
"""

import logging
from typing import Optional

from .config import settings
from .lookups import StageContext
from .registry import get_stage, list_stages
from .schemas import Cart, ErrorDetail, QuoteRecord, StageResult

logger = logging.getLogger(__name__)


def collect_shipping_rates(context: StageContext, cart: Cart,
                           stages: Optional[list] = None) -> StageResult:
    """
    Returns the combined StageResult of all stages.

    Args:
        context: StageContext for the request
        cart: the cart being priced
        stages: stage instances to run, defaults to every registered provider

    Fatal stage errors (ShippingRatesError) propagate to the caller.
    """
    if stages is None:
        stages = [get_stage(name) for name in list_stages()]

    result = _run_pass(stages, context, cart, StageResult.empty())

    for attempt in range(settings.RATE_RETRY_PASSES):
        if not result.retrial_targets:
            break
        logger.info(
            "Retrying %d shipping rate stage(s), pass %d",
            len(result.retrial_targets), attempt + 1,
        )
        # Errors from the failed pass are dropped; the retried stages report again
        quotes, _ = split_rates(result)
        result = _run_pass(
            stages, context, cart,
            StageResult(rates=quotes, retrial_targets=result.retrial_targets),
        )

    return result


def _run_pass(stages: list, context: StageContext, cart: Cart, result: StageResult) -> StageResult:
    roster = list(result.retrial_targets)
    result = StageResult(rates=result.rates, retrial_targets=roster)
    new_targets = []
    for stage in stages:
        result = stage.resolve(context, cart, result)
        # Markers added by this pass are what the next pass retries
        for target in result.retrial_targets[len(roster):]:
            if target not in new_targets:
                new_targets.append(target)
        result = StageResult(rates=result.rates, retrial_targets=roster)
    return StageResult(rates=result.rates, retrial_targets=new_targets)


def split_rates(result: StageResult) -> tuple[list[QuoteRecord], list[ErrorDetail]]:
    """Separates priced quotes from error entries, keeping their order."""
    quotes = [r for r in result.rates if isinstance(r, QuoteRecord)]
    errors = [r for r in result.rates if isinstance(r, ErrorDetail)]
    return quotes, errors
