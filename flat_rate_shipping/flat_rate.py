"""
Flat-rate shipping provider stage.

Prices every enabled flat-rate method configured for the shops in a cart.
Runs as one stage of the multi-provider rate pipeline and cooperates with
the other stages through the StageResult it receives and returns.

Input: StageContext + Cart + previous StageResult
Output: StageResult with QuoteRecords appended (or an ErrorDetail + RetryMarker
        when nothing could be priced)
"""

import logging
from typing import Optional

from .config import settings
from .errors import NotImplementedFault
from .lookups import StageContext
from .schemas import (
    Cart, ErrorDetail, FlatRateSettings, MarketplaceSettings, QuoteRecord,
    RetryMarker, ShippingConfigDoc, ShippingMethod, StageResult,
)

logger = logging.getLogger(__name__)

PACKAGE_NAME = "flat-rate-shipping"
FILE_NAME = "hooks"

MISSING_SHIPPING_MESSAGE = "this cart is missing shipping records"
INCOMPLETE_ADDRESS_MESSAGE = "The address property on one or more shipping records are incomplete"
NO_ITEMS_MESSAGE = "this cart has no items"
NO_METHODS_MESSAGE = "Flat rate shipping did not return any shipping methods."


class FlatRateShippingStage:
    """
    Flat-rate provider in the rate pipeline.
    Call resolve() once per pipeline pass.
    """

    identity = RetryMarker(package_name=PACKAGE_NAME, file_name=FILE_NAME)

    def resolve(self, context: StageContext, cart: Cart,
                previous_result: Optional[StageResult] = None) -> StageResult:
        """
        Returns the rates accumulated so far plus this provider's quotes.

        Args:
            context: StageContext with shop_id and lookup collections
            cart: the cart being priced
            previous_result: StageResult from earlier stages, empty by default.
                Treated as consumed; the returned lists are new.

        Raises:
            NotImplementedFault: the marketplace lets each merchant set its
                own shipping rates.
        """
        if previous_result is None:
            previous_result = StageResult.empty()
        rates = list(previous_result.rates)
        retrial_targets = list(previous_result.retrial_targets)

        # --- Only run again if an earlier pass asked for it ---
        if retrial_targets and self._is_not_among_failed_requests(retrial_targets):
            logger.debug("Flat rate stage not in retry roster, skipping")
            return previous_result

        # --- Cart shape ---
        validation_error = self._validate_cart(cart)
        if validation_error:
            logger.warning("Flat rate stage rejected cart %s: %s", cart.id, validation_error.message)
            return StageResult(rates=[validation_error], retrial_targets=[])

        # --- Marketplace delegation ---
        marketplace = self._marketplace_settings(context)
        if marketplace.merchant_shipping_rates_enabled:
            # TODO: fetch rates per shop represented in the cart once merchant shipping is supported
            raise NotImplementedFault("Multiple shipping providers is currently not supported")

        # --- Is flat-rate shipping switched on for this shop? ---
        if not self._flat_rates_enabled(context):
            logger.info("Flat rate shipping disabled for shop %s, passing results through", context.shop_id)
            return StageResult(rates=rates, retrial_targets=retrial_targets)

        # --- Price every enabled method ---
        shop_ids = [group.shop_id for group in cart.shipping if group.type == "shipping"]
        docs = context.collections.find_shipping_configs(shop_ids, provider_enabled=True)

        initial_count = len(rates)
        for doc in docs:
            rates.extend(build_quotes(doc))

        if len(rates) == initial_count:
            logger.warning("Flat rate shipping found no enabled methods for shops %s", shop_ids)
            rates.append(self._error(NO_METHODS_MESSAGE))
            retrial_targets.append(self.identity)
            return StageResult(rates=rates, retrial_targets=retrial_targets)

        logger.debug("Flat rate shipping rates: %s", rates)
        return StageResult(rates=rates, retrial_targets=retrial_targets)

    def _is_not_among_failed_requests(self, retrial_targets: list) -> bool:
        # A marker sharing either field with this stage's identity counts as a match.
        return all(
            target.package_name != self.identity.package_name and
            target.file_name != self.identity.file_name
            for target in retrial_targets
        )

    def _validate_cart(self, cart: Cart) -> Optional[ErrorDetail]:
        if not cart.shipping:
            return self._error(MISSING_SHIPPING_MESSAGE)
        if any(group.address is None for group in cart.shipping):
            return self._error(INCOMPLETE_ADDRESS_MESSAGE)
        # Carts without items are filtered upstream; guard anyway
        if not cart.items:
            return self._error(NO_ITEMS_MESSAGE)
        return None

    def _marketplace_settings(self, context: StageContext) -> MarketplaceSettings:
        # The primary shop owns the marketplace settings
        doc = context.collections.find_package(
            settings.MARKETPLACE_PACKAGE_NAME, context.shop_id, enabled=True,
        )
        if not doc:
            return MarketplaceSettings()
        return MarketplaceSettings.model_validate(doc)

    def _flat_rates_enabled(self, context: StageContext) -> bool:
        doc = context.collections.find_package(settings.SHIPPING_RATES_PACKAGE_NAME, context.shop_id)
        if not doc:
            return False
        return FlatRateSettings.model_validate(doc.get("settings") or {}).enabled

    def _error(self, message: str) -> ErrorDetail:
        return ErrorDetail(shipping_provider=PACKAGE_NAME, message=message)


def build_quotes(doc: ShippingConfigDoc) -> list[QuoteRecord]:
    """One QuoteRecord per enabled method on a shipping config."""
    carrier = doc.provider.label
    quotes = []
    for method in doc.methods:
        if not method.enabled:
            continue
        method = with_defaults(method, carrier)
        quotes.append(QuoteRecord(
            carrier=carrier,
            method=method,
            rate=method.rate + method.handling,
            shop_id=doc.shop_id,
        ))
    return quotes


def with_defaults(method: ShippingMethod, carrier: Optional[str]) -> ShippingMethod:
    """
    Copy of method with rate/handling defaulted to 0 and carrier defaulted
    to the provider label. The source method is left untouched.
    """
    return method.model_copy(update={
        "rate": method.rate or 0,
        "handling": method.handling or 0,
        "carrier": method.carrier or carrier,
    })
