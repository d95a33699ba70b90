"""
Wire shapes for carts, shipping configuration and stage results.

Field names are snake_case in Python and camelCase on the wire
(shopId, requestStatus, retrialTargets, ...). Both spellings are accepted
on input.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Literal, Optional, Union


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# --- Cart ---

class ShippingGroup(CamelModel):
    type: Optional[str] = None
    shop_id: Optional[str] = None
    address: Optional[Any] = None  # opaque, only checked for presence


class CartItem(CamelModel):
    id: Optional[str] = Field(default=None, alias="_id")
    product_id: Optional[str] = None
    quantity: int = 1


class Cart(CamelModel):
    id: Optional[str] = Field(default=None, alias="_id")
    shop_id: Optional[str] = None
    shipping: Optional[List[ShippingGroup]] = None
    items: Optional[List[CartItem]] = None


# --- Shipping configuration ---

class ShippingMethod(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow", frozen=True)

    name: Optional[str] = None
    label: Optional[str] = None
    group: Optional[str] = None
    enabled: bool = False
    rate: Optional[float] = None
    handling: Optional[float] = None
    carrier: Optional[str] = None
    fulfillment_types: List[str] = ["shipping"]


class ShippingProvider(CamelModel):
    name: Optional[str] = None
    label: Optional[str] = None
    enabled: bool = False


class ShippingConfigDoc(CamelModel):
    id: Optional[int] = None
    shop_id: str
    name: Optional[str] = None
    provider: ShippingProvider = ShippingProvider()
    methods: List[ShippingMethod] = []


# --- Package settings ---

class MarketplacePublicSettings(CamelModel):
    merchant_shipping_rates: Optional[bool] = None


class MarketplaceSettingsBody(CamelModel):
    enabled: Optional[bool] = None
    public: Optional[MarketplacePublicSettings] = None


class MarketplaceSettings(CamelModel):
    enabled: Optional[bool] = None
    settings: Optional[MarketplaceSettingsBody] = None

    @property
    def merchant_shipping_rates_enabled(self) -> bool:
        """True only when the marketplace hands shipping rates to each merchant."""
        if self.settings is None or not self.settings.enabled:
            return False
        if self.settings.public is None:
            return False
        return self.settings.public.merchant_shipping_rates is True


class FlatRatesToggle(CamelModel):
    enabled: Any = None  # only a literal True switches flat rates on


class FlatRateSettings(CamelModel):
    flat_rates: Optional[FlatRatesToggle] = None

    @property
    def enabled(self) -> bool:
        return self.flat_rates is not None and self.flat_rates.enabled is True


# --- Stage output ---

class QuoteRecord(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    carrier: Optional[str] = None
    method: ShippingMethod
    rate: float
    shop_id: Optional[str] = None


class ErrorDetail(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    request_status: Literal["error"] = "error"
    shipping_provider: str
    message: str


class RetryMarker(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    package_name: str
    file_name: str


RateEntry = Union[ErrorDetail, QuoteRecord]


class StageResult(CamelModel):
    """
    The (rates, retrialTargets) pair threaded through every provider stage.

    rates mixes QuoteRecord and ErrorDetail entries; retrial_targets names
    the stages the orchestrator should run again on its next pass.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rates: List[RateEntry] = []
    retrial_targets: List[RetryMarker] = []

    @classmethod
    def empty(cls) -> "StageResult":
        return cls(rates=[], retrial_targets=[])

    def as_pair(self) -> list:
        """JSON-ready [rates, retrialTargets] array."""
        dumped = self.model_dump(by_alias=True)
        return [dumped["rates"], dumped["retrialTargets"]]


# --- API payloads ---

class RatesRequest(CamelModel):
    cart: Cart
    shop_id: Optional[str] = None


class RatesResponse(CamelModel):
    rates: List[RateEntry] = []
    retrial_targets: List[RetryMarker] = []
    quotes: List[QuoteRecord] = []
    errors: List[ErrorDetail] = []


class ShippingConfigCreate(CamelModel):
    shop_id: str
    name: Optional[str] = None
    provider: ShippingProvider = ShippingProvider(name="flatRates", enabled=True)
    methods: List[ShippingMethod] = []


class ShippingConfigUpdate(CamelModel):
    provider_enabled: Optional[bool] = None
    provider_label: Optional[str] = None
    methods: Optional[List[ShippingMethod]] = None


class FlatRateSettingsUpdate(CamelModel):
    enabled: bool
