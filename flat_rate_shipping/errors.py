"""
Fatal shipping-rate errors.

Recoverable problems (bad cart shape, a provider with nothing to offer) are
reported as ErrorDetail entries in the stage result. These exceptions are for
conditions that must abort the whole rate request.
"""


class ShippingRatesError(Exception):
    """Base error carrying a machine-checkable kind and a readable message."""

    kind = "server-error"

    def __init__(self, message: str, kind: str = None):
        super().__init__(message)
        self.message = message
        if kind:
            self.kind = kind

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class NotImplementedFault(ShippingRatesError):
    """Raised for configurations the rate pipeline cannot honor yet."""

    kind = "not-implemented"
