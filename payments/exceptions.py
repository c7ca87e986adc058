class PaymentError(Exception):
    status_code = 500


class ValidationError(PaymentError):
    """The caller sent something we will not forward to the gateway."""

    status_code = 400


class GatewayError(PaymentError):
    """The gateway call did not produce an order."""

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.detail = detail


class TransportError(GatewayError):
    """Connection reset, unresolved host or timeout. The gateway never answered."""


class ProviderError(GatewayError):
    """The gateway answered and rejected the request."""

    def __init__(self, message, detail=None, caller_fault=False):
        super().__init__(message, detail)
        self.caller_fault = caller_fault
        self.status_code = 400 if caller_fault else 500
